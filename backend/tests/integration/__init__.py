"""
Integration tests package.

HTTP flows through ``app.test_client()`` against the full application and
the in-memory SQLite database.
"""
