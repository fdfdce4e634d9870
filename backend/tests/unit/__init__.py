"""
Unit tests package.

Services are tested against ``Mock(spec=...)`` repositories; repository
tests run on the in-memory SQLite database.
"""
