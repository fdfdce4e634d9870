"""
Pytest markers for the SimpleStore test suite.

Markers are added automatically from the test file location so suites can
be selected with ``-m unit``, ``-m integration`` and so on.
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "auth: mark test as authentication-related")
    config.addinivalue_line("markers", "security: mark test as security-related")
    config.addinivalue_line("markers", "controllers: mark test as controller-related")
    config.addinivalue_line("markers", "services: mark test as service layer test")
    config.addinivalue_line("markers", "repositories: mark test as repository test")
    config.addinivalue_line("markers", "orders: mark test as order/stock-related")
    config.addinivalue_line("markers", "reports: mark test as report-related")
    config.addinivalue_line("markers", "pdf: mark test as PDF export-related")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test items during collection."""
    for item in items:
        path = str(item.fspath)

        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "integration" in path:
            item.add_marker(pytest.mark.integration)

        if "auth" in path or "auth" in item.name:
            item.add_marker(pytest.mark.auth)

        if "authorization" in path or "security" in path:
            item.add_marker(pytest.mark.security)

        if "controller" in path:
            item.add_marker(pytest.mark.controllers)

        if "service" in path:
            item.add_marker(pytest.mark.services)

        if "repo" in path or "repository" in path:
            item.add_marker(pytest.mark.repositories)

        if "order" in path or "stock" in path:
            item.add_marker(pytest.mark.orders)

        if "report" in path or "dashboard" in path:
            item.add_marker(pytest.mark.reports)

        if "pdf" in path or "export" in path:
            item.add_marker(pytest.mark.pdf)
