"""
Integration tests for role-based access to the API.

Anonymous requests get 401; signed-in users outside a route's roles get 403.
"""

import pytest

PROTECTED_ROUTES = [
    ("get", "/api/user"),
    ("get", "/api/products"),
    ("get", "/api/categories"),
    ("get", "/api/customers"),
    ("get", "/api/sales-orders"),
    ("get", "/api/dashboard/stats"),
    ("get", "/api/settings/company"),
    ("post", "/api/purchase-orders"),
    ("get", "/api/reports/inventory"),
    ("get", "/api/export/report/inventory"),
]


@pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
def test_anonymous_requests_are_rejected(client, method, path):
    response = getattr(client, method)(path, json={})

    assert response.status_code == 401
    assert response.get_json()["success"] is False


@pytest.mark.parametrize(
    "role,method,path",
    [
        ("cashier", "post", "/api/categories"),
        ("warehouse", "post", "/api/categories"),
        ("cashier", "post", "/api/products"),
        ("cashier", "get", "/api/products/low-stock"),
        ("warehouse", "delete", "/api/products/1"),
        ("warehouse", "post", "/api/customers"),
        ("cashier", "post", "/api/vendors"),
        ("cashier", "get", "/api/purchase-orders"),
        ("warehouse", "post", "/api/sales-orders"),
        ("cashier", "patch", "/api/returns/1/status"),
        ("cashier", "delete", "/api/sales-orders/1"),
        ("cashier", "get", "/api/reports/accounts-payable"),
        ("warehouse", "get", "/api/reports/accounts-receivable"),
        ("cashier", "get", "/api/reports/inventory"),
        ("warehouse", "get", "/api/reports/monthly-sales"),
        ("cashier", "get", "/api/reports/profit-loss"),
        ("warehouse", "get", "/api/export/invoice/1"),
        ("cashier", "get", "/api/export/purchase-order/1"),
        ("cashier", "get", "/api/export/report/sales"),
        ("warehouse", "patch", "/api/settings/company"),
        ("cashier", "patch", "/api/settings/system"),
    ],
)
def test_roles_outside_the_route_are_forbidden(login_as, role, method, path):
    client = login_as(role)

    response = getattr(client, method)(path, json={})

    assert response.status_code == 403
    assert response.get_json() == {"success": False, "message": "Forbidden"}


@pytest.mark.parametrize(
    "role,path",
    [
        ("cashier", "/api/sales-orders"),
        ("warehouse", "/api/sales-orders"),
        ("warehouse", "/api/purchase-orders"),
        ("cashier", "/api/returns"),
        ("warehouse", "/api/returns"),
        ("cashier", "/api/reports/accounts-receivable"),
        ("warehouse", "/api/reports/inventory"),
        ("cashier", "/api/dashboard/stats"),
        ("warehouse", "/api/settings/system"),
    ],
)
def test_allowed_roles_can_read(login_as, role, path):
    assert login_as(role).get(path).status_code == 200


def test_owner_has_manager_access(owner_client):
    assert owner_client.get("/api/reports/profit-loss/1/2024").status_code == 200
    assert owner_client.get("/api/reports/accounts-payable").status_code == 200
