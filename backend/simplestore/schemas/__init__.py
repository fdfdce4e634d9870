"""
Schemas package - Data Transfer Objects and validation.

This package contains the request DTOs that validate API payloads and the
helpers that serialise domain entities into camelCase JSON.
"""

from .dtos import (
    CategoryRequest,
    ContactRequest,
    DateRangeQuery,
    LanguageRequest,
    LoginRequest,
    PeriodQuery,
    ProductRequest,
    ProductReturnRequest,
    ProfileUpdateRequest,
    PurchaseOrderRequest,
    RegisterRequest,
    SalesOrderRequest,
    StatusUpdateRequest,
    camelize,
    company_settings_from_dict,
    document_to_dict,
    entity_to_dict,
    system_settings_from_dict,
)

__all__ = [
    # Catalogue DTOs
    "CategoryRequest",
    "ProductRequest",
    "ContactRequest",
    # Order DTOs
    "PurchaseOrderRequest",
    "SalesOrderRequest",
    "ProductReturnRequest",
    "StatusUpdateRequest",
    # Report queries
    "DateRangeQuery",
    "PeriodQuery",
    # Auth DTOs
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "LanguageRequest",
    # Settings
    "company_settings_from_dict",
    "system_settings_from_dict",
    # Serialisation
    "camelize",
    "entity_to_dict",
    "document_to_dict",
]
