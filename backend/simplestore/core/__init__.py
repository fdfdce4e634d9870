# Core package initialization
# Cross-cutting concerns shared by every layer: configuration, logging,
# security, validation and HTTP helpers.

from . import auth_decorators, exceptions, security, validation

__all__ = [
    "auth_decorators",
    "exceptions",
    "security",
    "validation",
]
