import logging
from typing import Optional

from simplestore.core.exceptions import ConflictError, NotFoundError
from simplestore.core.security import hash_password, verify_password
from simplestore.core.validation import ValidationError
from simplestore.domain.entities import User as DomainUser
from simplestore.domain.interfaces import IUserRepository
from simplestore.schemas.dtos import ProfileUpdateRequest, RegisterRequest
from simplestore.services.entity_helpers import apply_changes, build_entity

logger = logging.getLogger(__name__)


class UserService:
    """Application service for accounts: registration, login and profile.

    Works with domain users; password hashes only pass through the
    repository's dedicated hash methods.
    """

    def __init__(self, repo: IUserRepository) -> None:
        self.repo = repo

    def get_user(self, user_id: int) -> DomainUser:
        user = self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def register(self, request: RegisterRequest, role: str = "cashier") -> DomainUser:
        """Create a local account.

        Business Rules:
        - Usernames are unique (409 otherwise)
        - ``role`` is decided by the caller; self-registration gets cashier
        """
        if self.repo.get_by_username(request.username):
            raise ConflictError("Username already exists")

        user = build_entity(
            DomainUser,
            username=request.username,
            full_name=request.full_name,
            email=request.email,
            role=role,
        )
        created = self.repo.create(user, hash_password(request.password))
        logger.info(
            "User registered",
            extra={"context": {"user_id": created.id, "role": created.role}},
        )
        return created

    def authenticate(self, username: str, password: str) -> Optional[DomainUser]:
        """Return the user when the credentials match an active account."""
        user = self.repo.get_by_username(username)
        if not user or not user.is_active:
            return None
        if not verify_password(password, self.repo.get_password_hash(user.id)):
            return None
        return user

    def update_profile(self, user_id: int, request: ProfileUpdateRequest) -> DomainUser:
        """Apply profile changes, then the password change if one was asked for.

        Nothing is written unless the current password matches and the
        profile changes are valid.
        """
        user = self.get_user(user_id)

        if request.wants_password_change and not verify_password(
            request.current_password, self.repo.get_password_hash(user_id)
        ):
            raise ValidationError("Current password is incorrect", "currentPassword")

        changes = {name: getattr(request, name) for name in request.supplied}
        if changes:
            user = self.repo.update(apply_changes(user, changes))

        if request.wants_password_change:
            self.repo.set_password_hash(user_id, hash_password(request.new_password))
            logger.info("Password changed", extra={"context": {"user_id": user_id}})
        return user

    def set_language(self, user_id: int, language: str) -> DomainUser:
        user = apply_changes(self.get_user(user_id), {"language": language})
        return self.repo.update(user)
