from typing import List, Optional

from simplestore.core.exceptions import NotFoundError
from simplestore.db.base import User as DbUser
from simplestore.domain.entities import User as DomainUser
from simplestore.domain.interfaces import IUserRepository
from simplestore.repositories.sql_helpers import commit_or_conflict


class UserRepository(IUserRepository):
    """Repository for staff accounts.

    Maps between ``simplestore.db.base.User`` and the domain ``User``; the
    password hash never leaves this class except through
    ``get_password_hash``.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_db_by_username(self, username: str) -> Optional[DbUser]:
        """Get user by username, returning the database model (for login)."""
        return self.db.query(DbUser).filter_by(username=username).first()

    def get_by_id(self, user_id: int) -> Optional[DomainUser]:
        db_user = self.db.get(DbUser, user_id)
        return self._to_domain(db_user) if db_user else None

    def get_by_username(self, username: str) -> Optional[DomainUser]:
        db_user = self.get_db_by_username(username)
        return self._to_domain(db_user) if db_user else None

    def get_password_hash(self, user_id: int) -> Optional[str]:
        db_user = self.db.get(DbUser, user_id)
        return db_user.password_hash if db_user else None

    def list_notification_recipients(self) -> List[str]:
        rows = (
            self.db.query(DbUser.email)
            .filter(
                DbUser.role.in_(("admin", "owner")),
                DbUser.active_flag.is_(True),
                DbUser.email.isnot(None),
                DbUser.email != "",
            )
            .order_by(DbUser.id)
            .all()
        )
        return [email for (email,) in rows]

    def create(self, user: DomainUser, password_hash: str) -> DomainUser:
        db_user = DbUser(
            username=user.username,
            password_hash=password_hash,
            email=user.email or None,
            full_name=user.full_name,
            role=user.role,
            language=user.language,
            active_flag=user.is_active,
        )
        self.db.add(db_user)
        commit_or_conflict(self.db, f"Username '{user.username}' already exists")
        self.db.refresh(db_user)
        return self._to_domain(db_user)

    def update(self, user: DomainUser) -> DomainUser:
        db_user = self.db.get(DbUser, user.id)
        if not db_user:
            raise NotFoundError("User not found")
        db_user.full_name = user.full_name
        db_user.email = user.email or None
        db_user.role = user.role
        db_user.language = user.language
        db_user.active_flag = user.is_active
        commit_or_conflict(self.db, "User could not be saved")
        self.db.refresh(db_user)
        return self._to_domain(db_user)

    def set_password_hash(self, user_id: int, password_hash: str) -> None:
        db_user = self.db.get(DbUser, user_id)
        if not db_user:
            raise NotFoundError("User not found")
        db_user.password_hash = password_hash
        commit_or_conflict(self.db, "Password could not be saved")

    def _to_domain(self, db_user: DbUser) -> DomainUser:
        return DomainUser(
            id=db_user.id,
            username=db_user.username,
            full_name=db_user.full_name,
            email=db_user.email,
            role=db_user.role,
            language=db_user.language,
            is_active=db_user.active_flag,
            created_at=db_user.created_at,
        )
