# app/services/auth/auth_service.py
from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DuplicateEntryError,
)
from app.core.security import create_access_token, hash_password, verify_password, verify_token
from app.models.base.enums import UserRole
from app.models.user.user import User
from app.repositories.user.user_repository import UserRepository
from app.schemas.auth.register import AdminRegisterRequest
from app.services.base.base_service import BaseService


class AuthService(BaseService[User, UserRepository]):
    """
    Authentication service:

    - Gated admin registration
    - Email/password login issuing an access token
    - Principal resolution from a token
    - Account activation and deactivation
    """

    def __init__(self, db_session: Session) -> None:
        super().__init__(UserRepository(db_session), db_session)
        self.users = self.repository

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #
    def register_admin(self, data: AdminRegisterRequest) -> User:
        """
        Create an admin account.

        Raises:
        - AuthorizationError if the registration code does not match
        - DuplicateEntryError if the email is taken
        """
        if not secrets.compare_digest(data.admin_code, settings.ADMIN_REGISTRATION_CODE):
            self._logger.warning("Admin registration with invalid code", extra={"email": data.email})
            raise AuthorizationError("Invalid admin registration code")

        with self.transactions.start("register_admin"):
            if self.users.email_exists(data.email):
                raise DuplicateEntryError("User already exists", field="email")

            user = self.users.create(
                User(
                    email=data.email,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    phone=data.phone,
                    password_hash=hash_password(data.password),
                    role=UserRole.ADMIN,
                    is_active=True,
                    staff_code=self.users.generate_unique_code("STAF", "staff_code"),
                )
            )

        self._logger.info("Admin registered", extra={"user_id": user.id})
        return user

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #
    def login(self, email: str, password: str, role: Optional[UserRole] = None) -> Tuple[User, str]:
        """
        Email/password login.

        Raises:
        - AuthenticationError on invalid credentials or a deactivated account
        - AuthorizationError if ``role`` is given and differs from the account's
        """
        user = self.users.find_by_email(email)

        # Do not leak whether the email exists
        if user is None or not verify_password(password, user.password_hash):
            self._logger.info("Failed login attempt", extra={"email": email})
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        if role is not None and user.role != role:
            raise AuthorizationError(f"Account is not registered as {role.value}")

        with self.transactions.start("login"):
            user.last_login_at = self._now()

        token = create_access_token(user.id, user.role.value)
        self._logger.info("User logged in", extra={"user_id": user.id, "role": user.role.value})
        return user, token

    # ------------------------------------------------------------------ #
    # Principal
    # ------------------------------------------------------------------ #
    def resolve_principal(self, token: str) -> User:
        """
        Map an access token to an active account.

        Raises:
        - AuthenticationError if the token is invalid or the account is gone
          or deactivated
        """
        payload = verify_token(token)
        user = self.users.find_by_id(payload["sub"])
        if user is None:
            raise AuthenticationError("User no longer exists")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated")
        return user

    # ------------------------------------------------------------------ #
    # Activation
    # ------------------------------------------------------------------ #
    def set_active(self, user_id: str, active: bool, acting_user_id: Optional[str] = None) -> User:
        """
        Activate or deactivate an account.

        Raises:
        - UserNotFoundError for an unknown id
        - ConflictError when an admin tries to deactivate themselves
        """
        if not active and user_id == acting_user_id:
            raise ConflictError("You cannot deactivate your own account")

        with self.transactions.start("set_user_active"):
            user = self.users.get_by_id(user_id)
            user.is_active = active

        self._logger.info(
            "User activation changed",
            extra={"user_id": user_id, "is_active": active, "changed_by": acting_user_id},
        )
        return user
