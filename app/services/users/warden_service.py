# app/services/users/warden_service.py
"""
Warden registry: warden accounts and their staff profiles.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateEntryError
from app.core.security import hash_password
from app.models.base.enums import UserRole
from app.models.user.user import User
from app.models.warden.warden import Warden
from app.repositories.user.user_repository import UserRepository
from app.repositories.warden.warden_repository import WardenRepository
from app.schemas.warden.warden import WardenCreate
from app.services.base.base_service import BaseService
from app.utils.string_utils import NameFormatter


class WardenService(BaseService[Warden, WardenRepository]):

    def __init__(self, db_session: Session):
        super().__init__(WardenRepository(db_session), db_session)
        self.wardens = self.repository
        self.users = UserRepository(db_session)

    def create(self, data: WardenCreate, created_by: Optional[str] = None) -> Warden:
        """
        Provision a warden account with a ``WARD####`` code and its profile.

        Raises:
            DuplicateEntryError: email already registered
        """
        with self.transactions.start("create_warden"):
            if self.users.email_exists(data.email):
                raise DuplicateEntryError("User already exists", field="email")

            code = self.users.generate_unique_code("WARD", "staff_code")
            first_name, last_name = NameFormatter.split_name(data.name)
            user = self.users.create(
                User(
                    email=data.email,
                    first_name=first_name,
                    last_name=last_name,
                    phone=data.contact_number,
                    password_hash=hash_password(data.password),
                    role=UserRole.WARDEN,
                    staff_code=code,
                    created_by=created_by,
                )
            )
            warden = self.wardens.create(
                Warden(
                    user_id=user.id,
                    name=data.name,
                    email=data.email,
                    employee_id=code,
                    contact_number=data.contact_number,
                    qualification=data.qualification,
                    assigned_blocks=[block.value for block in data.assigned_blocks],
                )
            )

        self._logger.info("Warden created", extra={"warden_id": warden.id, "employee_id": code})
        return warden

    def list(self) -> List[Warden]:
        return self.wardens.list_wardens()

    def get(self, warden_id: str) -> Warden:
        return self.wardens.get_by_id(warden_id)

    def get_by_user(self, user_id: str) -> Optional[Warden]:
        return self.wardens.find_by_user_id(user_id)

    def delete(self, warden_id: str) -> None:
        """Delete the profile and its account."""
        with self.transactions.start("delete_warden"):
            warden = self.wardens.get_by_id(warden_id)
            user = warden.user
            self.wardens.delete(warden)
            if user is not None:
                self.users.delete(user)

        self._logger.info("Warden deleted", extra={"warden_id": warden_id})
