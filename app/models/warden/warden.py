"""
Warden profile model.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import BaseModel
from app.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from app.models.user.user import User


class Warden(BaseModel, TimestampMixin):
    """Staff profile of an account with the warden role."""

    __tablename__ = "wardens"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    employee_id: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        unique=True,
        comment="WARD#### code shared with the owning account",
    )
    contact_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    qualification: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    assigned_blocks: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Block letters supervised by this warden",
    )

    user: Mapped["User"] = relationship("User", back_populates="warden_profile")

    def __repr__(self) -> str:
        return f"<Warden(id={self.id}, employee_id={self.employee_id})>"


__all__ = ["Warden"]
