"""
Custom SQLAlchemy column types.
"""

from enum import Enum as PyEnum
from typing import Type

from sqlalchemy import Enum


def enum_type(enum_cls: Type[PyEnum], length: int = 50) -> Enum:
    """
    Portable string column for a Python enum.

    Stores the enum *values* (``"Available"``, ``"admin"``) rather than the
    member names, so raw SQL filters and partial indexes can match them.
    """
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        validate_strings=True,
        values_callable=lambda members: [member.value for member in members],
    )


__all__ = ["enum_type"]
