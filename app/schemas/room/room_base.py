# --- File: app/schemas/room/room_base.py ---
"""
Room base schemas for creation and updates.

Occupancy fields (``occupied_count``, ``status``) are not part of any input
schema; they only ever change through occupancy operations.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, ClassVar, FrozenSet, List, Optional

from pydantic import Field, field_validator, model_validator

from app.models.base.enums import Block, Facility, Floor, PricePeriod, RoomType
from app.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema

__all__ = [
    "RoomBase",
    "RoomCreate",
    "RoomUpdate",
]

ROOM_NUMBER_PATTERN = r"^[A-D]-\d{3}$"
IMAGE_URL_PATTERN = r"^https?://.+"

Price = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


def _unique_facilities(value: Optional[List[Facility]]) -> Optional[List[Facility]]:
    if value is None:
        return value
    seen = []
    for item in value:
        if item not in seen:
            seen.append(item)
    return seen


class RoomBase(BaseSchema):
    """
    Base room schema with the descriptive attributes of a room.
    """

    block: Block = Field(..., description="Hostel block letter")
    room_number: str = Field(
        ...,
        pattern=ROOM_NUMBER_PATTERN,
        description="Block-prefixed room number",
        examples=["A-101", "C-204"],
    )
    floor: Optional[Floor] = Field(default=None, description="Floor of the room")
    capacity: int = Field(default=2, ge=1, le=4, description="Number of beds")
    room_type: RoomType = Field(..., description="Room category")
    facilities: List[Facility] = Field(default_factory=list, description="Facilities in the room")
    description: str = Field(..., min_length=1, max_length=2000)
    price: Optional[Price] = Field(default=None, description="Rent per price period")
    price_period: PricePeriod = Field(default=PricePeriod.MONTH)
    image_url: Optional[str] = Field(default=None, pattern=IMAGE_URL_PATTERN, max_length=500)

    @field_validator("facilities")
    @classmethod
    def dedupe_facilities(cls, v: List[Facility]) -> List[Facility]:
        return _unique_facilities(v)

    @model_validator(mode="after")
    def room_number_matches_block(self) -> "RoomBase":
        if not self.room_number.startswith(f"{self.block.value}-"):
            raise ValueError(f"room_number must start with '{self.block.value}-'")
        return self


class RoomCreate(RoomBase, BaseCreateSchema):
    """Schema for creating a room. A new room starts empty."""

    is_under_maintenance: bool = Field(default=False)


class RoomUpdate(BaseUpdateSchema):
    """
    Partial room update.

    Turning ``is_under_maintenance`` on removes every occupant.
    """

    clearable_fields: ClassVar[FrozenSet[str]] = frozenset({"floor", "price", "image_url"})

    block: Optional[Block] = None
    room_number: Optional[str] = Field(default=None, pattern=ROOM_NUMBER_PATTERN)
    floor: Optional[Floor] = None
    capacity: Optional[int] = Field(default=None, ge=1, le=4)
    room_type: Optional[RoomType] = None
    facilities: Optional[List[Facility]] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    price: Optional[Price] = None
    price_period: Optional[PricePeriod] = None
    image_url: Optional[str] = Field(default=None, pattern=IMAGE_URL_PATTERN, max_length=500)
    is_under_maintenance: Optional[bool] = None

    @field_validator("facilities")
    @classmethod
    def dedupe_facilities(cls, v: Optional[List[Facility]]) -> Optional[List[Facility]]:
        return _unique_facilities(v)

    @model_validator(mode="after")
    def room_number_matches_block(self) -> "RoomUpdate":
        if self.block is not None and self.room_number is not None:
            if not re.match(rf"^{self.block.value}-", self.room_number):
                raise ValueError(f"room_number must start with '{self.block.value}-'")
        return self
