"""Citizen and weapon schemas."""
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from cad_api.schemas.base import CamelModel
from cad_api.schemas.value import ValueResponse


class CitizenCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    surname: str = Field(..., min_length=1, max_length=255)
    date_of_birth: Optional[date] = None


class CitizenSummary(CamelModel):
    id: UUID
    name: str
    surname: str


class CitizenResponse(CitizenSummary):
    user_id: Optional[UUID] = None
    date_of_birth: Optional[date] = None
    created_at: datetime


class WeaponCreate(CamelModel):
    """
    Schema for registering or updating a weapon.

    ``model`` is a WEAPON value id, or free text when custom textfield
    values are enabled. ``registration_status`` is a LICENSE value id.
    """
    citizen_id: UUID
    model: str = Field(..., min_length=1, max_length=255)
    registration_status: str = Field(..., min_length=1)
    serial_number: Optional[str] = Field(None, max_length=255)

    @field_validator("model", "serial_number")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v


class WeaponResponse(CamelModel):
    id: UUID
    citizen_id: UUID
    user_id: Optional[UUID] = None
    serial_number: str
    model_id: UUID
    registration_status_id: UUID
    model: ValueResponse
    registration_status: ValueResponse
    citizen: CitizenSummary
    created_at: datetime
    updated_at: datetime


class WeaponListResponse(CamelModel):
    total_count: int
    weapons: List[WeaponResponse]
