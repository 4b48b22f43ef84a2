"""Courthouse schemas: name-change requests and warrants."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from cad_api.models.court import WarrantStatus, WhitelistStatus
from cad_api.schemas.base import CamelModel
from cad_api.schemas.citizen import CitizenSummary


class NameChangeRequestCreate(CamelModel):
    citizen_id: UUID
    new_name: str = Field(..., min_length=1, max_length=255)
    new_surname: str = Field(..., min_length=1, max_length=255)

    @field_validator("new_name", "new_surname")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name may not be blank")
        return v


class NameChangeRequestResponse(CamelModel):
    id: UUID
    citizen_id: UUID
    user_id: UUID
    new_name: str
    new_surname: str
    status: WhitelistStatus
    citizen: CitizenSummary
    created_at: datetime
    updated_at: datetime


class NameChangeRequestReview(CamelModel):
    """Accept or decline a pending request."""
    type: WhitelistStatus

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: WhitelistStatus) -> WhitelistStatus:
        if v == WhitelistStatus.PENDING:
            raise ValueError("Type must be ACCEPTED or DECLINED")
        return v


class WarrantCreate(CamelModel):
    citizen_id: UUID
    status: WarrantStatus = WarrantStatus.ACTIVE
    description: str = Field(..., min_length=1, max_length=10000)
    officer_id: Optional[UUID] = None


class WarrantOfficer(CamelModel):
    id: UUID
    callsign: str
    callsign2: str


class WarrantResponse(CamelModel):
    id: UUID
    citizen_id: UUID
    officer_id: Optional[UUID] = None
    description: str
    status: WarrantStatus
    citizen: CitizenSummary
    officer: Optional[WarrantOfficer] = None
    created_at: datetime
    updated_at: datetime
