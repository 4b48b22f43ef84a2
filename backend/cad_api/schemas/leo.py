"""LEO unit and dashboard schemas."""
from datetime import datetime
from typing import Dict, List, Optional, Union
from uuid import UUID

from pydantic import Field

from cad_api.schemas.base import CamelModel
from cad_api.schemas.citizen import CitizenSummary
from cad_api.schemas.court import WarrantResponse
from cad_api.schemas.value import StatusValueResponse


class OfficerCreate(CamelModel):
    citizen_id: UUID
    callsign: str = Field(..., min_length=1, max_length=50)
    callsign2: str = Field(..., min_length=1, max_length=50)
    badge_number: Optional[int] = Field(None, ge=0)


class OfficerStatusUpdate(CamelModel):
    status_id: UUID


class OfficerSummary(CamelModel):
    id: UUID
    callsign: str
    callsign2: str


class OfficerResponse(OfficerSummary):
    user_id: UUID
    citizen_id: UUID
    badge_number: Optional[int] = None
    status: Optional[StatusValueResponse] = None
    last_status_change_timestamp: Optional[datetime] = None
    citizen: CitizenSummary
    created_at: datetime


class CombinedUnitResponse(CamelModel):
    id: UUID
    callsign: str
    status: Optional[StatusValueResponse] = None
    last_status_change_timestamp: Optional[datetime] = None
    officers: List[OfficerResponse]


ActiveUnitResponse = Union[CombinedUnitResponse, OfficerResponse]


class MyOfficersResponse(CamelModel):
    officers: List[OfficerResponse]


class ActiveOfficersResponse(CamelModel):
    total_count: int
    officers: List[OfficerResponse]


class OfficerDashboardResponse(CamelModel):
    """Everything the officer dashboard needs on first render."""
    active_officer: Optional[ActiveUnitResponse] = None
    user_officers: List[OfficerResponse]
    active_officers: ActiveOfficersResponse
    # Only present when the ACTIVE_WARRANTS feature is enabled
    active_warrants: Optional[List[WarrantResponse]] = None
    features: Dict[str, bool]
