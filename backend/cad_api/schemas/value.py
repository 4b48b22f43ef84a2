"""Value and CAD settings schemas."""
from typing import Dict, Optional
from uuid import UUID

from pydantic import Field

from cad_api.features import Feature
from cad_api.models.value import ShouldDoType, ValueType
from cad_api.schemas.base import CamelModel


class ValueResponse(CamelModel):
    id: UUID
    type: ValueType
    value: str
    is_default: bool
    position: Optional[int] = None


class StatusValueResponse(CamelModel):
    id: UUID
    should_do: ShouldDoType
    color: Optional[str] = None
    value: ValueResponse


class ValueCreate(CamelModel):
    """Schema for creating a value. ``should_do``/``color`` only apply to 10-codes."""
    value: str = Field(..., min_length=1, max_length=255)
    should_do: Optional[ShouldDoType] = None
    color: Optional[str] = Field(None, max_length=20)


class CreatedValueResponse(CamelModel):
    value: ValueResponse
    status: Optional[StatusValueResponse] = None


class CadFeatureUpdate(CamelModel):
    feature: Feature
    is_enabled: bool


class MiscSettingsUpdate(CamelModel):
    unit_inactivity_timeout: Optional[int] = Field(None, ge=0)
    max_citizens_per_user: Optional[int] = Field(None, ge=1)


class MiscSettingsResponse(CamelModel):
    unit_inactivity_timeout: Optional[int] = None
    max_citizens_per_user: Optional[int] = None


class CadSettingsResponse(CamelModel):
    id: UUID
    name: str
    features: Dict[str, bool]
    misc_settings: MiscSettingsResponse
