"""Pydantic schemas for request/response validation."""
from cad_api.schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    Token,
    TokenData,
)
from cad_api.schemas.value import (
    ValueCreate,
    ValueResponse,
    StatusValueResponse,
    CreatedValueResponse,
    CadFeatureUpdate,
    MiscSettingsUpdate,
    CadSettingsResponse,
)
from cad_api.schemas.citizen import (
    CitizenCreate,
    CitizenResponse,
    CitizenSummary,
    WeaponCreate,
    WeaponResponse,
    WeaponListResponse,
)
from cad_api.schemas.court import (
    NameChangeRequestCreate,
    NameChangeRequestResponse,
    NameChangeRequestReview,
    WarrantCreate,
    WarrantResponse,
)
from cad_api.schemas.leo import (
    OfficerCreate,
    OfficerStatusUpdate,
    OfficerResponse,
    CombinedUnitResponse,
    MyOfficersResponse,
    ActiveOfficersResponse,
    OfficerDashboardResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "Token",
    "TokenData",
    # Values and settings
    "ValueCreate",
    "ValueResponse",
    "StatusValueResponse",
    "CreatedValueResponse",
    "CadFeatureUpdate",
    "MiscSettingsUpdate",
    "CadSettingsResponse",
    # Citizens and weapons
    "CitizenCreate",
    "CitizenResponse",
    "CitizenSummary",
    "WeaponCreate",
    "WeaponResponse",
    "WeaponListResponse",
    # Courthouse
    "NameChangeRequestCreate",
    "NameChangeRequestResponse",
    "NameChangeRequestReview",
    "WarrantCreate",
    "WarrantResponse",
    # LEO
    "OfficerCreate",
    "OfficerStatusUpdate",
    "OfficerResponse",
    "CombinedUnitResponse",
    "MyOfficersResponse",
    "ActiveOfficersResponse",
    "OfficerDashboardResponse",
]
