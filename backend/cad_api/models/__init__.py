"""Database models."""
from cad_api.models.user import User, UserRank
from cad_api.models.cad import Cad, CadFeature, MiscCadSettings
from cad_api.models.value import ShouldDoType, StatusValue, Value, ValueType
from cad_api.models.citizen import Citizen, Weapon
from cad_api.models.court import NameChangeRequest, Warrant, WarrantStatus, WhitelistStatus
from cad_api.models.leo import CombinedLeoUnit, Officer
from cad_api.models.audit import AuditAction, AuditLog

__all__ = [
    "User",
    "UserRank",
    "Cad",
    "CadFeature",
    "MiscCadSettings",
    "ShouldDoType",
    "StatusValue",
    "Value",
    "ValueType",
    "Citizen",
    "Weapon",
    "NameChangeRequest",
    "Warrant",
    "WarrantStatus",
    "WhitelistStatus",
    "CombinedLeoUnit",
    "Officer",
    "AuditAction",
    "AuditLog",
]
