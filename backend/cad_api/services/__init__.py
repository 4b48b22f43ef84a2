"""Business logic services."""
from cad_api.services.auth import AuthService
from cad_api.services.cad import CadService
from cad_api.services.serial_numbers import generate_or_validate_serial_number, generate_string
from cad_api.services.active_officer import get_active_officer, get_active_officers, get_inactivity_filter
from cad_api.services.dashboard import build_officer_dashboard

__all__ = [
    "AuthService",
    "CadService",
    "generate_or_validate_serial_number",
    "generate_string",
    "get_active_officer",
    "get_active_officers",
    "get_inactivity_filter",
    "build_officer_dashboard",
]
