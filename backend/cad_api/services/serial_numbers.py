"""Weapon serial number allocation."""
import secrets
import string
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.config import settings
from cad_api.exceptions import ExtendedBadRequest
from cad_api.models.citizen import Weapon

logger = structlog.get_logger()

SERIAL_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def generate_string(length: int) -> str:
    """Generate a random uppercase alphanumeric string."""
    return "".join(secrets.choice(SERIAL_NUMBER_ALPHABET) for _ in range(length))


async def is_serial_number_taken(
    db: AsyncSession,
    serial_number: str,
    weapon_id: Optional[UUID] = None,
) -> bool:
    """Check for another weapon with the same serial number, ignoring case."""
    query = select(Weapon.id).where(func.lower(Weapon.serial_number) == serial_number.lower())
    if weapon_id is not None:
        query = query.where(Weapon.id != weapon_id)

    result = await db.execute(query.limit(1))
    return result.first() is not None


async def generate_or_validate_serial_number(
    db: AsyncSession,
    serial_number: Optional[str] = None,
    weapon_id: Optional[UUID] = None,
) -> str:
    """
    Return a serial number that no other weapon uses.

    A caller-supplied value is validated and rejected with a field error
    when taken. Without one, random strings are generated until a free one
    is found.

    Args:
        db: Database session
        serial_number: Explicit serial number requested by the user
        weapon_id: Weapon being updated, excluded from the uniqueness check

    Raises:
        ExtendedBadRequest: If the explicit serial number is already in use
    """
    if serial_number:
        if await is_serial_number_taken(db, serial_number, weapon_id):
            raise ExtendedBadRequest({"serialNumber": "serialNumberInUse"})
        return serial_number

    while True:
        candidate = generate_string(settings.SERIAL_NUMBER_LENGTH)
        if not await is_serial_number_taken(db, candidate, weapon_id):
            return candidate
        logger.debug("Generated serial number collided, retrying", serial_number=candidate)
