"""Loading and updating the CAD instance settings."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from cad_api.config import settings
from cad_api.features import Feature
from cad_api.models.cad import Cad, CadFeature, MiscCadSettings

logger = structlog.get_logger()


class CadService:
    """Service for the CAD row, its feature toggles and misc settings."""

    @classmethod
    async def get_or_create_cad(cls, db: AsyncSession) -> Cad:
        """Return the CAD, creating it with defaults on a fresh install."""
        result = await db.execute(select(Cad).order_by(Cad.created_at).limit(1))
        cad = result.scalar_one_or_none()
        if cad:
            if cad.misc_settings is None:
                cad.misc_settings = MiscCadSettings()
                await db.flush()
            return cad

        cad = Cad(name=settings.DEFAULT_CAD_NAME, features=[], misc_settings=MiscCadSettings())
        db.add(cad)
        await db.flush()

        logger.info("CAD created with default settings", cad_id=str(cad.id))
        return cad

    @classmethod
    async def ensure_cad(cls, session_maker) -> None:
        """Create the CAD row at startup so requests never have to insert it."""
        async with session_maker() as db:
            await cls.get_or_create_cad(db)
            await db.commit()

    @classmethod
    async def set_feature(cls, db: AsyncSession, cad: Cad, feature: Feature, is_enabled: bool) -> Cad:
        """Enable or disable a feature, inserting the toggle row if needed."""
        existing: Optional[CadFeature] = next(
            (stored for stored in cad.features if stored.feature == feature), None
        )
        if existing:
            existing.is_enabled = is_enabled
        else:
            cad.features.append(CadFeature(feature=feature, is_enabled=is_enabled))

        await db.flush()
        logger.info("CAD feature updated", feature=feature.value, is_enabled=is_enabled)
        return cad

    @classmethod
    async def update_misc_settings(
        cls,
        db: AsyncSession,
        cad: Cad,
        unit_inactivity_timeout: Optional[int],
        max_citizens_per_user: Optional[int],
    ) -> Cad:
        """Replace the misc settings."""
        cad.misc_settings.unit_inactivity_timeout = unit_inactivity_timeout
        cad.misc_settings.max_citizens_per_user = max_citizens_per_user
        await db.flush()
        return cad
