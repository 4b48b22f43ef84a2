"""CAD instance settings: enabled features and misc options."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base
from cad_api.features import Feature


class Cad(Base):
    """The single CAD instance this server hosts."""

    __tablename__ = "cads"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # Only one CAD row may exist
    singleton = Column(Boolean, default=True, nullable=False, unique=True)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    features = relationship("CadFeature", back_populates="cad", lazy="selectin", cascade="all, delete-orphan")
    misc_settings = relationship(
        "MiscCadSettings", back_populates="cad", uselist=False, lazy="selectin", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Cad {self.name}>"


class CadFeature(Base):
    """Toggle for an optional CAD feature."""

    __tablename__ = "cad_features"
    __table_args__ = (UniqueConstraint("cad_id", "feature", name="uq_cad_features_cad_feature"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cad_id = Column(Uuid(as_uuid=True), ForeignKey("cads.id"), nullable=False)
    feature = Column(SQLEnum(Feature), nullable=False)
    is_enabled = Column(Boolean, default=True, nullable=False)

    cad = relationship("Cad", back_populates="features")

    def __repr__(self) -> str:
        return f"<CadFeature {self.feature} enabled={self.is_enabled}>"


class MiscCadSettings(Base):
    """Miscellaneous numeric CAD settings."""

    __tablename__ = "misc_cad_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    cad_id = Column(Uuid(as_uuid=True), ForeignKey("cads.id"), unique=True, nullable=False)

    unit_inactivity_timeout = Column(Integer, nullable=True)  # minutes
    max_citizens_per_user = Column(Integer, nullable=True)

    cad = relationship("Cad", back_populates="misc_settings")
