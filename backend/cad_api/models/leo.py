"""Law enforcement unit models."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


combined_unit_officers = Table(
    "combined_leo_unit_officers",
    Base.metadata,
    Column("combined_unit_id", Uuid(as_uuid=True), ForeignKey("combined_leo_units.id"), primary_key=True),
    Column("officer_id", Uuid(as_uuid=True), ForeignKey("officers.id"), primary_key=True),
)


class Officer(Base):
    """A LEO unit played by a user through one of their citizens."""

    __tablename__ = "officers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    citizen_id = Column(Uuid(as_uuid=True), ForeignKey("citizens.id"), nullable=False)

    callsign = Column(String(50), nullable=False)
    callsign2 = Column(String(50), nullable=False)
    badge_number = Column(Integer, nullable=True)

    status_id = Column(Uuid(as_uuid=True), ForeignKey("status_values.id"), nullable=True)
    last_status_change_timestamp = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="officers")
    citizen = relationship("Citizen", lazy="joined")
    status = relationship("StatusValue", lazy="joined")
    combined_units = relationship(
        "CombinedLeoUnit", secondary=combined_unit_officers, back_populates="officers", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Officer {self.callsign} {self.callsign2}>"


class CombinedLeoUnit(Base):
    """Several officers merged into one unit on duty."""

    __tablename__ = "combined_leo_units"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    callsign = Column(String(50), nullable=False)

    status_id = Column(Uuid(as_uuid=True), ForeignKey("status_values.id"), nullable=True)
    last_status_change_timestamp = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    status = relationship("StatusValue", lazy="joined")
    officers = relationship("Officer", secondary=combined_unit_officers, back_populates="combined_units", lazy="selectin")

    def __repr__(self) -> str:
        return f"<CombinedLeoUnit {self.callsign}>"
