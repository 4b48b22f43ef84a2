"""Citizen and registered weapon models."""
import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from cad_api.database import Base


class Citizen(Base):
    """A roleplay character owned by a user."""

    __tablename__ = "citizens"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)

    name = Column(String(255), nullable=False)
    surname = Column(String(255), nullable=False)
    date_of_birth = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="citizens")
    weapons = relationship("Weapon", back_populates="citizen", lazy="raise")

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    def __repr__(self) -> str:
        return f"<Citizen {self.full_name}>"


class Weapon(Base):
    """A weapon registered to a citizen."""

    __tablename__ = "weapons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    citizen_id = Column(Uuid(as_uuid=True), ForeignKey("citizens.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)

    serial_number = Column(String(255), nullable=False, index=True)
    model_id = Column(Uuid(as_uuid=True), ForeignKey("cad_values.id"), nullable=False)
    registration_status_id = Column(Uuid(as_uuid=True), ForeignKey("cad_values.id"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    citizen = relationship("Citizen", back_populates="weapons", lazy="joined")
    model = relationship("Value", foreign_keys=[model_id], lazy="joined")
    registration_status = relationship("Value", foreign_keys=[registration_status_id], lazy="joined")

    def __repr__(self) -> str:
        return f"<Weapon {self.serial_number}>"
