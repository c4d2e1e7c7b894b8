"""Appointment model definitions."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String
from clinic.database import Base


class Appointment(Base):
    """Represents a booked appointment for a patient with a doctor in a room."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    room_name = Column(String, ForeignKey("rooms.room_name"), nullable=False)
    starts_at = Column(DateTime, nullable=False)
    finishes_at = Column(DateTime, nullable=False)
