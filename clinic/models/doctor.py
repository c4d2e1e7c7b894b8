"""Doctor model definitions."""

from sqlalchemy import Column, Integer, String
from clinic.database import Base


class Doctor(Base):
    """Represents a doctor who can be booked for appointments."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    age = Column(Integer)
    email = Column(String, index=True)
