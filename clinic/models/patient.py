"""Patient model definitions."""

from sqlalchemy import Column, Integer, String
from clinic.database import Base


class Patient(Base):
    """Represents a patient of the clinic."""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    age = Column(Integer)
    email = Column(String, index=True)
