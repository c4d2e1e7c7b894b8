"""Room model definitions."""

from sqlalchemy import Column, String
from clinic.database import Base


class Room(Base):
    """Represents a consultation room, identified by its name."""
    __tablename__ = "rooms"

    room_name = Column(String, primary_key=True)
