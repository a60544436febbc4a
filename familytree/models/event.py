from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, Enum, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from familytree.database import Base
import enum

class EventType(str, enum.Enum):
    BIRTH = "BIRTH"
    DEATH = "DEATH"
    MARRIAGE = "MARRIAGE"
    DIVORCE = "DIVORCE"
    GRADUATION = "GRADUATION"
    MILITARY = "MILITARY"
    IMMIGRATION = "IMMIGRATION"
    CENSUS = "CENSUS"
    BURIAL = "BURIAL"
    CHRISTENING = "CHRISTENING"
    ENGAGEMENT = "ENGAGEMENT"
    ANNIVERSARY = "ANNIVERSARY"
    CUSTOM = "CUSTOM"

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    person_id = Column(Integer, ForeignKey("people.id"), nullable=False, index=True)
    type = Column(Enum(EventType), nullable=False)
    date = Column(Date, nullable=True)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    sources = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    person = relationship("Person", back_populates="events")
