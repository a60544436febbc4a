from pydantic import BaseModel, ConfigDict
import datetime as dt
from typing import Optional
from familytree.models.event import EventType
from familytree.schemas.base import RequestModel

class EventCreate(RequestModel):
    type: EventType
    date: Optional[dt.date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    sources: Optional[str] = None

class EventResponse(BaseModel):
    id: int
    person_id: int
    type: EventType
    date: Optional[dt.date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    sources: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)
