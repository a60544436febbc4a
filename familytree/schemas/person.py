from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Optional
from familytree.models.person import Gender
from familytree.schemas.base import RequestModel
from familytree.schemas.event import EventResponse
from familytree.schemas.note import NoteResponse

class PersonCreate(RequestModel):
    first_name: str = Field(min_length=1)
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    maiden_name: Optional[str] = None
    suffix: Optional[str] = None
    nickname: Optional[str] = None
    gender: Gender = Gender.UNKNOWN
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    is_living: bool = True
    is_public: bool = False
    photo_url: Optional[str] = None
    father_id: Optional[int] = None
    mother_id: Optional[int] = None

class PersonUpdate(RequestModel):
    # Only fields present in the request are applied; an explicit null clears a parent
    first_name: Optional[str] = Field(None, min_length=1)
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    maiden_name: Optional[str] = None
    suffix: Optional[str] = None
    nickname: Optional[str] = None
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    is_living: Optional[bool] = None
    is_public: Optional[bool] = None
    photo_url: Optional[str] = None
    father_id: Optional[int] = None
    mother_id: Optional[int] = None

class PersonResponse(BaseModel):
    id: int
    tree_id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    maiden_name: Optional[str] = None
    suffix: Optional[str] = None
    nickname: Optional[str] = None
    gender: Gender
    birth_date: Optional[date] = None
    death_date: Optional[date] = None
    is_living: bool
    is_public: bool
    photo_url: Optional[str] = None
    father_id: Optional[int] = None
    mother_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SpouseCreate(RequestModel):
    spouse_id: int
    marriage_date: Optional[date] = None
    marriage_location: Optional[str] = None
    divorce_date: Optional[date] = None
    is_current: bool = True

class SpouseLink(BaseModel):
    """A spouse edge seen from one side: spouse_id is always the other person."""

    id: int
    spouse_id: int
    marriage_date: Optional[date] = None
    marriage_location: Optional[str] = None
    divorce_date: Optional[date] = None
    is_current: bool = True

class PersonDetail(PersonResponse):
    spouses: List[SpouseLink] = []
    children_ids: List[int] = []
    events: List[EventResponse] = []
    notes: List[NoteResponse] = []
