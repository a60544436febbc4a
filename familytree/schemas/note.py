from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from familytree.schemas.base import RequestModel

class NoteCreate(RequestModel):
    content: str = Field(min_length=1)
    is_private: bool = True

class NoteResponse(BaseModel):
    id: int
    person_id: int
    content: str
    is_private: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
