from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional
from familytree.schemas.base import RequestModel
from familytree.schemas.person import PersonDetail

class TreeCreate(RequestModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_public: bool = False
    hide_living: bool = True
    language: str = "en"

class TreeUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_public: Optional[bool] = None
    hide_living: Optional[bool] = None
    language: Optional[str] = None

class TreeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    owner_id: int
    is_public: bool
    hide_living: bool
    share_token: Optional[str] = None
    language: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class TreeListItem(TreeResponse):
    people_count: int = 0

class TreeDetail(TreeResponse):
    people: List[PersonDetail] = []
