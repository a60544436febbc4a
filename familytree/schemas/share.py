from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import List, Optional
from familytree.models.tree import AccessLevel
from familytree.schemas.base import RequestModel
from familytree.schemas.tree import TreeResponse
from familytree.utils.validators import validate_email

class ShareSettingsUpdate(RequestModel):
    is_public: Optional[bool] = None
    hide_living: Optional[bool] = None

class InviteCreate(RequestModel):
    email: str
    access_level: AccessLevel = AccessLevel.VIEW

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

class RevokeRequest(RequestModel):
    access_id: int

class TreeAccessResponse(BaseModel):
    id: int
    tree_id: int
    user_email: str
    access_level: AccessLevel
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ShareOverview(BaseModel):
    tree: TreeResponse
    access_list: List[TreeAccessResponse] = []
