from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from familytree.config import get_settings
from familytree.core.visibility import Viewer
from familytree.database import get_db
from familytree.errors import Unauthenticated
from familytree.services.user_service import UserService
from familytree.utils.validators import normalize_email
from typing import Optional

settings = get_settings()

async def get_viewer(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[Viewer]:
    """Session of the request, or None for anonymous callers."""
    email = request.headers.get(settings.USER_EMAIL_HEADER, "").strip()
    if not email:
        return None
    name = request.headers.get(settings.USER_NAME_HEADER)
    user = await UserService(db).get_or_create_user(normalize_email(email), name)
    return Viewer(user_id=user.id, email=user.email)

async def require_viewer(viewer: Optional[Viewer] = Depends(get_viewer)) -> Viewer:
    if viewer is None:
        raise Unauthenticated()
    return viewer
