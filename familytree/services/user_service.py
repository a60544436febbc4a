from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from familytree.models.user import User
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).filter(User.email == email))
        return result.scalars().first()

    async def create_user(self, email: str, name: Optional[str] = None) -> User:
        user = User(email=email, name=name)
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Provisioned user {user.id} for {email}")
        return user

    async def get_or_create_user(self, email: str, name: Optional[str] = None) -> User:
        user = await self.get_user_by_email(email)
        if user:
            return user
        try:
            return await self.create_user(email, name)
        except IntegrityError:
            # another request provisioned the same email first
            await self.db.rollback()
            return await self.get_user_by_email(email)
