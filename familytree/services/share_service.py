from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.future import select
from familytree.config import get_settings
from familytree.errors import Conflict, NotFound
from familytree.models.tree import Tree, TreeAccess, AccessLevel
from typing import Optional, List
import logging
import secrets

logger = logging.getLogger(__name__)
settings = get_settings()

class ShareService:
    """Share token and grant management. Callers pass a tree already checked for ownership."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def generate_token(self, tree: Tree) -> str:
        # Overwrites unconditionally: previously distributed links stop working
        tree.share_token = secrets.token_urlsafe(settings.SHARE_TOKEN_BYTES)
        await self.db.commit()
        await self.db.refresh(tree)
        logger.info(f"Regenerated share token for tree {tree.id}")
        return tree.share_token

    async def update_settings(self, tree: Tree, is_public: Optional[bool] = None, hide_living: Optional[bool] = None) -> Tree:
        if is_public is not None:
            tree.is_public = is_public
        if hide_living is not None:
            tree.hide_living = hide_living
        await self.db.commit()
        await self.db.refresh(tree)
        return tree

    async def list_access(self, tree: Tree) -> List[TreeAccess]:
        result = await self.db.execute(
            select(TreeAccess).filter(TreeAccess.tree_id == tree.id).order_by(TreeAccess.id)
        )
        return result.scalars().all()

    async def get_access_by_email(self, tree_id: int, email: str) -> Optional[TreeAccess]:
        result = await self.db.execute(
            select(TreeAccess).filter(TreeAccess.tree_id == tree_id, TreeAccess.user_email == email)
        )
        return result.scalars().first()

    async def invite(self, tree: Tree, email: str, access_level: AccessLevel = AccessLevel.VIEW) -> TreeAccess:
        # One grant per email per tree; changing the level means revoke then invite
        if await self.get_access_by_email(tree.id, email):
            raise Conflict("User already has access to this tree")

        access = TreeAccess(tree_id=tree.id, user_email=email, access_level=access_level)
        self.db.add(access)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User already has access to this tree")
        await self.db.refresh(access)
        logger.info(f"Granted {access_level.value} on tree {tree.id} to {email}")
        return access

    async def revoke(self, tree: Tree, access_id: int):
        result = await self.db.execute(
            select(TreeAccess).filter(TreeAccess.id == access_id, TreeAccess.tree_id == tree.id)
        )
        access = result.scalars().first()
        if not access:
            raise NotFound("Access grant not found")
        await self.db.delete(access)
        await self.db.commit()
        logger.info(f"Revoked access {access_id} on tree {tree.id}")
