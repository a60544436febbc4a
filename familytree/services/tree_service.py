from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from familytree.config import get_settings
from familytree.core.layout import build_layout
from familytree.core.visibility import TreeView, Viewer, filter_tree
from familytree.errors import Forbidden, NotFound, Unauthenticated
from familytree.models.tree import Tree, TreeAccess
from familytree.models.person import Person, Spouse
from familytree.schemas.layout import TreeLayout
from familytree.schemas.tree import TreeCreate, TreeUpdate
from typing import Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)
settings = get_settings()

class TreeService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_trees(self, owner_id: int) -> List[Tuple[Tree, int]]:
        """Owned trees with their people counts, most recently touched first."""
        counts = (
            select(Person.tree_id, func.count(Person.id).label("people_count"))
            .group_by(Person.tree_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Tree, func.coalesce(counts.c.people_count, 0))
            .outerjoin(counts, counts.c.tree_id == Tree.id)
            .filter(Tree.owner_id == owner_id)
            .order_by(func.coalesce(Tree.updated_at, Tree.created_at).desc(), Tree.id.desc())
        )
        return result.all()

    async def create_tree(self, owner_id: int, data: TreeCreate) -> Tree:
        tree = Tree(owner_id=owner_id, **data.model_dump())
        self.db.add(tree)
        await self.db.commit()
        await self.db.refresh(tree)
        logger.info(f"Created tree {tree.id} for user {owner_id}")
        return tree

    async def get_tree(self, tree_id: int) -> Tree:
        result = await self.db.execute(select(Tree).filter(Tree.id == tree_id))
        tree = result.scalars().first()
        if not tree:
            raise NotFound("Tree not found")
        return tree

    async def get_tree_by_share_token(self, token: str) -> Tree:
        result = await self.db.execute(select(Tree).filter(Tree.share_token == token))
        tree = result.scalars().first()
        if not tree:
            raise NotFound("Shared tree not found")
        return tree

    async def get_owned_tree(self, tree_id: int, viewer: Optional[Viewer]) -> Tree:
        if viewer is None:
            raise Unauthenticated()
        tree = await self.get_tree(tree_id)
        if tree.owner_id != viewer.user_id:
            raise Forbidden()
        return tree

    async def update_tree(self, tree: Tree, data: TreeUpdate) -> Tree:
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key != "description":
                continue
            setattr(tree, key, value)
        await self.db.commit()
        await self.db.refresh(tree)
        return tree

    async def delete_tree(self, tree: Tree):
        # people, their events/notes/spouse links and grants cascade
        await self.db.delete(tree)
        await self.db.commit()
        logger.info(f"Deleted tree {tree.id}")

    async def load_view(self, tree: Tree, viewer: Optional[Viewer], share_token: Optional[str] = None) -> TreeView:
        people = await self.db.execute(
            select(Person)
            .filter(Person.tree_id == tree.id)
            .options(selectinload(Person.events), selectinload(Person.notes))
            .order_by(Person.id)
        )
        spouses = await self.db.execute(select(Spouse).filter(Spouse.tree_id == tree.id).order_by(Spouse.id))
        grants = await self.db.execute(select(TreeAccess).filter(TreeAccess.tree_id == tree.id))
        return filter_tree(
            tree,
            people.scalars().all(),
            spouses.scalars().all(),
            grants.scalars().all(),
            viewer,
            share_token=share_token,
        )

    async def view_tree(self, tree_id: int, viewer: Optional[Viewer]) -> TreeView:
        tree = await self.get_tree(tree_id)
        return await self.load_view(tree, viewer)

    async def view_shared_tree(self, token: str) -> TreeView:
        tree = await self.get_tree_by_share_token(token)
        return await self.load_view(tree, None, share_token=token)


def layout_for_view(view: TreeView, include_spouses: bool = True) -> TreeLayout:
    return build_layout(
        view.people,
        view.spouse_links,
        node_width=settings.LAYOUT_NODE_WIDTH,
        horizontal_gap=settings.LAYOUT_HORIZONTAL_GAP,
        row_height=settings.LAYOUT_ROW_HEIGHT,
        include_spouses=include_spouses,
    )
