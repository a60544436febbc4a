from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from familytree.core.visibility import Viewer
from familytree.database import get_db
from familytree.dependencies import get_viewer
from familytree.schemas.share import InviteCreate, RevokeRequest, ShareOverview, ShareSettingsUpdate, TreeAccessResponse
from familytree.schemas.tree import TreeResponse
from familytree.services.share_service import ShareService
from familytree.services.tree_service import TreeService, layout_for_view
from typing import Optional

router = APIRouter(tags=["sharing"])

@router.post("/trees/{tree_id}/share")
async def generate_share_token(tree_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    token = await ShareService(db).generate_token(tree)
    return {"data": {"share_token": token, "tree": TreeResponse.model_validate(tree)}}

@router.patch("/trees/{tree_id}/share")
async def update_share_settings(tree_id: int, data: ShareSettingsUpdate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    tree = await ShareService(db).update_settings(tree, is_public=data.is_public, hide_living=data.hide_living)
    return {"data": {"tree": TreeResponse.model_validate(tree)}}

@router.get("/trees/{tree_id}/share")
async def get_share_settings(tree_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    access_list = await ShareService(db).list_access(tree)
    overview = ShareOverview(
        tree=TreeResponse.model_validate(tree),
        access_list=[TreeAccessResponse.model_validate(a) for a in access_list],
    )
    return {"data": overview}

@router.post("/trees/{tree_id}/invite", status_code=status.HTTP_201_CREATED)
async def invite(tree_id: int, data: InviteCreate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    access = await ShareService(db).invite(tree, data.email, data.access_level)
    return {"data": TreeAccessResponse.model_validate(access)}

@router.delete("/trees/{tree_id}/invite")
async def revoke(tree_id: int, data: RevokeRequest, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    await ShareService(db).revoke(tree, data.access_id)
    return {"data": {"success": True}}

@router.get("/shared/{token}")
async def get_shared_tree(token: str, db: AsyncSession = Depends(get_db)):
    view = await TreeService(db).view_shared_tree(token)
    return {"data": view.detail()}

@router.get("/shared/{token}/layout")
async def get_shared_layout(token: str, include_spouses: bool = Query(True, alias="includeSpouses"), db: AsyncSession = Depends(get_db)):
    view = await TreeService(db).view_shared_tree(token)
    return {"data": layout_for_view(view, include_spouses)}
