from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from familytree.core.export import export_tree
from familytree.core.visibility import Viewer
from familytree.database import get_db
from familytree.dependencies import get_viewer, require_viewer
from familytree.schemas.person import PersonCreate, PersonResponse
from familytree.schemas.tree import TreeCreate, TreeListItem, TreeResponse, TreeUpdate
from familytree.services.person_service import PersonService
from familytree.services.tree_service import TreeService, layout_for_view
from typing import Optional
import logging

router = APIRouter(prefix="/trees", tags=["trees"])
logger = logging.getLogger(__name__)

@router.get("")
async def list_trees(viewer: Viewer = Depends(require_viewer), db: AsyncSession = Depends(get_db)):
    rows = await TreeService(db).list_trees(viewer.user_id)
    return {"data": [
        TreeListItem(**TreeResponse.model_validate(tree).model_dump(), people_count=count)
        for tree, count in rows
    ]}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tree(data: TreeCreate, viewer: Viewer = Depends(require_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).create_tree(viewer.user_id, data)
    return {"data": TreeResponse.model_validate(tree)}

@router.get("/{tree_id}")
async def get_tree(tree_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    view = await TreeService(db).view_tree(tree_id, viewer)
    return {"data": view.detail()}

@router.patch("/{tree_id}")
async def update_tree(tree_id: int, data: TreeUpdate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = TreeService(db)
    tree = await service.get_owned_tree(tree_id, viewer)
    tree = await service.update_tree(tree, data)
    return {"data": TreeResponse.model_validate(tree)}

@router.delete("/{tree_id}")
async def delete_tree(tree_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = TreeService(db)
    tree = await service.get_owned_tree(tree_id, viewer)
    await service.delete_tree(tree)
    return {"data": {"success": True}}

@router.get("/{tree_id}/people")
async def list_people(tree_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    view = await TreeService(db).view_tree(tree_id, viewer)
    return {"data": view.people}

@router.post("/{tree_id}/people", status_code=status.HTTP_201_CREATED)
async def create_person(tree_id: int, data: PersonCreate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    tree = await TreeService(db).get_owned_tree(tree_id, viewer)
    person = await PersonService(db).create_person(tree, data)
    return {"data": PersonResponse.model_validate(person)}

@router.get("/{tree_id}/layout")
async def get_layout(
    tree_id: int,
    include_spouses: bool = Query(True, alias="includeSpouses"),
    viewer: Optional[Viewer] = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    view = await TreeService(db).view_tree(tree_id, viewer)
    return {"data": layout_for_view(view, include_spouses)}

@router.get("/{tree_id}/export")
async def export(
    tree_id: int,
    format: str = Query("json"),
    include_private: bool = Query(False, alias="includePrivate"),
    include_notes: bool = Query(False, alias="includeNotes"),
    include_sources: bool = Query(False, alias="includeSources"),
    viewer: Viewer = Depends(require_viewer),
    db: AsyncSession = Depends(get_db),
):
    view = await TreeService(db).view_tree(tree_id, viewer)
    result = export_tree(
        view.tree,
        view.people,
        format,
        include_events=include_sources,
        include_notes=include_notes,
        include_private=include_private and view.is_owner,
    )
    logger.info(f"Exported tree {tree_id} as {format} ({len(view.people)} people)")
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
