from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from familytree.core.visibility import Viewer
from familytree.database import get_db
from familytree.dependencies import get_viewer
from familytree.schemas.event import EventCreate, EventResponse
from familytree.schemas.note import NoteCreate, NoteResponse
from familytree.schemas.person import PersonResponse, PersonUpdate, SpouseCreate
from familytree.services.person_service import PersonService
from familytree.services.tree_service import TreeService
from typing import Optional

router = APIRouter(prefix="/people", tags=["people"])

async def visible_person(person_id: int, viewer: Optional[Viewer], db: AsyncSession):
    person = await PersonService(db).get_person(person_id)
    view = await TreeService(db).view_tree(person.tree_id, viewer)
    return view.get_person(person.id)

@router.get("/{person_id}")
async def get_person(person_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    return {"data": await visible_person(person_id, viewer, db)}

@router.patch("/{person_id}")
async def update_person(person_id: int, data: PersonUpdate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    person = await service.update_person(person, data)
    return {"data": PersonResponse.model_validate(person)}

@router.delete("/{person_id}")
async def delete_person(person_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    await service.delete_person(person)
    return {"data": {"success": True}}

@router.get("/{person_id}/events")
async def list_events(person_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    person = await visible_person(person_id, viewer, db)
    return {"data": person.events}

@router.post("/{person_id}/events", status_code=status.HTTP_201_CREATED)
async def create_event(person_id: int, data: EventCreate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    event = await service.add_event(person, data)
    return {"data": EventResponse.model_validate(event)}

@router.get("/{person_id}/notes")
async def list_notes(person_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    person = await visible_person(person_id, viewer, db)
    return {"data": person.notes}

@router.post("/{person_id}/notes", status_code=status.HTTP_201_CREATED)
async def create_note(person_id: int, data: NoteCreate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    note = await service.add_note(person, data)
    return {"data": NoteResponse.model_validate(note)}

@router.post("/{person_id}/spouses", status_code=status.HTTP_201_CREATED)
async def add_spouse(person_id: int, data: SpouseCreate, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    link = await service.add_spouse(person, data)
    return {"data": {"id": link.id, "person_id": link.person_id, "spouse_id": link.spouse_id}}

@router.delete("/{person_id}/spouses/{spouse_id}")
async def remove_spouse(person_id: int, spouse_id: int, viewer: Optional[Viewer] = Depends(get_viewer), db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person, _ = await service.get_owned_person(person_id, viewer)
    await service.remove_spouse(person, spouse_id)
    return {"data": {"success": True}}
