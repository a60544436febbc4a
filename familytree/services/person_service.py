from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import or_, and_
from familytree.core.graph import GenealogyGraph
from familytree.core.visibility import Viewer
from familytree.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError
from familytree.models.tree import Tree
from familytree.models.person import Person, Spouse
from familytree.models.event import Event
from familytree.models.note import Note
from familytree.schemas.person import PersonCreate, PersonUpdate, SpouseCreate
from familytree.schemas.event import EventCreate
from familytree.schemas.note import NoteCreate
from typing import Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = ("first_name", "gender", "is_living", "is_public")

class PersonService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_person(self, person_id: int) -> Person:
        result = await self.db.execute(select(Person).filter(Person.id == person_id))
        person = result.scalars().first()
        if not person:
            raise NotFound("Person not found")
        return person

    async def get_people_by_tree(self, tree_id: int) -> List[Person]:
        result = await self.db.execute(
            select(Person).filter(Person.tree_id == tree_id).order_by(Person.id)
        )
        return result.scalars().all()

    async def get_owned_person(self, person_id: int, viewer: Optional[Viewer]) -> Tuple[Person, Tree]:
        if viewer is None:
            raise Unauthenticated()
        person = await self.get_person(person_id)
        result = await self.db.execute(select(Tree).filter(Tree.id == person.tree_id))
        tree = result.scalars().first()
        if tree is None or tree.owner_id != viewer.user_id:
            raise Forbidden()
        return person, tree

    def _validate_parents(self, graph: GenealogyGraph, person_id: Optional[int],
                          father_id: Optional[int], mother_id: Optional[int], changed=("father_id", "mother_id")):
        if person_id is not None and person_id in (father_id, mother_id):
            raise ValidationError("A person cannot be their own parent")
        if father_id is not None and father_id == mother_id:
            raise ValidationError("Father and mother cannot be the same person")

        for field, parent_id in (("father_id", father_id), ("mother_id", mother_id)):
            if field not in changed or parent_id is None:
                continue
            if parent_id not in graph:
                raise ValidationError("Parents must belong to the same tree")
            if person_id is not None and graph.would_create_cycle(person_id, parent_id):
                raise ValidationError("Circular parent relationship: a descendant cannot become a parent")

    async def create_person(self, tree: Tree, data: PersonCreate) -> Person:
        graph = GenealogyGraph(await self.get_people_by_tree(tree.id))
        self._validate_parents(graph, None, data.father_id, data.mother_id)

        person = Person(tree_id=tree.id, **data.model_dump())
        self.db.add(person)
        await self.db.commit()
        await self.db.refresh(person)
        logger.info(f"Created person {person.id} in tree {tree.id}")
        return person

    async def update_person(self, person: Person, data: PersonUpdate) -> Person:
        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be null")

        parent_changes = [f for f in ("father_id", "mother_id") if f in changes]
        if parent_changes:
            graph = GenealogyGraph(await self.get_people_by_tree(person.tree_id))
            self._validate_parents(
                graph,
                person.id,
                changes.get("father_id", person.father_id),
                changes.get("mother_id", person.mother_id),
                changed=parent_changes,
            )

        for key, value in changes.items():
            setattr(person, key, value)
        await self.db.commit()
        await self.db.refresh(person)
        return person

    async def delete_person(self, person: Person):
        graph = GenealogyGraph(await self.get_people_by_tree(person.tree_id))
        for child in graph.children_as_father(person.id):
            child.father_id = None
        for child in graph.children_as_mother(person.id):
            child.mother_id = None

        # events, notes and spouse links cascade
        await self.db.delete(person)
        await self.db.commit()
        logger.info(f"Deleted person {person.id} from tree {person.tree_id}")

    async def add_event(self, person: Person, data: EventCreate) -> Event:
        event = Event(person_id=person.id, **data.model_dump())
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def add_note(self, person: Person, data: NoteCreate) -> Note:
        note = Note(person_id=person.id, **data.model_dump())
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        return note

    async def _find_spouse_link(self, person_id: int, spouse_id: int) -> Optional[Spouse]:
        result = await self.db.execute(
            select(Spouse).filter(or_(
                and_(Spouse.person_id == person_id, Spouse.spouse_id == spouse_id),
                and_(Spouse.person_id == spouse_id, Spouse.spouse_id == person_id),
            ))
        )
        return result.scalars().first()

    async def add_spouse(self, person: Person, data: SpouseCreate) -> Spouse:
        if data.spouse_id == person.id:
            raise ValidationError("A person cannot be their own spouse")
        result = await self.db.execute(select(Person).filter(Person.id == data.spouse_id))
        other = result.scalars().first()
        if other is None or other.tree_id != person.tree_id:
            raise ValidationError("Spouses must belong to the same tree")
        if await self._find_spouse_link(person.id, other.id):
            raise Conflict("Spouse link already exists")

        link = Spouse(tree_id=person.tree_id, person_id=person.id, **data.model_dump())
        self.db.add(link)
        await self.db.commit()
        await self.db.refresh(link)
        return link

    async def remove_spouse(self, person: Person, spouse_id: int):
        link = await self._find_spouse_link(person.id, spouse_id)
        if link is None:
            raise NotFound("Spouse link not found")
        await self.db.delete(link)
        await self.db.commit()
