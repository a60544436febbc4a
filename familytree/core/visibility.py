"""
Visibility and access rules shared by every read path.

Tree reads, person detail, event/note listings, exports, layouts and share-link
views all go through ``filter_tree`` so the rules live in one place:

1. the owner sees everything, private notes included;
2. anyone else needs a public tree, a valid share token, or a grant for their
   email, otherwise the whole tree is Forbidden;
3. non-owners see public people only, minus living people on hide-living trees;
4. non-owners see non-private notes and all events of the people they can see;
5. references to people a non-owner cannot see are dropped.
"""
import enum
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from familytree.core.graph import GenealogyGraph
from familytree.errors import Forbidden
from familytree.schemas.event import EventResponse
from familytree.schemas.note import NoteResponse
from familytree.schemas.person import PersonDetail, PersonResponse, SpouseLink
from familytree.schemas.tree import TreeDetail, TreeResponse
from familytree.utils.validators import normalize_email

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewer:
    user_id: int
    email: str


class AccessMode(str, enum.Enum):
    OWNER = "owner"
    SHARE_LINK = "share_link"
    PUBLIC = "public"
    GRANTEE = "grantee"


def is_owner(tree, viewer: Optional[Viewer]) -> bool:
    return viewer is not None and viewer.user_id == tree.owner_id


def resolve_access(tree, viewer: Optional[Viewer], grants: Iterable, share_token: Optional[str] = None) -> AccessMode:
    if is_owner(tree, viewer):
        return AccessMode.OWNER
    if share_token is not None and tree.share_token is not None and share_token == tree.share_token:
        return AccessMode.SHARE_LINK
    if tree.is_public:
        return AccessMode.PUBLIC
    if viewer is not None and viewer.email:
        email = normalize_email(viewer.email)
        # EDIT and ADMIN grants read exactly like VIEW
        if any(normalize_email(grant.user_email) == email for grant in grants):
            return AccessMode.GRANTEE

    logger.info(f"Denied access to tree {tree.id} for {viewer.email if viewer else 'anonymous'}")
    raise Forbidden()


def is_visible(tree, person) -> bool:
    """Rule 3, for viewers that are not the owner."""
    if not person.is_public:
        return False
    if tree.hide_living and person.is_living:
        return False
    return True


@dataclass
class TreeView:
    tree: object
    access: AccessMode
    people: List[PersonDetail] = field(default_factory=list)
    spouse_links: list = field(default_factory=list)

    @property
    def is_owner(self) -> bool:
        return self.access == AccessMode.OWNER

    def get_person(self, person_id: int) -> PersonDetail:
        """Visible person or Forbidden; existence must be checked by the caller."""
        for person in self.people:
            if person.id == person_id:
                return person
        raise Forbidden()

    def summary(self) -> TreeResponse:
        tree = TreeResponse.model_validate(self.tree)
        if not self.is_owner:
            tree = tree.model_copy(update={"share_token": None})
        return tree

    def detail(self) -> TreeDetail:
        return TreeDetail(**self.summary().model_dump(), people=self.people)


def _spouse_index(links) -> Dict[int, list]:
    """Each link listed under both of its people as (link, other person id)."""
    index = defaultdict(list)
    for link in links:
        index[link.person_id].append((link, link.spouse_id))
        index[link.spouse_id].append((link, link.person_id))
    return index


def _project(person, graph: GenealogyGraph, owner: bool, spouse_index: Dict[int, list]) -> PersonDetail:
    base = PersonResponse.model_validate(person).model_dump()
    if not owner:
        base["father_id"] = person.father_id if person.father_id in graph else None
        base["mother_id"] = person.mother_id if person.mother_id in graph else None

    spouses = []
    for link, other in spouse_index.get(person.id, []):
        spouses.append(SpouseLink(
            id=link.id,
            spouse_id=other,
            marriage_date=link.marriage_date,
            marriage_location=link.marriage_location,
            divorce_date=link.divorce_date,
            is_current=link.is_current if link.is_current is not None else True,
        ))

    notes = [n for n in person.notes if owner or not n.is_private]

    return PersonDetail(
        **base,
        spouses=spouses,
        children_ids=[child.id for child in graph.children(person.id)],
        events=[EventResponse.model_validate(e) for e in person.events],
        notes=[NoteResponse.model_validate(n) for n in notes],
    )


def filter_tree(
    tree,
    people: Iterable,
    spouse_links: Iterable,
    grants: Iterable,
    viewer: Optional[Viewer],
    share_token: Optional[str] = None,
) -> TreeView:
    access = resolve_access(tree, viewer, grants, share_token)
    owner = access == AccessMode.OWNER

    people = list(people)
    visible = people if owner else [p for p in people if is_visible(tree, p)]

    # Graph over the visible set only, so hidden people cannot leak through references
    graph = GenealogyGraph(visible, spouse_links)
    spouse_index = _spouse_index(graph.spouse_links())
    projected = [_project(person, graph, owner, spouse_index) for person in visible]

    return TreeView(tree=tree, access=access, people=projected, spouse_links=graph.spouse_links())

