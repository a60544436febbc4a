"""In-memory genealogy graph for one tree.

Built fresh per request from the tree's ordered person records. Records only
need ``id``, ``father_id`` and ``mother_id`` attributes (ORM rows and pydantic
projections both qualify); spouse links need ``person_id`` and ``spouse_id``.

References that point outside the person set are treated as unknown ancestors:
lookups return ``None`` instead of raising.
"""
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional


class GenealogyGraph:
    def __init__(self, people: Iterable, spouse_links: Iterable = ()):
        self._people = {}
        for person in people:
            self._people[person.id] = person

        self._children_as_father: Dict[int, List[int]] = defaultdict(list)
        self._children_as_mother: Dict[int, List[int]] = defaultdict(list)
        for person in self._people.values():
            if person.father_id is not None:
                self._children_as_father[person.father_id].append(person.id)
            if person.mother_id is not None:
                self._children_as_mother[person.mother_id].append(person.id)

        self._spouses: Dict[int, List[int]] = defaultdict(list)
        self._spouse_links = []
        for link in spouse_links:
            a, b = link.person_id, link.spouse_id
            if a not in self._people or b not in self._people or a == b:
                continue
            self._spouse_links.append(link)
            if b not in self._spouses[a]:
                self._spouses[a].append(b)
            if a not in self._spouses[b]:
                self._spouses[b].append(a)

    def __contains__(self, person_id) -> bool:
        return person_id in self._people

    def __len__(self) -> int:
        return len(self._people)

    def __iter__(self) -> Iterator:
        return iter(self._people.values())

    def ids(self) -> List[int]:
        return list(self._people)

    def get(self, person_id):
        return self._people.get(person_id)

    def father(self, person_id):
        person = self._people.get(person_id)
        if person is None or person.father_id is None:
            return None
        return self._people.get(person.father_id)

    def mother(self, person_id):
        person = self._people.get(person_id)
        if person is None or person.mother_id is None:
            return None
        return self._people.get(person.mother_id)

    def parent_ids(self, person_id) -> List[int]:
        """Resolvable parent ids, father first."""
        return [p.id for p in (self.father(person_id), self.mother(person_id)) if p is not None]

    def spouses(self, person_id) -> list:
        return [self._people[sid] for sid in self._spouses.get(person_id, [])]

    def spouse_links(self) -> list:
        """Spouse links whose two ends are both in the graph."""
        return list(self._spouse_links)

    def children_as_father(self, person_id) -> list:
        return [self._people[cid] for cid in self._children_as_father.get(person_id, [])]

    def children_as_mother(self, person_id) -> list:
        return [self._people[cid] for cid in self._children_as_mother.get(person_id, [])]

    def children(self, person_id) -> list:
        seen = set()
        result = []
        for child in self.children_as_father(person_id) + self.children_as_mother(person_id):
            if child.id not in seen:
                seen.add(child.id)
                result.append(child)
        return result

    def descendants(self, person_id) -> set:
        visited = set()
        pending = [person_id]
        while pending:
            current = pending.pop()
            for child in self.children(current):
                if child.id not in visited:
                    visited.add(child.id)
                    pending.append(child.id)
        visited.discard(person_id)
        return visited

    def would_create_cycle(self, person_id, parent_id: Optional[int]) -> bool:
        if parent_id is None:
            return False
        return parent_id == person_id or parent_id in self.descendants(person_id)
