import logging
from collections import defaultdict
from typing import Dict, Iterable

from familytree.core.graph import GenealogyGraph
from familytree.schemas.layout import EdgeKind, LayoutEdge, LayoutNode, TreeLayout

logger = logging.getLogger(__name__)


def assign_generations(graph: GenealogyGraph) -> Dict[int, int]:
    """
    Generation of every person in the graph.

    generation(p) = 0 without resolvable parents, otherwise
    1 + max(generation(father), generation(mother)).

    Depth-first over parent links with an explicit worklist. ``path`` holds the
    people currently being expanded; reaching one of them again means the
    parent links form a cycle, and every person on that cycle gets generation 0.
    """
    generations: Dict[int, int] = {}

    for root in graph.ids():
        if root in generations:
            continue

        path = []
        position = {}
        stack = [(root, False)]
        while stack:
            person_id, expanded = stack.pop()

            if expanded:
                path.pop()
                del position[person_id]
                if person_id not in generations:
                    parent_generations = [generations.get(pid, 0) for pid in graph.parent_ids(person_id)]
                    generations[person_id] = 1 + max(parent_generations, default=-1)
                continue

            if person_id in generations:
                continue

            position[person_id] = len(path)
            path.append(person_id)
            stack.append((person_id, True))

            for parent_id in graph.parent_ids(person_id):
                if parent_id in generations:
                    continue
                if parent_id in position:
                    cycle = path[position[parent_id]:]
                    logger.warning(f"Parent cycle detected through people {cycle}")
                    for cycle_member in cycle:
                        generations[cycle_member] = 0
                    continue
                stack.append((parent_id, False))

    return generations


def display_name(person) -> str:
    return " ".join(part for part in (person.first_name, person.last_name) if part)


def build_layout(
    people: Iterable,
    spouse_links: Iterable = (),
    node_width: int = 200,
    horizontal_gap: int = 50,
    row_height: int = 200,
    include_spouses: bool = True,
) -> TreeLayout:
    """Top-down layout: one centered row per generation, input order within a row."""
    graph = GenealogyGraph(people, spouse_links)
    if not len(graph):
        return TreeLayout()

    generations = assign_generations(graph)

    rows = defaultdict(list)
    for person in graph:
        rows[generations[person.id]].append(person)

    nodes = []
    for generation in sorted(rows):
        row = rows[generation]
        row_width = len(row) * node_width + (len(row) - 1) * horizontal_gap
        start_x = -row_width / 2
        for idx, person in enumerate(row):
            nodes.append(LayoutNode(
                id=person.id,
                generation=generation,
                x=start_x + idx * (node_width + horizontal_gap) + node_width / 2,
                y=generation * row_height,
                label=display_name(person),
                gender=getattr(person, "gender", None),
            ))

    edges = []
    for person in graph:
        father = graph.father(person.id)
        if father is not None:
            edges.append(LayoutEdge(id=f"{father.id}-{person.id}", source=father.id, target=person.id, kind=EdgeKind.PATERNAL))
        mother = graph.mother(person.id)
        if mother is not None:
            edges.append(LayoutEdge(id=f"{mother.id}-{person.id}", source=mother.id, target=person.id, kind=EdgeKind.MATERNAL))

    if include_spouses:
        seen = set()
        for link in graph.spouse_links():
            pair = frozenset((link.person_id, link.spouse_id))
            if pair in seen:
                continue
            seen.add(pair)
            edges.append(LayoutEdge(
                id=f"spouse-{link.person_id}-{link.spouse_id}",
                source=link.person_id,
                target=link.spouse_id,
                kind=EdgeKind.SPOUSE,
            ))

    return TreeLayout(nodes=nodes, edges=edges)
