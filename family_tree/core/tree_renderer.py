"""
Nested display model for the family tree.

Rendering is depth-first from each root. Everything here degrades
instead of raising: unset dates are omitted, an unresolved spouse is
omitted, and a person with no children renders an empty list.
"""

import logging
from datetime import date
from typing import Optional

from family_tree.core.tree_builder import FamilyTree
from family_tree.schemas.person_schema import Person
from family_tree.schemas.tree_schema import DisplayNode, FamilyTreeView, OccasionOut

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%m/%d/%Y"
EMPTY_TREE_MESSAGE = "No family members yet. Add your first person to get started."


# ============================================================
# DERIVED FIELDS
# ============================================================

def format_date(value: Optional[date], fmt: str = DEFAULT_DATE_FORMAT) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(fmt)


def compute_age(
    birth: Optional[date],
    death: Optional[date] = None,
    today: Optional[date] = None,
) -> Optional[str]:
    """
    Calendar-year age: (death or today).year - birth.year.

    This ignores whether the birthday has come round yet in the end
    year, so it can read one year high. Kept as-is on purpose.
    """
    if birth is None:
        return None

    end = death or today or date.today()
    years = end.year - birth.year

    if death is not None:
        return f"({years} years)"
    return f"({years} years old)"


# ============================================================
# SELECTION
# ============================================================

class Selection:
    """At most one selected person; selecting the same one again clears it."""

    def __init__(self, selected_id: Optional[str] = None):
        self.selected_id = selected_id or None

    def toggle(self, person_id: Optional[str]) -> Optional[str]:
        if not person_id:
            return self.selected_id
        if self.selected_id == person_id:
            self.selected_id = None
        else:
            self.selected_id = person_id
        return self.selected_id

    def clear(self) -> None:
        self.selected_id = None

    def is_selected(self, person_id: str) -> bool:
        return self.selected_id is not None and self.selected_id == person_id


# ============================================================
# RENDERER
# ============================================================

class TreeRenderer:
    def __init__(
        self,
        tree: FamilyTree,
        today: Optional[date] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        selected_id: Optional[str] = None,
    ):
        self.tree = tree
        self.today = today or date.today()
        self.date_format = date_format
        self.selection = Selection(selected_id)

    def _node(self, person: Person, depth: int) -> DisplayNode:
        spouse = self.tree.spouse_of(person.spouse_id)

        return DisplayNode(
            id=person.id,
            depth=depth,
            first_name=person.first_name,
            last_name=person.last_name,
            full_name=person.full_name,
            profile_picture_url=person.profile_picture_url,
            initials=person.initials,
            birth_date=format_date(person.date_of_birth, self.date_format),
            death_date=format_date(person.date_of_death, self.date_format),
            marriage_date=format_date(person.marriage_date, self.date_format),
            age=compute_age(person.date_of_birth, person.date_of_death, self.today),
            is_deceased=person.date_of_death is not None,
            spouse_id=spouse.id if spouse else None,
            spouse_name=spouse.full_name if spouse else None,
            special_occasions=[
                OccasionOut(
                    name=o.name,
                    date=format_date(o.date, self.date_format),
                    description=o.description,
                )
                for o in person.special_occasions
            ],
            is_selected=self.selection.is_selected(person.id),
        )

    def _is_duplicate(self, person: Person) -> bool:
        # Later records sharing an id are not rendered again
        return self.tree.get(person.id) is not person

    def render(
        self,
        person: Person,
        depth: int = 0,
        placed: Optional[set[str]] = None,
    ) -> DisplayNode:
        """
        Render one person and their descendants, depth-first.

        The walk uses an explicit stack, so long parent chains are fine.
        ``placed`` collects every id rendered so far. A child already in
        it is skipped and the parent flagged, which cuts parent cycles.
        """
        if placed is None:
            placed = set()
        placed.add(person.id)

        root = self._node(person, depth)
        stack = [(person, root)]

        while stack:
            current, node = stack.pop()
            pending = []

            for child in self.tree.children_of(current.id):
                if self._is_duplicate(child):
                    continue
                if child.id in placed:
                    logger.warning(
                        "Parent cycle: %s already placed, not nesting under %s",
                        child.id,
                        current.id,
                    )
                    node.cycle_detected = True
                    continue

                placed.add(child.id)
                child_node = self._node(child, node.depth + 1)
                node.children.append(child_node)
                pending.append((child, child_node))

            # Reversed so the first child is expanded first
            stack.extend(reversed(pending))

        return root

    def render_forest(self) -> FamilyTreeView:
        if len(self.tree) == 0:
            return FamilyTreeView(
                roots=[],
                is_empty=True,
                empty_message=EMPTY_TREE_MESSAGE,
            )

        placed: set[str] = set()
        roots = []
        for person in self.tree.roots():
            if self._is_duplicate(person):
                logger.warning("Duplicate person id %s, rendering the first record", person.id)
                continue
            roots.append(self.render(person, 0, placed))

        # Anyone still unplaced only hangs off a parent cycle
        cycle_detected = any(node.cycle_detected for node in _walk(roots))
        for person in self.tree:
            if person.id in placed:
                continue
            logger.warning("Person %s is only reachable through a parent cycle", person.id)
            node = self.render(person, 0, placed)
            node.cycle_detected = True
            roots.append(node)
            cycle_detected = True

        return FamilyTreeView(roots=roots, cycle_detected=cycle_detected)


def _walk(nodes: list[DisplayNode]):
    stack = list(reversed(nodes))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(nodes: list[DisplayNode], person_id: Optional[str]) -> Optional[DisplayNode]:
    if person_id is None:
        return None
    for node in _walk(nodes):
        if node.id == person_id:
            return node
    return None


def count_nodes(nodes: list[DisplayNode]) -> int:
    return sum(1 for _ in _walk(nodes))
