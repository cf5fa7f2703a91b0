from typing import Iterable, Iterator, Optional

from family_tree.schemas.person_schema import Person


class FamilyTree:
    """
    Parent -> children and id -> person lookups over a flat people list.

    The backend returns people in no particular order, so nothing here
    depends on ordering beyond keeping the input's relative order.
    Parent cycles are not rejected; see TreeRenderer.render_forest.
    """

    def __init__(self, people: Iterable[Person]):
        self._people: list[Person] = list(people)
        self._by_id: dict[str, Person] = {}
        self._children: dict[str, list[Person]] = {}

        for person in self._people:
            # First record wins on duplicate ids
            self._by_id.setdefault(person.id, person)
            if person.parent_id is not None:
                self._children.setdefault(person.parent_id, []).append(person)

    def __len__(self) -> int:
        return len(self._people)

    def __iter__(self) -> Iterator[Person]:
        return iter(self._people)

    def __contains__(self, person_id: object) -> bool:
        return person_id in self._by_id

    @property
    def people(self) -> list[Person]:
        return list(self._people)

    def get(self, person_id: Optional[str]) -> Optional[Person]:
        if person_id is None:
            return None
        return self._by_id.get(person_id)

    def children_of(self, parent_id: Optional[str]) -> list[Person]:
        if parent_id is None:
            return []
        return list(self._children.get(parent_id, []))

    def spouse_of(self, spouse_id: Optional[str]) -> Optional[Person]:
        # Broken references are a display omission, not an error
        return self.get(spouse_id)

    def is_root(self, person: Person) -> bool:
        return person.parent_id is None or person.parent_id not in self._by_id

    def roots(self) -> list[Person]:
        """
        People with no parent, or whose parent is not in the collection.
        """
        return [p for p in self._people if self.is_root(p)]

    # ---------------------------------------------------------
    # Person form choices
    # ---------------------------------------------------------
    def parent_candidates(self, person_id: Optional[str] = None) -> list[Person]:
        return [p for p in self._people if p.id != person_id]

    def spouse_candidates(
        self,
        person_id: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> list[Person]:
        return [
            p for p in self._people
            if p.id != person_id and (parent_id is None or p.id != parent_id)
        ]


def roots_of(people: Iterable[Person]) -> list[Person]:
    return FamilyTree(people).roots()
