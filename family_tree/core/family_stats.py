from datetime import datetime
from typing import Iterable

from family_tree.core.tree_renderer import DEFAULT_DATE_FORMAT, format_date
from family_tree.schemas.person_schema import Person
from family_tree.schemas.tree_schema import FamilyStats, RecentAddition


def family_statistics(people: Iterable[Person]) -> FamilyStats:
    people = list(people)
    return FamilyStats(
        total_members=len(people),
        living_members=sum(1 for p in people if p.date_of_death is None),
        married_members=sum(1 for p in people if p.marriage_date is not None),
    )


def recent_additions(
    people: Iterable[Person],
    limit: int = 5,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> list[RecentAddition]:
    """
    Newest first by created_at; records without a timestamp sort last.
    """
    # timestamp() so naive and aware datetimes compare
    def sort_key(p: Person):
        if p.created_at is None:
            return (1, 0.0)
        return (0, -p.created_at.timestamp())

    ordered = sorted(people, key=sort_key)

    return [
        RecentAddition(
            id=p.id,
            full_name=p.full_name,
            initials=p.initials,
            added_on=format_date(
                p.created_at.date() if isinstance(p.created_at, datetime) else None,
                date_format,
            ),
        )
        for p in ordered[:max(limit, 0)]
    ]
