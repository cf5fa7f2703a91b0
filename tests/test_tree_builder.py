from family_tree.core.tree_builder import FamilyTree, roots_of
from family_tree.schemas.person_schema import Person


def make_person(id, first_name="A", parent_id=None, spouse_id=None, **kwargs):
    return Person(
        id=id,
        first_name=first_name,
        last_name=kwargs.pop("last_name", "Doe"),
        parent_id=parent_id,
        spouse_id=spouse_id,
        **kwargs,
    )


def sample_people():
    return [
        make_person(1, "A"),
        make_person(2, "B", parent_id=1),
        make_person(3, "C", parent_id=99),
    ]


def test_roots_include_orphans():
    tree = FamilyTree(sample_people())

    assert [p.id for p in tree.roots()] == ["1", "3"]
    assert [p.id for p in roots_of(sample_people())] == ["1", "3"]


def test_children_of_parent():
    tree = FamilyTree(sample_people())

    assert [p.id for p in tree.children_of("1")] == ["2"]


def test_children_of_unknown_or_unset_is_empty():
    tree = FamilyTree(sample_people())

    assert tree.children_of("2") == []
    assert tree.children_of("does-not-exist") == []
    assert tree.children_of(None) == []


def test_children_keep_input_order():
    people = [
        make_person("p", "Parent"),
        make_person("z", "Zed", parent_id="p"),
        make_person("a", "Amy", parent_id="p"),
        make_person("m", "Max", parent_id="p"),
    ]
    tree = FamilyTree(people)

    assert [p.first_name for p in tree.children_of("p")] == ["Zed", "Amy", "Max"]


def test_children_of_returns_a_copy():
    tree = FamilyTree(sample_people())

    tree.children_of("1").clear()

    assert [p.id for p in tree.children_of("1")] == ["2"]


def test_spouse_of_resolves_and_fails_soft():
    people = [
        make_person(1, "A", spouse_id=2),
        make_person(2, "B"),
        make_person(3, "C", spouse_id=42),
    ]
    tree = FamilyTree(people)

    assert tree.spouse_of("2").first_name == "B"
    assert tree.spouse_of("42") is None
    assert tree.spouse_of(None) is None


def test_spouse_of_returns_first_match_on_duplicate_ids():
    tree = FamilyTree([make_person(1, "First"), make_person(1, "Second")])

    assert tree.spouse_of("1").first_name == "First"


def test_root_membership_ignores_unrelated_fields():
    people = sample_people()
    before = [p.id for p in roots_of(people)]

    changed = [p.model_copy(update={"first_name": "Renamed", "spouse_id": "1"}) for p in people]

    assert [p.id for p in roots_of(changed)] == before


def test_empty_collection():
    tree = FamilyTree([])

    assert tree.roots() == []
    assert len(tree) == 0


def test_builder_does_not_mutate_input():
    people = sample_people()
    snapshot = [p.model_dump() for p in people]

    FamilyTree(people).roots()

    assert [p.model_dump() for p in people] == snapshot


def test_form_candidates_exclude_self_and_chosen_parent():
    tree = FamilyTree(sample_people())

    assert [p.id for p in tree.parent_candidates("2")] == ["1", "3"]
    assert [p.id for p in tree.spouse_candidates("2", parent_id="1")] == ["3"]
    assert [p.id for p in tree.spouse_candidates()] == ["1", "2", "3"]
