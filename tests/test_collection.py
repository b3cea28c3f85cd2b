from core.collection import Collection
from core.models import GovernmentScheme


def make_scheme(collection, title):
    scheme = GovernmentScheme(id=collection.next_id(), title=title, organization="Org", description="Desc")
    return collection.put(scheme)


def test_ids_are_monotonic_and_never_reused():
    schemes = Collection()
    first = make_scheme(schemes, "A")
    second = make_scheme(schemes, "B")
    assert (first.id, second.id) == (1, 2)

    assert schemes.remove(second.id) is True
    third = make_scheme(schemes, "C")
    assert third.id == 3
    assert second.id not in schemes
    assert len(schemes) == 2


def test_find_returns_first_in_insertion_order():
    schemes = Collection()
    make_scheme(schemes, "Same")
    make_scheme(schemes, "Same")
    assert schemes.find(lambda s: s.title == "Same").id == 1
    assert schemes.find(lambda s: s.title == "Missing") is None
    assert [s.id for s in schemes.filter(lambda s: s.title == "Same")] == [1, 2]


def test_replacing_a_record_keeps_its_position():
    schemes = Collection()
    first = make_scheme(schemes, "A")
    make_scheme(schemes, "B")
    schemes.put(first.model_copy(update={"title": "A2"}))
    assert [s.title for s in schemes.all()] == ["A2", "B"]


def test_returned_records_are_copies():
    schemes = Collection()
    make_scheme(schemes, "A")
    fetched = schemes.get(1)
    fetched.title = "changed"
    fetched.benefits.append("extra")
    assert schemes.get(1).title == "A"
    assert schemes.get(1).benefits == []


def test_remove_unknown_id():
    schemes = Collection()
    assert schemes.remove(42) is False
    assert schemes.get(42) is None
