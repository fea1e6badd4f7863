from __future__ import annotations

import pytest

from safelist import CheckedListView, ElementTypeError, ReadOnlyView, SafeList


@pytest.fixture
def items() -> SafeList[int]:
    return SafeList([10, 20, 30])


def test_checked_view_accepts_matching_values(items):
    view = CheckedListView(items, int)
    assert view.append(40) == 3
    view.insert(0, 5)
    view[1] = 11
    view.extend([50, 60])
    assert items.to_list() == [5, 11, 20, 30, 40, 50, 60]
    assert view.remove(20) is True
    assert view.index_of(30) == 2
    assert 30 in view
    assert len(view) == 6
    assert view.source is items
    assert view.element_type is int


@pytest.mark.parametrize(
    "operation",
    [
        lambda v: v.append("40"),
        lambda v: v.insert(0, 1.5),
        lambda v: v.__setitem__(0, None),
        lambda v: v.__setitem__(slice(0, 2), [1, "2"]),
        lambda v: v.extend([1, "2"]),
        lambda v: v.remove("10"),
        lambda v: v.index_of("10"),
        lambda v: "10" in v,
    ],
    ids=["append", "insert", "setitem", "setslice", "extend", "remove", "index_of", "contains"],
)
def test_checked_view_rejects_mismatches_without_mutating(items, operation):
    view = CheckedListView(items, int)
    reader = items.reader()
    reader.move_next()

    with pytest.raises(ElementTypeError) as excinfo:
        operation(view)

    assert isinstance(excinfo.value, TypeError)
    assert "Expected element of type int" in str(excinfo.value)
    assert items.to_list() == [10, 20, 30]
    assert reader.position == 0
    reader.close()


def test_checked_view_accepts_type_tuples():
    view = CheckedListView(SafeList(), (int, float))
    view.append(1)
    view.append(2.5)
    with pytest.raises(ElementTypeError, match="int \\| float"):
        view.append("3")


def test_checked_view_mutations_adjust_traversals(items):
    view = CheckedListView(items, int)
    found = []
    for value in items:
        found.append(value)
        if value == 10:
            view.insert(0, 1)
            view.append(40)
            del view[2]
    assert found == [10, 30, 40]
    assert list(view) == [1, 10, 30, 40]


def test_read_only_view_is_live(items):
    view = items.as_read_only()
    assert isinstance(view, ReadOnlyView)
    assert not hasattr(view, "append")
    items.append(40)
    assert len(view) == 4
    assert view[-1] == 40
    assert view[1:3] == [20, 30]
    assert 40 in view
    assert view.index_of(30) == 2
    assert view.index(30) == 2
    assert repr(view) == "ReadOnlyView([10, 20, 30, 40])"


def test_read_only_view_iteration_tolerates_mutation(items):
    view = items.as_read_only()
    found = []
    for value in view:
        found.append(value)
        if value == 20:
            items.remove(30)
            items.append(99)
    assert found == [10, 20, 99]
    assert items.cursor_registry.active_count == 0
