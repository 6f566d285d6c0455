import pytest

from lvs.registry.classes import Scope, ScopeKind
from lvs.registry.scope_tree import ScopeTree

from ...utils.factory_helpers import DOC, get_scope


@pytest.fixture
def tree():
    return ScopeTree()


def test_create_under_unknown_parent_is_rejected(tree):
    assert tree.create_scope(DOC, get_scope("b1", parent="nowhere")) is None
    assert tree.list_scopes(DOC) == []


def test_global_kind_is_a_programming_error(tree):
    with pytest.raises(AssertionError):
        tree.create_scope(DOC, Scope(id="g", scope_type=ScopeKind.GLOBAL))


def test_children_are_tracked_on_the_parent(tree):
    tree.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    tree.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))

    assert tree.get_scope(DOC, "fn").child_scope_ids == {"loop"}
    assert tree.ancestors(DOC, "loop") == ["fn"]
    assert tree.descendants(DOC, "fn") == ["loop"]


def test_recreating_a_scope_reparents_it(tree):
    tree.create_scope(DOC, get_scope("a"))
    tree.create_scope(DOC, get_scope("b"))
    tree.create_scope(DOC, get_scope("c", parent="a"))

    moved = tree.create_scope(DOC, get_scope("c", parent="b"))

    assert moved.parent_scope_id == "b"
    assert "c" not in tree.get_scope(DOC, "a").child_scope_ids
    assert "c" in tree.get_scope(DOC, "b").child_scope_ids


def test_reparenting_under_own_descendant_is_rejected(tree):
    tree.create_scope(DOC, get_scope("a"))
    tree.create_scope(DOC, get_scope("b", parent="a"))

    assert tree.create_scope(DOC, get_scope("a", parent="b")) is None
    assert tree.get_scope(DOC, "a").parent_scope_id is None


def test_destroy_cascades_to_descendants_and_active_stack(tree):
    tree.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    tree.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))
    tree.enter_scope(DOC, "fn")
    tree.enter_scope(DOC, "loop")

    removed = tree.destroy_scope(DOC, "fn")

    assert removed == ["loop", "fn"]
    assert tree.list_scopes(DOC) == []
    assert tree.active_scopes(DOC) == []
    assert tree.current_scope(DOC) is None


def test_enter_unknown_scope_returns_false(tree):
    assert tree.enter_scope(DOC, "missing") is False
    assert tree.current_scope(DOC) is None


def test_current_scope_is_most_recently_entered(tree):
    for scope_id in ("a", "b", "c"):
        tree.create_scope(DOC, get_scope(scope_id))
        tree.enter_scope(DOC, scope_id)

    assert tree.current_scope(DOC) == "c"


def test_out_of_order_exit_keeps_latest_remaining(tree):
    for scope_id in ("a", "b", "c"):
        tree.create_scope(DOC, get_scope(scope_id))
        tree.enter_scope(DOC, scope_id)

    tree.exit_scope(DOC, "b")
    assert tree.current_scope(DOC) == "c"
    tree.exit_scope(DOC, "c")
    assert tree.current_scope(DOC) == "a"


def test_reentering_moves_scope_to_top_without_duplicates(tree):
    for scope_id in ("a", "b"):
        tree.create_scope(DOC, get_scope(scope_id))
        tree.enter_scope(DOC, scope_id)

    tree.enter_scope(DOC, "a")

    assert tree.active_scopes(DOC) == ["b", "a"]
    assert tree.current_scope(DOC) == "a"


def test_exit_inactive_scope_is_a_noop(tree):
    tree.create_scope(DOC, get_scope("a"))
    assert tree.exit_scope(DOC, "a") is False


def test_scope_kind_of_global_and_unknown(tree):
    tree.create_scope(DOC, get_scope("loop", ScopeKind.LOOP))

    assert tree.scope_kind(DOC, None) == ScopeKind.GLOBAL
    assert tree.scope_kind(DOC, "missing") == ScopeKind.GLOBAL
    assert tree.scope_kind(DOC, "loop") == ScopeKind.LOOP
