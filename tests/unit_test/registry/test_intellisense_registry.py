import pytest

from lvs.luau_types import LuauType
from lvs.registry.classes import ScopeKind
from lvs.registry.events import EventKind

from ...utils.factory_helpers import DOC, get_function, get_registry, get_scope, get_variable, names


@pytest.fixture
def registry():
    return get_registry()


# --- Visibility ---


def test_loop_variable_visible_only_inside_loop(registry):
    registry.create_scope(DOC, get_scope("loop-1", ScopeKind.LOOP))
    registry.add_variable(DOC, get_variable("i", LuauType.NUMBER, scope_id="loop-1"))

    assert "i" in names(registry.visible_variables(DOC, "loop-1"))
    assert "i" not in names(registry.visible_variables(DOC, None))


def test_inner_declaration_shadows_global(registry):
    registry.add_variable(DOC, get_variable("count", LuauType.NUMBER))
    registry.create_scope(DOC, get_scope("b1", ScopeKind.BLOCK))
    registry.add_variable(DOC, get_variable("count", LuauType.STRING, scope_id="b1"))

    visible = registry.visible_variables(DOC, "b1")

    assert names(visible).count("count") == 1
    assert registry.resolve_variable(DOC, "count", "b1").type == LuauType.STRING
    assert registry.resolve_variable(DOC, "count", None).type == LuauType.NUMBER


def test_child_sees_parent_and_globals_but_not_siblings(registry):
    registry.add_variable(DOC, get_variable("g"))
    registry.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))
    registry.create_scope(DOC, get_scope("other", ScopeKind.BLOCK, parent="fn"))
    registry.add_variable(DOC, get_variable("param", scope_id="fn"))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))
    registry.add_variable(DOC, get_variable("hidden", scope_id="other"))

    parent_visible = set(names(registry.visible_variables(DOC, "fn")))
    child_visible = set(names(registry.visible_variables(DOC, "loop")))

    assert parent_visible <= child_visible
    assert child_visible == {"i", "param", "g"}


def test_visible_order_is_innermost_first(registry):
    registry.add_variable(DOC, get_variable("g"))
    registry.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))
    registry.add_variable(DOC, get_variable("param", scope_id="fn"))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))

    assert names(registry.visible_variables(DOC, "loop")) == ["i", "param", "g"]


def test_unknown_scope_fails_open(registry):
    registry.add_variable(DOC, get_variable("g"))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))

    assert sorted(names(registry.visible_variables(DOC, "not-mounted-yet"))) == ["g", "i"]


def test_declare_into_missing_scope_is_rejected(registry):
    assert registry.add_variable(DOC, get_variable("i", scope_id="ghost")) is None
    assert registry.list_variables(DOC) == []


def test_declared_symbol_takes_scope_kind(registry):
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP))
    stored = registry.add_variable(DOC, get_variable("i", scope_id="loop"))

    assert stored.scope_type == ScopeKind.LOOP
    assert stored.is_global is False
    assert registry.get_scope(DOC, "loop").member_names == {"i"}


def test_functions_resolve_separately_from_variables(registry):
    registry.add_variable(DOC, get_variable("add", LuauType.NUMBER))
    registry.add_function(DOC, get_function("add", [("a", LuauType.NUMBER)], LuauType.NUMBER))

    assert registry.resolve_function(DOC, "add", None).signature == "add(a: number) -> number"
    assert registry.resolve_variable(DOC, "add", None).type == LuauType.NUMBER


# --- Cleanup ---


def test_destroy_scope_removes_every_owned_symbol(registry):
    registry.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))
    registry.add_variable(DOC, get_variable("param", scope_id="fn"))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))
    registry.add_function(DOC, get_function("helper", scope_id="loop"))
    registry.add_variable(DOC, get_variable("g"))

    removed = registry.destroy_scope(DOC, "fn")

    assert set(removed) == {"fn", "loop"}
    everything = registry.visible_variables(DOC, None) + registry.list_variables(DOC) + registry.list_functions(DOC)
    assert all(s.scope_id not in ("fn", "loop") for s in everything)
    assert names(registry.list_variables(DOC)) == ["g"]


def test_destroy_unknown_scope_returns_empty(registry):
    assert registry.destroy_scope(DOC, "missing") == []


def test_clear_document_leaves_other_documents(registry):
    registry.add_variable("a", get_variable("x"))
    registry.add_variable("b", get_variable("y"))
    registry.create_scope("a", get_scope("s"))

    registry.clear_document("a")

    assert registry.list_variables("a") == []
    assert registry.list_scopes("a") == []
    assert names(registry.list_variables("b")) == ["y"]


def test_update_variable_keeps_scope(registry):
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP))
    registry.add_variable(DOC, get_variable("i", LuauType.ANY, scope_id="loop"))

    updated = registry.update_variable(DOC, "i", "loop", type=LuauType.NUMBER, scope_type=ScopeKind.GLOBAL)

    assert updated.type == LuauType.NUMBER
    assert updated.scope_type == ScopeKind.LOOP


def test_visible_from_current_follows_active_scope(registry):
    registry.add_variable(DOC, get_variable("g"))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP))
    registry.create_scope(DOC, get_scope("other", ScopeKind.BLOCK))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))
    registry.add_variable(DOC, get_variable("o", scope_id="other"))

    assert sorted(names(registry.visible_from_current(DOC))) == ["g", "i", "o"]
    registry.enter_scope(DOC, "loop")
    assert names(registry.visible_from_current(DOC)) == ["i", "g"]


# --- Events ---


def test_each_mutation_publishes_after_it_is_applied(registry):
    seen = []
    registry.subscribe(lambda event: seen.append((event.kind, event.name, len(registry.list_variables(DOC)))))

    registry.add_variable(DOC, get_variable("x"))
    registry.remove_variable(DOC, "x")

    assert seen == [(EventKind.VARIABLES_CHANGED, "x", 1), (EventKind.VARIABLES_CHANGED, "x", 0)]


def test_unsubscribe_stops_notifications(registry):
    seen = []
    unsubscribe = registry.subscribe(seen.append)

    registry.add_variable(DOC, get_variable("x"))
    unsubscribe()
    registry.add_variable(DOC, get_variable("y"))

    assert len(seen) == 1


def test_document_filter_on_subscription(registry):
    seen = []
    registry.subscribe(seen.append, document="other")

    registry.add_variable(DOC, get_variable("x"))
    registry.add_variable("other", get_variable("y"))

    assert [e.name for e in seen] == ["y"]


def test_listeners_run_in_subscription_order(registry):
    order = []
    registry.subscribe(lambda e: order.append("first"))
    registry.subscribe(lambda e: order.append("second"))

    registry.create_scope(DOC, get_scope("b1"))

    assert order == ["first", "second"]


def test_failing_listener_does_not_stop_the_others(registry):
    seen = []

    def broken(event):
        raise RuntimeError("re-render failed")

    registry.subscribe(broken)
    registry.subscribe(seen.append)

    assert registry.add_variable(DOC, get_variable("x")) is not None
    assert [e.name for e in seen] == ["x"]


def test_destroy_cascade_completes_before_listeners_run(registry):
    registry.create_scope(DOC, get_scope("fn", ScopeKind.FUNCTION))
    registry.create_scope(DOC, get_scope("loop", ScopeKind.LOOP, parent="fn"))
    registry.add_variable(DOC, get_variable("a", scope_id="fn"))
    registry.add_variable(DOC, get_variable("i", scope_id="loop"))
    snapshots = []

    def broken(event):
        snapshots.append([(v.name, v.scope_id) for v in registry.list_variables(DOC)])
        raise RuntimeError("re-render failed")

    registry.subscribe(broken)

    assert registry.destroy_scope(DOC, "fn") == ["loop", "fn"]
    assert registry.list_variables(DOC) == []
    assert registry.list_scopes(DOC) == []
    assert snapshots and all(s == [] for s in snapshots)


def test_rejected_write_publishes_nothing(registry):
    seen = []
    registry.subscribe(seen.append)

    registry.add_variable(DOC, get_variable("i", scope_id="ghost"))
    registry.remove_variable(DOC, "never-declared")

    assert seen == []


def test_update_with_unknown_type_is_rejected(registry):
    registry.add_variable(DOC, get_variable("hp", LuauType.NUMBER))
    seen = []
    registry.subscribe(seen.append)

    assert registry.update_variable(DOC, "hp", type="vector3") is None
    assert registry.get_variable(DOC, "hp").type is LuauType.NUMBER
    assert seen == []


def test_document_view_binds_the_document(registry):
    view = registry.document(DOC)
    view.create_scope(get_scope("loop", ScopeKind.LOOP))
    view.add_variable(get_variable("i", LuauType.NUMBER, scope_id="loop"))

    assert names(registry.visible_variables(DOC, "loop")) == ["i"]
    view.clear()
    assert registry.list_variables(DOC) == []
