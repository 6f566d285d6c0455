import pytest

from lvs.luau_types import LuauType
from lvs.registry.classes import FunctionParameter, ScopeKind
from lvs.registry.lifecycle import FunctionDeclaration, VariableDeclaration, mount_scope, scope_id_for, temporary_scope

from ...utils.factory_helpers import DOC, get_function, get_registry, get_variable, names


@pytest.fixture
def registry():
    return get_registry()


def test_scope_id_follows_node_and_kind():
    assert scope_id_for("node-7", ScopeKind.LOOP) == "node-7-loop-scope"


def test_mount_declares_and_enters(registry):
    mount = mount_scope(registry, DOC, "for-1", ScopeKind.LOOP, initial_symbols=[get_variable("i", LuauType.NUMBER)])

    assert mount.mounted
    assert registry.current_scope(DOC) == "for-1-loop-scope"
    assert registry.get_variable(DOC, "i", "for-1-loop-scope").type == LuauType.NUMBER


def test_unmount_removes_everything_and_is_idempotent(registry):
    mount = mount_scope(registry, DOC, "fn-1", ScopeKind.FUNCTION, initial_symbols=[get_variable("a"), get_function("inner")])

    mount.unmount()
    mount.unmount()

    assert registry.list_scopes(DOC) == []
    assert registry.list_variables(DOC) == []
    assert registry.list_functions(DOC) == []
    assert registry.current_scope(DOC) is None


def test_context_manager_tears_down_on_exception(registry):
    with pytest.raises(RuntimeError):
        with mount_scope(registry, DOC, "while-1", ScopeKind.LOOP, initial_symbols=[get_variable("tick")]):
            raise RuntimeError("node crashed mid-edit")

    assert registry.list_scopes(DOC) == []
    assert registry.list_variables(DOC) == []


def test_mount_under_missing_parent_is_inert(registry):
    mount = mount_scope(registry, DOC, "for-1", ScopeKind.LOOP, parent_scope_id="ghost", initial_symbols=[get_variable("i")])

    assert not mount.mounted
    assert mount.declare(get_variable("j")) is None
    assert registry.list_variables(DOC) == []
    mount.unmount()


def test_nested_mounts_with_out_of_order_teardown(registry):
    outer = mount_scope(registry, DOC, "fn-1", ScopeKind.FUNCTION)
    inner = mount_scope(registry, DOC, "for-1", ScopeKind.LOOP, parent_scope_id=outer.scope_id)

    outer.unmount()

    assert registry.list_scopes(DOC) == []
    assert registry.current_scope(DOC) is None
    inner.unmount()


def test_temporary_scope_enters_and_exits(registry):
    mount = mount_scope(registry, DOC, "if-1", ScopeKind.BLOCK, enter=False)

    with temporary_scope(registry, DOC, mount.scope_id) as entered:
        assert entered
        assert registry.current_scope(DOC) == mount.scope_id
    assert registry.current_scope(DOC) is None


def test_variable_declaration_rename_removes_old_entry(registry):
    binding = VariableDeclaration(registry, DOC)

    binding.sync("score", LuauType.NUMBER)
    binding.sync("points", LuauType.NUMBER)

    assert names(registry.list_variables(DOC)) == ["points"]


def test_variable_declaration_empty_name_removes_entry(registry):
    binding = VariableDeclaration(registry, DOC)
    binding.sync("score")

    assert binding.sync("   ") is None
    assert registry.list_variables(DOC) == []
    assert binding.name is None


def test_declaration_moves_with_its_node(registry):
    mount = mount_scope(registry, DOC, "for-1", ScopeKind.LOOP)
    binding = VariableDeclaration(registry, DOC)
    binding.sync("total", LuauType.NUMBER)

    binding.move_to(mount.scope_id)

    assert registry.get_variable(DOC, "total") is None
    assert registry.get_variable(DOC, "total", mount.scope_id).type == LuauType.NUMBER


def test_function_declaration_release(registry):
    with FunctionDeclaration(registry, DOC) as binding:
        stored = binding.sync("add", [FunctionParameter(name="a", type=LuauType.NUMBER)], LuauType.NUMBER, node_id="def-1")
        assert stored.node_id == "def-1"
        assert registry.resolve_function(DOC, "add", None).return_type == LuauType.NUMBER

    assert registry.list_functions(DOC) == []
