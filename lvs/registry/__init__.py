from .classes import FunctionDefinition, FunctionParameter, Scope, ScopeKind, Symbol, Variable
from .events import EventKind, RegistryEvent
from .intellisense import DocumentIntellisense, IntellisenseRegistry
from .lifecycle import FunctionDeclaration, ScopeMount, VariableDeclaration, mount_scope, temporary_scope
