"""Scopes and the symbols declared in them."""

from __future__ import annotations

from enum import Enum, auto

from tnac.token import SourceLocation


class SymKind(Enum):
    """Kinds of symbols."""

    VARIABLE = auto()
    PARAMETER = auto()
    FUNCTION = auto()
    MODULE = auto()
    SCOPE_REF = auto()
    DEFERRED = auto()


class ScopeKind(Enum):
    """Kinds of scopes."""

    GLOBAL = auto()
    MODULE = auto()
    FUNCTION = auto()
    BLOCK = auto()
    DEFERRED = auto()


class Scope:
    """A lexical scope; scopes are compared by identity."""

    __slots__ = ("enclosing", "kind", "depth", "sym")

    def __init__(self, enclosing: Scope | None, kind: ScopeKind) -> None:
        self.enclosing = enclosing
        self.kind = kind
        self.depth = enclosing.depth + 1 if enclosing is not None else 0
        self.sym: Symbol | None = None

    def __repr__(self) -> str:
        return f"Scope({self.kind.name}, depth={self.depth})"

    def is_any(self, *kinds: ScopeKind) -> bool:
        return self.kind in kinds

    def encl_skip_internal(self) -> Scope | None:
        """Climb to the nearest function, top-level or symbol-owning parent."""
        encl = self.enclosing
        while encl is not None:
            if encl.is_function() or encl.is_top_level() or encl.has_sym():
                break
            encl = encl.enclosing
        return encl

    def is_top_level(self) -> bool:
        return self.kind in (ScopeKind.GLOBAL, ScopeKind.MODULE)

    def is_module(self) -> bool:
        return self.kind is ScopeKind.MODULE

    def is_function(self) -> bool:
        return self.kind is ScopeKind.FUNCTION

    def is_internal(self) -> bool:
        return self.kind is ScopeKind.BLOCK

    def is_deferred(self) -> bool:
        return self.kind is ScopeKind.DEFERRED

    def has_sym(self) -> bool:
        return self.sym is not None

    def _sym_of(self, kind: SymKind) -> Symbol | None:
        if self.sym is not None and self.sym.kind is kind:
            return self.sym
        return None

    def to_func(self) -> Function | None:
        """Return the attached symbol if it is a function."""
        return self._sym_of(SymKind.FUNCTION)  # type: ignore[return-value]

    def to_module(self) -> ModuleSym | None:
        """Return the attached symbol if it is a module."""
        return self._sym_of(SymKind.MODULE)  # type: ignore[return-value]

    def to_callable(self) -> Function | None:
        """Return the attached function or module symbol of a callable scope."""
        if self.sym is not None and self.is_any(ScopeKind.MODULE, ScopeKind.FUNCTION):
            return self.sym  # type: ignore[return-value]
        return None

    def to_scope_ref(self) -> ScopeRef | None:
        """Return the attached symbol if it is a scope reference."""
        return self._sym_of(SymKind.SCOPE_REF)  # type: ignore[return-value]

    def attach_symbol(self, sym: Symbol) -> None:
        self.sym = sym


class Symbol:
    """Information about a named entity declared in a scope."""

    kind: SymKind

    def __init__(
        self, name: str, owner: Scope, at: SourceLocation | None = None
    ) -> None:
        self.name = name
        self.owner_scope = owner
        self.at = at

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def what(self) -> SymKind:
        return self.kind

    def is_any(self, *kinds: SymKind) -> bool:
        return self.kind in kinds

    def is_in_scope(self, other: Scope) -> bool:
        return self.owner_scope is other

    def override_location(self, loc: SourceLocation | None) -> None:
        self.at = loc


class Variable(Symbol):
    """A variable."""

    kind = SymKind.VARIABLE


class Parameter(Symbol):
    """A function or module parameter."""

    kind = SymKind.PARAMETER


class Function(Symbol):
    """A function owning a scope and a list of parameters."""

    kind = SymKind.FUNCTION

    def __init__(
        self,
        name: str,
        owner: Scope,
        params: list[Parameter] | None,
        own_scope: Scope,
        at: SourceLocation | None = None,
    ) -> None:
        super().__init__(name, owner, at)
        self.params: list[Parameter] = list(params or [])
        self.own_scope = own_scope

    def param_count(self) -> int:
        return len(self.params)

    def attach_params(self, params: list[Parameter]) -> None:
        """Set the parameter list; only allowed while it is still empty."""
        if self.params:
            raise ValueError(f"parameters of '{self.name}' are already attached")
        self.params = list(params)


class ModuleSym(Function):
    """A module; its entry parameters may be attached later."""

    kind = SymKind.MODULE

    def __init__(
        self,
        name: str,
        owner: Scope,
        own_scope: Scope,
        at: SourceLocation | None = None,
    ) -> None:
        super().__init__(name, owner, [], own_scope, at)


class ScopeRef(Symbol):
    """A name referring to another scope."""

    kind = SymKind.SCOPE_REF

    def __init__(
        self,
        name: str,
        owner: Scope,
        referenced: Scope,
        at: SourceLocation | None = None,
    ) -> None:
        super().__init__(name, owner, at)
        self.referenced = referenced


class Deferred(Symbol):
    """A name whose target can only be resolved during evaluation."""

    kind = SymKind.DEFERRED