"""Symbol table mapping names to symbols with respect to their scopes."""

from __future__ import annotations

from collections.abc import ItemsView
from typing import TypeVar

from tnac.symbols import (
    Deferred,
    Function,
    ModuleSym,
    Parameter,
    Scope,
    ScopeKind,
    ScopeRef,
    SymKind,
    Symbol,
    Variable,
)
from tnac.token import SourceLocation

_S = TypeVar("_S", bound=Symbol)

_ScopeMap = dict[Scope, Symbol]


class SymTable:
    """Stores scopes and the symbols declared in them."""

    def __init__(self) -> None:
        self._names: dict[str, _ScopeMap] = {}
        self._scopes: list[Scope] = []
        self._symbols: list[Symbol] = []
        self._vars: dict[Scope, list[Variable]] = {}
        self._funcs: dict[Scope, list[Function]] = {}
        self._modules: dict[Scope, list[ModuleSym]] = {}

    def add_scope(self, parent: Scope | None, kind: ScopeKind) -> Scope:
        """Create a new scope nested inside ``parent``."""
        scope = Scope(parent, kind)
        self._scopes.append(scope)
        return scope

    def add_variable(
        self, name: str, parent: Scope, loc: SourceLocation | None
    ) -> Variable:
        var = self._make_symbol(Variable, name, parent, lambda: Variable(name, parent, loc))
        self._store(var, self._vars)
        return var

    def add_parameter(
        self, name: str, parent: Scope, loc: SourceLocation | None
    ) -> Parameter:
        return self._make_symbol(
            Parameter, name, parent, lambda: Parameter(name, parent, loc)
        )

    def add_function(
        self,
        name: str,
        parent: Scope,
        params: list[Parameter],
        loc: SourceLocation | None,
        owned: Scope,
    ) -> Function:
        func = self._make_symbol(
            Function, name, parent, lambda: Function(name, parent, params, owned, loc)
        )
        self._store(func, self._funcs)
        return func

    def add_module(
        self, name: str, parent: Scope | None, loc: SourceLocation | None, owned: Scope
    ) -> ModuleSym:
        mod = self._make_symbol(
            ModuleSym, name, parent, lambda: ModuleSym(name, parent, owned, loc)
        )
        self._store(mod, self._modules)
        return mod

    def add_scope_ref(
        self,
        name: str,
        parent: Scope,
        loc: SourceLocation | None,
        referenced: Scope,
    ) -> ScopeRef:
        return self._make_symbol(
            ScopeRef, name, parent, lambda: ScopeRef(name, parent, referenced, loc)
        )

    def add_deferred_sym(
        self, name: str, parent: Scope, loc: SourceLocation | None
    ) -> Deferred:
        return self._make_symbol(
            Deferred, name, parent, lambda: Deferred(name, parent, loc)
        )

    def lookup(self, name: str, parent: Scope | None) -> Symbol | None:
        """Find ``name`` in ``parent`` or any of its enclosing scopes."""
        return self._lookup_in(self._names.get(name), parent, current=False)

    def scoped_lookup(self, name: str, parent: Scope | None) -> Symbol | None:
        """Find ``name`` declared directly in ``parent``."""
        return self._lookup_in(self._names.get(name), parent, current=True)

    def vars(self) -> ItemsView[Scope, list[Variable]]:
        """All declared variables, grouped by the scope they belong to."""
        return self._vars.items()

    def funcs(self) -> ItemsView[Scope, list[Function]]:
        """All declared functions, grouped by the scope they belong to."""
        return self._funcs.items()

    def modules(self) -> ItemsView[Scope, list[ModuleSym]]:
        """All declared modules, grouped by the scope they belong to."""
        return self._modules.items()

    @staticmethod
    def _lookup_in(
        scopes: _ScopeMap | None, parent: Scope | None, current: bool
    ) -> Symbol | None:
        if scopes is None:
            return None

        res: Symbol | None = None
        reached_function = False
        while parent is not None:
            found = scopes.get(parent)
            if found is not None:
                res = found
                break
            if current:
                break
            if parent.is_function():
                reached_function = True
            parent = parent.enclosing

        # Variables and parameters don't leak across functions
        if (
            reached_function
            and res is not None
            and res.is_any(SymKind.VARIABLE, SymKind.PARAMETER)
        ):
            return None
        return res

    def _make_symbol(self, cls: type[_S], name, parent, factory) -> _S:
        scopes = self._names.setdefault(name, {})
        existing = scopes.get(parent)
        if existing is not None:
            if existing.kind is not cls.kind:
                raise ValueError(
                    f"'{name}' is already declared in this scope as "
                    f"{existing.kind.name.lower()}"
                )
            return existing  # type: ignore[return-value]

        sym = factory()
        self._symbols.append(sym)
        scopes[parent] = sym
        return sym

    @staticmethod
    def _store(sym: _S, store: dict[Scope, list[_S]]) -> None:
        store.setdefault(sym.owner_scope, []).append(sym)