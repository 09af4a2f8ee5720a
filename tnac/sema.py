"""Semantic analyser tracking scopes and registering symbols."""

from __future__ import annotations

import itertools
from collections.abc import ItemsView, Iterable
from enum import Enum, auto

from tnac.ast import (
    Decl,
    DotExpr,
    Expr,
    FuncDecl,
    IdExpr,
    ModuleDef,
    NodeKind,
    ParamDecl,
    ParenExpr,
)
from tnac.sym_table import SymTable
from tnac.symbols import (
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
from tnac.token import SourceLocation, Token


class LookupType(Enum):
    """Whether a lookup is limited to the current scope."""

    SCOPED = auto()
    UNSCOPED = auto()


class ScopeGuard:
    """Makes a scope current and restores the previous one when closed."""

    def __init__(self, sema: Sema, new_scope: Scope | None) -> None:
        self._sema = sema
        self._prev = sema.current_scope
        self._alive = True
        sema.current_scope = new_scope

    def __enter__(self) -> ScopeGuard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.restore()

    def __bool__(self) -> bool:
        return self._alive

    @property
    def current(self) -> Scope | None:
        return self._sema.current_scope

    @property
    def prev(self) -> Scope | None:
        return self._prev

    def restore(self) -> None:
        """Make the previous scope current again; later calls do nothing."""
        if self._alive:
            self._sema.current_scope = self._prev
            self._alive = False


class _NamePool:
    """Generates unique names with a given prefix."""

    def __init__(self) -> None:
        self._counters: dict[str, itertools.count] = {}

    def next_indexed(self, prefix: str) -> str:
        counter = self._counters.setdefault(prefix, itertools.count())
        return f"{prefix}{next(counter)}"


class Sema:
    """Controls scope tracking; registers and looks up symbols."""

    def __init__(self) -> None:
        self._sym_tab = SymTable()
        self._generated_names = _NamePool()
        self.current_scope: Scope | None = None

    def open_scope(self, kind: ScopeKind) -> None:
        """Open a new scope nested in the current one."""
        self.current_scope = self._sym_tab.add_scope(self.current_scope, kind)

    def close_scope(self) -> None:
        """Close the current scope and make its parent current."""
        if self.current_scope is not None:
            self.current_scope = self.current_scope.enclosing

    def assume_scope(self, scope: Scope) -> ScopeGuard:
        """Make ``scope`` current; the returned guard restores the previous one."""
        return ScopeGuard(self, scope)

    def find(self, name: str, lookup_type: LookupType) -> Symbol | None:
        """Return the symbol declared under ``name``, if any."""
        if lookup_type is LookupType.SCOPED:
            return self._sym_tab.scoped_lookup(name, self.current_scope)
        return self._sym_tab.lookup(name, self.current_scope)

    def find_token(self, tok: Token, lookup_type: LookupType) -> Symbol | None:
        """Look up a token's name; in a deferred scope, create a deferred symbol."""
        scope = self.current_scope
        if scope is None or not scope.is_deferred():
            return self.find(tok.value, lookup_type)

        existing = self.find(tok.value, LookupType.SCOPED)
        if existing is not None:
            return existing
        return self._sym_tab.add_deferred_sym(tok.value, scope, tok.at)

    def visit_decl(self, decl: Decl) -> None:
        """Register a newly created declarator in the symbol table."""
        scope = self._require_scope()
        name = decl.name
        loc = decl.pos.at

        if decl.kind is NodeKind.VAR_DECL:
            decl.attach_symbol(self._sym_tab.add_variable(name, scope, loc))
        elif decl.kind is NodeKind.PARAM_DECL:
            decl.attach_symbol(self._sym_tab.add_parameter(name, scope, loc))
        elif decl.kind is NodeKind.FUNC_DECL:
            if not scope.is_function():
                raise ValueError("function declarations require a function scope")
            assert isinstance(decl, FuncDecl)
            sym = self._sym_tab.add_function(
                name, scope.enclosing, self._make_params(decl.params), loc, scope
            )
            decl.attach_symbol(sym)
            scope.attach_symbol(sym)
        else:
            raise ValueError(f"unsupported declarator kind {decl.kind.name}")

    def visit_module_def(self, definition: ModuleDef) -> None:
        """Register a newly created module definition."""
        scope = self._require_scope()
        if not scope.is_module():
            raise ValueError("module definitions require a module scope")

        name = self.contrive_name() if definition.is_fake() else definition.name
        sym = self._sym_tab.add_module(name, scope.enclosing, definition.at, scope)
        definition.attach_symbol(sym)
        scope.attach_symbol(sym)

    def visit_module_entry(
        self,
        definition: ModuleDef,
        params: Iterable[ParamDecl],
        at: SourceLocation | None,
    ) -> None:
        """Apply entry parameters and location to an existing module."""
        definition.attach_params(params)
        definition.override_loc(at)

        sym = definition.symbol
        if sym is None:
            raise ValueError(f"module '{definition.name}' has no symbol attached")
        sym.attach_params(self._make_params(definition.params))
        sym.override_location(at)

    def visit_import_component(self, tok: Token) -> Symbol:
        """Enter the scope named by one part of an import path."""
        name = tok.value
        found = self._sym_tab.scoped_lookup(name, self.current_scope)
        if isinstance(found, ScopeRef):
            self.current_scope = found.referenced
            return found

        new_scope = self._sym_tab.add_scope(self.current_scope, ScopeKind.BLOCK)
        ref = self._sym_tab.add_scope_ref(name, self.current_scope, tok.at, new_scope)
        new_scope.attach_symbol(ref)
        self.current_scope = new_scope
        return ref

    def visit_import_alias(self, definition: ModuleDef) -> Symbol:
        """Declare a previously imported module under its own name."""
        if definition.symbol is None:
            raise ValueError(f"module '{definition.name}' has no symbol attached")
        return self._import_alias(definition.name, definition.at, definition.symbol)

    def visit_import_alias_of(self, tok: Token, src: ModuleSym) -> Symbol:
        """Declare an alias for an imported module."""
        return self._import_alias(tok.value, tok.at, src)

    def try_resolve_scope(self, expr: Expr) -> ScopeGuard:
        """Make the scope an expression refers to current, or a deferred one."""
        sym = self._extract_sym(expr)
        if sym is not None and sym.is_any(SymKind.MODULE, SymKind.FUNCTION):
            found = sym.own_scope  # type: ignore[attr-defined]
        elif isinstance(sym, ScopeRef):
            found = sym.referenced
        else:
            found = self._sym_tab.add_scope(self.current_scope, ScopeKind.DEFERRED)
        return ScopeGuard(self, found)

    def contrive_name(self) -> str:
        """Generate a unique entity name."""
        return self._generated_names.next_indexed("`__anon_entity__")

    def contrive_func_name(self) -> str:
        """Generate a unique function name."""
        return self._generated_names.next_indexed("`__anon_function__")

    def vars(self) -> ItemsView[Scope, list[Variable]]:
        return self._sym_tab.vars()

    def funcs(self) -> ItemsView[Scope, list[Function]]:
        return self._sym_tab.funcs()

    def modules(self) -> ItemsView[Scope, list[ModuleSym]]:
        return self._sym_tab.modules()

    def _require_scope(self) -> Scope:
        if self.current_scope is None:
            raise RuntimeError("no scope is open")
        return self.current_scope

    def _extract_sym(self, expr: Expr) -> Symbol | None:
        while True:
            if isinstance(expr, ParenExpr):
                expr = expr.internal_expr
            elif isinstance(expr, DotExpr):
                expr = expr.accessor
            elif isinstance(expr, IdExpr):
                return expr.symbol
            else:
                return None

    @staticmethod
    def _make_params(src: Iterable[ParamDecl]) -> list[Parameter]:
        params = []
        for param in src:
            if not isinstance(param.symbol, Parameter):
                raise ValueError(f"'{param.name}' has no parameter symbol attached")
            params.append(param.symbol)
        return params

    def _import_alias(
        self, name: str, at: SourceLocation | None, src: ModuleSym
    ) -> Symbol:
        return self._sym_tab.add_scope_ref(
            name, self.current_scope, at, src.own_scope
        )