"""Factory creating AST nodes."""

from __future__ import annotations

from collections.abc import Iterable

from tnac.ast import (
    AbsExpr,
    ArrayExpr,
    AssignExpr,
    BinaryExpr,
    CallExpr,
    CondExpr,
    CondShort,
    Decl,
    DeclExpr,
    DotExpr,
    ErrorExpr,
    Expr,
    FuncDecl,
    IdExpr,
    ImportDir,
    LitExpr,
    Matcher,
    ModuleDef,
    Node,
    ParamDecl,
    ParenExpr,
    Pattern,
    ResultExpr,
    RetExpr,
    Root,
    ScopeNode,
    TailExpr,
    TypeCheckExpr,
    TypedExpr,
    TypeResolveExpr,
    UnaryExpr,
    VarDecl,
)
from tnac.symbols import Symbol
from tnac.token import SourceLocation, Token

_FAKE_MODULE_NAME = "`fake"


class Builder:
    """Creates AST nodes and holds the shared default module."""

    def __init__(self) -> None:
        self._fake_module = ModuleDef(_FAKE_MODULE_NAME, SourceLocation.dummy())

    # General

    def make_root(self) -> Root:
        return Root()

    def make_module(self, name: str, loc: SourceLocation | None) -> ModuleDef:
        return ModuleDef(name, loc)

    def get_default_module(self, loc: SourceLocation | None) -> ModuleDef:
        """Return the shared default module, moved to ``loc``."""
        self._fake_module.override_loc(loc)
        return self._fake_module

    def make_import(
        self, pos: Token, name: Iterable[IdExpr], alias: IdExpr | None
    ) -> ImportDir:
        return ImportDir(pos, name, alias)

    def make_scope(self, children: Iterable[Node | None] | None) -> ScopeNode:
        return ScopeNode(children)

    def make_error(self, pos: Token, msg: str) -> ErrorExpr:
        return ErrorExpr(pos, msg)

    # Expressions

    def make_result(self, tok: Token) -> ResultExpr:
        return ResultExpr(tok)

    def make_ret(self, ret_val: Expr, kw_pos: Token) -> RetExpr:
        return RetExpr(ret_val, kw_pos)

    def make_literal(self, tok: Token) -> LitExpr:
        return LitExpr(tok)

    def make_id(self, tok: Token, sym: Symbol) -> IdExpr:
        return IdExpr(tok, sym)

    def make_typed(self, kw: Token, args: Iterable[Expr]) -> TypedExpr:
        return TypedExpr(kw, args)

    def make_call(self, callable_expr: Expr, args: Iterable[Expr]) -> CallExpr:
        return CallExpr(callable_expr, args)

    def make_array(self, ob: Token, elements: Iterable[Expr]) -> ArrayExpr:
        return ArrayExpr(ob, elements)

    def make_paren(self, e: Expr, op: Token) -> ParenExpr:
        return ParenExpr(e, op)

    def make_abs(self, e: Expr, op: Token) -> AbsExpr:
        return AbsExpr(e, op)

    def make_unary(self, e: Expr, op: Token) -> UnaryExpr:
        return UnaryExpr(e, op)

    def make_type_check(self, e: Expr, op: Token) -> TypeCheckExpr:
        return TypeCheckExpr(e, op)

    def make_type_resolver(self, chk: TypeCheckExpr, res: Expr) -> TypeResolveExpr:
        return TypeResolveExpr(chk, res)

    def make_tail(self, e: Expr) -> TailExpr:
        return TailExpr(e)

    def make_binary(self, left: Expr, right: Expr, op: Token) -> BinaryExpr:
        return BinaryExpr(left, right, op)

    def make_assign(self, left: Expr, right: Expr, op: Token) -> AssignExpr:
        return AssignExpr(left, right, op)

    def make_matcher(self, op: Token, checked: Expr | None) -> Matcher:
        return Matcher(op, checked)

    def make_pattern(self, matcher: Expr, body: ScopeNode) -> Pattern:
        return Pattern(matcher, body)

    def make_conditional(self, condition: Expr, body: ScopeNode) -> CondExpr:
        return CondExpr(condition, body)

    def make_short_cond(
        self,
        condition: Expr,
        on_true: Expr | None,
        on_false: Expr | None,
        scope: ScopeNode,
    ) -> CondShort:
        return CondShort(condition, on_true, on_false, scope)

    def make_dot(self, accessed: Expr, accessor: Expr) -> DotExpr:
        return DotExpr(accessed, accessor)

    # Declarators

    def make_decl_expr(self, decl: Decl) -> DeclExpr:
        return DeclExpr(decl)

    def make_var_decl(self, var: Token, initialiser: Expr) -> VarDecl:
        return VarDecl(var, initialiser)

    def make_param_decl(self, name: Token, opt: Expr | None) -> ParamDecl:
        return ParamDecl(name, opt)

    def make_func_decl(
        self,
        func: Token,
        pos: Token,
        definition: ScopeNode,
        params: Iterable[ParamDecl],
    ) -> FuncDecl:
        return FuncDecl(func, pos, definition, params)