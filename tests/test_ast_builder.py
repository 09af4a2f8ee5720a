import pytest

from tnac.ast import NodeKind
from tnac.ast_builder import Builder
from tnac.symbols import Scope, ScopeKind, Variable
from tnac.token import SourceLocation, TokKind, Token


@pytest.fixture
def builder():
    return Builder()


def lit(value="1"):
    return Token(value, TokKind.INT_DEC)


def test_binary_links_children_and_takes_left_position(builder):
    left = builder.make_literal(lit("1"))
    right = builder.make_literal(lit("2"))
    op = Token("+", TokKind.PLUS)
    node = builder.make_binary(left, right, op)
    assert node.kind is NodeKind.BINARY
    assert node.pos is left.pos
    assert left.parent is node and right.parent is node
    assert node.op is op
    assert node.valid


def test_assign_kind(builder):
    node = builder.make_assign(
        builder.make_literal(lit()), builder.make_literal(lit()), Token("=", TokKind.ASSIGN)
    )
    assert node.kind is NodeKind.ASSIGN


def test_error_makes_parent_invalid(builder):
    err = builder.make_error(lit("x"), "boom")
    assert not err.valid
    assert err.message == "boom"
    un = builder.make_unary(err, Token("-", TokKind.MINUS))
    assert not un.valid
    assert err.parent is un


def test_scope_adopt_invalidates_ancestors(builder):
    outer = builder.make_scope([])
    inner = builder.make_scope([])
    outer.adopt([inner])
    assert outer.valid
    inner.adopt([builder.make_error(lit(), "bad")])
    assert not inner.valid
    assert not outer.valid


def test_default_module_is_shared_and_relocated(builder):
    first_loc = SourceLocation.dummy()
    second_loc = SourceLocation(None, 3, 4)
    a = builder.get_default_module(first_loc)
    b = builder.get_default_module(second_loc)
    assert a is b
    assert b.at is second_loc
    assert b.name == "`fake"


def test_make_module_keeps_name_and_loc(builder):
    loc = SourceLocation(None, 1, 2)
    mod = builder.make_module("main", loc)
    assert mod.kind is NodeKind.MODULE
    assert mod.name == "main"
    assert mod.at is loc
    assert builder.make_module("other", loc) is not mod


def test_func_decl_parents_params_and_body(builder):
    body = builder.make_scope([])
    p = builder.make_param_decl(Token("a", TokKind.IDENTIFIER), None)
    name = Token("f", TokKind.IDENTIFIER)
    fn = builder.make_func_decl(name, name, body, [p])
    assert fn.param_count() == 1
    assert p.parent is fn and body.parent is fn
    assert fn.body is body
    assert fn.name == "f"
    expr = builder.make_decl_expr(fn)
    assert expr.kind is NodeKind.DECL
    assert expr.declarator is fn


def test_var_decl_initialiser(builder):
    init = builder.make_literal(lit())
    decl = builder.make_var_decl(Token("v", TokKind.IDENTIFIER), init)
    assert decl.initialiser is init
    assert init.parent is decl


def test_id_and_dot(builder):
    sym = Variable("x", Scope(None, ScopeKind.GLOBAL))
    ident = builder.make_id(Token("x", TokKind.IDENTIFIER), sym)
    other = builder.make_id(Token("y", TokKind.IDENTIFIER), sym)
    dot = builder.make_dot(ident, other)
    assert ident.symbol is sym
    assert dot.accessed is ident and dot.accessor is other
    assert dot.pos is ident.pos


def test_short_cond_with_missing_branches(builder):
    cond = builder.make_literal(lit())
    sc = builder.make_short_cond(cond, None, None, builder.make_scope([]))
    assert not sc.has_true and not sc.has_false
    assert sc.kind is NodeKind.COND_SHORT


def test_matcher_default_and_unary(builder):
    default = builder.make_matcher(Token("{", TokKind.CURLY_OPEN), None)
    unary = builder.make_matcher(Token("!", TokKind.EXCLAMATION), None)
    assert default.is_default() and not default.is_unary()
    assert unary.is_unary() and not unary.is_default()


def test_call_and_array_args(builder):
    callee = builder.make_literal(lit())
    args = [builder.make_literal(lit()), builder.make_literal(lit())]
    call = builder.make_call(callee, args)
    assert call.args == args
    assert all(a.parent is call for a in args)
    arr = builder.make_array(Token("[", TokKind.BRACKET_OPEN), args)
    assert arr.elements == args


def test_type_resolver_chain(builder):
    kw = Token("_int", TokKind.KW_INT)
    chk = builder.make_type_check(builder.make_literal(lit()), kw)
    res = builder.make_type_resolver(chk, builder.make_literal(lit()))
    assert res.kind is NodeKind.TYPE_RES
    assert res.pos is kw
    assert chk.parent is res