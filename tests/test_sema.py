import pytest

from tnac.ast import (
    DotExpr,
    FuncDecl,
    IdExpr,
    LitExpr,
    ModuleDef,
    ParamDecl,
    ParenExpr,
    ScopeNode,
    VarDecl,
)
from tnac.sema import LookupType, Sema
from tnac.symbols import (
    Deferred,
    Function,
    ModuleSym,
    Parameter,
    ScopeKind,
    ScopeRef,
    Variable,
)
from tnac.token import SourceLocation, TokKind, Token


def ident(name):
    return Token(name, TokKind.IDENTIFIER, SourceLocation.dummy())


def literal():
    return LitExpr(Token("1", TokKind.INT_DEC, SourceLocation.dummy()))


def declare_var(sema, name):
    decl = VarDecl(ident(name), literal())
    sema.visit_decl(decl)
    return decl


def declare_func(sema, name, param_names=()):
    sema.open_scope(ScopeKind.FUNCTION)
    params = []
    for pname in param_names:
        p = ParamDecl(ident(pname))
        sema.visit_decl(p)
        params.append(p)
    decl = FuncDecl(ident(name), ident(name), ScopeNode(), params)
    sema.visit_decl(decl)
    sema.close_scope()
    return decl


@pytest.fixture
def sema():
    s = Sema()
    s.open_scope(ScopeKind.GLOBAL)
    return s


def test_open_and_close_scope():
    s = Sema()
    assert s.current_scope is None
    s.open_scope(ScopeKind.GLOBAL)
    glob = s.current_scope
    s.open_scope(ScopeKind.BLOCK)
    assert s.current_scope.enclosing is glob
    s.close_scope()
    assert s.current_scope is glob
    s.close_scope()
    s.close_scope()
    assert s.current_scope is None


def test_visit_var_decl(sema):
    decl = declare_var(sema, "x")
    assert isinstance(decl.symbol, Variable)
    assert sema.find("x", LookupType.UNSCOPED) is decl.symbol
    assert dict(sema.vars())[sema.current_scope] == [decl.symbol]


def test_visit_decl_without_scope_raises():
    with pytest.raises(RuntimeError):
        Sema().visit_decl(VarDecl(ident("x"), literal()))


def test_scoped_find_ignores_enclosing(sema):
    declare_var(sema, "x")
    sema.open_scope(ScopeKind.BLOCK)
    assert sema.find("x", LookupType.SCOPED) is None
    assert isinstance(sema.find("x", LookupType.UNSCOPED), Variable)


def test_visit_func_decl(sema):
    glob = sema.current_scope
    decl = declare_func(sema, "f", ["a", "b"])
    sym = decl.symbol
    assert isinstance(sym, Function)
    assert sym.owner_scope is glob
    assert [p.name for p in sym.params] == ["a", "b"]
    assert all(isinstance(p, Parameter) for p in sym.params)
    assert sym.own_scope.sym is sym
    assert sema.find("f", LookupType.SCOPED) is sym


def test_func_decl_outside_function_scope_raises(sema):
    decl = FuncDecl(ident("f"), ident("f"), ScopeNode(), [])
    with pytest.raises(ValueError):
        sema.visit_decl(decl)


def test_fake_module_gets_contrived_name(sema):
    sema.open_scope(ScopeKind.MODULE)
    mod = ModuleDef("", None)
    sema.visit_module_def(mod)
    assert isinstance(mod.symbol, ModuleSym)
    assert mod.symbol.name.startswith("`__anon_entity__")
    assert sema.current_scope.sym is mod.symbol


def test_named_module_and_entry(sema):
    glob = sema.current_scope
    sema.open_scope(ScopeKind.MODULE)
    loc = SourceLocation(None, 0, 0)
    mod = ModuleDef("calc", loc)
    sema.visit_module_def(mod)
    assert mod.symbol.name == "calc"
    assert dict(sema.modules())[glob] == [mod.symbol]

    param = ParamDecl(ident("n"))
    sema.visit_decl(param)
    entry_loc = SourceLocation(None, 3, 1)
    sema.visit_module_entry(mod, [param], entry_loc)
    assert mod.params == [param]
    assert mod.symbol.params == [param.symbol]
    assert mod.symbol.at is entry_loc
    assert mod.at is entry_loc


def test_module_def_requires_module_scope(sema):
    with pytest.raises(ValueError):
        sema.visit_module_def(ModuleDef("m", None))


def test_find_token_in_deferred_scope_creates_deferred(sema):
    sema.open_scope(ScopeKind.DEFERRED)
    sym = sema.find_token(ident("later"), LookupType.UNSCOPED)
    assert isinstance(sym, Deferred)
    assert sema.find_token(ident("later"), LookupType.UNSCOPED) is sym


def test_find_token_in_normal_scope(sema):
    assert sema.find_token(ident("nothing"), LookupType.UNSCOPED) is None


def test_import_components_create_and_reuse_scopes(sema):
    glob = sema.current_scope
    ref = sema.visit_import_component(ident("pkg"))
    assert isinstance(ref, ScopeRef)
    assert sema.current_scope is ref.referenced
    assert sema.current_scope.enclosing is glob
    sema.current_scope = glob
    again = sema.visit_import_component(ident("pkg"))
    assert again is ref
    assert sema.current_scope is ref.referenced


def test_try_resolve_scope_function(sema):
    glob = sema.current_scope
    decl = declare_func(sema, "f")
    expr = ParenExpr(IdExpr(ident("f"), decl.symbol), ident("("))
    with sema.try_resolve_scope(expr) as guard:
        assert sema.current_scope is decl.symbol.own_scope
        assert guard.prev is glob
    assert sema.current_scope is glob
    assert not guard


def test_try_resolve_scope_through_dot(sema):
    decl = declare_func(sema, "f")
    var = declare_var(sema, "v")
    dot = DotExpr(IdExpr(ident("v"), var.symbol), IdExpr(ident("f"), decl.symbol))
    guard = sema.try_resolve_scope(dot)
    assert guard.current is decl.symbol.own_scope
    guard.restore()


def test_try_resolve_scope_defers_unknown(sema):
    glob = sema.current_scope
    guard = sema.try_resolve_scope(literal())
    assert sema.current_scope.is_deferred()
    assert sema.current_scope.enclosing is glob
    guard.restore()
    assert sema.current_scope is glob


def test_assume_scope(sema):
    glob = sema.current_scope
    sema.open_scope(ScopeKind.BLOCK)
    block = sema.current_scope
    sema.close_scope()
    with sema.assume_scope(block):
        assert sema.current_scope is block
    assert sema.current_scope is glob


def test_contrived_names_are_unique():
    s = Sema()
    funcs = {s.contrive_func_name() for _ in range(5)}
    assert len(funcs) == 5
    assert all(n.startswith("`__anon_function__") for n in funcs)
    assert s.contrive_name() not in funcs