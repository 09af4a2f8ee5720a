"""Abstract syntax tree nodes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum, auto

from tnac.symbols import ModuleSym, Symbol
from tnac.token import SourceLocation, TokKind, Token


class NodeKind(Enum):
    """Kinds of AST nodes."""

    ERROR = auto()
    SCOPE = auto()
    MODULE = auto()
    ROOT = auto()
    IMPORT = auto()

    RESULT = auto()
    RET = auto()
    LITERAL = auto()
    IDENTIFIER = auto()
    UNARY = auto()
    TAIL = auto()
    IS_TYPE = auto()
    TYPE_RES = auto()
    BINARY = auto()
    ASSIGN = auto()
    DOT = auto()
    ARRAY = auto()
    PAREN = auto()
    ABS = auto()
    TYPED = auto()
    CALL = auto()
    MATCHER = auto()
    PATTERN = auto()
    COND = auto()
    COND_SHORT = auto()

    DECL = auto()
    VAR_DECL = auto()
    PARAM_DECL = auto()
    FUNC_DECL = auto()


class Node:
    """Base AST node with a parent link and a validity flag."""

    def __init__(self, kind: NodeKind) -> None:
        self.kind = kind
        self.parent: Node | None = None
        self.valid = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name})"

    def is_any(self, *kinds: NodeKind) -> bool:
        return self.kind in kinds

    def make_invalid(self) -> None:
        self.valid = False

    def _make_invalid_if(self, child: Node | None) -> None:
        if self.valid and child is not None and not child.valid:
            self.make_invalid()

    def assume_ancestry(self, child: Node | None) -> None:
        """Become the parent of ``child`` and inherit its invalidity."""
        self._make_invalid_if(child)
        if child is not None:
            child.parent = self

    def invalidate_parents(self) -> None:
        """Propagate this node's invalidity up through valid ancestors."""
        node: Node = self
        while not node.valid:
            parent = node.parent
            if parent is None or not parent.valid:
                return
            parent.make_invalid()
            node = parent


class ScopeNode(Node):
    """A node holding a sequence of child expressions."""

    def __init__(
        self,
        children: Iterable[Node | None] | None = None,
        kind: NodeKind = NodeKind.SCOPE,
    ) -> None:
        super().__init__(kind)
        self.children: list[Node | None] = []
        if children is not None:
            self.adopt(children)

    def adopt(self, children: Iterable[Node | None]) -> None:
        """Append ``children`` and take ownership of them."""
        children = list(children)
        for child in children:
            self.assume_ancestry(child)
        self.children.extend(children)
        self.invalidate_parents()

    def is_global(self) -> bool:
        return self.parent is None


class Expr(Node):
    """Base expression; ``pos`` is the token it is reported at."""

    def __init__(self, kind: NodeKind, pos: Token) -> None:
        super().__init__(kind)
        self.pos = pos


class ResultExpr(Expr):
    """The ``_result`` expression."""

    def __init__(self, tok: Token) -> None:
        super().__init__(NodeKind.RESULT, tok)


class RetExpr(Expr):
    """A return expression."""

    def __init__(self, returned_value: Expr, kw_pos: Token) -> None:
        super().__init__(NodeKind.RET, kw_pos)
        self.returned_value = returned_value
        self.assume_ancestry(returned_value)


class LitExpr(Expr):
    """A literal."""

    def __init__(self, tok: Token) -> None:
        super().__init__(NodeKind.LITERAL, tok)


class IdExpr(Expr):
    """An identifier bound to a symbol."""

    def __init__(self, tok: Token, symbol: Symbol) -> None:
        super().__init__(NodeKind.IDENTIFIER, tok)
        self.symbol = symbol

    @property
    def name(self) -> str:
        return self.pos.value


class UnaryExpr(Expr):
    """A prefix operator applied to an operand."""

    def __init__(self, operand: Expr, op: Token) -> None:
        super().__init__(NodeKind.UNARY, op)
        self.operand = operand
        self.assume_ancestry(operand)

    @property
    def op(self) -> Token:
        return self.pos


class TailExpr(Expr):
    """The postfix ``@`` operator."""

    def __init__(self, operand: Expr) -> None:
        super().__init__(NodeKind.TAIL, operand.pos)
        self.operand = operand
        self.assume_ancestry(operand)


class TypeCheckExpr(Expr):
    """Checks whether an operand has the type named by a keyword."""

    def __init__(self, operand: Expr, type_tok: Token) -> None:
        super().__init__(NodeKind.IS_TYPE, type_tok)
        self.operand = operand
        self.assume_ancestry(operand)

    @property
    def type(self) -> Token:
        return self.pos


class TypeResolveExpr(Expr):
    """A type check followed by a resolver expression."""

    def __init__(self, checker: TypeCheckExpr, resolver: Expr) -> None:
        super().__init__(NodeKind.TYPE_RES, checker.pos)
        self.checker = checker
        self.resolver = resolver
        self.assume_ancestry(checker)
        self.assume_ancestry(resolver)


class BinaryExpr(Expr):
    """A binary operation; positioned at its left operand."""

    def __init__(
        self,
        left: Expr,
        right: Expr,
        op: Token,
        kind: NodeKind = NodeKind.BINARY,
    ) -> None:
        super().__init__(kind, left.pos)
        self.left = left
        self.right = right
        self.op = op
        self.assume_ancestry(left)
        self.assume_ancestry(right)


class AssignExpr(BinaryExpr):
    """An assignment."""

    def __init__(self, assignee: Expr, assigned: Expr, op: Token) -> None:
        super().__init__(assignee, assigned, op, NodeKind.ASSIGN)


class DotExpr(Expr):
    """Member access ``accessed.accessor``."""

    def __init__(self, accessed: Expr, accessor: Expr) -> None:
        super().__init__(NodeKind.DOT, accessed.pos)
        self.accessed = accessed
        self.accessor = accessor
        self.assume_ancestry(accessed)
        self.assume_ancestry(accessor)


class ArrayExpr(Expr):
    """An array literal."""

    def __init__(self, ob: Token, elements: Iterable[Expr]) -> None:
        super().__init__(NodeKind.ARRAY, ob)
        self.elements = list(elements)
        for e in self.elements:
            self.assume_ancestry(e)


class ParenExpr(Expr):
    """A parenthesised expression."""

    def __init__(self, internal_expr: Expr, op: Token) -> None:
        super().__init__(NodeKind.PAREN, op)
        self.internal_expr = internal_expr
        self.assume_ancestry(internal_expr)


class AbsExpr(Expr):
    """An absolute value ``|e|``."""

    def __init__(self, expression: Expr, op: Token) -> None:
        super().__init__(NodeKind.ABS, op)
        self.expression = expression
        self.assume_ancestry(expression)


class Invocation(Expr):
    """Base of expressions invoked by name with arguments."""

    def __init__(self, kind: NodeKind, name: Token, args: Iterable[Expr]) -> None:
        super().__init__(kind, name)
        self.args = list(args)
        for arg in self.args:
            self.assume_ancestry(arg)

    @property
    def name(self) -> Token:
        return self.pos


class TypedExpr(Invocation):
    """Construction of a value of a built-in type."""

    def __init__(self, type_name: Token, args: Iterable[Expr]) -> None:
        super().__init__(NodeKind.TYPED, type_name, args)

    @property
    def type_name(self) -> Token:
        return self.pos


class CallExpr(Expr):
    """A call of a callable expression."""

    def __init__(self, callable_expr: Expr, args: Iterable[Expr]) -> None:
        super().__init__(NodeKind.CALL, callable_expr.pos)
        self.callable = callable_expr
        self.args = list(args)
        self.assume_ancestry(callable_expr)
        for arg in self.args:
            self.assume_ancestry(arg)


_COMPARISONS = (
    TokKind.EQ,
    TokKind.NOT_EQ,
    TokKind.LESS,
    TokKind.LESS_EQ,
    TokKind.GREATER,
    TokKind.GREATER_EQ,
)


class Matcher(Expr):
    """The matching part of a conditional pattern."""

    def __init__(self, op: Token, checked: Expr | None) -> None:
        super().__init__(NodeKind.MATCHER, op)
        self.checked = checked
        self.assume_ancestry(checked)

    def is_default(self) -> bool:
        return self.checked is None and not self.is_unary()

    def is_unary(self) -> bool:
        return self.checked is None and self.pos.is_any(
            TokKind.EXCLAMATION, TokKind.QUESTION
        )

    def has_implicit_op(self) -> bool:
        return self.checked is not None and not self.pos.is_any(*_COMPARISONS)


class Pattern(Expr):
    """A matcher with the body it guards."""

    def __init__(self, matcher: Expr, body: ScopeNode) -> None:
        super().__init__(NodeKind.PATTERN, matcher.pos)
        self.matcher = matcher
        self.body = body
        self.assume_ancestry(matcher)
        self.assume_ancestry(body)


class CondExpr(Expr):
    """A conditional with a list of patterns."""

    def __init__(self, cond: Expr, patterns: ScopeNode) -> None:
        super().__init__(NodeKind.COND, cond.pos)
        self.cond = cond
        self.patterns = patterns
        self.assume_ancestry(cond)
        self.assume_ancestry(patterns)


class CondShort(Expr):
    """The shorthand conditional ``{c} -> {t, f}``."""

    def __init__(
        self,
        cond: Expr,
        on_true: Expr | None,
        on_false: Expr | None,
        scope: ScopeNode,
    ) -> None:
        super().__init__(NodeKind.COND_SHORT, cond.pos)
        self.cond = cond
        self.on_true = on_true
        self.on_false = on_false
        self.assume_ancestry(cond)
        self.assume_ancestry(on_true)
        self.assume_ancestry(on_false)
        self.assume_ancestry(scope)

    @property
    def has_true(self) -> bool:
        return self.on_true is not None

    @property
    def has_false(self) -> bool:
        return self.on_false is not None


class Decl(Node):
    """Base declarator."""

    def __init__(
        self,
        kind: NodeKind,
        id_tok: Token,
        definition: Node | None,
        pos: Token | None = None,
    ) -> None:
        super().__init__(kind)
        self.definition = definition
        self.id = id_tok
        self.pos = pos if pos is not None else id_tok
        self.symbol: Symbol | None = None
        self.assume_ancestry(definition)

    @property
    def name(self) -> str:
        return self.id.value

    def attach_symbol(self, sym: Symbol) -> None:
        self.symbol = sym


class DeclExpr(Expr):
    """An expression wrapping a declarator."""

    def __init__(self, declarator: Decl) -> None:
        super().__init__(NodeKind.DECL, declarator.pos)
        self.declarator = declarator
        self.assume_ancestry(declarator)


class VarDecl(Decl):
    """A variable declaration."""

    def __init__(self, var: Token, initialiser: Expr) -> None:
        super().__init__(NodeKind.VAR_DECL, var, initialiser)

    @property
    def initialiser(self) -> Expr:
        return self.definition  # type: ignore[return-value]


class ParamDecl(Decl):
    """A parameter; its definition, if any, is an error."""

    def __init__(self, name: Token, opt: Expr | None = None) -> None:
        super().__init__(NodeKind.PARAM_DECL, name, opt)


class FuncDecl(Decl):
    """A function declaration."""

    def __init__(
        self,
        func: Token,
        pos: Token,
        definition: ScopeNode,
        params: Iterable[ParamDecl],
    ) -> None:
        super().__init__(NodeKind.FUNC_DECL, func, definition, pos)
        self.params = list(params)
        for p in self.params:
            self.assume_ancestry(p)

    def param_count(self) -> int:
        return len(self.params)

    @property
    def body(self) -> ScopeNode:
        return self.definition  # type: ignore[return-value]


class ImportDir(Node):
    """An import directive."""

    def __init__(
        self, pos: Token, name: Iterable[IdExpr], alias_name: IdExpr | None = None
    ) -> None:
        super().__init__(NodeKind.IMPORT)
        self.pos = pos
        self.name = list(name)
        self.alias_name = alias_name
        self.assume_ancestry(alias_name)
        for part in self.name:
            self.assume_ancestry(part)

    @property
    def imported_sym(self) -> Symbol:
        return self.name[-1].symbol


class ModuleDef(ScopeNode):
    """A module definition."""

    def __init__(self, name: str, at: SourceLocation | None = None) -> None:
        super().__init__(None, NodeKind.MODULE)
        self.name = name
        self.at = at
        self.symbol: ModuleSym | None = None
        self.params: list[ParamDecl] = []
        self.imports: list[ImportDir] = []

    def is_fake(self) -> bool:
        return not self.name and (self.at is None or self.at.is_dummy)

    def param_count(self) -> int:
        return len(self.params)

    def add_import(self, imp: ImportDir) -> None:
        self.imports.append(imp)
        self.assume_ancestry(imp)

    def import_count(self) -> int:
        return len(self.imports)

    def override_loc(self, loc: SourceLocation | None) -> None:
        self.at = loc

    def attach_params(self, params: Iterable[ParamDecl]) -> None:
        """Set the entry parameters; only allowed once."""
        if self.params:
            raise ValueError(f"entry parameters of '{self.name}' are already attached")
        self.params = list(params)
        for p in self.params:
            self.assume_ancestry(p)

    def attach_symbol(self, sym: ModuleSym) -> None:
        self.symbol = sym


class Root(Node):
    """The root of the tree holding all modules."""

    def __init__(self) -> None:
        super().__init__(NodeKind.ROOT)
        self.modules: list[ModuleDef] = []

    def append(self, module: ModuleDef) -> None:
        self.assume_ancestry(module)
        self.modules.append(module)


class ErrorExpr(Expr):
    """An expression standing for a parse error; always invalid."""

    def __init__(self, tok: Token, message: str) -> None:
        super().__init__(NodeKind.ERROR, tok)
        self.message = message
        self.make_invalid()

    @property
    def at(self) -> Token:
        return self.pos


class Command:
    """A command with its argument tokens."""

    def __init__(self, cmd: Token, args: Iterable[Token] = ()) -> None:
        self.pos = cmd
        self.args = list(args)

    def __repr__(self) -> str:
        return f"Command({self.name!r}, {[a.value for a in self.args]!r})"

    @property
    def name(self) -> str:
        return self.pos.value

    def __getitem__(self, idx: int) -> Token:
        return self.args[idx]

    def __len__(self) -> int:
        return len(self.args)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.args)