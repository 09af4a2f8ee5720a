# tnac

Front-end building blocks for the tnac calculator language: a lexer, syntax
tree nodes with a node builder, scopes and symbols, a symbol table and a
semantic analyser that tracks scopes and registers declarations.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Tokenizing

```python
from tnac.lexer import tokenize
from tnac.token import TokKind

kinds = [tok.kind for tok in tokenize("x = 0x1F + 2.5")]
# [IDENTIFIER, ASSIGN, INT_HEX, PLUS, FLOAT]
```

`tokenize` yields every token up to, but not including, the end of input.
`Lexer` gives finer control: `feed` hands it a buffer, `peek` looks at the next
token without consuming it, and `next` consumes it. When the input runs out,
the lexer keeps returning `TokKind.EOL` tokens. Malformed input, such as `08`,
`0b2` or an unterminated string, becomes a `TokKind.ERROR` token rather than an
exception.

- Keywords are written with a leading underscore: `_fn`, `_ret`, `_result`,
  `_cplx`, `_frac`, `_int`, `_flt`, `_bool`, `_array`, `_undef`, `_true`,
  `_false`, `_i`, `_pi`, `_e`, `_entry`, `_import`, `_as`. `lookup_keyword`
  maps such a name to its kind, or to `TokKind.ERROR`.
- Integers may be decimal, octal (leading `0`), binary (`0b`) or hex (`0x`);
  floats need digits on both sides of the dot.
- Strings are enclosed in single quotes; the token value excludes them.
- Comments run between backticks, or from a backslash to the end of the line.
- Commands start with `#`; the token value excludes the `#`.

To track positions, attach a `SourceLocation` with `Lexer.attach_loc`; it is
advanced as text is consumed, and each `Token.at` holds a snapshot of where the
token starts. `Token.get_after` returns an empty token placed just after it.

## Syntax tree

`tnac.ast` defines the node classes (`ModuleDef`, `Root`, `ScopeNode`,
`BinaryExpr`, `CallExpr`, `CondExpr`, `FuncDecl`, `ErrorExpr` and the rest), and
`tnac.ast_builder.Builder` creates them. A node becomes the parent of the
children it is given; an invalid child, such as an `ErrorExpr`, makes its parent
invalid too:

```python
from tnac.ast_builder import Builder
from tnac.token import Token, TokKind

builder = Builder()
paren = Token("(", TokKind.PAREN_OPEN)
err = builder.make_error(paren, "expected ')'")
expr = builder.make_paren(err, paren)
expr.valid  # False
```

`Command` holds a command token and its argument tokens, and can be indexed,
iterated and measured with `len`.

## Scopes and symbols

`tnac.symbols` holds `Scope` and the symbol kinds: `Variable`, `Parameter`,
`Function`, `ModuleSym`, `ScopeRef` and `Deferred`. `tnac.sym_table.SymTable`
stores them: `lookup` searches a scope and its enclosing scopes, while
`scoped_lookup` searches one scope only. Variables and parameters are not
visible across a function boundary. Declaring a name again in the same scope
returns the existing symbol, or raises `ValueError` if it is of another kind.

`tnac.sema.Sema` keeps the current scope and registers declarations:

```python
from tnac.ast_builder import Builder
from tnac.sema import LookupType, Sema
from tnac.symbols import ScopeKind
from tnac.token import Token, TokKind

builder = Builder()
sema = Sema()
sema.open_scope(ScopeKind.GLOBAL)
sema.open_scope(ScopeKind.MODULE)

init = builder.make_literal(Token("42", TokKind.INT_DEC))
decl = builder.make_var_decl(Token("x", TokKind.IDENTIFIER), init)
sema.visit_decl(decl)

sema.find("x", LookupType.UNSCOPED) is decl.symbol  # True
```

`assume_scope` and `try_resolve_scope` return a guard that makes a scope
current and, used in a `with` block, restores the previous one on exit.
`find_token` creates `Deferred` symbols for names looked up in a deferred scope.
`contrive_name` and `contrive_func_name` generate unique names, and `vars`,
`funcs` and `modules` list the declared symbols grouped by scope.

## What this package does not do

There is no parser here: nothing turns a token stream into a syntax tree, so
trees are put together by calling `Builder` and `Sema` directly. The package
also does not evaluate programs, load source files or resolve imports from
disk, and it has no command-line program.

## Modules

- `tnac.token` – token kinds, tokens and source locations
- `tnac.lexer` – the lexer
- `tnac.ast` – syntax tree nodes
- `tnac.ast_builder` – creates syntax tree nodes
- `tnac.symbols` – scopes and symbol kinds
- `tnac.sym_table` – the symbol table and its lookup rules
- `tnac.sema` – scope tracking and symbol registration