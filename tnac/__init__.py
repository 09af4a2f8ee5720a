"""Lexer, syntax tree, symbol table and semantic analyser for the tnac language."""

__version__ = "0.1.0"