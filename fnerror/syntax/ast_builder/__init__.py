"""
AST Builder module for the fnerror expander.

Exports:
    ASTBuilder: Main class for building the syntax tree from Lark parse trees
    Exceptions: Custom exceptions for AST building errors
"""
# Main ASTBuilder class
from fnerror.syntax.ast_builder.builder import ASTBuilder

# Exception classes
from fnerror.syntax.ast_builder.exceptions import UnsupportedSyntaxError

__all__ = [
    'ASTBuilder',
    'UnsupportedSyntaxError',
]
