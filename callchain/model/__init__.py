"""
Code model: symbols, the provider interface and the Python provider
"""

from .symbols import (
    Accessibility, CodeSymbol, FieldSymbol, MethodKind, MethodSymbol, PropertySymbol, TypeSymbol
)
from .provider import CodeModelProvider, CompilationUnit, SemanticScope, SourceDefinition, SyntaxKind
from .python_provider import TreeSitterProvider

__all__ = [
    "Accessibility",
    "CodeSymbol",
    "FieldSymbol",
    "MethodKind",
    "MethodSymbol",
    "PropertySymbol",
    "TypeSymbol",
    "CodeModelProvider",
    "CompilationUnit",
    "SemanticScope",
    "SourceDefinition",
    "SyntaxKind",
    "TreeSitterProvider",
]
