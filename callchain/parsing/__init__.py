"""
Tree-sitter parsing for the Python code model
"""

from .parser import PythonParser
from .ast_utils import ASTNode, ClassDef, Definition, FunctionDef, ImportStatement, annotation_name

__all__ = ["PythonParser", "ASTNode", "ClassDef", "Definition", "FunctionDef", "ImportStatement", "annotation_name"]
