"""
Output formatting
"""

from .tree_printer import TreePrinter

__all__ = ["TreePrinter"]
