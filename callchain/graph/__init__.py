"""
Call graph traversal
"""

from .walker import CallGraphWalker, TraversalContext
from .classifier import DependencyClassifier, DependencyUsage
from .noise import NoiseFilter
from .entry import EntryResolver, EntryResolution
from .heuristics import (
    ControllerClassifier, SuffixControllerClassifier, ActionClassifier,
    RouteAttributeClassifier, ReturnTypeActionClassifier, AnyActionClassifier
)
from .models import (
    EnterNode, CycleHit, Terminal, CreationAnnotation, DependencyAnnotation,
    CallEdge, WalkerOptions, WalkResult, TerminalReason, EdgeKind, signature_key
)

__all__ = [
    "CallGraphWalker", "TraversalContext", "DependencyClassifier", "DependencyUsage", "NoiseFilter",
    "EntryResolver", "EntryResolution", "ControllerClassifier", "SuffixControllerClassifier",
    "ActionClassifier", "RouteAttributeClassifier", "ReturnTypeActionClassifier", "AnyActionClassifier",
    "EnterNode", "CycleHit", "Terminal", "CreationAnnotation", "DependencyAnnotation",
    "CallEdge", "WalkerOptions", "WalkResult", "TerminalReason", "EdgeKind", "signature_key",
]
