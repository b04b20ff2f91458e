"""
Call graph walker: depth-first expansion of the methods reachable from an entry point
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from ..errors import WalkCancelled
from ..model.provider import CodeModelProvider, SyntaxKind
from ..model.symbols import FieldSymbol, MethodSymbol, short_name
from .classifier import DependencyClassifier
from .models import (
    CallEdge, CreationAnnotation, CycleHit, DependencyAnnotation, EdgeKind, EnterNode,
    MemberKind, Terminal, TerminalReason, TraversalEvent, WalkerOptions, WalkResult,
    signature_key
)
from .noise import NoiseFilter

logger = logging.getLogger(__name__)


@dataclass
class TraversalContext:
    """State of one walk, passed by reference through every recursive call"""
    options: WalkerOptions
    cancel: Optional[Callable[[], bool]] = None
    visited: Set[str] = field(default_factory=set)
    visit_order: List[str] = field(default_factory=list)
    path: List[str] = field(default_factory=list)
    events: List[TraversalEvent] = field(default_factory=list)
    edges: List[CallEdge] = field(default_factory=list)
    expanded: List[str] = field(default_factory=list)

    def emit(self, event: TraversalEvent) -> None:
        self.events.append(event)

    def is_guarded(self, key: str) -> bool:
        """Whether reaching *key* again must not expand it"""
        if self.options.expand_repeated_paths:
            return key in self.path
        return key in self.visited

    def mark(self, key: str) -> None:
        if key not in self.visited:
            self.visited.add(key)
            self.visit_order.append(key)
        self.expanded.append(key)

    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel()


class CallGraphWalker:
    """Walks the static call graph from one entry method.

    Each signature key is expanded at most once per walk. A key reached
    again, whether through a real cycle or through a second path (diamond),
    produces a CycleHit and is not expanded again. Set
    ``WalkerOptions.expand_repeated_paths`` to guard only against keys on the
    current path instead.
    """

    def __init__(self, provider: CodeModelProvider,
                 noise_filter: Optional[NoiseFilter] = None,
                 classifier: Optional[DependencyClassifier] = None,
                 options: Optional[WalkerOptions] = None):
        self.provider = provider
        self.options = options or WalkerOptions()
        self.noise_filter = noise_filter or NoiseFilter()
        self.classifier = classifier or DependencyClassifier(
            provider, unify_properties=self.options.unify_property_dependencies
        )

    def walk(self, entry: MethodSymbol, cancel: Optional[Callable[[], bool]] = None) -> WalkResult:
        """Traverse from *entry* and return the emitted events"""
        context = TraversalContext(options=self.options, cancel=cancel)
        was_cancelled = False
        try:
            self._visit(entry, 0, context)
        except WalkCancelled:
            logger.info("Walk from %s cancelled after %d nodes", entry.qualified_name, len(context.expanded))
            was_cancelled = True

        return WalkResult(
            entry=self._key(entry),
            events=context.events,
            edges=context.edges,
            visited=context.visit_order,
            expanded=context.expanded,
            cancelled=was_cancelled,
        )

    def _key(self, method: MethodSymbol) -> str:
        return signature_key(method, self.options.overload_aware_keys)

    def _visit(self, method: MethodSymbol, depth: int, context: TraversalContext) -> None:
        key = self._key(method)

        if context.cancelled():
            context.emit(Terminal(signature=key, depth=depth, reason=TerminalReason.CANCELLED))
            raise WalkCancelled(key)

        if context.is_guarded(key):
            context.emit(CycleHit(signature=key, depth=depth))
            return

        context.emit(EnterNode(signature=key, depth=depth))

        if depth >= self.options.max_depth:
            context.emit(Terminal(signature=key, depth=depth, reason=TerminalReason.DEPTH_LIMIT))
            return

        context.mark(key)
        context.path.append(key)
        try:
            self._expand(method, key, depth, context)
        except WalkCancelled:
            raise
        except Exception as e:
            logger.warning("Analysis of %s failed: %s", method.qualified_name, e)
            context.emit(Terminal(signature=key, depth=depth, reason=TerminalReason.PROVIDER_ERROR, detail=str(e)))
        finally:
            context.path.pop()

    def _expand(self, method: MethodSymbol, key: str, depth: int, context: TraversalContext) -> None:
        definition = self.provider.source_definition(method)
        if definition is None:
            context.emit(Terminal(signature=key, depth=depth, reason=TerminalReason.UNAVAILABLE))
            return

        scope = self.provider.semantic_scope(definition)
        if scope is None:
            context.emit(Terminal(signature=key, depth=depth, reason=TerminalReason.NO_SEMANTIC_MODEL))
            return

        logger.debug("Expanding %s at depth %d", key, depth)

        for invocation in self.provider.descendants_of_kind(definition, SyntaxKind.INVOCATION):
            target = scope.resolve(invocation)
            if not isinstance(target, MethodSymbol) or self.noise_filter.should_skip(target):
                continue
            self._follow(key, target, EdgeKind.DIRECT_INVOCATION, depth, context)

        for creation in self.provider.descendants_of_kind(definition, SyntaxKind.OBJECT_CREATION):
            constructor = scope.resolve(creation)
            if not isinstance(constructor, MethodSymbol):
                continue
            context.emit(CreationAnnotation(type_name=constructor.containing_type or constructor.name, depth=depth))
            if not self.noise_filter.should_skip(constructor):
                self._follow(key, constructor, EdgeKind.OBJECT_CREATION, depth, context)

        for usage in self.classifier.classify(definition, scope, definition.enclosing_type):
            if usage.is_annotation:
                member = usage.member
                context.emit(DependencyAnnotation(
                    member_type=short_name(getattr(member, 'type_name', None) or "Any"),
                    depth=depth,
                    member_kind=MemberKind.FIELD if isinstance(member, FieldSymbol) else MemberKind.PROPERTY,
                    member_name=member.name,
                ))
            elif not self.noise_filter.should_skip(usage.invoked):
                self._follow(key, usage.invoked, EdgeKind.DEPENDENCY_INVOCATION, depth, context)

    def _follow(self, caller: str, callee: MethodSymbol, kind: EdgeKind, depth: int,
                context: TraversalContext) -> None:
        context.edges.append(CallEdge(caller=caller, callee=self._key(callee), kind=kind, depth=depth + 1))
        self._visit(callee, depth + 1, context)
