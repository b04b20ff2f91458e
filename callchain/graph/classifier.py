"""
Dependency classifier: finds field- and property-mediated calls in a method body
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Set

from ..model.provider import CodeModelProvider, SemanticScope, SourceDefinition, SyntaxKind
from ..model.symbols import CodeSymbol, FieldSymbol, MethodSymbol, PropertySymbol, TypeSymbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyUsage:
    """A referenced member, optionally with a method invoked through it.

    ``invoked`` is None for the annotation entry of a member.
    """
    member: CodeSymbol
    invoked: Optional[MethodSymbol] = None

    @property
    def is_annotation(self) -> bool:
        return self.invoked is None


class DependencyClassifier:
    """Treats every declared instance field and property as a dependency candidate.

    Fields yield one annotation entry followed by every method invoked with
    the field as receiver. Properties yield the annotation entry only, unless
    ``unify_properties`` is set.
    """

    def __init__(self, provider: CodeModelProvider, unify_properties: bool = False):
        self.provider = provider
        self.unify_properties = unify_properties

    def classify(self, definition: SourceDefinition, scope: SemanticScope,
                 enclosing_type: Optional[TypeSymbol]) -> List[DependencyUsage]:
        if enclosing_type is None:
            return []

        members = self.provider.members(enclosing_type)
        fields = [m for m in members if isinstance(m, FieldSymbol) and not m.is_static]
        properties = [m for m in members if isinstance(m, PropertySymbol) and not m.is_static]
        if not fields and not properties:
            return []

        references = self._references(definition, scope)
        accesses = self.provider.descendants_of_kind(definition, SyntaxKind.MEMBER_ACCESS)

        usages: List[DependencyUsage] = []
        for member in fields:
            if member not in references:
                continue
            usages.append(DependencyUsage(member))
            usages.extend(self._invocations_through(member, accesses, scope))

        for member in properties:
            if member not in references:
                continue
            usages.append(DependencyUsage(member))
            if self.unify_properties:
                usages.extend(self._invocations_through(member, accesses, scope))

        return usages

    def _references(self, definition: SourceDefinition, scope: SemanticScope) -> Set[CodeSymbol]:
        """Symbols referred to by any identifier or member-access node of the body"""
        referenced: Set[CodeSymbol] = set()
        for kind in (SyntaxKind.IDENTIFIER, SyntaxKind.MEMBER_ACCESS):
            for node in self.provider.descendants_of_kind(definition, kind):
                symbol = scope.resolve(node)
                if symbol is not None:
                    referenced.add(symbol)
        return referenced

    def _invocations_through(self, member: CodeSymbol, accesses: List[Any],
                             scope: SemanticScope) -> List[DependencyUsage]:
        usages = []
        for access in accesses:
            receiver = self.provider.member_receiver(access)
            if receiver is None or scope.resolve(receiver) != member:
                continue
            invocation = self.provider.invocation_of(access)
            if invocation is None:
                continue
            method = scope.resolve(invocation)
            if isinstance(method, MethodSymbol):
                usages.append(DependencyUsage(member, method))
            else:
                logger.debug("Unresolved call through %s", member.qualified_name)
        return usages
