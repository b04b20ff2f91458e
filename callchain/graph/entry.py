"""
Entry resolver: locates the controller type and action method a walk starts from
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import MethodNotFound, TypeNotFound
from ..model.provider import CodeModelProvider
from ..model.symbols import Accessibility, MethodKind, MethodSymbol, TypeSymbol
from .heuristics import (
    ActionClassifier, ControllerClassifier, SuffixControllerClassifier, default_action_classifier
)

logger = logging.getLogger(__name__)


class EntryResolution(BaseModel):
    """Resolved controller type, and the action method unless in discovery mode"""
    type_symbol: TypeSymbol = Field(..., description="Resolved controller-like type")
    method: Optional[MethodSymbol] = Field(None, description="Entry method, None in discovery mode")
    candidates: List[MethodSymbol] = Field(default_factory=list, description="Action-like methods found in discovery mode")

    @property
    def is_discovery(self) -> bool:
        return self.method is None


class EntryResolver:
    """Finds entry points through swappable controller and action heuristics"""

    def __init__(self, provider: CodeModelProvider,
                 controller_classifier: Optional[ControllerClassifier] = None,
                 action_classifier: Optional[ActionClassifier] = None,
                 type_suffix: str = "Controller"):
        self.provider = provider
        self.controller_classifier = controller_classifier or SuffixControllerClassifier()
        self.action_classifier = action_classifier or default_action_classifier()
        self.type_suffix = type_suffix

    def resolve_entry(self, type_hint: str, action_hint: Optional[str] = None) -> EntryResolution:
        """Resolve *type_hint* and either *action_hint* or the list of candidate actions"""
        type_symbol = self.resolve_type(type_hint)
        if not action_hint:
            return EntryResolution(type_symbol=type_symbol, candidates=self.discover_actions(type_symbol))
        return EntryResolution(type_symbol=type_symbol, method=self.resolve_method(type_symbol, action_hint, type_hint))

    def resolve_type(self, type_hint: str) -> TypeSymbol:
        """First controller-like type named *type_hint* or *type_hint* plus the type suffix"""
        wanted = {type_hint.lower(), f"{type_hint}{self.type_suffix}".lower()}

        def matches(symbol: TypeSymbol) -> bool:
            return symbol.name.lower() in wanted and self.controller_classifier.is_controller(symbol)

        found = self.provider.find_types(matches)
        if not found:
            raise TypeNotFound(type_hint)
        if len(found) > 1:
            logger.info("%d types match '%s'; using %s", len(found), type_hint, found[0].qualified_name)
        return found[0]

    def discover_actions(self, type_symbol: TypeSymbol) -> List[MethodSymbol]:
        """Public instance methods of *type_symbol* that look like request handlers"""
        return [
            member for member in self.provider.members(type_symbol)
            if isinstance(member, MethodSymbol)
            and member.accessibility == Accessibility.PUBLIC
            and not member.is_static
            and member.kind != MethodKind.CONSTRUCTOR
            and self.action_classifier.is_action(member)
        ]

    def resolve_method(self, type_symbol: TypeSymbol, action_hint: str, type_label: Optional[str] = None) -> MethodSymbol:
        """First method of *type_symbol* whose name equals *action_hint*, ignoring case"""
        wanted = action_hint.lower()
        for member in self.provider.members(type_symbol):
            if isinstance(member, MethodSymbol) and member.name.lower() == wanted:
                return member
        raise MethodNotFound(type_label or type_symbol.name, action_hint)
