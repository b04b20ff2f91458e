"""
Data models for call graph traversal
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field
from enum import Enum

from ..model.symbols import MethodSymbol


class EventKind(str, Enum):
    """Kinds of events emitted by the walker"""
    ENTER_NODE = "enter_node"
    CYCLE_HIT = "cycle_hit"
    TERMINAL = "terminal"
    CREATION = "creation"
    DEPENDENCY = "dependency"


class TerminalReason(str, Enum):
    """Why a node was not expanded"""
    UNAVAILABLE = "unavailable"              # no source definition
    NO_SEMANTIC_MODEL = "no_semantic_model"  # definition found, resolver missing
    PROVIDER_ERROR = "provider_error"        # provider raised while analyzing the node
    DEPTH_LIMIT = "depth_limit"              # max_depth reached
    CANCELLED = "cancelled"                  # cancellation signal fired


class MemberKind(str, Enum):
    """Kinds of dependency-carrying members"""
    FIELD = "field"
    PROPERTY = "property"


class EdgeKind(str, Enum):
    """How a callee was discovered"""
    DIRECT_INVOCATION = "direct_invocation"
    OBJECT_CREATION = "object_creation"
    DEPENDENCY_INVOCATION = "dependency_invocation"


class EnterNode(BaseModel):
    """A method is being visited"""
    kind: EventKind = Field(default=EventKind.ENTER_NODE)
    signature: str = Field(..., description="Signature key of the method")
    depth: int = Field(..., description="Distance from the entry method")


class CycleHit(BaseModel):
    """A method whose key was already expanded was reached again"""
    kind: EventKind = Field(default=EventKind.CYCLE_HIT)
    signature: str = Field(..., description="Signature key of the method")
    depth: int = Field(..., description="Distance from the entry method")


class Terminal(BaseModel):
    """A visited method that could not be expanded"""
    kind: EventKind = Field(default=EventKind.TERMINAL)
    signature: str = Field(..., description="Signature key of the method")
    depth: int = Field(..., description="Distance from the entry method")
    reason: TerminalReason = Field(..., description="Why expansion stopped")
    detail: Optional[str] = Field(None, description="Error text for provider failures")


class CreationAnnotation(BaseModel):
    """The enclosing method constructs an object"""
    kind: EventKind = Field(default=EventKind.CREATION)
    type_name: str = Field(..., description="Name of the constructed type")
    depth: int = Field(..., description="Depth of the constructing method")


class DependencyAnnotation(BaseModel):
    """The enclosing method uses a field or property of its type"""
    kind: EventKind = Field(default=EventKind.DEPENDENCY)
    member_type: str = Field(..., description="Declared type of the member")
    depth: int = Field(..., description="Depth of the using method")
    member_kind: MemberKind = Field(default=MemberKind.FIELD, description="Field or property")
    member_name: Optional[str] = Field(None, description="Name of the member")


TraversalEvent = Union[EnterNode, CycleHit, Terminal, CreationAnnotation, DependencyAnnotation]


class CallEdge(BaseModel):
    """Represents a discovered call relationship"""
    caller: str = Field(..., description="Caller signature key")
    callee: str = Field(..., description="Callee signature key")
    kind: EdgeKind = Field(..., description="How the callee was discovered")
    depth: int = Field(..., description="Depth of the callee")


class WalkerOptions(BaseModel):
    """Traversal policies"""
    max_depth: int = Field(default=64, ge=1, le=200, description="Depth at which nodes are listed but no longer expanded")
    overload_aware_keys: bool = Field(
        default=False, description="Include parameters in signature keys instead of collapsing overloads"
    )
    expand_repeated_paths: bool = Field(
        default=False,
        description=(
            "Guard only against true cycles; re-expand methods reached by another path. "
            "Output can grow exponentially with stacked diamonds, bounded only by max_depth"
        ),
    )
    unify_property_dependencies: bool = Field(
        default=False, description="Follow calls made through properties the same way as through fields"
    )


class WalkResult(BaseModel):
    """Outcome of one walk from one entry method"""
    entry: str = Field(..., description="Signature key of the entry method")
    events: List[TraversalEvent] = Field(default_factory=list, description="Events in emission order")
    edges: List[CallEdge] = Field(default_factory=list, description="Edges followed")
    visited: List[str] = Field(default_factory=list, description="Final visited set, in insertion order")
    expanded: List[str] = Field(default_factory=list, description="Keys whose bodies were examined, in order")
    cancelled: bool = Field(default=False, description="Walk stopped by the cancellation signal")

    def signatures(self) -> List[str]:
        """Signatures of all EnterNode events"""
        return [e.signature for e in self.events if isinstance(e, EnterNode)]


def signature_key(method: MethodSymbol, overload_aware: bool = False) -> str:
    """Cycle-guard identity of a method.

    By default the key is ``<containing type>.<name>`` so overloads sharing a
    name collapse into one key; with *overload_aware* the parameter list is
    appended.
    """
    owner = method.containing_type or method.namespace or "<module>"
    key = f"{owner}.{method.name}"
    if overload_aware:
        key = f"{key}({', '.join(method.parameters)})"
    return key
