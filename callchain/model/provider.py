"""
Code model provider interface

The analysis core never parses source. Everything it knows about a program
comes through a CodeModelProvider: types, members, method bodies and a
resolver that maps sub-expressions of a body onto declared symbols.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

from .symbols import CodeSymbol, MethodSymbol, TypeSymbol


class SyntaxKind(str, Enum):
    """Syntactic kinds the core asks a provider to enumerate"""
    INVOCATION = "invocation"
    OBJECT_CREATION = "object_creation"
    MEMBER_ACCESS = "member_access"
    IDENTIFIER = "identifier"


@dataclass
class CompilationUnit:
    """One parsed source file"""
    path: Path
    module: str
    root: Any


@dataclass
class SourceDefinition:
    """Syntax of a method as declared in source"""
    symbol: MethodSymbol
    node: Any
    unit: CompilationUnit
    enclosing_type: Optional[TypeSymbol] = None

    @property
    def body(self) -> Any:
        return self.node.child_by_field_name('body') if self.node is not None else None


class SemanticScope(ABC):
    """Resolves expressions inside one source definition"""

    @abstractmethod
    def resolve(self, node: Any) -> Optional[CodeSymbol]:
        """Map an identifier, invocation, object creation or member access to its symbol"""
        ...


class CodeModelProvider(ABC):
    """Abstract source of resolved program structure"""

    @abstractmethod
    def open(self, workspace_root: Path) -> List[CompilationUnit]:
        """Load every compilation unit under *workspace_root*"""
        ...

    @abstractmethod
    def find_types(self, predicate: Callable[[TypeSymbol], bool]) -> List[TypeSymbol]:
        """Types satisfying *predicate*, in deterministic enumeration order"""
        ...

    @abstractmethod
    def members(self, type_symbol: TypeSymbol) -> List[CodeSymbol]:
        """Declared methods, fields and properties of a type, in declaration order"""
        ...

    @abstractmethod
    def source_definition(self, symbol: MethodSymbol) -> Optional[SourceDefinition]:
        """Source of a method, or None for external and synthesized methods"""
        ...

    @abstractmethod
    def semantic_scope(self, definition: SourceDefinition) -> Optional[SemanticScope]:
        """Resolver for expressions inside *definition*"""
        ...

    @abstractmethod
    def descendants_of_kind(self, definition: SourceDefinition, kind: SyntaxKind) -> List[Any]:
        """Sub-expressions of the definition body of the given kind, in source order"""
        ...

    @abstractmethod
    def member_receiver(self, access: Any) -> Optional[Any]:
        """The receiver expression of a member access"""
        ...

    @abstractmethod
    def invocation_of(self, access: Any) -> Optional[Any]:
        """The invocation that calls *access* directly, if any"""
        ...
