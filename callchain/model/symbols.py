"""
Symbol models exposed by code model providers
"""

from typing import Optional, Tuple, Union
from pydantic import BaseModel, Field
from enum import Enum


class Accessibility(str, Enum):
    """Declared accessibility, derived from naming conventions"""
    PUBLIC = "public"
    INTERNAL = "internal"    # single leading underscore
    PRIVATE = "private"      # name-mangled double underscore


class MethodKind(str, Enum):
    """Kinds of callable symbols"""
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    FUNCTION = "function"    # module-level function


class CodeSymbol(BaseModel):
    """Opaque handle to a declared program element"""
    name: str = Field(..., description="Simple name")
    qualified_name: str = Field(..., description="Fully qualified dotted name")
    namespace: str = Field("", description="Dotted module the symbol belongs to")
    containing_type: Optional[str] = Field(None, description="Name of the declaring type")
    accessibility: Accessibility = Field(default=Accessibility.PUBLIC, description="Declared accessibility")
    is_static: bool = Field(default=False, description="Does not bind to an instance")
    return_type: Optional[str] = Field(None, description="Declared return type name")
    attributes: Tuple[str, ...] = Field(default_factory=tuple, description="Attached decorator names")
    file_path: Optional[str] = Field(None, description="Declaring source file")

    class Config:
        """Symbols are immutable for the duration of an analysis"""
        frozen = True


class TypeSymbol(CodeSymbol):
    """A class (or an external type known only by name)"""
    base_types: Tuple[str, ...] = Field(default_factory=tuple, description="Declared base type names")
    is_external: bool = Field(default=False, description="Declared outside the workspace")


class MethodSymbol(CodeSymbol):
    """A method, constructor or module-level function"""
    kind: MethodKind = Field(default=MethodKind.METHOD, description="Kind of callable")
    parameters: Tuple[str, ...] = Field(default_factory=tuple, description="Parameter names, receiver excluded")
    is_external: bool = Field(default=False, description="Declared outside the workspace")


class FieldSymbol(CodeSymbol):
    """An instance attribute declared on a class"""
    type_name: str = Field("Any", description="Declared or inferred type name")


class PropertySymbol(CodeSymbol):
    """A ``@property`` accessor declared on a class"""
    type_name: str = Field("Any", description="Declared return type name")


MemberSymbol = Union[MethodSymbol, FieldSymbol, PropertySymbol]


def accessibility_of(name: str) -> Accessibility:
    """Map Python naming conventions onto declared accessibility"""
    if name.startswith('__') and name.endswith('__'):
        return Accessibility.PUBLIC
    if name.startswith('__'):
        return Accessibility.PRIVATE
    if name.startswith('_'):
        return Accessibility.INTERNAL
    return Accessibility.PUBLIC


def short_name(dotted: str) -> str:
    """Last segment of a dotted name"""
    return dotted.rsplit('.', 1)[-1]
