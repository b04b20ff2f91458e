"""
Code model provider for Python workspaces, built on tree-sitter
"""

import builtins
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from ..errors import ProviderUnavailable
from ..parsing.ast_utils import ASTNode, ClassDef, FunctionDef, ImportStatement, annotation_name
from ..parsing.parser import PythonParser
from .provider import (
    CodeModelProvider, CompilationUnit, SemanticScope, SourceDefinition, SyntaxKind
)
from .symbols import (
    CodeSymbol, FieldSymbol, MethodKind, MethodSymbol, PropertySymbol, TypeSymbol,
    accessibility_of, short_name
)

logger = logging.getLogger(__name__)

SKIP_DIRS: Set[str] = {
    ".venv", "venv", "env", "__pycache__", "node_modules", ".git", ".hg",
    "site-packages", ".tox", ".nox", ".pytest_cache", "build", "dist",
    ".mypy_cache", ".ruff_cache", "htmlcov", ".eggs",
}

BUILTIN_NAMES = frozenset(dir(builtins))

STATIC_DECORATORS = {'staticmethod', 'classmethod'}
PROPERTY_DECORATORS = {'property', 'cached_property'}


@dataclass(frozen=True)
class ModuleRef:
    """A module used as a value (``import os`` then ``os.path``)"""
    name: str
    external: bool = False


Resolved = Union[CodeSymbol, ModuleRef, None]


@dataclass
class ModuleIndex:
    """Top-level bindings of one compilation unit"""
    unit: CompilationUnit
    is_package: bool = False
    imports: Dict[str, str] = field(default_factory=dict)
    module_bindings: Set[str] = field(default_factory=set)
    classes: Dict[str, TypeSymbol] = field(default_factory=dict)
    functions: Dict[str, MethodSymbol] = field(default_factory=dict)


@dataclass
class TypeIndex:
    """Declared members of one class"""
    symbol: TypeSymbol
    node: ClassDef
    unit: CompilationUnit
    members: List[CodeSymbol] = field(default_factory=list)
    methods: Dict[str, MethodSymbol] = field(default_factory=dict)
    fields: Dict[str, FieldSymbol] = field(default_factory=dict)
    properties: Dict[str, PropertySymbol] = field(default_factory=dict)
    nested: Dict[str, TypeSymbol] = field(default_factory=dict)


class TreeSitterProvider(CodeModelProvider):
    """Indexes a Python workspace and resolves expressions inside its methods"""

    def __init__(self, exclude_dirs: Optional[Iterable[str]] = None):
        self.parser = PythonParser()
        self.exclude_dirs: Set[str] = SKIP_DIRS | set(exclude_dirs or ())
        self.units: List[CompilationUnit] = []
        self._modules: Dict[str, ModuleIndex] = {}
        self._types: Dict[str, TypeIndex] = {}
        self._definitions: Dict[str, SourceDefinition] = {}
        self._scopes: Dict[str, 'PythonSemanticScope'] = {}
        self._opened = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def open(self, workspace_root: Path) -> List[CompilationUnit]:
        """Parse and index every Python file under *workspace_root*"""
        root = Path(workspace_root)
        if not root.exists():
            raise ProviderUnavailable(f"Workspace not found: {workspace_root}")

        base = root if root.is_dir() else root.parent
        for path in self._collect_files(root):
            module, is_package = self._module_name(path.relative_to(base))
            ast = self.parser.parse_file(str(path))
            if ast is None:
                logger.warning("Skipping unparsable file %s", path)
                continue
            error_lines = self.parser.error_lines(ast)
            if error_lines:
                logger.warning("Syntax errors in %s at lines %s; indexing what parsed", path, error_lines)
            unit = CompilationUnit(path=path, module=module, root=ast)
            self.units.append(unit)
            self._index_module(unit, is_package)

        self._opened = True
        logger.debug("Indexed %d modules, %d types", len(self._modules), len(self._types))
        return list(self.units)

    def open_sources(self, sources: Dict[str, str]) -> List[CompilationUnit]:
        """Index in-memory sources keyed by relative file path"""
        for rel_path in sorted(sources):
            path = Path(rel_path)
            module, is_package = self._module_name(path)
            ast = self.parser.parse_string(sources[rel_path])
            if ast is None:
                logger.warning("Skipping unparsable source %s", rel_path)
                continue
            unit = CompilationUnit(path=path, module=module, root=ast)
            self.units.append(unit)
            self._index_module(unit, is_package)
        self._opened = True
        return list(self.units)

    def _collect_files(self, root: Path) -> List[Path]:
        if root.is_file():
            return [root] if root.suffix == '.py' else []
        files = []
        for path in root.rglob("*.py"):
            rel_parts = path.relative_to(root).parts[:-1]
            if any(part in self.exclude_dirs or part.endswith('.egg-info') for part in rel_parts):
                continue
            files.append(path)
        return sorted(files)

    @staticmethod
    def _module_name(rel: Path) -> Tuple[str, bool]:
        """Dotted module name for a path relative to the workspace root"""
        parts = list(rel.with_suffix('').parts)
        is_package = bool(parts) and parts[-1] == '__init__'
        if is_package:
            parts = parts[:-1]
        return '.'.join(parts) or '__init__', is_package

    def _index_module(self, unit: CompilationUnit, is_package: bool) -> None:
        index = ModuleIndex(unit=unit, is_package=is_package)
        self._modules[unit.module] = index

        root: ASTNode = unit.root
        for node in root.descendants('import_statement', 'import_from_statement'):
            statement = ImportStatement.of(node)
            bindings = statement.bindings
            index.imports.update(bindings)
            if statement.type == 'import_statement':
                index.module_bindings.update(bindings)

        for statement in self._top_level_statements(root):
            if statement.type == 'class_definition':
                type_symbol = self._index_class(ClassDef.of(statement), unit, None)
                index.classes[type_symbol.name] = type_symbol
            elif statement.type == 'function_definition':
                func = FunctionDef.of(statement)
                symbol = MethodSymbol(
                    name=func.name,
                    qualified_name=f"{unit.module}.{func.name}",
                    namespace=unit.module,
                    containing_type=short_name(unit.module),
                    accessibility=accessibility_of(func.name),
                    is_static=True,
                    return_type=annotation_name(func.return_type),
                    attributes=tuple(func.decorators),
                    file_path=str(unit.path),
                    kind=MethodKind.FUNCTION,
                    parameters=tuple(name for name, _ in func.parameter_annotations),
                )
                index.functions[func.name] = symbol
                self._definitions[symbol.qualified_name] = SourceDefinition(symbol, func, unit, None)

    @staticmethod
    def _top_level_statements(root: ASTNode) -> List[ASTNode]:
        statements = []
        for child in root.named_children():
            if child.type == 'decorated_definition':
                definition = child.child_by_field_name('definition')
                if definition:
                    statements.append(definition)
            else:
                statements.append(child)
        return statements

    def _index_class(self, node: ClassDef, unit: CompilationUnit,
                     outer: Optional[TypeSymbol]) -> TypeSymbol:
        prefix = outer.qualified_name if outer else unit.module
        symbol = TypeSymbol(
            name=node.name,
            qualified_name=f"{prefix}.{node.name}",
            namespace=unit.module,
            containing_type=outer.name if outer else None,
            accessibility=accessibility_of(node.name),
            attributes=tuple(node.decorators),
            file_path=str(unit.path),
            base_types=tuple(node.base_names),
        )
        type_index = TypeIndex(symbol=symbol, node=node, unit=unit)
        self._types[symbol.qualified_name] = type_index

        for statement in node.statements():
            if statement.type == 'function_definition':
                self._index_method(FunctionDef.of(statement), type_index)
            elif statement.type == 'class_definition':
                nested = self._index_class(ClassDef.of(statement), unit, symbol)
                type_index.nested[nested.name] = nested
            elif statement.type == 'expression_statement':
                self._index_class_field(statement, type_index)

        return symbol

    def _index_method(self, func: FunctionDef, type_index: TypeIndex) -> None:
        owner = type_index.symbol
        decorators = func.decorators
        last_segments = {short_name(d) for d in decorators}
        if any(d.endswith(('.setter', '.deleter')) for d in decorators):
            return

        common = dict(
            name=func.name,
            qualified_name=f"{owner.qualified_name}.{func.name}",
            namespace=owner.namespace,
            containing_type=owner.name,
            accessibility=accessibility_of(func.name),
            return_type=annotation_name(func.return_type),
            attributes=tuple(decorators),
            file_path=str(type_index.unit.path),
        )

        if last_segments & PROPERTY_DECORATORS:
            prop = PropertySymbol(type_name=common['return_type'] or "Any", **common)
            type_index.properties[func.name] = prop
            type_index.members.append(prop)
            return

        is_static = bool(last_segments & STATIC_DECORATORS)
        params = [name for name, _ in func.parameter_annotations]
        if 'staticmethod' not in last_segments and params:
            params = params[1:]

        method = MethodSymbol(
            is_static=is_static,
            kind=MethodKind.CONSTRUCTOR if func.name == '__init__' else MethodKind.METHOD,
            parameters=tuple(params),
            **common,
        )
        type_index.methods[func.name] = method
        type_index.members.append(method)
        self._definitions[method.qualified_name] = SourceDefinition(method, func, type_index.unit, owner)

        if func.name == '__init__':
            for field_symbol in self._init_fields(func, type_index):
                type_index.fields[field_symbol.name] = field_symbol
                type_index.members.append(field_symbol)

    def _index_class_field(self, statement: ASTNode, type_index: TypeIndex) -> None:
        """Class-level ``name: T`` declarations (dataclass style)"""
        assignment = statement.named_children()[0] if statement.named_children() else None
        if assignment is None or assignment.type != 'assignment':
            return
        left = assignment.child_by_field_name('left')
        annotation = assignment.child_by_field_name('type')
        if left is None or left.type != 'identifier' or annotation is None:
            return
        type_name = annotation_name(annotation) or "Any"
        if short_name(type_name) == 'ClassVar' or left.text in type_index.fields:
            return
        field_symbol = self._field_symbol(left.text, type_name, type_index)
        type_index.fields[field_symbol.name] = field_symbol
        type_index.members.append(field_symbol)

    def _init_fields(self, func: FunctionDef, type_index: TypeIndex) -> List[FieldSymbol]:
        """Instance attributes assigned on the receiver inside ``__init__``"""
        params = func.parameter_annotations
        if not params or func.body is None:
            return []
        receiver = params[0][0]
        param_types = {name: annotation_name(ann) for name, ann in params[1:] if ann is not None}

        found: Dict[str, FieldSymbol] = {}
        for assignment in func.body.descendants('assignment'):
            left = assignment.child_by_field_name('left')
            if left is None or left.type != 'attribute':
                continue
            obj = left.child_by_field_name('object')
            attr = left.child_by_field_name('attribute')
            if obj is None or attr is None or obj.type != 'identifier' or obj.text != receiver:
                continue
            name = attr.text
            if name in found or name in type_index.fields:
                continue
            found[name] = self._field_symbol(
                name, self._infer_field_type(assignment, param_types), type_index
            )
        return list(found.values())

    @staticmethod
    def _infer_field_type(assignment: ASTNode, param_types: Dict[str, Optional[str]]) -> str:
        annotation = assignment.child_by_field_name('type')
        if annotation is not None:
            return annotation_name(annotation) or "Any"
        right = assignment.child_by_field_name('right')
        if right is None:
            return "Any"
        if right.type == 'identifier' and param_types.get(right.text):
            return param_types[right.text]
        if right.type == 'call':
            callee = right.child_by_field_name('function')
            if callee is not None and callee.type in ('identifier', 'attribute') \
                    and short_name(callee.text)[:1].isupper():
                return callee.text
        return "Any"

    @staticmethod
    def _field_symbol(name: str, type_name: str, type_index: TypeIndex) -> FieldSymbol:
        owner = type_index.symbol
        return FieldSymbol(
            name=name,
            qualified_name=f"{owner.qualified_name}.{name}",
            namespace=owner.namespace,
            containing_type=owner.name,
            accessibility=accessibility_of(name),
            file_path=str(type_index.unit.path),
            type_name=type_name,
        )

    # ------------------------------------------------------------------
    # CodeModelProvider interface
    # ------------------------------------------------------------------

    def find_types(self, predicate: Callable[[TypeSymbol], bool]) -> List[TypeSymbol]:
        self._require_open()
        return [index.symbol for index in self._types.values() if predicate(index.symbol)]

    def members(self, type_symbol: TypeSymbol) -> List[CodeSymbol]:
        index = self._types.get(type_symbol.qualified_name)
        return list(index.members) if index else []

    def source_definition(self, symbol: MethodSymbol) -> Optional[SourceDefinition]:
        if symbol.is_external:
            return None
        definition = self._definitions.get(symbol.qualified_name)
        if definition is not None:
            return definition
        if symbol.kind == MethodKind.CONSTRUCTOR:
            # Inherited constructor: the first workspace base that declares one
            owner = self._types.get(symbol.qualified_name.rsplit('.', 1)[0])
            if owner is None:
                return None
            for base in self.mro(owner.symbol)[1:]:
                base_index = self._types.get(base.qualified_name)
                if base_index and '__init__' in base_index.methods:
                    return self._definitions.get(base_index.methods['__init__'].qualified_name)
        return None

    def semantic_scope(self, definition: SourceDefinition) -> Optional[SemanticScope]:
        if definition is None or definition.node is None:
            return None
        key = definition.symbol.qualified_name
        scope = self._scopes.get(key)
        if scope is None:
            scope = PythonSemanticScope(self, definition)
            self._scopes[key] = scope
        return scope

    def descendants_of_kind(self, definition: SourceDefinition, kind: SyntaxKind) -> List[Any]:
        body = definition.body
        if body is None:
            return []
        if kind in (SyntaxKind.INVOCATION, SyntaxKind.OBJECT_CREATION):
            scope = self.semantic_scope(definition)
            calls = body.descendants('call')
            want_creation = kind == SyntaxKind.OBJECT_CREATION
            return [call for call in calls if scope.is_creation(call) == want_creation]
        if kind == SyntaxKind.MEMBER_ACCESS:
            return body.descendants('attribute')
        if kind == SyntaxKind.IDENTIFIER:
            return body.descendants('identifier')
        return []

    def member_receiver(self, access: Any) -> Optional[Any]:
        if access is None or access.type != 'attribute':
            return None
        return access.child_by_field_name('object')

    def invocation_of(self, access: Any) -> Optional[Any]:
        parent = access.parent if access is not None else None
        if parent is None or parent.type != 'call':
            return None
        function = parent.child_by_field_name('function')
        if function is None or function.key != access.key:
            return None
        return parent

    # ------------------------------------------------------------------
    # Symbol lookup shared by semantic scopes
    # ------------------------------------------------------------------

    def constructor_of(self, type_symbol: TypeSymbol) -> MethodSymbol:
        """Constructor invoked when *type_symbol* is instantiated"""
        index = self._types.get(type_symbol.qualified_name)
        if index is not None and '__init__' in index.methods:
            return index.methods['__init__']
        return MethodSymbol(
            name='__init__',
            qualified_name=f"{type_symbol.qualified_name}.__init__",
            namespace=type_symbol.namespace,
            containing_type=type_symbol.name,
            file_path=type_symbol.file_path,
            kind=MethodKind.CONSTRUCTOR,
            is_external=type_symbol.is_external,
        )

    def mro(self, type_symbol: TypeSymbol) -> List[TypeSymbol]:
        """Type followed by its resolvable bases, depth-first, left to right"""
        order: List[TypeSymbol] = []
        seen: Set[str] = set()

        def visit(current: TypeSymbol) -> None:
            if current.qualified_name in seen:
                return
            seen.add(current.qualified_name)
            order.append(current)
            if current.is_external:
                return
            for base_name in current.base_types:
                base = self.resolve_type_name(current.namespace, base_name)
                if base is not None:
                    visit(base)

        visit(type_symbol)
        return order

    def lookup_member(self, type_symbol: TypeSymbol, name: str) -> Optional[CodeSymbol]:
        """Find a member by name on a type or its bases"""
        external_base: Optional[TypeSymbol] = None
        for current in self.mro(type_symbol):
            if current.is_external:
                external_base = external_base or current
                continue
            index = self._types.get(current.qualified_name)
            if index is None:
                continue
            for table in (index.methods, index.properties, index.fields, index.nested):
                if name in table:
                    return table[name]
        if external_base is not None:
            return self._external_method(external_base.namespace, external_base.name, name,
                                         f"{external_base.qualified_name}.{name}")
        return None

    def resolve_type_name(self, module: str, type_name: Optional[str]) -> Optional[TypeSymbol]:
        """Resolve a (possibly dotted) type name as seen from *module*"""
        if not type_name or type_name == "Any":
            return None
        head, *rest = type_name.split('.')
        current = self.resolve_global(module, head)
        for part in rest:
            current = self.resolve_attribute_of(current, part)
        return current if isinstance(current, TypeSymbol) else None

    def resolve_global(self, module: str, name: str) -> Resolved:
        """Resolve a top-level name in *module*"""
        index = self._modules.get(module)
        if index is not None:
            if name in index.classes:
                return index.classes[name]
            if name in index.functions:
                return index.functions[name]
            if name in index.imports:
                return self._resolve_import(index, name)
        if name in BUILTIN_NAMES:
            return self._external_method('builtins', 'builtins', name, f"builtins.{name}")
        return None

    def resolve_attribute_of(self, receiver: Resolved, name: str) -> Resolved:
        """Resolve ``receiver.name`` where receiver is a type or module"""
        if isinstance(receiver, TypeSymbol):
            return self.lookup_member(receiver, name)
        if isinstance(receiver, ModuleRef):
            return self.resolve_in_module(receiver, name)
        return None

    def resolve_in_module(self, ref: ModuleRef, name: str, _depth: int = 0) -> Resolved:
        if ref.external or ref.name not in self._modules:
            submodule = f"{ref.name}.{name}"
            if submodule in self._modules:
                return ModuleRef(submodule)
            return self._external_name(ref.name, name)
        index = self._modules[ref.name]
        if name in index.classes:
            return index.classes[name]
        if name in index.functions:
            return index.functions[name]
        submodule = f"{ref.name}.{name}"
        if submodule in self._modules:
            return ModuleRef(submodule)
        if name in index.imports and _depth < 8:
            return self._resolve_import(index, name, _depth + 1)
        return None

    def _resolve_import(self, index: ModuleIndex, name: str, _depth: int = 0) -> Resolved:
        target = self._absolute_target(index, index.imports[name])
        if target in self._modules:
            return ModuleRef(target)
        if '.' not in target:
            return ModuleRef(target, external=True)
        parent, last = target.rsplit('.', 1)
        if name in index.module_bindings:
            return ModuleRef(target, external=True)
        # Longest workspace module prefix, then walk the remaining segments
        parts = target.split('.')
        for cut in range(len(parts) - 1, 0, -1):
            prefix = '.'.join(parts[:cut])
            if prefix in self._modules:
                current: Resolved = ModuleRef(prefix)
                for part in parts[cut:]:
                    if isinstance(current, ModuleRef):
                        current = self.resolve_in_module(current, part, _depth)
                    else:
                        current = self.resolve_attribute_of(current, part)
                return current
        return self._external_name(parent, last)

    def _absolute_target(self, index: ModuleIndex, target: str) -> str:
        if not target.startswith('.'):
            return target
        dots = len(target) - len(target.lstrip('.'))
        package = index.unit.module.split('.') if index.unit.module else []
        if not index.is_package:
            package = package[:-1]
        if dots > 1:
            package = package[:len(package) - (dots - 1)]
        remainder = target[dots:]
        return '.'.join(package + ([remainder] if remainder else []))

    def _external_name(self, module: str, name: str) -> CodeSymbol:
        if name[:1].isupper():
            return TypeSymbol(
                name=name,
                qualified_name=f"{module}.{name}",
                namespace=module,
                is_external=True,
            )
        return self._external_method(module, short_name(module), name, f"{module}.{name}")

    @staticmethod
    def _external_method(namespace: str, containing: str, name: str, qualified: str) -> MethodSymbol:
        return MethodSymbol(
            name=name,
            qualified_name=qualified,
            namespace=namespace,
            containing_type=containing,
            accessibility=accessibility_of(name),
            kind=MethodKind.FUNCTION,
            is_external=True,
        )

    def _require_open(self) -> None:
        if not self._opened:
            raise ProviderUnavailable("Workspace has not been opened")


class PythonSemanticScope(SemanticScope):
    """Flow-insensitive resolver for one method or function body"""

    def __init__(self, provider: TreeSitterProvider, definition: SourceDefinition):
        self.provider = provider
        self.definition = definition
        self.module = definition.unit.module
        self.enclosing = definition.enclosing_type
        self.locals: Dict[str, Optional[TypeSymbol]] = {}
        self.receiver: Optional[str] = None
        self._bind_parameters()
        self._bind_assignments()

    def _bind_parameters(self) -> None:
        func: FunctionDef = self.definition.node
        params = func.parameter_annotations
        decorators = {short_name(d) for d in func.decorators}
        if self.enclosing is not None and params and 'staticmethod' not in decorators:
            self.receiver = params[0][0]
            params = params[1:]
        for name, annotation in params:
            self.locals[name] = self.provider.resolve_type_name(self.module, annotation_name(annotation))

    def _bind_assignments(self) -> None:
        body = self.definition.body
        if body is None:
            return
        for assignment in body.descendants('assignment'):
            left = assignment.child_by_field_name('left')
            if left is None or left.type != 'identifier':
                continue
            annotation = assignment.child_by_field_name('type')
            right = assignment.child_by_field_name('right')
            if annotation is not None:
                bound = self.provider.resolve_type_name(self.module, annotation_name(annotation))
            elif right is not None and right.type == 'call':
                inferred = self._receiver_of(right)
                bound = inferred if isinstance(inferred, TypeSymbol) else None
            else:
                bound = None
            if self.locals.get(left.text) is None:
                self.locals[left.text] = bound

    # -- public ---------------------------------------------------------

    def resolve(self, node: Any) -> Optional[CodeSymbol]:
        if node is None:
            return None
        if node.type == 'call':
            return self._resolve_call(node)
        if node.type == 'attribute':
            resolved = self._resolve_attribute(node)
        elif node.type == 'identifier':
            resolved = self._resolve_identifier(node)
        else:
            return None
        return resolved if isinstance(resolved, CodeSymbol) else None

    def is_creation(self, call: ASTNode) -> bool:
        """True when the call instantiates a class"""
        return isinstance(self._callable_of(call.child_by_field_name('function')), TypeSymbol)

    # -- internals ------------------------------------------------------

    def _resolve_call(self, call: ASTNode) -> Optional[MethodSymbol]:
        target = self._callable_of(call.child_by_field_name('function'))
        if isinstance(target, TypeSymbol):
            return self.provider.constructor_of(target)
        if isinstance(target, MethodSymbol):
            return target
        return None

    def _callable_of(self, func: Optional[ASTNode]) -> Resolved:
        if func is None:
            return None
        if func.type == 'identifier':
            name = func.text
            if name == self.receiver:
                # cls(...) inside a classmethod
                return self.enclosing if self._is_classmethod() else None
            if name in self.locals:
                return None
            return self.provider.resolve_global(self.module, name)
        if func.type == 'attribute':
            return self._resolve_attribute(func)
        return None

    def _resolve_attribute(self, node: ASTNode) -> Resolved:
        obj = node.child_by_field_name('object')
        attr = node.child_by_field_name('attribute')
        if obj is None or attr is None:
            return None
        receiver = self._receiver_of(obj)
        return self.provider.resolve_attribute_of(receiver, attr.text)

    def _resolve_identifier(self, node: ASTNode) -> Resolved:
        parent = node.parent
        if parent is not None and parent.type in ('attribute', 'keyword_argument'):
            # obj.<name> and f(<name>=...) are not references to bindings
            field_name = 'attribute' if parent.type == 'attribute' else 'name'
            named = parent.child_by_field_name(field_name)
            if named is not None and named.key == node.key:
                return None
        name = node.text
        if name == self.receiver or name in self.locals:
            return None
        return self.provider.resolve_global(self.module, name)

    def _receiver_of(self, expr: ASTNode) -> Resolved:
        """Type or module an expression evaluates to, when statically known"""
        if expr.type == 'identifier':
            name = expr.text
            if name == self.receiver:
                return self.enclosing
            if name in self.locals:
                return self.locals[name]
            resolved = self.provider.resolve_global(self.module, name)
            if isinstance(resolved, MethodSymbol) and resolved.is_external \
                    and resolved.namespace != 'builtins':
                # from os import path
                return ModuleRef(resolved.qualified_name, external=True)
            return resolved if isinstance(resolved, (TypeSymbol, ModuleRef)) else None

        if expr.type == 'attribute':
            resolved = self._resolve_attribute(expr)
            if isinstance(resolved, (FieldSymbol, PropertySymbol)):
                return self.provider.resolve_type_name(resolved.namespace, resolved.type_name)
            if isinstance(resolved, MethodSymbol) and resolved.is_external \
                    and resolved.kind == MethodKind.FUNCTION and resolved.namespace != 'builtins':
                return ModuleRef(resolved.qualified_name, external=True)
            return resolved if isinstance(resolved, (TypeSymbol, ModuleRef)) else None

        if expr.type == 'call':
            func = expr.child_by_field_name('function')
            if func is not None and func.type == 'identifier' and func.text == 'super':
                return self._super_type()
            target = self._callable_of(func)
            if isinstance(target, TypeSymbol):
                return target
            if isinstance(target, MethodSymbol) and target.return_type:
                return self.provider.resolve_type_name(target.namespace, target.return_type)
            return None

        if expr.type == 'parenthesized_expression' and expr.named_children():
            return self._receiver_of(expr.named_children()[0])

        return None

    def _super_type(self) -> Optional[TypeSymbol]:
        if self.enclosing is None:
            return None
        for base_name in self.enclosing.base_types:
            base = self.provider.resolve_type_name(self.enclosing.namespace, base_name)
            if base is not None:
                return base
        return None

    def _is_classmethod(self) -> bool:
        return 'classmethod' in {short_name(d) for d in self.definition.symbol.attributes}
