"""
Tree-sitter node wrappers used by the Python code model
"""

from typing import List, Optional, Tuple, Dict
import tree_sitter


class ASTNode:
    """A tree-sitter node bound to the source buffer it was parsed from.

    Two wrappers are equal when they denote the same span and node type of the
    same buffer, so nodes can key the provider's dictionaries.
    """

    def __init__(self, node: tree_sitter.Node, source_code: bytes):
        self.node = node
        self.source_code = source_code

    @classmethod
    def of(cls, node: 'ASTNode'):
        """Rewrap *node* as this wrapper type"""
        return cls(node.node, node.source_code)

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def text(self) -> str:
        return self.node.text.decode('utf-8')

    @property
    def line(self) -> int:
        """1-based line of the first character"""
        return self.node.start_point[0] + 1

    @property
    def key(self) -> Tuple[int, int, str]:
        return (self.node.start_byte, self.node.end_byte, self.node.type)

    @property
    def parent(self) -> Optional['ASTNode']:
        return self._wrap(self.node.parent)

    def _wrap(self, node: Optional[tree_sitter.Node]) -> Optional['ASTNode']:
        return ASTNode(node, self.source_code) if node is not None else None

    def child_by_field_name(self, field_name: str) -> Optional['ASTNode']:
        return self._wrap(self.node.child_by_field_name(field_name))

    def named_children(self) -> List['ASTNode']:
        """Child nodes without punctuation and keywords"""
        return [ASTNode(child, self.source_code) for child in self.node.named_children]

    def descendants(self, *node_types: str) -> List['ASTNode']:
        """Descendants whose type is one of *node_types*, in source order.

        The walk is iterative, so deeply nested expressions cannot exhaust the
        interpreter's recursion limit.
        """
        found = []
        stack = list(reversed(self.node.children))
        while stack:
            node = stack.pop()
            if node.type in node_types:
                found.append(ASTNode(node, self.source_code))
            stack.extend(reversed(node.children))
        return found

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ASTNode):
            return NotImplemented
        return self.key == other.key and self.source_code is other.source_code

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"ASTNode(type={self.type}, line={self.line}, text={self.text[:40]!r})"


def annotation_name(annotation: Optional[ASTNode]) -> Optional[str]:
    """Reduce a type annotation to the dotted name of its principal type.

    ``Optional[Foo]`` and ``"Foo"`` give ``Foo``; ``List[Foo]`` gives ``List``.
    """
    if annotation is None:
        return None

    node = annotation
    if node.type == 'type' and node.named_children():
        node = node.named_children()[0]

    if node.type == 'string':
        text = node.text.strip('\'"')
        return text.split('[', 1)[0].strip() or None

    if node.type in ('generic_type', 'subscript'):
        head = node.named_children()[0] if node.named_children() else None
        if head is not None and head.text.split('.')[-1] == 'Optional':
            args = [c for c in node.named_children()[1:]]
            if args:
                inner = args[0]
                if inner.type == 'type_parameter' and inner.named_children():
                    inner = inner.named_children()[0]
                return annotation_name(inner)
        return head.text if head is not None else None

    if node.type in ('identifier', 'attribute', 'dotted_name'):
        return node.text

    if node.type == 'binary_operator':
        # Foo | None
        return annotation_name(node.child_by_field_name('left'))

    return node.text.split('[', 1)[0].strip() or None


class Definition(ASTNode):
    """A ``def`` or ``class`` statement"""

    node_types: Tuple[str, ...] = ()

    def __init__(self, node: tree_sitter.Node, source_code: bytes):
        if node.type not in self.node_types:
            raise ValueError(f"{type(self).__name__} cannot wrap a '{node.type}' node")
        super().__init__(node, source_code)

    @property
    def name(self) -> str:
        name_node = self.child_by_field_name('name')
        return name_node.text if name_node is not None else ""

    @property
    def body(self) -> Optional[ASTNode]:
        return self.child_by_field_name('body')

    @property
    def decorators(self) -> List[str]:
        """Decorator expressions without call arguments.

        ``@app.get('/')`` gives ``app.get``; ``@route`` gives ``route``.
        """
        wrapper = self.parent
        if wrapper is None or wrapper.type != 'decorated_definition':
            return []
        names = []
        for decorator in wrapper.named_children():
            if decorator.type != 'decorator' or not decorator.node.named_children:
                continue
            expr = decorator.named_children()[0]
            if expr.type == 'call':
                expr = expr.child_by_field_name('function') or expr
            names.append(expr.text)
        return names


class FunctionDef(Definition):
    """A function or method definition"""

    node_types = ('function_definition',)

    @property
    def parameter_annotations(self) -> List[Tuple[str, Optional[ASTNode]]]:
        """(name, annotation) pairs in declaration order, ``self`` included"""
        params_node = self.child_by_field_name('parameters')
        if params_node is None:
            return []
        pairs = []
        for param in params_node.named_children():
            if param.type == 'identifier':
                pairs.append((param.text, None))
            elif param.type in ('typed_parameter', 'typed_default_parameter', 'default_parameter'):
                name_node = param.child_by_field_name('name')
                if name_node is None:
                    named = [c for c in param.named_children() if c.type == 'identifier']
                    name_node = named[0] if named else None
                if name_node is not None:
                    pairs.append((name_node.text, param.child_by_field_name('type')))
            elif param.type in ('list_splat_pattern', 'dictionary_splat_pattern'):
                pairs.append((param.text, None))
        return pairs

    @property
    def return_type(self) -> Optional[ASTNode]:
        return self.child_by_field_name('return_type')


class ClassDef(Definition):
    """A class definition"""

    node_types = ('class_definition',)

    @property
    def base_names(self) -> List[str]:
        """Declared base class expressions; keyword arguments such as ``metaclass=`` are skipped"""
        supers = self.child_by_field_name('superclasses')
        if supers is None:
            return []
        return [
            child.text for child in supers.named_children()
            if child.type in ('identifier', 'attribute')
        ]

    def statements(self) -> List[ASTNode]:
        """Direct statements of the body, with decorated definitions unwrapped"""
        body = self.body
        if body is None:
            return []
        statements = []
        for child in body.named_children():
            if child.type == 'decorated_definition':
                definition = child.child_by_field_name('definition')
                if definition is not None:
                    statements.append(definition)
            else:
                statements.append(child)
        return statements


class ImportStatement(ASTNode):
    """``import a.b [as c]`` or ``from m import x [as y]``"""

    def __init__(self, node: tree_sitter.Node, source_code: bytes):
        if node.type not in ('import_statement', 'import_from_statement'):
            raise ValueError(f"ImportStatement cannot wrap a '{node.type}' node")
        super().__init__(node, source_code)

    @property
    def is_from_import(self) -> bool:
        return self.type == 'import_from_statement'

    @property
    def module_name(self) -> str:
        """Source module of a from-import, leading dots kept; empty for plain imports"""
        module = self.child_by_field_name('module_name')
        return module.text if self.is_from_import and module is not None else ""

    @property
    def bindings(self) -> Dict[str, str]:
        """Local name -> imported dotted target

        ``import a.b`` binds ``a`` to ``a``; ``import a.b as c`` binds ``c`` to
        ``a.b``; ``from m import x as y`` binds ``y`` to ``m.x``.
        """
        bindings: Dict[str, str] = {}
        module_node = self.child_by_field_name('module_name') if self.is_from_import else None
        module = self.module_name
        prefix = module if module.endswith('.') else f"{module}."
        for child in self.named_children():
            if module_node is not None and child.key == module_node.key:
                continue
            if child.type == 'dotted_name':
                if self.is_from_import:
                    bindings[child.text] = f"{prefix}{child.text}"
                else:
                    head = child.text.split('.')[0]
                    bindings[head] = head
            elif child.type == 'aliased_import':
                target = child.child_by_field_name('name')
                alias = child.child_by_field_name('alias')
                if target is None or alias is None:
                    continue
                bindings[alias.text] = f"{prefix}{target.text}" if self.is_from_import else target.text
        return bindings
