"""
Noise filter: keeps framework and object-protocol methods out of the call tree
"""

import sys
from typing import Iterable, Optional, Set

from ..model.symbols import MethodSymbol

DEFAULT_FRAMEWORK_ROOTS = ('builtins',)

# str(), repr(), ==, hash(); the runtime type query type() lives in builtins
DEFAULT_SKIP_METHODS = ('__str__', '__repr__', '__format__', '__eq__', '__ne__', '__hash__')


class NoiseFilter:
    """Rejects methods that should never be expanded or printed"""

    def __init__(self, framework_roots: Optional[Iterable[str]] = None,
                 skip_methods: Optional[Iterable[str]] = None,
                 include_stdlib: bool = True):
        self.framework_roots: Set[str] = set(
            DEFAULT_FRAMEWORK_ROOTS if framework_roots is None else framework_roots
        )
        # Workspace modules may shadow stdlib names, so this set only applies to external symbols
        self.stdlib_roots: Set[str] = set(getattr(sys, 'stdlib_module_names', ())) if include_stdlib else set()
        self.skip_methods: Set[str] = set(
            DEFAULT_SKIP_METHODS if skip_methods is None else skip_methods
        )

    def should_skip(self, method: Optional[MethodSymbol]) -> bool:
        """True when *method* is framework or object-protocol noise"""
        if method is None:
            return True
        if method.name in self.skip_methods:
            return True
        if self._under(method.namespace, self.framework_roots):
            return True
        return method.is_external and self._under(method.namespace, self.stdlib_roots)

    @staticmethod
    def _under(namespace: Optional[str], roots: Set[str]) -> bool:
        """Namespace equals a root or sits underneath one, on whole dotted segments"""
        if not namespace:
            return False
        parts = namespace.split('.')
        return any('.'.join(parts[:i]) in roots for i in range(1, len(parts) + 1))
