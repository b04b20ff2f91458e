"""
Tree-sitter Python parser wrapper
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import tree_sitter_python as tspython
from tree_sitter import Language, Parser

from .ast_utils import ASTNode

logger = logging.getLogger(__name__)


class PythonParser:
    """Parses workspace files into ASTNode roots.

    Parsed files are cached per path and modification time, so reopening a
    workspace only reparses files that changed.
    """

    def __init__(self):
        self.language = Language(tspython.language())
        self.parser = Parser(self.language)
        self._cache: Dict[Tuple[str, float], ASTNode] = {}

    def parse_file(self, file_path: str) -> Optional[ASTNode]:
        """Parse a file, or return None when it cannot be read"""
        path = Path(file_path)
        try:
            cache_key = (str(path.resolve()), path.stat().st_mtime)
            if cache_key in self._cache:
                return self._cache[cache_key]
            source_code = path.read_bytes()
        except OSError as e:
            logger.warning("Cannot read %s: %s", file_path, e)
            return None

        root = self.parse_bytes(source_code)
        if root is not None:
            self._cache[cache_key] = root
        return root

    def parse_string(self, code: str) -> Optional[ASTNode]:
        return self.parse_bytes(code.encode('utf-8'))

    def parse_bytes(self, source_code: bytes) -> Optional[ASTNode]:
        tree = self.parser.parse(source_code)
        if tree.root_node is None:
            return None
        return ASTNode(tree.root_node, source_code)

    def error_lines(self, root: ASTNode) -> List[int]:
        """Lines holding ERROR or MISSING nodes; tree-sitter still builds the rest"""
        if not root.node.has_error:
            return []
        lines = []
        stack = [root.node]
        while stack:
            node = stack.pop()
            if node.is_error or node.is_missing:
                lines.append(node.start_point[0] + 1)
            elif node.has_error:
                stack.extend(node.children)
        return sorted(set(lines))
