"""
Shared fixtures for callchain tests
"""

import textwrap
from pathlib import Path
from typing import Dict

import pytest

from callchain.model.python_provider import TreeSitterProvider
from callchain.model.symbols import MethodSymbol


def build_provider(sources: Dict[str, str]) -> TreeSitterProvider:
    """Provider over in-memory modules keyed by relative path"""
    provider = TreeSitterProvider()
    provider.open_sources({path: textwrap.dedent(code) for path, code in sources.items()})
    return provider


def method_of(provider: TreeSitterProvider, type_name: str, method_name: str) -> MethodSymbol:
    """Look up a declared method by simple type and method name"""
    for type_symbol in provider.find_types(lambda t: t.name == type_name):
        for member in provider.members(type_symbol):
            if isinstance(member, MethodSymbol) and member.name == method_name:
                return member
    raise LookupError(f"{type_name}.{method_name}")


def write_workspace(root: Path, files: Dict[str, str]) -> Path:
    """Materialize a workspace of Python files under *root*"""
    for rel_path, code in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(code))
    return root


@pytest.fixture
def shop_workspace(tmp_path: Path) -> Path:
    """Small web project with a controller, a service and a repository"""
    return write_workspace(tmp_path, {
        "shop/__init__.py": "",
        "shop/repository.py": '''
            class OrderRepository:
                def save(self, order):
                    pass

                def __repr__(self):
                    return "OrderRepository()"
        ''',
        "shop/services.py": '''
            from .repository import OrderRepository


            class Order:
                def __init__(self, sku):
                    self.sku = sku


            class OrderService:
                def __init__(self, repository: OrderRepository):
                    self.repository = repository

                def place(self, sku):
                    order = Order(sku)
                    self.repository.save(order)
                    return order
        ''',
        "shop/controllers.py": '''
            from .services import OrderService


            def route(path):
                def wrap(func):
                    return func
                return wrap


            class OrdersController:
                def __init__(self, service: OrderService):
                    self._service = service

                @route("/orders")
                def create(self, sku):
                    print("creating", sku)
                    return self._service.place(sku)

                @route("/orders/<sku>")
                def show(self, sku):
                    return str(sku)

                def helper(self):
                    pass
        ''',
    })
