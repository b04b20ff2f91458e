"""
Heuristic classifiers for entry-point discovery
Decide which types look like controllers and which of their methods look like actions
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..model.symbols import MethodSymbol, TypeSymbol, short_name


class RoutingMarkers:
    """Name fragments that identify routing decorators and action return types"""

    # Decorators such as @app.route, @router.get, @api_view, @action
    ROUTE = ('route', 'http', 'action', 'api_view', 'endpoint')

    # Last segment of @router.get, @bp.post, ...
    VERBS = ('get', 'post', 'put', 'patch', 'delete', 'head', 'options')

    # Return annotations of request handlers
    ACTION_RETURNS = ('Response', 'ActionResult', 'HttpResponse', 'JSONResponse')


class ControllerClassifier(ABC):
    """Decides whether a type is controller-like"""

    @abstractmethod
    def is_controller(self, type_symbol: TypeSymbol) -> bool:
        ...


class SuffixControllerClassifier(ControllerClassifier):
    """Controller when the name ends with the marker or a declared base contains it"""

    def __init__(self, marker: str = "Controller"):
        self.marker = marker

    def is_controller(self, type_symbol: TypeSymbol) -> bool:
        if type_symbol.name.endswith(self.marker):
            return True
        return any(self.marker in short_name(base) for base in type_symbol.base_types)


class ActionClassifier(ABC):
    """Decides whether a method looks like a request-handling action"""

    @abstractmethod
    def is_action(self, method: MethodSymbol) -> bool:
        ...


class RouteAttributeClassifier(ActionClassifier):
    """Action when a decorator name carries a routing marker or an HTTP verb"""

    def __init__(self, route_markers: Optional[Iterable[str]] = None,
                 verb_markers: Optional[Iterable[str]] = None):
        self.route_markers = tuple(m.lower() for m in (RoutingMarkers.ROUTE if route_markers is None else route_markers))
        self.verb_markers = tuple(m.lower() for m in (RoutingMarkers.VERBS if verb_markers is None else verb_markers))

    def is_action(self, method: MethodSymbol) -> bool:
        for attribute in method.attributes:
            lowered = attribute.lower()
            if any(marker in lowered for marker in self.route_markers):
                return True
            if '.' in lowered and short_name(lowered) in self.verb_markers:
                return True
        return False


class ReturnTypeActionClassifier(ActionClassifier):
    """Action when the return annotation names a response type"""

    def __init__(self, return_markers: Optional[Iterable[str]] = None):
        self.return_markers = tuple(RoutingMarkers.ACTION_RETURNS if return_markers is None else return_markers)

    def is_action(self, method: MethodSymbol) -> bool:
        if not method.return_type:
            return False
        return any(marker in method.return_type for marker in self.return_markers)


class AnyActionClassifier(ActionClassifier):
    """Accepts a method when any of the wrapped classifiers does"""

    def __init__(self, classifiers: List[ActionClassifier]):
        self.classifiers = classifiers

    def is_action(self, method: MethodSymbol) -> bool:
        return any(classifier.is_action(method) for classifier in self.classifiers)


def default_action_classifier(route_markers: Optional[Iterable[str]] = None,
                              verb_markers: Optional[Iterable[str]] = None,
                              return_markers: Optional[Iterable[str]] = None) -> ActionClassifier:
    return AnyActionClassifier([
        RouteAttributeClassifier(route_markers, verb_markers),
        ReturnTypeActionClassifier(return_markers),
    ])
