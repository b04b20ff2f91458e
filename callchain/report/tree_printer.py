"""
Tree printer: renders traversal events as an indented call tree
"""

from typing import Iterable, List, Optional
from rich.console import Console

from ..graph.models import (
    CreationAnnotation, CycleHit, DependencyAnnotation, EnterNode, MemberKind,
    Terminal, TerminalReason, TraversalEvent
)


class TreePrinter:
    """Formats events two spaces per depth level"""

    ARROW = "→"

    CYCLE_MARKER = "(already analyzed - preventing cycle)"

    # Parenthesized note printed under a node that was not expanded
    TERMINAL_NOTES = {
        TerminalReason.UNAVAILABLE: "external or generated method - cannot analyze further",
        TerminalReason.NO_SEMANTIC_MODEL: "no semantic model - cannot analyze further",
        TerminalReason.PROVIDER_ERROR: "analysis failed",
        TerminalReason.DEPTH_LIMIT: "maximum depth reached - not expanded",
        TerminalReason.CANCELLED: "analysis cancelled",
    }

    def __init__(self, console: Optional[Console] = None, indent: int = 2):
        self.console = console or Console(markup=False, highlight=False)
        self.indent = indent

    def format_event(self, event: TraversalEvent) -> List[str]:
        """Lines for a single event"""
        pad = " " * (event.depth * self.indent)
        note = pad + " " * self.indent

        if isinstance(event, EnterNode):
            return [f"{pad}{self.ARROW} {event.signature}"]

        if isinstance(event, CycleHit):
            return [f"{pad}{self.ARROW} {event.signature}", f"{note}{self.CYCLE_MARKER}"]

        if isinstance(event, Terminal):
            text = self.TERMINAL_NOTES.get(event.reason, event.reason.value)
            if event.reason == TerminalReason.PROVIDER_ERROR and event.detail:
                text = f"{text}: {event.detail}"
            return [f"{note}({text})"]

        if isinstance(event, CreationAnnotation):
            return [f"{note}[Creates {event.type_name}]"]

        if isinstance(event, DependencyAnnotation):
            if event.member_kind == MemberKind.PROPERTY:
                return [f"{note}[Uses dependency property: {event.member_type}]"]
            return [f"{note}[Uses dependency: {event.member_type}]"]

        return []

    def render(self, events: Iterable[TraversalEvent]) -> List[str]:
        """All lines for an event sequence, in order"""
        lines: List[str] = []
        for event in events:
            lines.extend(self.format_event(event))
        return lines

    def print_events(self, events: Iterable[TraversalEvent]) -> None:
        for line in self.render(events):
            self.console.print(line, markup=False, highlight=False, soft_wrap=True)
