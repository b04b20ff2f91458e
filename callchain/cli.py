"""
Command-line interface for callchain
"""

import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console

from .config import AnalyzerConfig, load_config
from .errors import CallChainError, EntryNotFound
from .graph.classifier import DependencyClassifier
from .graph.entry import EntryResolver
from .graph.heuristics import SuffixControllerClassifier, default_action_classifier
from .graph.noise import NoiseFilter
from .graph.walker import CallGraphWalker
from .log import configure_logging
from .model.python_provider import TreeSitterProvider
from .report.tree_printer import TreePrinter

logger = logging.getLogger(__name__)

# Initialize typer app
app = typer.Typer(
    name="callchain",
    help="Static call chain analyzer for controller actions",
    add_completion=False
)

console = Console(markup=False, highlight=False, soft_wrap=True)


def build_resolver(provider: TreeSitterProvider, config: AnalyzerConfig) -> EntryResolver:
    entry = config.entry
    return EntryResolver(
        provider,
        controller_classifier=SuffixControllerClassifier(entry.controller_marker),
        action_classifier=default_action_classifier(
            entry.route_markers, entry.verb_markers, entry.action_return_markers
        ),
        type_suffix=entry.controller_marker,
    )


def build_walker(provider: TreeSitterProvider, config: AnalyzerConfig) -> CallGraphWalker:
    noise = NoiseFilter(
        framework_roots=config.noise.framework_roots,
        skip_methods=config.noise.skip_methods,
        include_stdlib=config.noise.include_stdlib,
    )
    classifier = DependencyClassifier(provider, unify_properties=config.walker.unify_property_dependencies)
    return CallGraphWalker(provider, noise_filter=noise, classifier=classifier, options=config.walker)


@app.command()
def analyze(
    workspace: str = typer.Argument(..., help="Workspace directory or Python file to analyze"),
    type_name: str = typer.Argument(..., help="Controller name, with or without the Controller suffix"),
    action: Optional[str] = typer.Argument(None, help="Action method to start from; omit to list actions"),
):
    """Print the call chain reachable from a controller action"""
    target = f"{type_name}.{action}" if action else type_name
    console.print(f"Analyzing call chain for {target}...")

    try:
        config = load_config(Path(workspace))
        configure_logging(config.log_level)

        console.print(f"Loading workspace: {workspace}")
        provider = TreeSitterProvider(exclude_dirs=config.workspace.exclude_dirs)
        provider.open(Path(workspace))

        resolution = build_resolver(provider, config).resolve_entry(type_name, action)
        if resolution.is_discovery:
            console.print(f"Available actions in {resolution.type_symbol.name}:")
            for candidate in resolution.candidates:
                console.print(f"  - {candidate.name}")
            return

        console.print("Call chain:")
        result = build_walker(provider, config).walk(resolution.method)
        TreePrinter(console).print_events(result.events)
        logger.info("Expanded %d methods, followed %d edges", len(result.expanded), len(result.edges))

        console.print("Analysis complete.")

    except EntryNotFound as e:
        console.print(str(e))
        raise typer.Exit(1)
    except CallChainError as e:
        console.print(f"Error: {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
