"""
Analyzer configuration loaded from an optional YAML file in the workspace root
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .graph.heuristics import RoutingMarkers
from .graph.models import WalkerOptions
from .graph.noise import DEFAULT_FRAMEWORK_ROOTS, DEFAULT_SKIP_METHODS

CONFIG_FILE_NAMES = ("callchain.yaml", ".callchain.yaml")

LOG_LEVEL_ENV = "CALLCHAIN_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class NoiseConfig(BaseModel):
    """Which methods are kept out of the call tree"""
    framework_roots: List[str] = Field(default_factory=lambda: list(DEFAULT_FRAMEWORK_ROOTS),
                                       description="Namespaces never expanded or printed")
    include_stdlib: bool = Field(default=True, description="Also skip external standard-library symbols")
    skip_methods: List[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_METHODS),
                                    description="Object-protocol method names to skip")


class EntryConfig(BaseModel):
    """Controller and action heuristics"""
    controller_marker: str = Field(default="Controller", description="Controller name suffix / base name marker")
    route_markers: List[str] = Field(default_factory=lambda: list(RoutingMarkers.ROUTE),
                                     description="Decorator name fragments marking an action")
    verb_markers: List[str] = Field(default_factory=lambda: list(RoutingMarkers.VERBS),
                                    description="HTTP verbs recognized as the last decorator segment")
    action_return_markers: List[str] = Field(default_factory=lambda: list(RoutingMarkers.ACTION_RETURNS),
                                             description="Return annotation fragments marking an action")


class WorkspaceConfig(BaseModel):
    """Workspace loading"""
    exclude_dirs: List[str] = Field(default_factory=list, description="Extra directory names to skip")


class AnalyzerConfig(BaseModel):
    """Top-level configuration"""
    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    entry: EntryConfig = Field(default_factory=EntryConfig)
    walker: WalkerOptions = Field(default_factory=WalkerOptions)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    log_level: str = Field(default="WARNING", description="Logging level for diagnostics on stderr")

    @field_validator('log_level')
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def find_config(workspace: Path) -> Optional[Path]:
    """Config file in the workspace root, if any"""
    root = workspace if workspace.is_dir() else workspace.parent
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(workspace: Optional[Path] = None, path: Optional[Path] = None) -> AnalyzerConfig:
    """Load configuration for *workspace*, falling back to defaults.

    An explicit *path* wins over discovery. ``CALLCHAIN_LOG_LEVEL`` overrides
    the configured log level.
    """
    if path is None and workspace is not None:
        path = find_config(Path(workspace))

    data = {}
    if path is not None:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config {path}: expected a mapping at the top level")

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        data = dict(data, log_level=env_level)

    try:
        return AnalyzerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path or LOG_LEVEL_ENV}: {e}") from e
