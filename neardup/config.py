"""
Configuration for near-duplicate detection runs.

Parameters come from a YAML file, environment overrides (NEARDUP_*) and,
finally, command-line flags. validate() rejects bad values before any
document is read.
"""

import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from .errors import ConfigurationError

DEFAULT_CONFIG_FILE = ".neardup.yml"
ENV_PREFIX = "NEARDUP_"


@dataclass
class LSHConfig:
    """Run parameters. Everything except the tuning knobs at the end is required."""

    n_shingles: int  # token universe size N
    shingle_length: int
    max_documents: int
    bands: int  # b
    rows: int  # r, rows per band
    bucket_count: int
    threshold: float

    seed: int = 1234
    two_pass: bool = False
    batch_size: int = 475_000
    text_column: int = 2

    @property
    def signature_length(self) -> int:
        return self.bands * self.rows

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LSHConfig':
        """Create from dictionary, rejecting unknown or missing keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}",
                                     parameter=unknown[0])
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigurationError(f"Incomplete configuration: {e}") from e

    def validate(self) -> 'LSHConfig':
        """
        Check every parameter, raising ConfigurationError on the first bad one.

        Returns self so calls can be chained.
        """
        for name in ("bands", "rows", "bucket_count", "n_shingles", "shingle_length", "batch_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}",
                                         parameter=name, value=value)

        if isinstance(self.max_documents, bool) or not isinstance(self.max_documents, int) \
                or self.max_documents < 0:
            raise ConfigurationError(
                f"max_documents must be a non-negative integer, got {self.max_documents!r}",
                parameter="max_documents", value=self.max_documents)

        if not isinstance(self.threshold, (int, float)) or not 0.0 <= self.threshold <= 1.0:
            raise ConfigurationError(f"threshold must be between 0 and 1, got {self.threshold!r}",
                                     parameter="threshold", value=self.threshold)

        if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}",
                                     parameter="seed", value=self.seed)

        if self.text_column < 0:
            raise ConfigurationError(f"text_column must be >= 0, got {self.text_column}",
                                     parameter="text_column", value=self.text_column)

        # a_i * j must stay inside int64 while building the hash table
        if self.n_shingles >= 2 ** 31:
            raise ConfigurationError(f"n_shingles must be below 2^31, got {self.n_shingles}",
                                     parameter="n_shingles", value=self.n_shingles)
        return self


_ENV_CASTS = {
    "n_shingles": int,
    "shingle_length": int,
    "max_documents": int,
    "bands": int,
    "rows": int,
    "bucket_count": int,
    "threshold": float,
    "seed": int,
    "two_pass": lambda v: v.strip().lower() in ("1", "true", "yes", "on"),
    "batch_size": int,
    "text_column": int,
}


def env_overrides(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Collect NEARDUP_* overrides, e.g. NEARDUP_THRESHOLD=0.8."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for name, cast in _ENV_CASTS.items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        try:
            overrides[name] = cast(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}",
                                     parameter=name, value=raw) from e
    return overrides


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None,
                use_env: bool = True) -> LSHConfig:
    """
    Build a validated LSHConfig.

    Later sources win: config file, then environment, then overrides (None
    values in overrides are ignored).
    """
    data: Dict[str, Any] = {}
    if path is not None:
        data.update(read_config_file(path))
    if use_env:
        data.update(env_overrides())
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return LSHConfig.from_dict(data).validate()


def save_config(config: LSHConfig, path: Union[str, Path]) -> None:
    with open(path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)


def create_default_config_file(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write a starter config file.

    The values are a reasonable starting point for tweet-sized documents,
    not defaults the library applies on its own.
    """
    path = Path(path or DEFAULT_CONFIG_FILE)
    config = LSHConfig(
        n_shingles=2 ** 20,
        shingle_length=3,
        max_documents=1000,
        bands=20,
        rows=5,
        bucket_count=2 ** 31 - 1,
        threshold=0.9,
    )
    save_config(config, path)
    return path


def display_config(config: LSHConfig, console: Optional[Console] = None) -> None:
    """Display configuration in a formatted panel."""
    console = console or Console()
    yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
    syntax = Syntax(yaml_str, "yaml", theme="monokai", line_numbers=True)
    console.print(Panel(
        syntax,
        title="[bold cyan]LSH Configuration[/bold cyan]",
        border_style="cyan"
    ))
