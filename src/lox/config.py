"""TOML config loading for lox.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "lox.toml"


@dataclass
class ReplConfig:
    prompt: str = "> "
    echo_values: bool = True  # echo the value of a bare expression


@dataclass
class DiagnosticsConfig:
    color: bool = True
    style: str = "rich"  # "rich" or "plain"


@dataclass
class LoxConfig:
    repl: ReplConfig = field(default_factory=ReplConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find lox.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> LoxConfig:
    """Parse a lox.toml file into a LoxConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = LoxConfig()

    if "repl" in data:
        repl = data["repl"]
        config.repl = ReplConfig(
            prompt=repl.get("prompt", "> "),
            echo_values=repl.get("echo_values", True),
        )

    if "diagnostics" in data:
        diag = data["diagnostics"]
        style = diag.get("style", "rich")
        if style not in ("rich", "plain"):
            raise ValueError(f"{path}: diagnostics.style must be 'rich' or 'plain', got {style!r}")
        config.diagnostics = DiagnosticsConfig(
            color=diag.get("color", True),
            style=style,
        )

    return config


def resolve_config(start_path: Path | None = None) -> LoxConfig:
    """Load the nearest lox.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return LoxConfig()
