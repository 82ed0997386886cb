"""Configuration loading for nsbundle (.nsbundle.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import Namespace

CONFIG_FILENAME = ".nsbundle.yml"
PAGES_DIR = Path("src") / "pages"

_NAMESPACE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class ConfigError(RuntimeError):
    """Raised when configuration is missing, invalid, or cannot be parsed."""


@dataclass
class BundlerConfig:
    """Settings forwarded to the esbuild adapter."""

    executable: Optional[str] = None
    target: str = "es2022"
    sourcemap: bool = True


@dataclass
class BuildConfig:
    """Effective settings for a build run."""

    root: Path
    namespace: Optional[str] = None
    output: Optional[Path] = None
    bundler: BundlerConfig = field(default_factory=BundlerConfig)

    @property
    def pages_dir(self) -> Path:
        return self.root / PAGES_DIR

    def with_overrides(
        self,
        *,
        namespace: Optional[str] = None,
        output: Optional[str | Path] = None,
    ) -> "BuildConfig":
        """Return a copy with command-line values taking precedence."""
        updated = self
        if namespace:
            updated = replace(updated, namespace=namespace)
        if output:
            updated = replace(updated, output=Path(output).expanduser())
        return updated

    def require_namespace(self) -> Namespace:
        """Validate and return the namespace, raising ConfigError when unusable."""
        token = (self.namespace or "").strip()
        if not token:
            raise ConfigError(
                'A namespace is required (for example --namespace "acme-studio-").'
            )
        if not _NAMESPACE_PATTERN.match(token):
            raise ConfigError(
                f"Invalid namespace {token!r}: use letters, digits, '-' or '_' "
                "and start with a letter or '_'."
            )
        return Namespace(token)

    def require_output(self) -> Path:
        if self.output is None:
            raise ConfigError("An output directory is required (--output).")
        output = self.output
        if not output.is_absolute():
            output = Path.cwd() / output
        return output.resolve()


def load_config(config_path: Path) -> BuildConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BuildConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_str = _as_str(data.get("output"))
    output = None
    if output_str:
        output = Path(output_str).expanduser()
        if not output.is_absolute():
            output = root / output

    bundler = BundlerConfig()
    bundler_data = _as_dict(data.get("bundler"))
    if bundler_data:
        bundler.executable = _as_str(bundler_data.get("executable"))
        bundler.target = _as_str(bundler_data.get("target")) or bundler.target
        sourcemap = _as_bool(bundler_data.get("sourcemap"))
        if sourcemap is not None:
            bundler.sourcemap = sourcemap

    return BuildConfig(
        root=root,
        namespace=_as_str(data.get("namespace")),
        output=output,
        bundler=bundler,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None
