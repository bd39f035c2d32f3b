"""Configuration loading for seocheck (.seocheck.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".seocheck.yml"

DEFAULT_IGNORE_PATHS: tuple[str, ...] = (
    "purchase/order",
    "purchase/orderLead",
    "purchase",
    "admin",
    "api",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SandboxConfig:
    """Settings for dynamic evaluation of the SEO utility."""

    enabled: bool = True
    timeout_ms: int = 2000
    origin: str = "https://example.com"


@dataclass
class CIConfig:
    """Continuous integration exit policy."""

    fail_under: int = 50


@dataclass
class SeoCheckConfig:
    """Represents the settings defined in .seocheck.yml."""

    root: Path
    pages_dir: Optional[Path] = None
    sitemap_file: Optional[Path] = None
    framework_config: Optional[Path] = None
    seo_util_file: Optional[Path] = None
    ignore_paths: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATHS))
    workers: int = 4
    sandbox: SandboxConfig = field(default_factory=SandboxConfig)
    ci: CIConfig = field(default_factory=CIConfig)


def load_config(config_path: Path) -> SeoCheckConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SeoCheckConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SeoCheckConfig(root=root)
    config.pages_dir = _as_path(root, data.get("pages_dir"))
    config.sitemap_file = _as_path(root, data.get("sitemap_file"))
    config.framework_config = _as_path(root, data.get("framework_config"))
    config.seo_util_file = _as_path(root, data.get("seo_util_file"))

    if "ignore_paths" in data:
        config.ignore_paths = _as_str_list(data.get("ignore_paths"))

    workers = _as_int(data.get("workers"))
    if workers is not None and workers > 0:
        config.workers = workers

    sandbox_data = _as_dict(data.get("sandbox"))
    if sandbox_data:
        enabled = _as_bool(sandbox_data.get("enabled"))
        if enabled is not None:
            config.sandbox.enabled = enabled
        timeout_ms = _as_int(sandbox_data.get("timeout_ms"))
        if timeout_ms is not None and timeout_ms > 0:
            config.sandbox.timeout_ms = timeout_ms
        origin = _as_str(sandbox_data.get("origin"))
        if origin:
            config.sandbox.origin = origin.rstrip("/")

    ci_data = _as_dict(data.get("ci"))
    if ci_data:
        fail_under = _as_int(ci_data.get("fail_under"))
        if fail_under is not None:
            config.ci.fail_under = fail_under

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return (root / text).resolve()


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CIConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_IGNORE_PATHS",
    "SandboxConfig",
    "SeoCheckConfig",
    "load_config",
]
