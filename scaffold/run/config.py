"""
Generator configuration.

Resolved once per run, lowest to highest priority:
  1) dataclass defaults
  2) YAML file (top level, or a "scaffold:" section)
  3) SCAFFOLD_* environment variables
  4) explicit overrides (CLI flags)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from scaffold.errors import ConfigError

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}

ENV_PREFIX = "SCAFFOLD_"


@dataclass(frozen=True)
class GeneratorConfig:
    output_dir: Path = Path("generated")
    model_package: str = "models"
    test_package: str = "tests"
    generate_accessors: bool = True
    wire_name_annotations: bool = True
    base_url: str = "{{base_url}}"
    generate_shared_fixture: bool = True
    model_import_package: Optional[str] = None   # defaults to model_package

    @property
    def models_import(self) -> str:
        return self.model_import_package or self.model_package

    @property
    def model_dir(self) -> Path:
        return Path(*self.model_package.split("."))

    @property
    def test_dir(self) -> Path:
        return Path(*self.test_package.split("."))


def _coerce(name: str, value: Any) -> Any:
    default = GeneratorConfig.__dataclass_fields__[name].default

    if value is None:
        if name == "model_import_package":
            return None
        raise ConfigError(f"Missing value for {name}")

    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        low = str(value).strip().lower()
        if low in _TRUE:
            return True
        if low in _FALSE:
            return False
        raise ConfigError(f"Invalid boolean for {name}: {value!r}")

    if isinstance(default, Path):
        return Path(str(value))

    value = str(value).strip()
    if name.endswith("_package") and not _PACKAGE_RE.match(value):
        raise ConfigError(f"Invalid package name for {name}: {value!r}")
    return value


def _apply(config: GeneratorConfig, updates: Mapping[str, Any]) -> GeneratorConfig:
    known = {f.name for f in fields(GeneratorConfig)}
    unknown = sorted(set(updates) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {unknown}")
    return replace(config, **{k: _coerce(k, v) for k, v in updates.items()})


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must hold a mapping: {path}")
    section = data.get("scaffold", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'scaffold' section must be a mapping: {path}")
    return section


def _from_env(env: Mapping[str, str]) -> Dict[str, str]:
    out = {}
    for f in fields(GeneratorConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in env:
            out[f.name] = env[key]
    return out


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> GeneratorConfig:
    config = GeneratorConfig()
    if path is not None:
        config = _apply(config, _load_yaml(Path(path)))
    config = _apply(config, _from_env(os.environ if env is None else env))
    if overrides:
        config = _apply(config, {k: v for k, v in overrides.items() if v is not None})
    return config
