from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .emit.backends import list_backends
from .emit.emitter import DEFAULT_LOOP_MULTIPLIER
from .errors import SqlTplUserError

DEFAULT_CFG_FILE = "sqltpl.yaml"

_LOG = logging.getLogger("sqltpl.config")

# --------------------------------------------------------------------------- #
# DEFAULTS
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "backend": "go",
    "loop_multiplier": DEFAULT_LOOP_MULTIPLIER,
    "buffer": "sb",
    "params": "params",
    "include": ["**/*.sqlt"],
    "exclude": [],
}

_yaml = YAML(typ="safe")


class ConfigError(SqlTplUserError):
    """Invalid sqltpl.yaml."""
    pass


@dataclass(frozen=True)
class CompilerConfig:
    """
    Settings of the compiler and of template discovery.
    """
    backend: str = "go"
    loop_multiplier: int = DEFAULT_LOOP_MULTIPLIER
    buffer: str = "sb"
    params: str = "params"
    include: Tuple[str, ...] = ("**/*.sqlt",)
    exclude: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CompilerConfig:
        """Create CompilerConfig from a YAML mapping merged over defaults."""
        unknown = sorted(set(data) - set(_DEFAULT_CFG))
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        cfg = _DEFAULT_CFG.copy()
        cfg.update(data)

        backend = cfg["backend"]
        if backend not in list_backends():
            raise ConfigError(
                f"backend: expected one of {', '.join(list_backends())}, got {backend!r}"
            )

        multiplier = cfg["loop_multiplier"]
        if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier < 1:
            raise ConfigError(f"loop_multiplier: expected a positive integer, got {multiplier!r}")

        for key in ("buffer", "params"):
            if not isinstance(cfg[key], str) or not cfg[key].isidentifier():
                raise ConfigError(f"{key}: expected an identifier, got {cfg[key]!r}")
        if cfg["buffer"] == cfg["params"]:
            raise ConfigError("buffer and params must have different names")

        return cls(
            backend=backend,
            loop_multiplier=multiplier,
            buffer=cfg["buffer"],
            params=cfg["params"],
            include=_patterns(cfg["include"], "include"),
            exclude=_patterns(cfg["exclude"], "exclude"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "loop_multiplier": self.loop_multiplier,
            "buffer": self.buffer,
            "params": self.params,
            "include": list(self.include),
            "exclude": list(self.exclude),
        }


def _patterns(value: Any, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ConfigError(f"{key}: expected a pattern or a list of patterns, got {value!r}")


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(root: Path, filename: str = DEFAULT_CFG_FILE) -> CompilerConfig:
    """
    Load sqltpl.yaml from the project root.

    • No file: defaults.
    • User keys override defaults; unknown keys are an error.
    """
    path = root / filename
    if not path.exists():
        _LOG.debug("no %s in %s, using defaults", filename, root)
        return CompilerConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    return CompilerConfig.from_dict(raw)


__all__ = ["DEFAULT_CFG_FILE", "ConfigError", "CompilerConfig", "load_config"]
