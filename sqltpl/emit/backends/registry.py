from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Dict, List, Type

from .base import BaseBackend
from ...errors import SqlTplUserError

__all__ = [
    "UnknownBackendError",
    "register_lazy",
    "get_backend",
    "create_backend",
    "list_backends",
]


class UnknownBackendError(SqlTplUserError):
    pass


@dataclass(frozen=True)
class _LazySpec:
    module: str
    class_name: str


# Lazy specs: back end name -> where its class lives
_LAZY_BY_NAME: Dict[str, _LazySpec] = {}

# Resolved classes
_CLASS_BY_NAME: Dict[str, Type[BaseBackend]] = {}


def register_lazy(*, module: str, class_name: str, name: str) -> None:
    """
    Register a back end by strings, without importing its module.
    """
    _LAZY_BY_NAME[name] = _LazySpec(module=module, class_name=class_name)


def _load_backend_from_spec(spec: _LazySpec) -> Type[BaseBackend]:
    # Both relative (".golang") and absolute module names are supported.
    mod = importlib.import_module(spec.module, package=__package__)
    cls = getattr(mod, spec.class_name, None)
    if cls is None:
        raise RuntimeError(f"Backend class '{spec.class_name}' not found in {spec.module}")
    if not issubclass(cls, BaseBackend):
        raise TypeError(f"{spec.module}.{spec.class_name} is not a subclass of BaseBackend")
    _CLASS_BY_NAME[cls.name] = cls
    return cls


def get_backend(name: str) -> Type[BaseBackend]:
    """
    Back end CLASS by name. Nothing is instantiated.
    """
    cls = _CLASS_BY_NAME.get(name)
    if cls:
        return cls
    spec = _LAZY_BY_NAME.get(name)
    if spec:
        return _load_backend_from_spec(spec)
    raise UnknownBackendError(
        f"Unknown backend '{name}'. Available: {', '.join(list_backends())}"
    )


def create_backend(name: str, *, buffer: str = "sb", params: str = "params") -> BaseBackend:
    return get_backend(name)(buffer=buffer, params=params)


def list_backends() -> List[str]:
    return sorted(set(_LAZY_BY_NAME) | set(_CLASS_BY_NAME))


register_lazy(module=".golang", class_name="GoBackend", name="go")
register_lazy(module=".python", class_name="PythonBackend", name="python")
