"""
Code back ends for the instruction list.
"""

from .base import BaseBackend
from .registry import UnknownBackendError, create_backend, get_backend, list_backends

__all__ = ["BaseBackend", "UnknownBackendError", "create_backend", "get_backend", "list_backends"]
