"""
Emission of template ASTs: instruction list and its back ends.
"""

from .emitter import DEFAULT_LOOP_MULTIPLIER, Emitter, UnsupportedWrapperError, emit_program, estimate_capacity
from .ir import Instruction, dump

__all__ = [
    "DEFAULT_LOOP_MULTIPLIER",
    "Emitter",
    "UnsupportedWrapperError",
    "emit_program",
    "estimate_capacity",
    "Instruction",
    "dump",
]
