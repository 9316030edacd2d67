#!/usr/bin/env python
# tinytensor/common.py: encodings, enums, modes and errors
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

from enum import Enum
import logging
from typing import ClassVar

import torch

logger = logging.getLogger("tinytensor")  # the package logger configured by utils.get_logger

INT8_MIN, INT8_MAX = -128, 127


class Encoding(Enum):
    """Physical element encodings, values match the original integer codes."""

    FLOAT32 = 0  # IEEE single precision, 4 bytes
    FLOAT16 = 1  # IEEE half precision, 2 bytes
    INT8Q = 2  # signed 8-bit integer, interpreted through scale and zero point

    @property
    def torch_dtype(self) -> torch.dtype:
        return ENCODING_DTYPES[self]

    @property
    def width(self) -> int:
        """Bytes per stored element."""
        return self.torch_dtype.itemsize

    @property
    def is_quantized(self) -> bool:
        return self == Encoding.INT8Q


ENCODING_DTYPES = {Encoding.FLOAT32: torch.float32, Encoding.FLOAT16: torch.float16, Encoding.INT8Q: torch.int8}
ENCODING_ALIASES = dict(f32="FLOAT32", fp32="FLOAT32", f16="FLOAT16", fp16="FLOAT16", half="FLOAT16", i8="INT8Q", int8="INT8Q")


class RoundMode(Enum):
    """Round modes for int8 quantization."""

    TRUNC = 0  # toward zero, matches a raw float to int cast
    EVEN = 1  # nearest, ties to even
    AWAY = 2  # nearest, ties away from zero


class NarrowMode(Enum):
    """What happens to a quantized value outside the int8 range."""

    WRAP = 0  # two's complement wrap, as a narrowing integer cast does
    SATURATE = 1  # clamp to [-128, 127]


class BoundsMode(Enum):
    """Out of bounds element access policy."""

    SILENT = 0  # set is a no-op, get returns 0.0
    STRICT = 1  # raise IndexError


class AllocationError(MemoryError):
    """The backing store for a tensor could not be obtained."""


class DestroyedTensorError(RuntimeError):
    """An operation was attempted on a tensor after destroy()."""


def get_enum(etype: Enum, s: str, silent: bool = False) -> Enum | None:
    """Create the enum from a string matching the name."""
    if isinstance(s, etype):
        return s
    if isinstance(s, str):
        if s.upper() in dir(etype):
            return etype[s.upper()]
        if not silent:
            raise ValueError(f"'{s}' is not a valid {etype.__name__} name.")
    return None


def get_encoding(code: str | int | Encoding) -> Encoding:
    """Resolve an encoding from an enum member, a name or alias, or the integer code."""
    if isinstance(code, str):
        code = ENCODING_ALIASES.get(code.lower(), code)
        return get_enum(Encoding, code)
    if isinstance(code, int) and not isinstance(code, bool):
        if code not in [e.value for e in Encoding]:
            raise ValueError(f"'{code}' is not a valid Encoding code.")
        return Encoding(code)
    if isinstance(code, Encoding):
        return code
    raise ValueError(f"'{code}' type {type(code)} is not a valid type for an Encoding.")


class Modes:
    """Static class to manage modes used in element conversion."""

    round: ClassVar[RoundMode] = RoundMode.TRUNC
    narrow: ClassVar[NarrowMode] = NarrowMode.WRAP
    bounds: ClassVar[BoundsMode] = BoundsMode.SILENT
    saved_round: ClassVar[RoundMode] = RoundMode.TRUNC
    saved_narrow: ClassVar[NarrowMode] = NarrowMode.WRAP
    saved_bounds: ClassVar[BoundsMode] = BoundsMode.SILENT

    @classmethod
    def restore_modes(cls):
        """Restore the saved modes."""
        cls.round, cls.narrow, cls.bounds = cls.saved_round, cls.saved_narrow, cls.saved_bounds

    @classmethod
    def reset_modes(cls):
        """Back to the defaults, which reproduce the original conversions."""
        cls.round, cls.narrow, cls.bounds = RoundMode.TRUNC, NarrowMode.WRAP, BoundsMode.SILENT
        cls.saved_round, cls.saved_narrow, cls.saved_bounds = cls.round, cls.narrow, cls.bounds

    @classmethod
    def set_modes(
        cls, roundmode: str | RoundMode = None, narrowmode: str | NarrowMode = None, boundsmode: str | BoundsMode = None
    ) -> dict:
        """Check and set the rounding, narrowing and bounds modes."""
        roundmode, narrowmode, boundsmode = (
            get_enum(RoundMode, roundmode),
            get_enum(NarrowMode, narrowmode),
            get_enum(BoundsMode, boundsmode),
        )
        cls.saved_round, cls.saved_narrow, cls.saved_bounds = cls.round, cls.narrow, cls.bounds
        if roundmode is not None:
            cls.round = roundmode
        if narrowmode is not None:
            cls.narrow = narrowmode
        if boundsmode is not None:
            cls.bounds = boundsmode
        logger.debug(f"modes: round={cls.round.name} narrow={cls.narrow.name} bounds={cls.bounds.name}")
        return dict(roundmode=cls.round, narrowmode=cls.narrow, boundsmode=cls.bounds)
