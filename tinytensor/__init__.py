#!/usr/bin/env python
# tinytensor/__init__.py: tinytensor package
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

from .codec import TorchCodec
from .common import (
    AllocationError,
    BoundsMode,
    DestroyedTensorError,
    Encoding,
    Modes,
    NarrowMode,
    RoundMode,
    get_encoding,
    get_enum,
)
from .tensor import Tensor, create, destroy
from .utils import get_logger, getenv, saturate_int8, to_float, to_string, wrap_int8

__version__ = "0.1.0"

float32 = Encoding.FLOAT32
float16 = Encoding.FLOAT16
int8q = Encoding.INT8Q


def initialize(
    roundmode: str | RoundMode = None,
    narrowmode: str | NarrowMode = None,
    boundsmode: str | BoundsMode = None,
    logname: str = None,
    logfile: str = None,
) -> dict:
    """Set conversion and bounds modes, falling back to TT_* environment variables.  Optional."""
    if logname or logfile:
        get_logger(logname or "tinytensor", True, logfile)
    if roundmode is None:
        roundmode = getenv("roundmode", None, RoundMode)
    if narrowmode is None:
        narrowmode = getenv("narrowmode", None, NarrowMode)
    if boundsmode is None:
        boundsmode = getenv("boundsmode", None, BoundsMode)
    return Modes.set_modes(roundmode, narrowmode, boundsmode)
