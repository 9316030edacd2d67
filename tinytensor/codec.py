#!/usr/bin/env python
# tinytensor/codec.py: element conversions between float32 and the stored encodings
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import math

import torch

from .common import INT8_MAX, INT8_MIN, Encoding, Modes, NarrowMode, RoundMode
from .utils import get_logger, in_int8_range, saturate_int8, wrap_int8

logger = get_logger()


class TorchCodec:
    """Static class with scalar conversions implemented with torch.

    All arithmetic is done on 0-d float32 tensors so that results match float32
    hardware arithmetic rather than Python's double precision.
    """

    @staticmethod
    def as_float32(x) -> torch.Tensor:
        return torch.as_tensor(x, dtype=torch.float32)

    @staticmethod
    def round(x: torch.Tensor) -> torch.Tensor:
        if Modes.round == RoundMode.EVEN:
            return torch.round(x)
        if Modes.round == RoundMode.AWAY:
            y = x.double()
            return (y.sign() * torch.floor(y.abs() + 0.5)).to(x.dtype)
        return torch.trunc(x)

    @staticmethod
    def narrow_int8(q: int) -> int:
        """Fit an integer into int8 using the active narrow mode."""
        if in_int8_range(q):
            return q
        narrowed = saturate_int8(q) if Modes.narrow == NarrowMode.SATURATE else wrap_int8(q)
        logger.debug(f"quantized value {q} outside int8 range, {Modes.narrow.name.lower()} to {narrowed}")
        return narrowed

    @staticmethod
    def quantize(value: float, scale: float | torch.Tensor, zero_point: int) -> int:
        """q = round(value / scale) + zero_point, narrowed to int8."""
        x = TorchCodec.round(TorchCodec.as_float32(value) / TorchCodec.as_float32(scale)).item()
        if math.isnan(x):
            return TorchCodec.narrow_int8(zero_point)
        if math.isinf(x):
            # no integer to wrap, so infinities always saturate
            return INT8_MAX if x > 0 else INT8_MIN
        return TorchCodec.narrow_int8(int(x) + zero_point)

    @staticmethod
    def dequantize(q: int, scale: float | torch.Tensor, zero_point: int) -> float:
        """(q - zero_point) * scale in float32."""
        return (TorchCodec.as_float32(q - zero_point) * TorchCodec.as_float32(scale)).item()

    @staticmethod
    def narrow_half(value: float) -> torch.Tensor:
        """float32 to float16, round to nearest even, overflow to inf."""
        return TorchCodec.as_float32(value).to(torch.float16)

    @staticmethod
    def widen_half(element: torch.Tensor) -> float:
        """float16 to float32, always exact."""
        return element.to(torch.float32).item()

    @staticmethod
    def encode(value: float, encoding: Encoding, scale: float | torch.Tensor = 1.0, zero_point: int = 0):
        """Convert a logical float32 value to the stored element for the encoding."""
        if encoding == Encoding.FLOAT32:
            return TorchCodec.as_float32(value)
        if encoding == Encoding.FLOAT16:
            return TorchCodec.narrow_half(value)
        if encoding == Encoding.INT8Q:
            return TorchCodec.quantize(value, scale, zero_point)
        raise NotImplementedError(f"TorchCodec: encoding {encoding} is not supported.")

    @staticmethod
    def decode(element: torch.Tensor, encoding: Encoding, scale: float | torch.Tensor = 1.0, zero_point: int = 0) -> float:
        """Convert a stored element back to its logical float32 value."""
        if encoding == Encoding.FLOAT32:
            return element.item()
        if encoding == Encoding.FLOAT16:
            return TorchCodec.widen_half(element)
        if encoding == Encoding.INT8Q:
            return TorchCodec.dequantize(int(element.item()), scale, zero_point)
        raise NotImplementedError(f"TorchCodec: encoding {encoding} is not supported.")
