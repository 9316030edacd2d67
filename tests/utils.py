#!/usr/bin/env python
# tests/utils.py: unit test utilities
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import functools

import torch

import tinytensor as tt

ENCODINGS = [tt.Encoding.FLOAT32, tt.Encoding.FLOAT16, tt.Encoding.INT8Q]
WIDTHS = {tt.Encoding.FLOAT32: 4, tt.Encoding.FLOAT16: 2, tt.Encoding.INT8Q: 1}
LENGTHS = [0, 1, 10, 1000]

ROUNDMODE_ALL = ["trunc", "even", "away"]
NARROWMODE_ALL = ["wrap", "saturate"]

logger = tt.get_logger()

assert_equal = functools.partial(torch.testing.assert_close, rtol=0, atol=0)


def f32(x: float) -> float:
    """The float32 nearest to x, as a Python float."""
    return torch.tensor(x, dtype=torch.float32).item()


def f16(x: float) -> float:
    """The float16 nearest to float32(x), widened back to a Python float."""
    return torch.tensor(x, dtype=torch.float32).half().float().item()


def quantized_reference(value: float, scale: float, zero_point: int) -> tuple[int, float]:
    """Truncating quantize then dequantize in float32, for values that fit int8."""
    q = int(torch.trunc(torch.tensor(value, dtype=torch.float32) / torch.tensor(scale, dtype=torch.float32)).item())
    q += zero_point
    assert -128 <= q <= 127, "reference only covers values that do not wrap"
    v = (torch.tensor(q - zero_point, dtype=torch.float32) * torch.tensor(scale, dtype=torch.float32)).item()
    return q, v
