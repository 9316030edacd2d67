#!/usr/bin/env python
# tinytensor/tensor.py: the multi-precision tensor container
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import numbers

import torch

from .codec import TorchCodec
from .common import INT8_MAX, INT8_MIN, AllocationError, BoundsMode, DestroyedTensorError, Encoding, Modes, get_encoding
from .utils import get_logger

logger = get_logger()


class Tensor:
    """A flat tensor stored in one encoding and read and written as float32.

    The tensor exclusively owns a 1-D torch buffer of ``length`` elements of the
    encoding's storage dtype.  ``scale`` and ``zero_point`` are only used by the
    INT8Q encoding.  Out of bounds access follows ``Modes.bounds``.  After
    ``destroy()`` (or leaving a ``with`` block) the buffer is released and every
    further operation raises DestroyedTensorError.
    """

    def __init__(self, length: int, encoding: str | int | Encoding):
        if not isinstance(length, int) or isinstance(length, bool) or length < 0:
            raise ValueError(f"Tensor: length must be a non-negative integer, got {length!r}.")
        self._encoding = get_encoding(encoding)
        self._length = length
        try:
            self._buffer = torch.zeros(length, dtype=self._encoding.torch_dtype)
        except (RuntimeError, MemoryError) as err:
            logger.error(f"Tensor: could not allocate {length * self._encoding.width} bytes for {self._encoding.name}")
            raise AllocationError(f"Tensor: could not allocate {length} {self._encoding.name} elements") from err
        self._scale = torch.tensor(1.0, dtype=torch.float32)
        self._zero_point = 0
        logger.debug(f"created {self!r}")

    # fmt: off
    @property
    def encoding(self) -> Encoding: return self._encoding
    @property
    def length(self) -> int: return self._length
    @property
    def width(self) -> int: return self._encoding.width
    @property
    def is_quantized(self) -> bool: return self._encoding.is_quantized
    @property
    def is_destroyed(self) -> bool: return self._buffer is None
    # fmt: on

    @property
    def nbytes(self) -> int:
        """Size of the backing store in bytes."""
        self._check_live()
        return self._buffer.numel() * self._buffer.element_size()

    @property
    def buffer(self) -> torch.Tensor:
        """A read-only copy of the stored elements."""
        self._check_live()
        return self._buffer.clone()

    @property
    def scale(self) -> float:
        return self._scale.item()

    @scale.setter
    def scale(self, value: float):
        self._check_live()
        self._scale = torch.tensor(float(value), dtype=torch.float32)

    @property
    def zero_point(self) -> int:
        return self._zero_point

    @zero_point.setter
    def zero_point(self, value: int):
        self._check_live()
        integral = isinstance(value, numbers.Integral) or isinstance(value, float) and value.is_integer()
        if isinstance(value, bool) or not integral or not INT8_MIN <= value <= INT8_MAX:
            raise ValueError(f"Tensor: zero_point must be an integer in [{INT8_MIN}, {INT8_MAX}], got {value!r}.")
        self._zero_point = int(value)

    def _check_live(self):
        if self._buffer is None:
            raise DestroyedTensorError("Tensor: operation on a destroyed tensor.")

    def _in_bounds(self, index: int) -> bool:
        """Check an index, raising in STRICT mode."""
        self._check_live()
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"Tensor: index must be an integer, got {type(index).__name__}.")
        if 0 <= index < self._length:
            return True
        if Modes.bounds == BoundsMode.STRICT:
            raise IndexError(f"Tensor: index {index} out of range for length {self._length}.")
        return False

    def set(self, index: int, value: float) -> None:
        """Encode a float32 value into the element at index."""
        if not self._in_bounds(index):
            return
        self._buffer[index] = TorchCodec.encode(value, self._encoding, self._scale, self._zero_point)

    def get(self, index: int) -> float:
        """Decode the element at index to its float32 value."""
        if not self._in_bounds(index):
            return 0.0
        return TorchCodec.decode(self._buffer[index], self._encoding, self._scale, self._zero_point)

    def raw(self, index: int) -> int | float:
        """The stored element: float32 value, float16 bit pattern, or int8 integer."""
        if not self._in_bounds(index):
            return 0
        if self._encoding == Encoding.FLOAT16:
            return self._buffer[index : index + 1].view(torch.int16).item() & 0xFFFF
        return self._buffer[index].item()

    def tolist(self) -> list[float]:
        self._check_live()
        return [self.get(i) for i in range(self._length)]

    def destroy(self) -> None:
        """Release the buffer.  Safe to call more than once."""
        if self._buffer is None:
            return
        self._buffer = None
        logger.debug(f"destroyed tensor of {self._length} {self._encoding.name} elements")

    def __len__(self):
        return self._length

    def __getitem__(self, index: int) -> float:
        return self.get(index)

    def __setitem__(self, index: int, value: float):
        self.set(index, value)

    def __enter__(self):
        self._check_live()
        return self

    def __exit__(self, *exc):
        self.destroy()
        return False

    def __repr__(self):
        s = f"Tensor(length={self._length}, encoding={self._encoding.name}"
        if self.is_quantized:
            s += f", scale={self.scale}, zero_point={self._zero_point}"
        if self.is_destroyed:
            s += ", destroyed"
        return s + ")"


def create(length: int, encoding: str | int | Encoding) -> Tensor:
    """Create a zero-filled tensor, raising AllocationError if storage cannot be obtained."""
    return Tensor(length, encoding)


def destroy(tensor: Tensor) -> None:
    """Release the tensor's buffer."""
    tensor.destroy()
