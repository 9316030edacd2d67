#!/usr/bin/env python
# tinytensor/utils.py: utility functions for tinytensor package
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

from enum import Enum
import inspect
import logging
import os

import torch

from .common import INT8_MAX, INT8_MIN

logger: logging.Logger = None


def get_logger(name: str = "tinytensor", replace: bool = False, logfile: str = None) -> logging.Logger:
    """Set up logging."""
    global logger
    if logger is not None and not replace:
        return logger
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s %(message)s", datefmt="%m/%d/%Y %I:%M:%S %p")
    ch = logging.StreamHandler()
    ch.setFormatter(formatter)
    ch.setLevel(logging.INFO)
    logger.addHandler(ch)
    if logfile:
        fh = logging.FileHandler((logfile + ".log").replace(".log.log", ".log"), mode="w")
        fh.setLevel(logging.INFO)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    logger.propagate = False
    return logger


# fmt: off
def wrap_int8(n: int) -> int: return (n - INT8_MIN) % 256 + INT8_MIN
def saturate_int8(n: int) -> int: return min(max(n, INT8_MIN), INT8_MAX)
def in_int8_range(n: int) -> bool: return INT8_MIN <= n <= INT8_MAX
# fmt: on


def convert_enum(enum_type, enum_value, convert_type=None) -> str | int | None:
    """Convert a string, int, or enum instance to a string, int, or enum instance."""
    # enum_type is a class derived from Enum (if not, return None)
    # convert_type is str, int, or None
    if inspect.isclass(enum_type) and issubclass(enum_type, Enum):
        if isinstance(enum_value, str):
            enum_value = enum_value.upper()
            if enum_value not in dir(enum_type):
                raise ValueError(f"'{enum_value}' is not a valid {enum_type.__name__} name.")
            enum_instance = enum_type[enum_value]
        elif isinstance(enum_value, enum_type):
            enum_instance = enum_value
        elif isinstance(enum_value, int):
            if enum_value >= len(enum_type):
                raise ValueError(f"'{enum_value}' is not a valid {enum_type.__name__} value.")
            enum_instance = enum_type(enum_value)
        else:
            raise ValueError(f"'{enum_value}' type {type(enum_value)} is not a valid type for enum_value.")
        if convert_type is str:
            return enum_instance.name
        if convert_type is int:
            return enum_instance.value
        return enum_instance
    return None


def getenv(x: str, dflt: str = "", dtype=str, prefix: str = "TT"):
    """Get an environment variable with optional default and type conversion."""
    # for tinytensor modes the prefix is "TT_", e.g. TT_ROUNDMODE=even
    x = x.upper()
    if prefix and not prefix.endswith("_"):
        prefix += "_"
    prefix = prefix.upper()
    if prefix and not x.startswith(prefix):
        x = f"{prefix}{x}"
    setting = os.getenv(x, dflt)
    if setting is None or setting.lower() == "none":
        return None
    if dtype is bool:
        return setting.lower() in ("1", "true", "yes")
    if dtype is int:
        try:
            if setting.startswith("0x"):
                return int(setting, 16)
            return int(setting)
        except ValueError as err:
            raise ValueError(f"Invalid integer value for {x}: {setting}") from err
    if dtype is float:
        try:
            return float(setting)
        except ValueError as err:
            raise ValueError(f"Invalid float value for {x}: {setting}") from err
    if inspect.isclass(dtype) and issubclass(dtype, Enum):
        if setting.isdigit():
            return convert_enum(dtype, int(setting))
        return convert_enum(dtype, setting)
    return setting


def to_string(val, spaced=True, dtype=torch.float32):
    """Debug util for visualizing float values."""
    if dtype == torch.float32:
        idtype, space = torch.int32, 8
    elif dtype == torch.float16:
        idtype, space = torch.int16, 5
    else:
        raise ValueError(f"Unsupported dtype: {dtype}. Supported types are torch.float32 and torch.float16.")
    size = dtype.itemsize * 8
    bits = torch.tensor([val], dtype=dtype).view(idtype).item() & ((1 << size) - 1)
    s = f"{bits:0{size}b}"
    return f"{s[0]} {s[1:space+1]} {s[space+1:]}" if spaced else s


def to_float(s: str, dtype=torch.float32) -> float:
    """Convert a binary string to a float."""
    s = s.replace(" ", "").strip()
    size = dtype.itemsize * 8
    if len(s) != size:
        raise ValueError(f"Input string must be {size} bits long for dtype {dtype}")
    if dtype == torch.float32:
        ebits, mbits, bias = 8, 23, 127
    elif dtype == torch.float16:
        ebits, mbits, bias = 5, 10, 15
    else:
        raise ValueError(f"Unsupported dtype: {dtype}. Supported types are torch.float32 and torch.float16.")
    sign_bit = int(s[0], 2)
    exponent = int(s[1 : 1 + ebits], 2)
    mantissa = int(s[1 + ebits :], 2)
    if exponent == (1 << ebits) - 1:  # all exponent bits set
        if mantissa != 0:
            return float("NaN")
        return float("Inf") if sign_bit == 0 else float("-Inf")
    elif exponent == 0:  # subnormal
        if mantissa == 0:
            return -0.0 if sign_bit else 0.0
        return (-1) ** sign_bit * 2 ** (1 - bias) * (mantissa / (1 << mbits))
    return (-1) ** sign_bit * 2 ** (exponent - bias) * (1 + mantissa / (1 << mbits))
