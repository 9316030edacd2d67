#!/usr/bin/env python
# tests/test_utils.py: test utility functions
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import logging

import pytest
import torch

import tinytensor as tt
import tinytensor.codec
import tinytensor.common
import tinytensor.tensor
from tinytensor.utils import convert_enum, in_int8_range


@pytest.mark.parametrize("n, wrapped, saturated", [(250, -6, 127), (-6, -6, -6), (128, -128, 127), (-129, 127, -128), (511, -1, 127), (-1000, 24, -128)])
def test_int8_narrowing(n: int, wrapped: int, saturated: int):
    assert tt.wrap_int8(n) == wrapped
    assert tt.saturate_int8(n) == saturated
    assert in_int8_range(wrapped) and in_int8_range(saturated)


@pytest.mark.parametrize(
    "val, dtype, s",
    [
        (1.0, torch.float16, "0 01111 0000000000"),
        (-2.0, torch.float16, "1 10000 0000000000"),
        (1.0, torch.float32, "0 01111111 00000000000000000000000"),
        (-0.0, torch.float32, "1 00000000 00000000000000000000000"),
    ],
)
def test_to_string_to_float(val: float, dtype: torch.dtype, s: str):
    assert tt.to_string(val, dtype=dtype) == s
    assert tt.to_string(val, spaced=False, dtype=dtype) == s.replace(" ", "")
    assert tt.to_float(s, dtype=dtype) == val


def test_to_float_specials():
    assert tt.to_float("0 11111 0000000000", torch.float16) == float("inf")
    assert tt.to_float("1 11111 0000000000", torch.float16) == float("-inf")
    assert tt.to_float("0 00000 0000000001", torch.float16) == 2.0**-24
    nan = tt.to_float("0 11111 1000000000", torch.float16)
    assert nan != nan
    with pytest.raises(ValueError):
        tt.to_float("0101", torch.float16)
    with pytest.raises(ValueError):
        tt.to_string(1.0, dtype=torch.bfloat16)


def test_getenv(monkeypatch):
    monkeypatch.setenv("TT_ROUNDMODE", "even")
    monkeypatch.setenv("TT_SOMEINT", "0x10")
    monkeypatch.setenv("TT_SOMEFLAG", "yes")
    monkeypatch.setenv("TT_SOMEFLOAT", "-0.25")
    monkeypatch.setenv("TT_NARROWMODE", "1")
    monkeypatch.delenv("TT_BOUNDSMODE", raising=False)
    assert tt.getenv("roundmode", None, tt.RoundMode) == tt.RoundMode.EVEN
    assert tt.getenv("narrowmode", None, tt.NarrowMode) == tt.NarrowMode.SATURATE
    assert tt.getenv("boundsmode", None, tt.BoundsMode) is None
    assert tt.getenv("someint", "0", int) == 16
    assert tt.getenv("someflag", "", bool) is True
    assert tt.getenv("somefloat", "", float) == -0.25
    assert tt.getenv("TT_SOMEFLOAT") == "-0.25"


def test_getenv_bad_values(monkeypatch):
    monkeypatch.setenv("TT_SOMEINT", "twelve")
    monkeypatch.setenv("TT_ROUNDMODE", "sideways")
    with pytest.raises(ValueError):
        tt.getenv("someint", "0", int)
    with pytest.raises(ValueError):
        tt.getenv("roundmode", None, tt.RoundMode)


def test_convert_enum():
    assert convert_enum(tt.BoundsMode, "strict") == tt.BoundsMode.STRICT
    assert convert_enum(tt.BoundsMode, 1, str) == "STRICT"
    assert convert_enum(tt.BoundsMode, tt.BoundsMode.SILENT, int) == 0
    assert convert_enum(int, 1) is None
    with pytest.raises(ValueError):
        convert_enum(tt.BoundsMode, 5)


def test_get_logger(tmp_path):
    logger = tt.get_logger()
    assert logger is tt.get_logger()
    assert not logger.propagate
    logfile = str(tmp_path / "tinytensor_test")
    replaced = tt.get_logger("tinytensor_test", True, logfile)
    assert replaced.name == "tinytensor_test"
    assert any(isinstance(h, logging.FileHandler) for h in replaced.handlers)
    assert (tmp_path / "tinytensor_test.log").exists()
    tt.get_logger("tinytensor", True)


def test_module_loggers_share_package_logger():
    assert tinytensor.common.logger.name == "tinytensor"
    assert tinytensor.codec.logger is tinytensor.tensor.logger
    assert tinytensor.codec.logger.name == "tinytensor"
