#!/usr/bin/env python
# tests/conftest.py: shared fixtures
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import pytest

import tinytensor as tt


@pytest.fixture(autouse=True)
def default_modes():
    """Every test starts and ends with the default modes."""
    tt.Modes.reset_modes()
    yield
    tt.Modes.reset_modes()
