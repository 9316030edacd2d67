#!/usr/bin/env python
# tests/__init__.py: unit test package
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""
