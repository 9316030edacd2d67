#!/usr/bin/env python
# examples/__init__.py: package for examples
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""
