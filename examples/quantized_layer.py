#!/usr/bin/env python
# examples/quantized_layer.py: store a layer's weights as int8 and read them back as float32
# SPDX-License-Identifier: MIT

"""TinyTensor: Multi-precision flat tensors with float32 element access."""

import tinytensor as tt

logger = tt.get_logger()


def show(t: tt.Tensor, index: int, value: float):
    t.set(index, value)
    logger.info(f"{t.encoding.name:8s} wrote {value:8.4f}  stored {t.raw(index)!r:>8}  read {t.get(index):8.4f}")


if __name__ == "__main__":
    tt.initialize()

    # a quantized layer saves three quarters of the memory of float32
    with tt.create(10, tt.int8q) as layer:
        layer.scale = 0.05
        layer.zero_point = 0
        show(layer, 0, 12.5)  # 250 does not fit in int8 and wraps to -6
        show(layer, 1, 3.14159)
        logger.info(f"{layer!r}: {layer.nbytes} bytes")

    with tt.create(10, tt.float16) as half:
        show(half, 0, 12.5)
        show(half, 1, 3.14159)
        logger.info(f"{half!r}: {half.nbytes} bytes")

    tt.initialize(narrowmode="saturate")
    with tt.create(10, tt.int8q) as layer:
        layer.scale = 0.05
        show(layer, 0, 12.5)
