"""Sensor fusion activity predictor package.

Samples from independent sensor channels arrive at irregular times. This
package keeps a bounded rolling store of them, fuses the channels on an
exact-time axis, windows the fused series, derives a canonically ordered
feature vector and classifies it with a pre-trained scoring function.
"""

__all__ = [
    "config",
    "core",
    "data",
    "errors",
    "utils",
]
