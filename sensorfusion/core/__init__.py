"""Core primitives: sample store, exact-time merge, windowing, interpolation,
feature extraction, scaling, classification and the Predictor that ties them
together.
"""
