"""Normalization utilities for classifier input."""

import numpy as np

# Matches the TensorFlow backend epsilon the classifiers were trained against
EPSILON = 1e-7


def normalize(x, epsilon=EPSILON):
    """Standardize a tensor to zero mean and unit variance over all elements.

    Returns a new float32 array; the input is left untouched. A constant input
    maps to all zeros.
    """
    x = np.asarray(x, dtype=np.float32)
    mean = np.mean(x)
    variance = np.var(x)
    return ((x - mean) / (np.sqrt(variance) + epsilon)).astype(np.float32)
