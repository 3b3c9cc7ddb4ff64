"""
Shared statistics helpers for energy-based detection.
"""

from typing import Sequence

import numpy as np


def rms(samples: np.ndarray) -> float:
    """
    Root-mean-square amplitude of a chunk.

    Multi-channel chunks are flattened first, so the channel count only
    changes how many samples enter the mean.

    Args:
        samples: Chunk samples, any shape

    Returns:
        RMS energy (0.0 for an empty chunk)
    """
    flat = np.asarray(samples, dtype=np.float64).ravel()
    if flat.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(flat ** 2)))


def percentile(values: Sequence[float], fraction: float) -> float:
    """
    Rank-based percentile using the lower rank on ties.

    Args:
        values: Energy sequence
        fraction: Percentile as a fraction in [0, 1] (0.2 is the 20th percentile)

    Returns:
        The selected element of the sorted sequence (0.0 for an empty sequence)
    """
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"fraction must be within [0, 1], got {fraction}")

    data = np.asarray(values, dtype=np.float64)
    if data.size == 0:
        return 0.0
    return float(np.percentile(data, fraction * 100.0, method="lower"))
