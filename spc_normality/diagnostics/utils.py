"""
Constants and small array helpers shared by the diagnostic computations.
"""

import numpy as np

# Scott's rule: h = SCOTT_FACTOR * sigma * n ** (-1/3)
SCOTT_FACTOR = 3.5

# Bin width used when every observation is equal and Scott's rule gives zero
DEGENERATE_BIN_WIDTH = 1.0

# Fitted normal curve drawn over the histogram
OVERLAY_POINTS = 1000
OVERLAY_SIGMAS = 3.0

# Hazen plotting positions (i - 0.5) / n for the Q-Q plot
PLOTTING_POSITION_OFFSET = 0.5

# Probability pair anchoring the Q-Q reference line
QQ_LINE_PROBS = (0.25, 0.75)


def readonly(values, dtype=float) -> np.ndarray:
    """Return a read-only copy of ``values`` as a numpy array."""
    arr = np.array(values, dtype=dtype, copy=True)
    arr.flags.writeable = False
    return arr


def stable_sort(x: np.ndarray) -> np.ndarray:
    """Return a sorted copy using a stable O(n log n) comparison sort."""
    return np.sort(x, kind="mergesort")
