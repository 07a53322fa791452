import numpy as np


def is_finite_number(value) -> bool:
    """True for real, finite ints and floats (numpy scalars included); False for bools, NaN, inf and non-numbers."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    if not isinstance(value, (float, np.floating)):
        return False
    return bool(np.isfinite(value))
