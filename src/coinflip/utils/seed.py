"""
Random seed management for reproducibility.

All randomness flows through explicit numpy Generators, so a seed only
matters where a Generator is built from it.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create an independent numpy Generator (fresh entropy if seed is None)."""
    return np.random.default_rng(seed)
