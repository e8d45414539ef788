"""Centralized seed management for reproducible block model fits.

Every (K, restart) run of the estimator draws from its own generator derived
from the master seed, so results do not depend on which worker executes a
run or in which order runs complete.
"""

import random

import numpy as np


def set_seed(seed: int) -> None:
    """Seed the Python and NumPy legacy global RNGs.

    run_pipeline calls this with the resolved master seed; the estimator
    itself draws only from derive_rng streams.
    """
    random.seed(seed)
    np.random.seed(seed % 2**32)


def resolve_seed(seed: int | None) -> int:
    """Return seed unchanged, or draw a fresh master seed when it is None.

    Recording the resolved value makes an unseeded run repeatable afterwards.
    """
    if seed is not None:
        return seed
    return int(np.random.SeedSequence().generate_state(1, dtype=np.uint32)[0])


def derive_rng(seed: int, *keys: int) -> np.random.Generator:
    """Independent generator for a (seed, *keys) stream.

    Usage::

        rng = derive_rng(config.sbm.random_seed, K, restart)
    """
    return np.random.default_rng(np.random.SeedSequence([seed, *keys]))
