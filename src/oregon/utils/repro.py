from __future__ import annotations

import os
import random

import numpy as np


def seed_everything(seed: int) -> random.Random:
    """Seed ``random``, numpy and the hash seed; return an engine RNG for the same seed."""
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
    return random.Random(seed)


def spawn_seeds(seed: int, count: int) -> list:
    """Independent per-game seeds derived from one master seed."""
    generator = np.random.default_rng(seed)
    return [int(value) for value in generator.integers(0, 2**31 - 1, size=count)]
