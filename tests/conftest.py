"""Shared pytest fixtures for the Homotrack test suite.

Fixtures:
    single_d: Registry with one puncture D at (2, 2), ray straight down
    c_and_d: Registry with C at (2, 2) and D at (6, 2), rays straight down
    three_punctures: Registry with A, B, C scattered around the origin
    rng: Seeded numpy Generator for reproducible random walks
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from geometry.api import build_registry  # noqa: E402


@pytest.fixture
def single_d():
    """Registry with a single puncture D at (2, 2)."""
    return build_registry([("D", (2.0, 2.0))])


@pytest.fixture
def c_and_d():
    """Registry with C at (2, 2) and D at (6, 2)."""
    return build_registry([("C", (2.0, 2.0)), ("D", (6.0, 2.0))])


@pytest.fixture
def three_punctures():
    """Registry with three punctures, one using a custom ray direction."""
    return build_registry([
        ("A", (-1.3, 0.7)),
        ("B", (1.1, -0.4)),
        ("C", (0.2, 1.9), (1.0, 1.0)),
    ])


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(20261016)


def random_walk(rng, n_moves, start=(0.05, 0.05), scale=0.9, substeps=3):
    """
    Samples of a random walk where every move is split into `substeps`
    collinear samples (so the simplifier has something to merge).
    """
    pos = np.asarray(start, dtype=float)
    samples = [tuple(pos)]
    for _ in range(n_moves):
        step = rng.normal(scale=scale, size=2)
        for k in range(1, substeps + 1):
            samples.append(tuple(pos + step * k / substeps))
        pos = pos + step
    return samples
