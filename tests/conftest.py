"""Shared pytest fixtures.

Only the image finishing kernel needs Taichi, but it must be initialised
once before any test renders, so a session fixture does it up front on the
CPU backend.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def taichi_cpu():
    """Initialise Taichi on the CPU backend for the whole session."""
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def rng():
    """Seeded random generator so sampled tests are reproducible."""
    return np.random.default_rng(42)
