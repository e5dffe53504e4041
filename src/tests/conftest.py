"""
Shared Test Fixtures
====================

Automatically loaded by pytest for every suite under tests/.
The import path (src/) comes from [tool.pytest.ini_options] in
pyproject.toml, so the package need not be installed.
"""

import logging

import numpy as np
import pytest

from sphere_nofold.builders import build_octahedron
from sphere_nofold.spec.constants import DEFAULT_SEED


@pytest.fixture
def rng():
    """Seeded generator, one per test."""
    return np.random.default_rng(DEFAULT_SEED)


@pytest.fixture
def octahedron():
    """Unit octahedron: vertices on the 6 poles, 8 triangles of volume 1/6."""
    return build_octahedron(1.0)


@pytest.fixture
def package_logger():
    """The 'sphere_nofold' logger, with handlers and level restored afterwards."""
    logger = logging.getLogger("sphere_nofold")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
