import os

import pytest

from meshkit.mesh import Mesh


@pytest.fixture(scope="session")
def rng_seed():
    return int(os.environ.get("MESHKIT_TEST_SEED", "1234"))


@pytest.fixture
def triangle():
    return Mesh(vertices=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0)], triangles=[0, 1, 2])


@pytest.fixture
def full_quad():
    """Two triangles carrying normals and UV0."""
    return Mesh(
        vertices=[(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.5), (0.0, 1.0, 0.25)],
        triangles=[0, 2, 1, 0, 3, 2],
        normals=[(0.0, 0.0, 1.0)] * 4,
        uvs0=[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)],
        name="quad",
    )
