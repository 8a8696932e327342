from __future__ import annotations
import pytest

import numpy as np
from onering.mesh import Mesh


@pytest.fixture
def simple_triangle_mesh():
    """
    Provides a Mesh instance with a single triangle:
        v0 = [0, 0, 0]
        v1 = [1, 0, 0]
        v2 = [0, 1, 0]
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # v0
            [1.0, 0.0, 0.0],  # v1
            [0.0, 1.0, 0.0],  # v2
        ]
    )
    faces = np.array([[0, 1, 2]])  # One triangle
    return Mesh(verts=verts, faces=faces)


@pytest.fixture
def two_triangle_square():
    """
    Unit square split into two triangles along the diagonal (0-2):
      v3 (0,1) ---- v2 (1,1)
        |  \\           |
        |    \\         |
        |      \\       |
      v0 (0,0) ---- v1 (1,0)
    Faces: [0,1,2] and [0,2,3]
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # v0
            [1.0, 0.0, 0.0],  # v1
            [1.0, 1.0, 0.0],  # v2
            [0.0, 1.0, 0.0],  # v3
        ],
        dtype=float,
    )
    faces = [[0, 1, 2], [0, 2, 3]]
    return Mesh(verts=verts, faces=faces)


@pytest.fixture
def tetra_surface():
    """
    Closed tetrahedron surface, faces not consistently oriented.
    Vertices: (0,0,0),(1,0,0),(0,1,0),(0,0,1)
    Faces: (0,1,2),(0,1,3),(1,2,3),(0,2,3)
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # 0
            [1.0, 0.0, 0.0],  # 1
            [0.0, 1.0, 0.0],  # 2
            [0.0, 0.0, 1.0],  # 3
        ],
        dtype=float,
    )
    faces = [[0, 1, 2], [0, 1, 3], [1, 2, 3], [0, 2, 3]]
    return Mesh(verts=verts, faces=faces)


@pytest.fixture
def octahedron():
    """
    Unit octahedron with outward counter-clockwise faces.
    0:+x 1:-x 2:+y 3:-y 4:+z 5:-z
    """
    verts = np.array(
        [
            [1.0, 0.0, 0.0],
            [-1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, -1.0, 0.0],
            [0.0, 0.0, 1.0],
            [0.0, 0.0, -1.0],
        ],
        dtype=float,
    )
    faces = [
        [0, 2, 4],
        [2, 1, 4],
        [1, 3, 4],
        [3, 0, 4],
        [2, 0, 5],
        [1, 2, 5],
        [3, 1, 5],
        [0, 3, 5],
    ]
    return Mesh(verts=verts, faces=faces)


@pytest.fixture
def quad_grid():
    """
    3x3 points, 2x2 unit quads in the z=0 plane (open boundary):
      6 --- 7 --- 8
      |  q2 |  q3 |
      3 --- 4 --- 5
      |  q0 |  q1 |
      0 --- 1 --- 2
    """
    verts = np.array(
        [[float(i), float(j), 0.0] for j in range(3) for i in range(3)], dtype=float
    )
    faces = [[0, 1, 4, 3], [1, 2, 5, 4], [3, 4, 7, 6], [4, 5, 8, 7]]
    return Mesh(verts=verts, faces=faces)


@pytest.fixture
def bowtie():
    """
    Two triangles touching only at point 0 (non-manifold vertex):
      [0, 1, 2] and [0, 3, 4]
    """
    verts = np.array(
        [
            [0.0, 0.0, 0.0],  # 0
            [1.0, 0.0, 0.0],  # 1
            [1.0, 1.0, 0.0],  # 2
            [-1.0, 0.0, 0.0],  # 3
            [-1.0, -1.0, 0.0],  # 4
        ],
        dtype=float,
    )
    faces = [[0, 1, 2], [0, 3, 4]]
    return Mesh(verts=verts, faces=faces)


def _torus(nu: int = 6, nv: int = 5, R: float = 2.0, r: float = 0.5) -> Mesh:
    verts = []
    for i in range(nu):
        phi = 2.0 * np.pi * i / nu
        for j in range(nv):
            theta = 2.0 * np.pi * j / nv
            verts.append(
                [
                    (R + r * np.cos(theta)) * np.cos(phi),
                    (R + r * np.cos(theta)) * np.sin(phi),
                    r * np.sin(theta),
                ]
            )

    def idx(i: int, j: int) -> int:
        return (i % nu) * nv + (j % nv)

    faces = []
    for i in range(nu):
        for j in range(nv):
            a, b, c, d = idx(i, j), idx(i + 1, j), idx(i + 1, j + 1), idx(i, j + 1)
            faces.append([a, b, c])
            faces.append([a, c, d])
    return Mesh(verts=np.array(verts), faces=faces)


@pytest.fixture
def torus():
    """Closed triangulated torus (6x5 grid, every vertex has valence 6)."""
    return _torus()
