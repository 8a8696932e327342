"""Local geometric quantities built on the neighbor queries.

This module provides:
  - Triangle area from side lengths (Heron's formula).
  - Local one-ring area of a point.
  - Average face normal and point normal (attribute-backed or derived).
  - Batch forms of the per-point quantities.
  - Spherical to Cartesian conversion.

Degenerate input never raises: collinear triangles give 0 (or NaN when
rounding pushes Heron's radicand below zero) and callers check the result.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import config
from .incidence import IncidenceQuery

_LOGGER = logging.getLogger(__name__)


def triangle_area(a: ArrayLike, b: ArrayLike, c: ArrayLike) -> float:
    """Compute the area of triangle (a, b, c) with Heron's formula.

    Args:
        a: First corner position.
        b: Second corner position.
        c: Third corner position.

    Returns:
        float: Area. Zero for collinear corners, possibly NaN when rounding
        makes the radicand slightly negative.
    """
    pa = np.asarray(a, dtype=float)
    pb = np.asarray(b, dtype=float)
    pc = np.asarray(c, dtype=float)

    A = np.linalg.norm(pa - pb)
    B = np.linalg.norm(pb - pc)
    C = np.linalg.norm(pc - pa)
    s = (A + B + C) / 2.0

    with np.errstate(invalid="ignore"):
        area = np.sqrt(s * (s - A) * (s - B) * (s - C))
    return float(area)


def local_one_ring_area(geo: IncidenceQuery, point: int) -> float:
    """Sum the areas of the faces around `point`.

    Each face is approximated by the triangle through its first three loop
    vertices; quads and larger polygons are not fully measured. Faces with
    fewer than three vertices add nothing.

    Args:
        geo: Mesh to query.
        point: Point id.

    Returns:
        float: Accumulated area (0.0 for an isolated point).
    """
    area = 0.0
    for face in geo.point_faces(point):
        pts = geo.face_points(face)
        if len(pts) < 3:
            _LOGGER.debug(
                "local_one_ring_area(%d): face %d has %d point(s); skipped.",
                point,
                face,
                len(pts),
            )
            continue
        area += triangle_area(
            geo.point_position(pts[0]),
            geo.point_position(pts[1]),
            geo.point_position(pts[2]),
        )
    return area


def local_one_ring_areas(
    geo: IncidenceQuery, points: Iterable[int]
) -> NDArray[Any]:
    """Return `local_one_ring_area` for each of `points` as a float array."""
    return np.array([local_one_ring_area(geo, int(p)) for p in points], dtype=float)


def average_normal(geo: IncidenceQuery, faces: Sequence[int]) -> NDArray[Any]:
    """Average the normals of `faces`, sampled at the configured (u, v).

    The mean is unweighted. With zero or one face the zero vector is returned,
    not the single face's normal.

    Args:
        geo: Mesh to query.
        faces: Face ids.

    Returns:
        NDArray[Any]: Mean normal, shape (3,). Not renormalized.
    """
    total = np.zeros(3, dtype=float)
    if len(faces) > 1:
        u, v = config.face_normal_uv
        for face in faces:
            total += np.asarray(geo.face_normal(face, u, v), dtype=float)
        total *= 1.0 / len(faces)
    else:
        _LOGGER.debug(
            "average_normal: %d face(s) given; returning zero vector.", len(faces)
        )
    return total


def point_normal(
    geo: IncidenceQuery, point: int, faces: Optional[Sequence[int]] = None
) -> NDArray[Any]:
    """Return the normal of `point`.

    If the mesh carries the configured normal attribute (``"N"`` by default)
    its value is returned as is. Otherwise the normal is the
    `average_normal` of `faces`, or of the faces incident to `point` when
    `faces` is None.

    Args:
        geo: Mesh to query.
        point: Point id.
        faces: Optional precomputed incident faces; unused when the attribute
            exists.

    Returns:
        NDArray[Any]: Normal vector, shape (3,).
    """
    name = config.normal_attrib
    if geo.has_point_attrib(name):
        return np.array(geo.point_attrib(name, point), dtype=float)
    if faces is None:
        faces = list(geo.point_faces(point))
    return average_normal(geo, faces)


def point_normals(geo: IncidenceQuery, points: Iterable[int]) -> NDArray[Any]:
    """Stack `point_normal` for each of `points` into an (n, 3) array."""
    rows = [point_normal(geo, int(p)) for p in points]
    if not rows:
        return np.zeros((0, 3), dtype=float)
    return np.vstack(rows)


def spherical_to_cartesian(lon: float, lat: float, rad: float) -> NDArray[Any]:
    """Convert spherical coordinates to a Cartesian position (y up).

    Args:
        lon: Longitude in radians.
        lat: Latitude in radians.
        rad: Sphere radius.

    Returns:
        NDArray[Any]: Position, shape (3,).
    """
    return rad * np.array(
        [
            -np.cos(lat) * np.cos(lon),
            np.sin(lat),
            np.cos(lat) * np.sin(lon),
        ],
        dtype=float,
    )
