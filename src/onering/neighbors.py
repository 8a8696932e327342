"""Neighbor queries around a mesh vertex.

This module provides:
  - `connected_points`: unordered, deduplicated edge neighbors of a point.
  - `one_ring`: ordered walk around a point, stitched face by face.
  - `one_ring_fans`: the same walk, continued over faces a single walk leaves
    unvisited (non-manifold vertices).
  - Small helpers to classify rings and turn them into triangle fans.

All functions only read from an `IncidenceQuery` and never mutate it.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .arrays import append_unique, index_of
from .incidence import IncidenceQuery

_LOGGER = logging.getLogger(__name__)


def connected_points(geo: IncidenceQuery, point: int) -> List[int]:
    """Return the points sharing a face edge with `point`.

    For every incident face the loop-previous vertex is a neighbor, and for
    faces with three or more vertices so is the loop-next vertex (a two-point
    face would otherwise yield the same vertex twice). Faces that do not
    actually contain `point` are skipped.

    Args:
        geo: Mesh to query.
        point: Point id.

    Returns:
        List[int]: Unique neighbor ids in discovery order. The order carries no
        meaning; use `one_ring` for a walk.
    """
    result: List[int] = []
    for face in geo.point_faces(point):
        pts = list(geo.face_points(face))
        n = len(pts)
        index = index_of(pts, point)
        if index < 0:
            _LOGGER.debug(
                "connected_points: point %d missing from incident face %d; skipped.",
                point,
                face,
            )
            continue
        if n >= 2:
            append_unique(result, pts[(index - 1) % n])
        if n >= 3:
            append_unique(result, pts[(index + 1) % n])
    return result


def _walk(
    point: int,
    faces: Sequence[int],
    loops: Sequence[Sequence[int]],
    visited: List[bool],
) -> List[int]:
    """Stitch unvisited faces into one chain around `point`.

    `visited` is updated in place. The walk ends when no unvisited face
    contains the current anchor.
    """
    result: List[int] = []
    while True:
        anchor = result[-1] if result else point

        # First unvisited face containing the anchor; incidence order wins.
        chosen: Optional[int] = None
        start = -1
        for i, pts in enumerate(loops):
            if visited[i]:
                continue
            start = index_of(pts, anchor)
            if start >= 0:
                chosen = i
                visited[i] = True
                break

        if chosen is None:
            break

        pts = loops[chosen]
        n = len(pts)
        # Walk away from the pivot if it directly follows the anchor.
        direction = -1 if pts[(start + 1) % n] == point else 1

        for k in range(1, n):
            p = pts[(start + k * direction) % n]
            if p == point:
                break
            result.append(p)

        _LOGGER.debug(
            "one_ring(%d): face %d from anchor %d (dir=%+d) -> %d point(s)",
            point,
            faces[chosen],
            anchor,
            direction,
            len(result),
        )
    return result


def _incident_loops(
    geo: IncidenceQuery, point: int
) -> Tuple[List[int], List[List[int]]]:
    faces = [int(f) for f in geo.point_faces(point)]
    loops = [list(geo.face_points(f)) for f in faces]
    return faces, loops


def one_ring(geo: IncidenceQuery, point: int) -> List[int]:
    """Return the ordered one-ring of `point`.

    Incident faces are stitched together through the vertex they share with
    the previous face: the first face is entered at `point` itself, every
    following one at the last point appended so far. Within a face the loop is
    walked away from `point` until `point` comes around again.

    If the first and last entries are equal the ring is closed (interior
    vertex). Otherwise the vertex lies on a boundary, or the walk could not
    continue.

    Note:
        On a non-manifold vertex (two or more disjoint fans) only the fan
        reached from the first incident face is returned; the other faces are
        ignored. Use `one_ring_fans` to get all of them.

    Args:
        geo: Mesh to query.
        point: Point id.

    Returns:
        List[int]: Ordered neighbor ids; empty if `point` has no faces.
    """
    faces, loops = _incident_loops(geo, point)
    visited = [False] * len(faces)
    ring = _walk(point, faces, loops, visited)

    leftover = visited.count(False)
    if leftover:
        _LOGGER.debug(
            "one_ring(%d): walk stopped with %d of %d incident face(s) unvisited.",
            point,
            leftover,
            len(faces),
        )
    return ring


def one_ring_fans(geo: IncidenceQuery, point: int) -> List[List[int]]:
    """Return one walk per chain of faces around `point`.

    The first chain is exactly `one_ring(geo, point)`. As long as incident
    faces remain unvisited, a new walk starts from `point` on the first of
    them. A boundary vertex whose first incident face sits in the middle of
    its fan is reported as two chains.

    Args:
        geo: Mesh to query.
        point: Point id.

    Returns:
        List[List[int]]: Chains in discovery order; empty if `point` has no
        faces.
    """
    faces, loops = _incident_loops(geo, point)
    visited = [False] * len(faces)
    fans: List[List[int]] = []
    while not all(visited):
        ring = _walk(point, faces, loops, visited)
        if not ring:
            # Faces that never contain the anchor; nothing more can be walked.
            break
        fans.append(ring)
    if len(fans) > 1:
        _LOGGER.debug("one_ring_fans(%d): %d separate chains.", point, len(fans))
    return fans


def is_closed_ring(ring: Sequence[int]) -> bool:
    """Return True if `ring` starts and ends on the same point."""
    return len(ring) > 1 and ring[0] == ring[-1]


def is_boundary_point(geo: IncidenceQuery, point: int) -> bool:
    """Return True if the one-ring of `point` does not close."""
    return not is_closed_ring(one_ring(geo, point))


def ring_triangles(point: int, ring: Sequence[int]) -> List[Tuple[int, int, int]]:
    """Return the triangle fan `(point, ring[i], ring[i + 1])` along `ring`."""
    return [(point, ring[i], ring[i + 1]) for i in range(len(ring) - 1)]
