"""Read-only query interface the neighbor and geometry routines consume.

Any mesh store can be used with onering as long as it answers these queries;
`onering.mesh.Mesh` is the in-package implementation.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from numpy.typing import NDArray


@runtime_checkable
class IncidenceQuery(Protocol):
    """Point/face incidence and attribute lookups on an externally owned mesh.

    Point and face ids are plain integers. Implementations must return the same
    incident-face order for repeated queries on an unchanged mesh.
    """

    def point_faces(self, point: int) -> Sequence[int]:
        """Return the faces referencing `point`, in a stable order."""
        ...

    def face_points(self, face: int) -> Sequence[int]:
        """Return the vertex loop of `face` in its winding order."""
        ...

    def point_position(self, point: int) -> NDArray[Any]:
        """Return the 3D position of `point`."""
        ...

    def has_point_attrib(self, name: str) -> bool:
        """Return True if a per-point vector attribute `name` exists."""
        ...

    def point_attrib(self, name: str, point: int) -> NDArray[Any]:
        """Return the value of attribute `name` at `point`."""
        ...

    def face_normal(self, face: int, u: float, v: float) -> NDArray[Any]:
        """Return the geometric normal of `face` sampled at (u, v)."""
        ...
