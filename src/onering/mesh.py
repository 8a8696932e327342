"""Module defining the Mesh class, an in-memory polygon mesh store.

This module provides:
  - Loading from OBJ, any meshio-readable file, or direct arrays.
  - A point -> face incidence map built once at construction.
  - Named per-point vector attributes (e.g. ``"N"``).
  - Face normals and KD-tree nearest-point lookup.
  - VTU export through meshio.

`Mesh` answers every query of `onering.incidence.IncidenceQuery`, so it can be
handed straight to the neighbor and geometry functions. It is a plain polygon
soup, not a half-edge structure.
"""
from __future__ import annotations

import collections
import logging
import os
from typing import Any, DefaultDict, Dict, List, Optional, Sequence, Tuple
from numpy.typing import ArrayLike, NDArray

import numpy as np
import meshio
from scipy.spatial import cKDTree

from . import geometry, neighbors

_LOGGER = logging.getLogger(__name__)

# meshio cell types read as face loops, and the two-point "faces" kept as edges.
_FACE_CELL_TYPES = ("line", "triangle", "quad", "polygon")
_CELL_TYPE_BY_SIZE = {2: "line", 3: "triangle", 4: "quad"}


class Mesh:
    """Handle polygon surface meshes with arbitrary face sizes.

    Args:
        filename (Optional[str]): Path to a mesh file. ``.obj`` files are read
            with `loadOBJ` (keeping polygons intact), anything else with
            meshio.
        verts (Optional[ArrayLike]): Vertex coordinates (n_points×3).
        faces (Optional[Sequence[Sequence[int]]]): Face loops. Either a
            sequence of variable-length loops or an (n_faces×k) integer array.
        point_attribs (Optional[Dict[str, ArrayLike]]): Per-point vector
            attributes, each (n_points×3).

    Attributes:
        verts (NDArray[Any]): Vertex array, shape (n_points, 3).
        faces (List[Tuple[int, ...]]): Face loops in winding order.
        point_to_faces (DefaultDict[int, List[int]]): Point -> [face indices],
            in face order.
        point_attribs (Dict[str, NDArray[Any]]): Named per-point vectors.
        tree (cKDTree): KD-tree over `verts` for nearest-point queries.
    """

    verts: NDArray[Any]
    faces: List[Tuple[int, ...]]
    point_to_faces: DefaultDict[int, List[int]]
    point_attribs: Dict[str, NDArray[Any]]
    tree: cKDTree

    def __init__(
        self,
        filename: Optional[str] = None,
        verts: Optional[ArrayLike] = None,
        faces: Optional[Sequence[Sequence[int]]] = None,
        point_attribs: Optional[Dict[str, ArrayLike]] = None,
    ) -> None:
        """Initialize mesh from a file or provided arrays.

        Raises:
            ValueError: If neither `filename` nor `verts` is provided, both a
                `filename` and `verts`/`faces` are provided, or the
                data are malformed (wrong shape, out-of-range indices, loops
                with fewer than two points).
        """
        attribs: Dict[str, ArrayLike] = dict(point_attribs or {})

        if filename is not None:
            if verts is not None or faces is not None:
                _LOGGER.error("Mesh __init__: filename given with verts/faces.")
                raise ValueError("Pass either a filename or verts/faces, not both.")
            if os.path.splitext(filename)[1].lower() == ".obj":
                verts, faces = self.loadOBJ(filename)
            else:
                verts, faces, file_attribs = self._read_meshio(meshio.read(filename))
                for name, values in file_attribs.items():
                    attribs.setdefault(name, values)

        if verts is None:
            _LOGGER.error("Mesh __init__: no filename and no verts given.")
            raise ValueError("Mesh needs either a filename or verts.")

        self.verts = self._validate_verts(verts)
        self.faces = self._validate_faces(faces if faces is not None else [])

        # ---- Topology ----------------------------------------------------------
        self.point_to_faces = collections.defaultdict(list)
        for face_idx, loop in enumerate(self.faces):
            for p in loop:
                # Map point -> faces, once per face even if the loop repeats p.
                touching = self.point_to_faces[p]
                if not touching or touching[-1] != face_idx:
                    touching.append(face_idx)

        # KD-tree over points (SciPy)
        self.tree = cKDTree(self.verts)

        self.point_attribs = {}
        for name, values in attribs.items():
            self.set_point_attrib(name, values)

        _LOGGER.info(
            "Mesh initialized with %d points and %d faces",
            self.verts.shape[0],
            len(self.faces),
        )

    # ------------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------------
    @staticmethod
    def _validate_verts(verts: ArrayLike) -> NDArray[Any]:
        arr = np.asarray(verts, dtype=float)
        if arr.ndim != 2 or arr.shape[1] != 3:
            _LOGGER.error("Mesh: verts must be (n, 3); got %s", arr.shape)
            raise ValueError(f"verts must be (n_points, 3); got {arr.shape}")
        return arr

    def _validate_faces(self, faces: Sequence[Sequence[int]]) -> List[Tuple[int, ...]]:
        n_points = self.verts.shape[0]
        loops: List[Tuple[int, ...]] = []
        for face_idx, face in enumerate(faces):
            loop = tuple(int(p) for p in face)
            if len(loop) < 2:
                _LOGGER.error("Mesh: face %d has %d point(s).", face_idx, len(loop))
                raise ValueError(f"Face {face_idx} needs at least 2 points.")
            if min(loop) < 0 or max(loop) >= n_points:
                _LOGGER.error(
                    "Mesh: face %d references out-of-range points %s.", face_idx, loop
                )
                raise ValueError(
                    f"Face {face_idx} contains out-of-range point indices."
                )
            loops.append(loop)
        return loops

    @staticmethod
    def _read_meshio(
        m: meshio.Mesh,
    ) -> Tuple[NDArray[Any], List[List[int]], Dict[str, NDArray[Any]]]:
        """Extract points, face loops and 3-component point data."""
        faces: List[List[int]] = []
        for block in m.cells:
            if block.type not in _FACE_CELL_TYPES:
                _LOGGER.debug(
                    "Mesh: skipping meshio cell block '%s' (%d cells).",
                    block.type,
                    len(block.data),
                )
                continue
            faces.extend([int(p) for p in cell] for cell in block.data)

        attribs: Dict[str, NDArray[Any]] = {}
        for name, values in m.point_data.items():
            arr = np.asarray(values)
            if arr.ndim == 2 and arr.shape[1] == 3:
                attribs[name] = arr
        points = np.asarray(m.points, dtype=float)
        if points.ndim == 2 and points.shape[1] == 2:
            points = np.column_stack([points, np.zeros(points.shape[0])])
        return points, faces, attribs

    @classmethod
    def from_meshio(cls, m: meshio.Mesh) -> Mesh:
        """Build a Mesh from a `meshio.Mesh`.

        Surface cell blocks (lines, triangles, quads, polygons) become faces
        in block order; point data with three components become point
        attributes.
        """
        verts, faces, attribs = cls._read_meshio(m)
        return cls(verts=verts, faces=faces, point_attribs=attribs)

    @classmethod
    def read(cls, filename: str) -> Mesh:
        """Build a Mesh from a file (.obj, or any format meshio reads)."""
        return cls(filename=filename)

    def loadOBJ(self, filename: str) -> Tuple[NDArray[Any], List[List[int]]]:
        """Read a Wavefront .obj mesh file and return (verts, faces).

        Only ``v`` and ``f`` records are used. Faces keep their full loop, so
        quads and n-gons survive.

        Args:
            filename (str): Path to the .obj file.

        Returns:
            Tuple[NDArray[Any], List[List[int]]]:
                - verts: Array of shape (n_vertices, 3)
                - faces: One loop of 0-based point indices per face
        """
        verts: list[list[float]] = []
        faces: list[list[int]] = []

        with open(filename, "r") as fh:
            for line in fh:
                vals = line.split()
                if not vals:
                    continue
                if vals[0] == "v":
                    verts.append(list(map(float, vals[1:4])))
                elif vals[0] == "f":
                    loop = []
                    for f in vals[1:]:
                        idx = int(f.split("/")[0])
                        # OBJ is 1-indexed; negative indices count from the end
                        loop.append(idx - 1 if idx > 0 else len(verts) + idx)
                    faces.append(loop)
        _LOGGER.info(
            "Loaded OBJ from %s with %d vertices and %d faces",
            filename,
            len(verts),
            len(faces),
        )

        verts_arr: NDArray[Any] = np.array(verts, dtype=float).reshape(-1, 3)
        return verts_arr, faces

    # ------------------------------------------------------------------------
    # Incidence queries
    # ------------------------------------------------------------------------
    @property
    def n_points(self) -> int:
        return int(self.verts.shape[0])

    @property
    def n_faces(self) -> int:
        return len(self.faces)

    def point_faces(self, point: int) -> List[int]:
        """Return the faces touching `point` (empty for unknown points)."""
        return list(self.point_to_faces.get(int(point), ()))

    def face_points(self, face: int) -> Tuple[int, ...]:
        """Return the point loop of `face`."""
        return self.faces[face]

    def point_position(self, point: int) -> NDArray[Any]:
        """Return the position of `point`."""
        return self.verts[point].copy()

    def has_point_attrib(self, name: str) -> bool:
        return name in self.point_attribs

    def point_attrib(self, name: str, point: int) -> NDArray[Any]:
        """Return attribute `name` at `point`.

        Raises:
            KeyError: If the attribute does not exist.
        """
        return self.point_attribs[name][point].copy()

    def set_point_attrib(self, name: str, values: ArrayLike) -> None:
        """Store a per-point vector attribute (copied).

        Raises:
            ValueError: If `values` is not (n_points, 3).
        """
        arr = np.array(values, dtype=float)
        if arr.shape != (self.n_points, 3):
            msg = (
                f"point attribute '{name}' has shape {arr.shape}; "
                f"expected ({self.n_points}, 3)"
            )
            _LOGGER.error("set_point_attrib: %s", msg)
            raise ValueError(msg)
        self.point_attribs[name] = arr
        _LOGGER.debug("set_point_attrib: stored '%s'.", name)

    def remove_point_attrib(self, name: str) -> None:
        """Drop attribute `name` if present."""
        self.point_attribs.pop(name, None)

    def face_normal(self, face: int, u: float = 0.5, v: float = 0.5) -> NDArray[Any]:
        """Return the unit normal of `face` at parametric (u, v).

        Quads are treated as bilinear patches (u along the first edge, v along
        the last), so (u, v) matters for non-planar quads. Other faces use
        Newell's method and have one normal everywhere. Degenerate faces
        (including two-point faces) give the zero vector.
        """
        pts = self.verts[list(self.faces[face])]

        if len(pts) == 4:
            p0, p1, p2, p3 = pts
            dpdu = (1.0 - v) * (p1 - p0) + v * (p2 - p3)
            dpdv = (1.0 - u) * (p3 - p0) + u * (p2 - p1)
            n = np.cross(dpdu, dpdv)
        else:
            # Newell: sum of cross products of consecutive corners.
            n = np.cross(pts, np.roll(pts, -1, axis=0)).sum(axis=0)

        nn = float(np.linalg.norm(n))
        if nn <= 1e-12 or not np.isfinite(nn):
            _LOGGER.warning(
                "face_normal: face %d is degenerate (~zero area); normal set to 0.",
                face,
            )
            return np.zeros(3, dtype=float)
        return n / nn

    # ------------------------------------------------------------------------
    # Spatial lookup
    # ------------------------------------------------------------------------
    def nearest_point(self, position: ArrayLike) -> Tuple[int, float]:
        """Return (point id, distance) of the point closest to `position`.

        Raises:
            ValueError: If the mesh has no points.
        """
        if self.n_points == 0:
            raise ValueError("nearest_point: mesh has no points.")
        p = np.asarray(position, dtype=float).reshape(3)
        dist, idx = self.tree.query(p)
        _LOGGER.debug(
            "nearest_point: %s -> point %d (dist=%.6g)", p.tolist(), int(idx), dist
        )
        return int(idx), float(dist)

    # ------------------------------------------------------------------------
    # Neighbor shortcuts
    # ------------------------------------------------------------------------
    def connected_points(self, point: int) -> List[int]:
        """See `onering.neighbors.connected_points`."""
        return neighbors.connected_points(self, point)

    def one_ring(self, point: int) -> List[int]:
        """See `onering.neighbors.one_ring`."""
        return neighbors.one_ring(self, point)

    def point_normal(
        self, point: int, faces: Optional[Sequence[int]] = None
    ) -> NDArray[Any]:
        """See `onering.geometry.point_normal`."""
        return geometry.point_normal(self, point, faces)

    # ------------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------------
    def to_meshio(self, point_data: Optional[Dict[str, ArrayLike]] = None) -> meshio.Mesh:
        """Convert to a `meshio.Mesh`, one cell block per face size.

        Stored point attributes are exported as point data, together with
        `point_data` (which wins on name clashes).

        Raises:
            ValueError: If a `point_data` array length differs from n_points.
        """
        by_size: Dict[int, List[Tuple[int, ...]]] = {}
        for loop in self.faces:
            by_size.setdefault(len(loop), []).append(loop)
        cells = [
            (_CELL_TYPE_BY_SIZE.get(size, "polygon"), np.asarray(loops, dtype=int))
            for size, loops in by_size.items()
        ]

        data: Dict[str, NDArray[Any]] = dict(self.point_attribs)
        for name, arr in (point_data or {}).items():
            arr_np = np.asarray(arr)
            if arr_np.shape[0] != self.n_points:
                msg = (
                    f"point_data['{name}'] length {arr_np.shape[0]} "
                    f"!= n_points {self.n_points}"
                )
                _LOGGER.error("to_meshio: %s", msg)
                raise ValueError(msg)
            data[name] = arr_np

        return meshio.Mesh(points=self.verts, cells=cells, point_data=data)

    def writeVTU(
        self,
        filename: str,
        point_data: Optional[Dict[str, ArrayLike]] = None,
    ) -> None:
        """Export this mesh (and optional point data) in VTU format.

        Args:
            filename: Output path (e.g., ``"mesh.vtu"``).
            point_data: Optional dict of per-point arrays.

        Raises:
            ValueError: If provided data have incompatible lengths.
            Exception: If the underlying mesh writer fails.
        """
        try:
            m = self.to_meshio(point_data)
            m.write(filename)
            _LOGGER.info(
                "VTU written to '%s' (points=%d, faces=%d, point_data=%d)",
                filename,
                self.n_points,
                self.n_faces,
                len(m.point_data),
            )
        except Exception:
            _LOGGER.exception("writeVTU failed for '%s'.", filename)
            raise
