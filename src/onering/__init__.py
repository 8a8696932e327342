"""The onering package provides one-ring neighbor queries on polygon meshes.

This package offers:
  - Ordered one-ring walks and unordered edge-neighbor sets around a vertex.
  - Local one-ring area and point normals derived from the neighborhood.
  - An in-memory polygon mesh store implementing the incidence queries.

Submodules:
  - arrays: Small sequence helpers (index lookup, unique append).
  - config: Package settings, logging level and environment helpers.
  - geometry: Triangle/one-ring area, normals, spherical coordinates.
  - incidence: The read-only query protocol the algorithms consume.
  - mesh: Mesh class (OBJ/meshio loading, attributes, VTU export).
  - neighbors: connected_points, one_ring and friends.

Classes:
  IncidenceQuery, Mesh
"""

from onering.config import (
    config,
    configure,
    use,
    set_log_level,
)

from onering.arrays import append_unique, index_of
from onering.geometry import (
    average_normal,
    local_one_ring_area,
    local_one_ring_areas,
    point_normal,
    point_normals,
    spherical_to_cartesian,
    triangle_area,
)
from onering.incidence import IncidenceQuery
from onering.mesh import Mesh
from onering.neighbors import (
    connected_points,
    is_boundary_point,
    is_closed_ring,
    one_ring,
    one_ring_fans,
    ring_triangles,
)

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "IncidenceQuery",
    "Mesh",
    # Neighbor queries
    "connected_points",
    "one_ring",
    "one_ring_fans",
    "is_closed_ring",
    "is_boundary_point",
    "ring_triangles",
    # Geometry
    "triangle_area",
    "local_one_ring_area",
    "local_one_ring_areas",
    "average_normal",
    "point_normal",
    "point_normals",
    "spherical_to_cartesian",
    # Utilities
    "append_unique",
    "index_of",
    # Configuration
    "config",
    "configure",
    "use",
    "set_log_level",
]
