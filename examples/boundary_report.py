import sys

import numpy as np

import onering

# Mesh to inspect; any .obj or meshio-readable file works.
meshfile = sys.argv[1] if len(sys.argv) > 1 else "sphere.obj"

mesh = onering.Mesh(filename=meshfile)
print(f"{meshfile}: {mesh.n_points} points, {mesh.n_faces} faces")

boundary = []
non_manifold = []
for p in range(mesh.n_points):
    fans = onering.one_ring_fans(mesh, p)
    if len(fans) > 1:
        non_manifold.append(p)
    if fans and not onering.is_closed_ring(fans[0]):
        boundary.append(p)

print(f"boundary points:     {len(boundary)}")
print(f"multi-chain points:  {len(non_manifold)}")

areas = onering.local_one_ring_areas(mesh, range(mesh.n_points))
normals = onering.point_normals(mesh, range(mesh.n_points))
print(f"one-ring area min/max: {areas.min():.6g} / {areas.max():.6g}")
print(f"zero normals:          {int(np.sum(~normals.any(axis=1)))}")

# Store the derived normals so later reads short-circuit point_normal.
mesh.set_point_attrib("N", normals)
mesh.writeVTU(meshfile.rsplit(".", 1)[0] + "-onering.vtu", point_data={"ring_area": areas})
