from dataclasses import dataclass, field
from typing import List
from .scene import Scene, SceneMesh, MaterialLookupError
from .types import Mesh, Vertex, BLACK, ZERO3


@dataclass
class FlattenResult:
    meshes: List[Mesh] = field(default_factory=list)
    vertices: List[Vertex] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)

    # Faces that were not triangles, and meshes whose material had no
    # diffuse color.
    skipped_faces: int = 0
    defaulted_materials: int = 0

    def summary_lines(self) -> List[str]:
        lines = [
            f"Vertex count: {len(self.vertices)}",
            f"Index count: {len(self.indices)}",
            f"Meshes: {len(self.meshes)}",
        ]

        for mesh in self.meshes:
            r, g, b = mesh.color

            lines += [
                f"Color: r: {r}, g: {g}, b: {b}",
                f"Vertex base: {mesh.vertex_base}",
                f"Vertex count: {mesh.vertex_count}",
                f"Index base: {mesh.index_base}",
                f"Index count: {mesh.index_count}",
                "",
            ]

        if self.skipped_faces:
            lines.append(f"Skipped non-triangle faces: {self.skipped_faces}")

        if self.defaulted_materials:
            lines.append(
                f"Meshes without diffuse color: {self.defaulted_materials}"
            )

        return lines


def flatten_scene(scene: Scene, copy_normals: bool = False) -> FlattenResult:
    """
    Flattens every submesh of the scene into one vertex pool and one
    index pool. Mesh records keep their offsets into the pools, in scene
    order.

    The scene is expected to be triangulated already. Faces which are
    not triangles are dropped and counted in `skipped_faces`.
    """

    result = FlattenResult()

    for scene_mesh in scene.meshes:
        try:
            color = scene.diffuse_color(scene_mesh.material_index)
        except MaterialLookupError:
            color = BLACK
            result.defaulted_materials += 1

        result.skipped_faces += _flatten_mesh(
            scene_mesh,
            color,
            result.meshes,
            result.vertices,
            result.indices,
            copy_normals,
        )

    return result


def _flatten_mesh(
    scene_mesh: SceneMesh,
    color,
    meshes: List[Mesh],
    vertices: List[Vertex],
    indices: List[int],
    copy_normals: bool,
) -> int:
    mesh = Mesh(
        color=color,
        vertex_base=len(vertices),
        vertex_count=scene_mesh.vertex_count,
        index_base=len(indices),
    )

    normals = scene_mesh.normals if scene_mesh.has_normals else None

    for vertex_index, position in enumerate(scene_mesh.positions):
        normal = ZERO3

        if copy_normals and normals is not None:
            normal = normals[vertex_index]

        vertices.append(Vertex(position=position, normal=normal))

    skipped = 0

    for face in scene_mesh.faces:
        if len(face) != 3:
            skipped += 1
            continue

        indices.append(mesh.vertex_base + face[0])
        indices.append(mesh.vertex_base + face[1])
        indices.append(mesh.vertex_base + face[2])

        mesh.index_count += 3

    meshes.append(mesh)

    return skipped
