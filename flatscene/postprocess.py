from enum import IntFlag
from typing import Dict, List, Optional, Tuple
from .scene import Scene, SceneMesh, PrimitiveType, Face


class PostProcess(IntFlag):
    TRIANGULATE = 1
    JOIN_IDENTICAL_VERTICES = 2
    SORT_BY_PTYPE = 4


DEFAULT_FLAGS = (
    PostProcess.TRIANGULATE
    | PostProcess.JOIN_IDENTICAL_VERTICES
    | PostProcess.SORT_BY_PTYPE
)

_PTYPE_ORDER = (
    PrimitiveType.POINT,
    PrimitiveType.LINE,
    PrimitiveType.TRIANGLE,
    PrimitiveType.POLYGON,
)


def apply_post_processing(scene: Scene, flags: PostProcess) -> Scene:
    meshes = scene.meshes

    if flags & PostProcess.TRIANGULATE:
        meshes = [triangulate(mesh) for mesh in meshes]

    if flags & PostProcess.JOIN_IDENTICAL_VERTICES:
        meshes = [join_identical_vertices(mesh) for mesh in meshes]

    if flags & PostProcess.SORT_BY_PTYPE:
        sorted_meshes = []

        for mesh in meshes:
            sorted_meshes += sort_by_primitive_type(mesh)

        meshes = sorted_meshes

    return Scene(meshes=meshes, materials=scene.materials)


def triangulate(mesh: SceneMesh) -> SceneMesh:
    """
    Splits polygons into triangle fans around their first corner.
    Points and lines are kept as they are.
    """

    faces = []

    for face in mesh.faces:
        if len(face) <= 3:
            faces.append(tuple(face))
            continue

        for i in range(1, len(face) - 1):
            faces.append((face[0], face[i], face[i + 1]))

    return _with_faces(mesh, faces)


def _vertex_key(mesh: SceneMesh, index: int) -> Tuple:
    normal = mesh.normals[index] if mesh.has_normals else None
    uvs = tuple(
        channel[index] if channel is not None else None
        for channel in mesh.texture_coords
    )

    return tuple(mesh.positions[index]), \
        tuple(normal) if normal is not None else None, \
        uvs


def join_identical_vertices(mesh: SceneMesh) -> SceneMesh:
    remap: List[int] = []
    seen: Dict[Tuple, int] = {}
    kept: List[int] = []

    for index in range(mesh.vertex_count):
        key = _vertex_key(mesh, index)

        if key not in seen:
            seen[key] = len(kept)
            kept.append(index)

        remap.append(seen[key])

    faces = [tuple(remap[i] for i in face) for face in mesh.faces]

    return _select_vertices(mesh, kept, faces)


def sort_by_primitive_type(mesh: SceneMesh) -> List[SceneMesh]:
    """
    Splits a mesh mixing points, lines, triangles and polygons into one
    mesh per primitive type. Each new mesh only keeps the vertices its
    faces reference.
    """

    types = mesh.primitive_types

    if not mesh.faces or types in _PTYPE_ORDER:
        return [mesh]

    result = []

    for ptype in _PTYPE_ORDER:
        faces = [f for f in mesh.faces if PrimitiveType.for_face(f) is ptype]

        if not faces:
            continue

        kept: List[int] = []
        local: Dict[int, int] = {}

        for face in faces:
            for index in face:
                if index not in local:
                    local[index] = len(kept)
                    kept.append(index)

        result.append(
            _select_vertices(
                mesh,
                kept,
                [tuple(local[i] for i in face) for face in faces],
            )
        )

    return result


def _with_faces(mesh: SceneMesh, faces: List[Face]) -> SceneMesh:
    return SceneMesh(
        positions=mesh.positions,
        faces=faces,
        material_index=mesh.material_index,
        normals=mesh.normals,
        texture_coords=mesh.texture_coords,
        name=mesh.name,
    )


def _pick(values: Optional[list], kept: List[int]) -> Optional[list]:
    if values is None:
        return None

    return [values[i] for i in kept]


def _select_vertices(
    mesh: SceneMesh, kept: List[int], faces: List[Face]
) -> SceneMesh:
    return SceneMesh(
        positions=_pick(mesh.positions, kept),
        faces=faces,
        material_index=mesh.material_index,
        normals=_pick(mesh.normals, kept),
        texture_coords=[_pick(c, kept) for c in mesh.texture_coords],
        name=mesh.name,
    )
