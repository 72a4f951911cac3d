from dataclasses import dataclass, field
from enum import IntFlag
from typing import List, Optional, Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Face = Tuple[int, ...]


class MaterialLookupError(KeyError):
    pass


class PrimitiveType(IntFlag):
    POINT = 1
    LINE = 2
    TRIANGLE = 4
    POLYGON = 8

    @classmethod
    def for_face(cls, face: Sequence[int]) -> 'PrimitiveType':
        if len(face) == 1:
            return cls.POINT
        elif len(face) == 2:
            return cls.LINE
        elif len(face) == 3:
            return cls.TRIANGLE

        return cls.POLYGON


@dataclass
class SceneMaterial:
    name: str = ""
    diffuse: Optional[Vec3] = None


@dataclass
class SceneMesh:
    """
    A submesh as handed over by the import service: local vertex
    attributes, faces indexing into them and a material reference.
    """

    positions: List[Vec3]
    faces: List[Face]
    material_index: int = 0
    normals: Optional[List[Vec3]] = None
    texture_coords: List[Optional[List[Vec2]]] = field(default_factory=list)
    name: str = ""

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def has_normals(self) -> bool:
        return self.normals is not None

    def has_texture_coords(self, channel: int = 0) -> bool:
        return (
            channel < len(self.texture_coords)
            and self.texture_coords[channel] is not None
        )

    @property
    def primitive_types(self) -> PrimitiveType:
        result = PrimitiveType(0)

        for face in self.faces:
            result |= PrimitiveType.for_face(face)

        return result


@dataclass
class Scene:
    meshes: List[SceneMesh] = field(default_factory=list)
    materials: List[SceneMaterial] = field(default_factory=list)

    @property
    def mesh_count(self) -> int:
        return len(self.meshes)

    def diffuse_color(self, material_index: int) -> Vec3:
        if not 0 <= material_index < len(self.materials):
            raise MaterialLookupError(
                f"No material at index {material_index}"
            )

        diffuse = self.materials[material_index].diffuse

        if diffuse is None:
            raise MaterialLookupError(
                f"Material {material_index} has no diffuse color"
            )

        return diffuse
