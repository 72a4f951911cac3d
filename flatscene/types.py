from dataclasses import dataclass, field
from typing import Tuple
from .util import to_vec3_f32

Vec3 = Tuple[float, float, float]

ZERO3: Vec3 = (0.0, 0.0, 0.0)
BLACK: Vec3 = (0.0, 0.0, 0.0)


@dataclass
class Mesh:
    """
    One record per submesh. The base/count pairs address the shared
    vertex and index pools.
    """

    color: Vec3 = BLACK
    vertex_base: int = 0
    vertex_count: int = 0
    index_base: int = 0
    index_count: int = 0

    def __post_init__(self):
        self.color = to_vec3_f32(self.color)


@dataclass
class Vertex:
    position: Vec3
    # Written to disk, but only filled when normals are copied.
    normal: Vec3 = field(default=ZERO3)

    def __post_init__(self):
        self.position = to_vec3_f32(self.position)
        self.normal = to_vec3_f32(self.normal)
