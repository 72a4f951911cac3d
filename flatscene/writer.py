"""
Reads and writes the flat asset layout.

All numbers are little-endian. Counts and indices are u32, floats are
IEEE-754 single precision, and no padding is inserted anywhere:

    u32 mesh_count
        f32 r, g, b; u32 vertex_base, vertex_count, index_base, index_count
    u32 vertex_count
        f32 px, py, pz; f32 nx, ny, nz
    u32 index_count
        u32 index
"""

from dataclasses import dataclass, field
from struct import Struct
from typing import BinaryIO, List, Sequence
from .types import Mesh, Vertex

COUNT = Struct("<I")
MESH_RECORD = Struct("<fffIIII")
VERTEX_RECORD = Struct("<ffffff")
INDEX = Struct("<I")


class AssetFormatError(ValueError):
    pass


@dataclass
class Asset:
    meshes: List[Mesh] = field(default_factory=list)
    vertices: List[Vertex] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)


def write_asset(
    stream: BinaryIO,
    meshes: Sequence[Mesh],
    vertices: Sequence[Vertex],
    indices: Sequence[int],
) -> int:
    """
    Writes the three pools to `stream` and returns the number of bytes
    written. The stream is left open and unflushed.
    """

    written = 0

    written += stream.write(COUNT.pack(len(meshes)))

    for mesh in meshes:
        written += stream.write(
            MESH_RECORD.pack(
                *mesh.color,
                mesh.vertex_base,
                mesh.vertex_count,
                mesh.index_base,
                mesh.index_count,
            )
        )

    written += stream.write(COUNT.pack(len(vertices)))

    for vertex in vertices:
        written += stream.write(
            VERTEX_RECORD.pack(*vertex.position, *vertex.normal)
        )

    written += stream.write(COUNT.pack(len(indices)))

    for index in indices:
        written += stream.write(INDEX.pack(index))

    return written


def _read_exact(stream: BinaryIO, record: Struct, what: str) -> tuple:
    data = stream.read(record.size)

    if len(data) != record.size:
        raise AssetFormatError(
            f"Unexpected end of data while reading {what}, "
            f"wanted {record.size} bytes, got {len(data)}"
        )

    return record.unpack(data)


def read_asset(stream: BinaryIO) -> Asset:
    asset = Asset()

    mesh_count = _read_exact(stream, COUNT, "mesh count")[0]

    for i in range(mesh_count):
        r, g, b, \
            vertex_base, \
            vertex_count, \
            index_base, \
            index_count = _read_exact(stream, MESH_RECORD, f"mesh {i}")

        asset.meshes.append(
            Mesh(
                color=(r, g, b),
                vertex_base=vertex_base,
                vertex_count=vertex_count,
                index_base=index_base,
                index_count=index_count,
            )
        )

    vertex_count = _read_exact(stream, COUNT, "vertex count")[0]

    for i in range(vertex_count):
        px, py, pz, nx, ny, nz = _read_exact(stream, VERTEX_RECORD, f"vertex {i}")

        asset.vertices.append(
            Vertex(position=(px, py, pz), normal=(nx, ny, nz))
        )

    index_count = _read_exact(stream, COUNT, "index count")[0]

    for i in range(index_count):
        asset.indices.append(_read_exact(stream, INDEX, f"index {i}")[0])

    return asset
