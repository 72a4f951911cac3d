import io
import struct
import pytest

from flatscene import Mesh, Vertex, Scene, SceneMesh, SceneMaterial, \
    AssetFormatError, flatten_scene, write_asset, read_asset


def test_write_empty():
    stream = io.BytesIO()

    written = write_asset(stream, [], [], [])

    assert written == 12
    assert stream.getvalue() == struct.pack("<III", 0, 0, 0)


def test_write_layout():
    stream = io.BytesIO()

    write_asset(
        stream,
        [Mesh(color=(1.0, 0.5, 0.25), vertex_base=0, vertex_count=3, index_base=0, index_count=3)],
        [
            Vertex(position=(0.0, 0.0, 0.0)),
            Vertex(position=(1.0, 0.0, 0.0), normal=(0.0, 0.0, 1.0)),
            Vertex(position=(0.0, 1.0, 0.0)),
        ],
        [0, 1, 2]
    )

    assert stream.getvalue() == b"".join([
        struct.pack("<I", 1),
        struct.pack("<fffIIII", 1.0, 0.5, 0.25, 0, 3, 0, 3),
        struct.pack("<I", 3),
        struct.pack("<ffffff", 0, 0, 0, 0, 0, 0),
        struct.pack("<ffffff", 1, 0, 0, 0, 0, 1),
        struct.pack("<ffffff", 0, 1, 0, 0, 0, 0),
        struct.pack("<I", 3),
        struct.pack("<III", 0, 1, 2),
    ])


def test_write_leaves_stream_open():
    stream = io.BytesIO()

    write_asset(stream, [], [], [])

    assert not stream.closed
    stream.write(b"x")


def test_write_index_out_of_range():
    with pytest.raises(struct.error):
        write_asset(io.BytesIO(), [], [], [2**32])


def _scene():
    return Scene(
        meshes=[
            SceneMesh(
                positions=[(0.1, 0.2, 0.3), (1.5, -2.25, 3.0), (1e-8, 7.0, -0.7), (4, 4, 4)],
                faces=[(0, 1, 2), (1, 2, 3)],
                material_index=0,
            ),
            SceneMesh(
                positions=[(5, 5, 5), (6, 6, 6), (7, 7, 7)],
                faces=[(2, 1, 0), (0, 1, 2, 0)],
                material_index=3,
            ),
        ],
        materials=[SceneMaterial(diffuse=(0.3, 0.6, 0.9))]
    )


def test_section_counts():
    result = flatten_scene(_scene())
    data = io.BytesIO()
    write_asset(data, result.meshes, result.vertices, result.indices)
    data = data.getvalue()

    mesh_count = struct.unpack_from("<I", data, 0)[0]
    assert mesh_count == 2

    offset = 4 + mesh_count * 28
    vertex_count = struct.unpack_from("<I", data, offset)[0]
    assert vertex_count == 7

    offset += 4 + vertex_count * 24
    index_count = struct.unpack_from("<I", data, offset)[0]
    assert index_count == 9

    assert len(data) == offset + 4 + index_count * 4


def _bits(values):
    return [struct.pack("<f", v) for v in values]


def test_round_trip():
    result = flatten_scene(_scene())
    stream = io.BytesIO()

    write_asset(stream, result.meshes, result.vertices, result.indices)
    stream.seek(0)

    asset = read_asset(stream)

    assert asset.meshes == result.meshes
    assert asset.indices == result.indices
    assert len(asset.vertices) == len(result.vertices)

    for read, original in zip(asset.vertices, result.vertices):
        assert _bits(read.position) == _bits(original.position)
        assert _bits(read.normal) == _bits(original.normal)


def test_read_truncated():
    stream = io.BytesIO()
    write_asset(stream, [Mesh()], [Vertex(position=(1, 2, 3))], [0, 0, 0])

    data = stream.getvalue()

    with pytest.raises(AssetFormatError):
        read_asset(io.BytesIO(data[:-1]))

    with pytest.raises(AssetFormatError):
        read_asset(io.BytesIO(data[:10]))

    with pytest.raises(AssetFormatError):
        read_asset(io.BytesIO(b""))
