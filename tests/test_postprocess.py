from flatscene import Scene, SceneMesh, SceneMaterial, PrimitiveType, \
    PostProcess, apply_post_processing
from flatscene.postprocess import triangulate, join_identical_vertices, \
    sort_by_primitive_type


def test_triangulate_fan():
    mesh = SceneMesh(
        positions=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0.5, 2, 0), (0, 1, 0)],
        faces=[(0, 1, 2, 3, 4), (0, 1), (0, 1, 2)],
    )

    assert triangulate(mesh).faces == [
        (0, 1, 2), (0, 2, 3), (0, 3, 4), (0, 1), (0, 1, 2)
    ]
    assert mesh.faces[0] == (0, 1, 2, 3, 4)


def test_join_identical_vertices():
    mesh = SceneMesh(
        positions=[(0, 0, 0), (1, 0, 0), (0, 1, 0), (1, 0, 0), (0, 0, 0)],
        faces=[(0, 1, 2), (4, 3, 2)],
    )

    joined = join_identical_vertices(mesh)

    assert joined.positions == [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
    assert joined.faces == [(0, 1, 2), (0, 1, 2)]


def test_join_keeps_different_normals():
    mesh = SceneMesh(
        positions=[(0, 0, 0), (0, 0, 0)],
        normals=[(0, 0, 1), (0, 1, 0)],
        faces=[(0, 1)],
    )

    assert join_identical_vertices(mesh).vertex_count == 2


def test_sort_by_primitive_type():
    mesh = SceneMesh(
        positions=[(0, 0, 0), (1, 0, 0), (0, 1, 0), (5, 5, 5)],
        faces=[(0, 1, 2), (3,), (1, 3)],
        material_index=2,
    )

    points, lines, triangles = sort_by_primitive_type(mesh)

    assert points.primitive_types == PrimitiveType.POINT
    assert points.positions == [(5, 5, 5)]
    assert points.faces == [(0,)]

    assert lines.positions == [(1, 0, 0), (5, 5, 5)]
    assert lines.faces == [(0, 1)]

    assert triangles.faces == [(0, 1, 2)]
    assert triangles.vertex_count == 3
    assert triangles.material_index == 2


def test_sort_single_type_is_untouched():
    mesh = SceneMesh(positions=[(0, 0, 0)] * 3, faces=[(0, 1, 2)])

    assert sort_by_primitive_type(mesh) == [mesh]


def test_apply_post_processing():
    scene = Scene(
        meshes=[
            SceneMesh(
                positions=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0, 0, 0)],
                faces=[(0, 1, 2, 3), (4, 1)],
            )
        ],
        materials=[SceneMaterial()]
    )

    result = apply_post_processing(
        scene,
        PostProcess.TRIANGULATE | PostProcess.JOIN_IDENTICAL_VERTICES | PostProcess.SORT_BY_PTYPE
    )

    lines, triangles = result.meshes

    assert lines.faces == [(0, 1)]
    assert triangles.faces == [(0, 1, 2), (0, 2, 3)]
    assert result.materials is scene.materials


def test_apply_no_flags():
    scene = Scene(meshes=[SceneMesh(positions=[(0, 0, 0)] * 4, faces=[(0, 1, 2, 3)])])

    result = apply_post_processing(scene, PostProcess(0))

    assert result.meshes[0].faces == [(0, 1, 2, 3)]
