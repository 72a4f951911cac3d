"""
glTF 2.0 loader for `.gltf` and `.glb` files.

Each primitive of each mesh becomes one submesh, in file order. Node
transforms are not applied.
"""

import base64
from pathlib import Path
from struct import Struct
from typing import List, Optional
from urllib.parse import unquote

import pygltflib

from ..scene import Scene, SceneMesh, SceneMaterial


class GLTFLoadError(ValueError):
    pass


COMPONENT_FORMATS = {
    pygltflib.BYTE: "b",
    pygltflib.UNSIGNED_BYTE: "B",
    pygltflib.SHORT: "h",
    pygltflib.UNSIGNED_SHORT: "H",
    pygltflib.UNSIGNED_INT: "I",
    pygltflib.FLOAT: "f",
}

# Divisors for normalized integer attributes.
COMPONENT_MAX = {
    pygltflib.BYTE: 127.0,
    pygltflib.UNSIGNED_BYTE: 255.0,
    pygltflib.SHORT: 32767.0,
    pygltflib.UNSIGNED_SHORT: 65535.0,
}

TYPE_SIZES = {
    pygltflib.SCALAR: 1,
    pygltflib.VEC2: 2,
    pygltflib.VEC3: 3,
    pygltflib.VEC4: 4,
}


def _faces_for_mode(mode: int, indices: List[int]) -> List[tuple]:
    if mode == pygltflib.POINTS:
        return [(i,) for i in indices]
    elif mode == pygltflib.LINES:
        return [
            (indices[i], indices[i + 1])
            for i in range(0, len(indices) - 1, 2)
        ]
    elif mode == pygltflib.LINE_STRIP:
        return [
            (indices[i], indices[i + 1]) for i in range(len(indices) - 1)
        ]
    elif mode == pygltflib.LINE_LOOP:
        faces = [
            (indices[i], indices[i + 1]) for i in range(len(indices) - 1)
        ]

        if len(indices) > 2:
            faces.append((indices[-1], indices[0]))

        return faces
    elif mode == pygltflib.TRIANGLES:
        return [
            tuple(indices[i:i + 3]) for i in range(0, len(indices) - 2, 3)
        ]
    elif mode == pygltflib.TRIANGLE_STRIP:
        faces = []

        for i in range(len(indices) - 2):
            # Every other triangle has its winding flipped.
            if i % 2 == 0:
                faces.append((indices[i], indices[i + 1], indices[i + 2]))
            else:
                faces.append((indices[i + 1], indices[i], indices[i + 2]))

        return faces
    elif mode == pygltflib.TRIANGLE_FAN:
        return [
            (indices[0], indices[i], indices[i + 1])
            for i in range(1, len(indices) - 1)
        ]

    raise GLTFLoadError(f"Unknown primitive mode {mode}")


class GLTFReader:
    def __init__(self, path: Path, gltf: pygltflib.GLTF2):
        self.path = path
        self.gltf = gltf
        self._buffers = {}

    def buffer_data(self, buffer_index: int) -> bytes:
        if buffer_index in self._buffers:
            return self._buffers[buffer_index]

        buffer = self.gltf.buffers[buffer_index]

        if buffer.uri is None:
            data = self.gltf.binary_blob()

            if data is None:
                raise GLTFLoadError(
                    f"Buffer {buffer_index} has no uri and there is no binary chunk"
                )
        elif buffer.uri.startswith("data:"):
            data = base64.b64decode(buffer.uri[buffer.uri.find(",") + 1:])
        else:
            data = (self.path.parent / unquote(buffer.uri)).read_bytes()

        self._buffers[buffer_index] = data

        return data

    def read_accessor(self, accessor_index: int) -> List[tuple]:
        """
        Returns the accessor's elements as tuples of numbers.
        """

        accessor = self.gltf.accessors[accessor_index]

        try:
            fmt = COMPONENT_FORMATS[accessor.componentType]
            width = TYPE_SIZES[accessor.type]
        except KeyError:
            raise GLTFLoadError(
                f"Unsupported accessor {accessor_index}: "
                f"componentType={accessor.componentType}, type={accessor.type}"
            )

        element = Struct("<" + fmt * width)

        # Accessors without a buffer view are all zeros.
        if accessor.bufferView is None:
            return [(0,) * width] * accessor.count

        view = self.gltf.bufferViews[accessor.bufferView]
        data = self.buffer_data(view.buffer)

        stride = view.byteStride or element.size
        start = (view.byteOffset or 0) + (accessor.byteOffset or 0)
        end = start + stride * (accessor.count - 1) + element.size

        if accessor.count and end > len(data):
            raise GLTFLoadError(
                f"Accessor {accessor_index} reads past the end of buffer {view.buffer}"
            )

        values = [
            element.unpack_from(data, start + i * stride)
            for i in range(accessor.count)
        ]

        if accessor.normalized and accessor.componentType in COMPONENT_MAX:
            scale = COMPONENT_MAX[accessor.componentType]
            values = [
                tuple(max(v / scale, -1.0) for v in value) for value in values
            ]

        return values

    def read_material(self, material: pygltflib.Material) -> SceneMaterial:
        diffuse = None
        pbr = material.pbrMetallicRoughness

        if pbr is not None and pbr.baseColorFactor is not None:
            r, g, b = pbr.baseColorFactor[:3]
            diffuse = (float(r), float(g), float(b))

        return SceneMaterial(name=material.name or "", diffuse=diffuse)

    def read_primitive(self, mesh_name: str, primitive) -> SceneMesh:
        attributes = primitive.attributes

        if attributes.POSITION is None:
            raise GLTFLoadError(f"Primitive of mesh {mesh_name!r} has no POSITION")

        positions = [tuple(v) for v in self.read_accessor(attributes.POSITION)]

        normals: Optional[list] = None

        if attributes.NORMAL is not None:
            normals = [tuple(v) for v in self.read_accessor(attributes.NORMAL)]

        texture_coords = []

        if attributes.TEXCOORD_0 is not None:
            texture_coords.append(
                [tuple(v) for v in self.read_accessor(attributes.TEXCOORD_0)]
            )

        if primitive.indices is not None:
            indices = [v[0] for v in self.read_accessor(primitive.indices)]
        else:
            indices = list(range(len(positions)))

        for index in indices:
            if index >= len(positions):
                raise GLTFLoadError(
                    f"Index {index} out of range in mesh {mesh_name!r} "
                    f"with {len(positions)} vertices"
                )

        mode = pygltflib.TRIANGLES if primitive.mode is None else primitive.mode

        # Primitives without a material point past the material table.
        if primitive.material is None:
            material_index = len(self.gltf.materials)
        else:
            material_index = primitive.material

        return SceneMesh(
            positions=positions,
            faces=_faces_for_mode(mode, indices),
            material_index=material_index,
            normals=normals,
            texture_coords=texture_coords,
            name=mesh_name,
        )

    def read_scene(self) -> Scene:
        scene = Scene(
            materials=[self.read_material(m) for m in self.gltf.materials]
        )

        for mesh_index, mesh in enumerate(self.gltf.meshes):
            name = mesh.name or f"mesh_{mesh_index}"

            for primitive in mesh.primitives:
                scene.meshes.append(self.read_primitive(name, primitive))

        return scene


def load_gltf(path: Path) -> Scene:
    gltf = pygltflib.GLTF2().load(str(path))

    if gltf is None:
        raise GLTFLoadError(f"Unable to read glTF file {path}")

    return GLTFReader(path, gltf).read_scene()
