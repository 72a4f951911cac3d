"""
Wavefront OBJ loader with MTL diffuse colors.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..scene import Scene, SceneMesh, SceneMaterial


class OBJLoadError(ValueError):
    pass


def parse_mtl(text: str) -> List[SceneMaterial]:
    materials = []
    current = None

    for line in text.splitlines():
        parts = line.split("#", 1)[0].split()

        if not parts:
            continue

        if parts[0] == "newmtl":
            current = SceneMaterial(name=" ".join(parts[1:]))
            materials.append(current)
        elif parts[0] == "Kd" and current is not None:
            try:
                r, g, b = (float(x) for x in parts[1:4])
            except ValueError:
                raise OBJLoadError(f"Invalid Kd line: {line!r}")

            current.diffuse = (r, g, b)

    return materials


class _Group:
    """
    Collects the faces of one object, group or `usemtl` run with its own vertex list.
    """

    def __init__(self, material_index: int):
        self.material_index = material_index
        self.positions = []
        self.normals = []
        self.texture_coords = []
        self.faces = []
        self.has_normals = True
        self.has_texture_coords = True
        self._lookup: Dict[Tuple, int] = {}

    def add_corner(self, corner, positions, normals, uvs) -> int:
        if corner in self._lookup:
            return self._lookup[corner]

        v, vt, vn = corner

        self.positions.append(positions[v])

        if vn is None:
            self.has_normals = False
            self.normals.append((0.0, 0.0, 0.0))
        else:
            self.normals.append(normals[vn])

        if vt is None:
            self.has_texture_coords = False
            self.texture_coords.append((0.0, 0.0))
        else:
            self.texture_coords.append(uvs[vt])

        self._lookup[corner] = len(self.positions) - 1

        return self._lookup[corner]

    def to_scene_mesh(self, name: str) -> SceneMesh:
        return SceneMesh(
            positions=self.positions,
            faces=self.faces,
            material_index=self.material_index,
            normals=self.normals if self.has_normals else None,
            texture_coords=[self.texture_coords] if self.has_texture_coords else [],
            name=name,
        )


def _resolve(index: str, count: int, line_number: int) -> int:
    i = int(index)

    if i < 0:
        i += count
    else:
        i -= 1

    if not 0 <= i < count:
        raise OBJLoadError(f"Line {line_number}: index {index} out of range")

    return i


def _parse_corner(token, counts, line_number) -> Tuple[int, Optional[int], Optional[int]]:
    parts = token.split("/")

    v = _resolve(parts[0], counts[0], line_number)
    vt = None
    vn = None

    if len(parts) > 1 and parts[1]:
        vt = _resolve(parts[1], counts[1], line_number)

    if len(parts) > 2 and parts[2]:
        vn = _resolve(parts[2], counts[2], line_number)

    return v, vt, vn


def parse_obj(text: str, materials: List[SceneMaterial]) -> Scene:
    positions = []
    normals = []
    uvs = []

    material_names = {m.name: i for i, m in enumerate(materials)}
    groups: List[Tuple[str, _Group]] = []
    current = None
    # Unknown or missing materials point past the material table.
    current_material = len(materials)
    current_name = ""

    for line_number, line in enumerate(text.splitlines(), start=1):
        parts = line.split("#", 1)[0].split()

        if not parts:
            continue

        keyword = parts[0]

        try:
            if keyword == "v":
                x, y, z = (float(c) for c in parts[1:4])
                positions.append((x, y, z))
            elif keyword == "vn":
                x, y, z = (float(c) for c in parts[1:4])
                normals.append((x, y, z))
            elif keyword == "vt":
                u = float(parts[1])
                v = float(parts[2]) if len(parts) > 2 else 0.0
                uvs.append((u, v))
            elif keyword in ("o", "g"):
                current_name = " ".join(parts[1:])
                current = None
            elif keyword == "usemtl":
                current_material = material_names.get(
                    " ".join(parts[1:]), len(materials)
                )
                current = None
            elif keyword in ("f", "l", "p"):
                if current is None:
                    current = _Group(current_material)
                    groups.append((current_name, current))

                counts = (len(positions), len(uvs), len(normals))
                face = tuple(
                    current.add_corner(
                        _parse_corner(token, counts, line_number),
                        positions,
                        normals,
                        uvs,
                    )
                    for token in parts[1:]
                )

                if keyword == "l":
                    current.faces += [
                        (face[i], face[i + 1]) for i in range(len(face) - 1)
                    ]
                elif keyword == "p":
                    current.faces += [(i,) for i in face]
                else:
                    current.faces.append(face)
        except OBJLoadError:
            raise
        except (ValueError, IndexError):
            raise OBJLoadError(f"Line {line_number}: cannot parse {line!r}")

    return Scene(
        meshes=[group.to_scene_mesh(name) for name, group in groups],
        materials=materials,
    )


def load_obj(path: Path) -> Scene:
    text = path.read_text()
    materials = []

    for line in text.splitlines():
        parts = line.split()

        if parts and parts[0] == "mtllib":
            mtl_path = path.parent / " ".join(parts[1:])

            if mtl_path.is_file():
                materials += parse_mtl(mtl_path.read_text())

    return parse_obj(text, materials)
