from .gltf import load_gltf, GLTFLoadError
from .obj import load_obj, OBJLoadError

LOADERS = {
    ".gltf": load_gltf,
    ".glb": load_gltf,
    ".obj": load_obj,
}
