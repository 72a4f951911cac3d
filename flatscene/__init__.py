from .util import to_f32
from .types import Mesh, Vertex
from .scene import Scene, SceneMesh, SceneMaterial, PrimitiveType, \
    MaterialLookupError
from .flatten import FlattenResult, flatten_scene
from .writer import Asset, AssetFormatError, write_asset, read_asset
from .postprocess import PostProcess, DEFAULT_FLAGS, apply_post_processing
from .importer import SceneImportError, import_scene
