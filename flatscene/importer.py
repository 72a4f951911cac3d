from pathlib import Path
from typing import Union
from .formats import LOADERS
from .postprocess import PostProcess, DEFAULT_FLAGS, apply_post_processing
from .scene import Scene


class SceneImportError(ValueError):
    pass


def import_scene(
    path: Union[str, Path], flags: PostProcess = DEFAULT_FLAGS
) -> Scene:
    """
    Loads a model file and runs the requested post-processing steps on
    it. Any failure is raised as a SceneImportError with a readable
    message.
    """

    path = Path(path)

    if not path.is_file():
        raise SceneImportError(f"Unable to open file \"{path}\".")

    loader = LOADERS.get(path.suffix.lower())

    if loader is None:
        raise SceneImportError(
            f"No suitable reader found for the file format of file \"{path}\"."
        )

    try:
        scene = loader(path)
    except (OSError, ValueError, KeyError, IndexError, TypeError) as e:
        raise SceneImportError(f"{path.name}: {e}") from e

    return apply_post_processing(scene, flags)
