"""Locating and reading map documents"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .errors import ResourceNotFoundError, ResourceReadError

logger = logging.getLogger(__name__)


class ResourceLocator:
    """
    Finds documents by name in an ordered list of directories.

    Names may be given with or without extension:

        locator = ResourceLocator(["maps", "assets/maps"])
        data, path = locator.read("level1")      # maps/level1.tmx

    External tilesets are resolved relative to the document that references
    them first, then through the search paths.
    """

    def __init__(self, search_paths: Iterable[Union[str, Path]] = (".",),
                 default_extension: str = ".tmx"):
        self.search_paths: List[Path] = [Path(p) for p in search_paths]
        self.default_extension = default_extension

    def _candidates(self, name: Union[str, Path], extension: Optional[str],
                    base_dir: Optional[Path]) -> List[Path]:
        name = Path(name)
        if not name.suffix and extension:
            name = name.with_name(name.name + extension)
        if name.is_absolute():
            return [name]
        directories = ([base_dir] if base_dir is not None else []) + self.search_paths
        return [directory / name for directory in directories]

    def locate(self, name: Union[str, Path], extension: Optional[str] = None,
               base_dir: Optional[Path] = None) -> Path:
        """
        Return the first existing file for `name`.

        Raises:
        -------
        ResourceNotFoundError : no candidate exists
        """
        if extension is None:
            extension = self.default_extension
        candidates = self._candidates(name, extension, base_dir)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise ResourceNotFoundError(str(name), candidates)

    def read(self, name: Union[str, Path], extension: Optional[str] = None,
             base_dir: Optional[Path] = None) -> Tuple[bytes, Path]:
        """
        Locate `name` and return (content, path).

        Raises:
        -------
        ResourceNotFoundError : no candidate exists
        ResourceReadError : the file exists but couldn't be read
        """
        path = self.locate(name, extension, base_dir)
        return read_file(path), path


def read_file(path: Union[str, Path]) -> bytes:
    """Read a whole file, turning OS errors into layout errors."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        raise ResourceNotFoundError(str(path), [path]) from None
    except OSError as e:
        raise ResourceReadError(path, e.strerror or str(e)) from e
    logger.debug("read %d bytes from %s", len(data), path)
    return data
