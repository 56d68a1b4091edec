"""
Exception hierarchy for layout loading

=============================================================================
FATAL VS RECOVERABLE
=============================================================================

Only a handful of problems stop a load:

    LayoutError
    ├── ResourceUnavailableError      document missing or unreadable
    │   ├── ResourceNotFoundError
    │   └── ResourceReadError
    ├── MalformedDocumentError        the XML itself is broken
    └── StructuralError               the map cannot be built
        ├── MissingGeometryError
        └── TileSetMismatchError

Everything else (a tile without an id, a property with a bad value, an
object without a position...) is recorded as a ParseWarning and the parser
keeps going.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


class LayoutError(Exception):
    """Base class for every error raised while loading a layout."""


class ResourceUnavailableError(LayoutError):
    """The document could not be obtained, parsing never started."""


class ResourceNotFoundError(ResourceUnavailableError):
    def __init__(self, name: str, searched=()):
        self.name = name
        self.searched = tuple(searched)
        where = ", ".join(str(p) for p in self.searched) or "no search paths"
        super().__init__(f"resource '{name}' couldn't be found (searched: {where})")


class ResourceReadError(ResourceUnavailableError):
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"couldn't read '{path}': {reason}")


class MalformedDocumentError(LayoutError):
    """The XML tokenizer rejected the document."""


class StructuralError(LayoutError):
    """
    The document is well-formed XML but does not describe a usable map.

    Carries the offending element and its position in the event stream so
    the message can point at it.
    """

    def __init__(self, message: str, element: Optional[str] = None,
                 ordinal: Optional[int] = None):
        self.element = element
        self.ordinal = ordinal
        if element is not None:
            message = f"{message} [<{element}> #{ordinal}]"
        super().__init__(message)


class MissingGeometryError(StructuralError):
    """Map size or tile size is absent, non-numeric or not positive."""


class TileSetMismatchError(StructuralError):
    """Two tiles of the same layer come from different tilesets."""


@dataclass(frozen=True)
class ParseWarning:
    """A recoverable problem met while parsing."""
    message: str
    element: Optional[str] = None     # Tag of the element being processed
    ordinal: Optional[int] = None     # Position of that element in the stream

    def __str__(self) -> str:
        if self.element is None:
            return self.message
        return f"{self.message} [<{self.element}> #{self.ordinal}]"
