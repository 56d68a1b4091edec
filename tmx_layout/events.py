"""
Element event stream over ElementTree

The parser consumes a flat sequence of start/end events instead of a
document tree. ElementTree's iterparse already produces that sequence; this
module wraps it into ElementEvent records and prunes every element as soon
as its end event has been handed out, so memory stays flat whatever the map
size.
"""

import io
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Union

from .errors import MalformedDocumentError

START = "start"
END = "end"


@dataclass(frozen=True)
class ElementEvent:
    """
    One tokenizer event.

    kind:       START or END
    tag:        element name
    attributes: attribute map in document order (START only)
    text:       character data directly inside the element (END only)
    ordinal:    1-based position of the element in the document
    """
    kind: str
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    ordinal: int = 0


def iter_events(source: Union[bytes, str, io.IOBase]) -> Iterator[ElementEvent]:
    """
    Yield ElementEvents for an XML document.

    `source` is raw bytes, a file path, or a binary file object.

    Raises:
    -------
    MalformedDocumentError : the XML is not well-formed
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    stack = []          # (element, ordinal) of the open elements
    counter = 0

    try:
        for kind, elem in ET.iterparse(source, events=(START, END)):
            if kind == START:
                counter += 1
                stack.append((elem, counter))
                yield ElementEvent(START, elem.tag, dict(elem.attrib), ordinal=counter)
            else:
                _, ordinal = stack.pop()
                yield ElementEvent(END, elem.tag, text=elem.text, ordinal=ordinal)
                # Drop the finished element from its parent to keep no tree
                elem.clear()
                if stack:
                    stack[-1][0].remove(elem)
    except ET.ParseError as e:
        raise MalformedDocumentError(f"malformed XML: {e}") from e
