import pytest

from tmx_layout import MalformedDocumentError, iter_events
from tmx_layout.events import END, START


def test_events_in_document_order():
    events = list(iter_events(b'<map width="2"><layer name="a"/><layer name="b"/></map>'))

    assert [(e.kind, e.tag) for e in events] == [
        (START, "map"), (START, "layer"), (END, "layer"),
        (START, "layer"), (END, "layer"), (END, "map"),
    ]
    assert events[0].attributes == {"width": "2"}
    assert events[3].attributes == {"name": "b"}


def test_ordinals_match_between_start_and_end():
    events = list(iter_events(b"<map><tileset><tile/></tileset><layer/></map>"))
    ordinals = {(e.kind, e.tag): e.ordinal for e in events}

    assert ordinals[(START, "map")] == 1
    assert ordinals[(START, "tile")] == 3
    assert ordinals[(END, "tile")] == 3
    assert ordinals[(END, "tileset")] == 2
    assert ordinals[(START, "layer")] == 4


def test_text_comes_with_end_event():
    events = list(iter_events(b'<data encoding="csv">1,2,3</data>'))
    assert events[0].text is None
    assert events[1].text == "1,2,3"


def test_malformed_document():
    with pytest.raises(MalformedDocumentError):
        list(iter_events(b"<map><layer></map>"))


def test_empty_document():
    with pytest.raises(MalformedDocumentError):
        list(iter_events(b""))
