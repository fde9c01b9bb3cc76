import pytest

from tracegraph.types import EventType
from tracegraph.trace.types import Event
from tracegraph.trace.index import TraceIndex


def make_event(time, address, size=1, type=EventType.R, value=0, id=None):
    if id is None:
        id = time
    return Event(time=time, address=address, size=size, id=id, type=type, value=value)


@pytest.fixture
def build_index():
    """Return a helper that loads a list of events into a finished index."""

    def _build(events):
        index = TraceIndex()
        index.begin()
        for event in events:
            index.ingest(event)
        index.finish()
        return index

    return _build


@pytest.fixture(autouse=True)
def _no_dev_mode(monkeypatch):
    monkeypatch.delenv("TRACEGRAPH_DEV", raising=False)
