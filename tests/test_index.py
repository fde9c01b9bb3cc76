import pytest

from tracegraph.types import PAGE_SIZE, TraceState, EventType
from tracegraph.trace.index import TraceIndex

from conftest import make_event


def test_ingest_creates_page_aligned_block():
    index = TraceIndex()
    index.begin()
    event = make_event(1, 0x1234, size=4, type=EventType.W)

    index.ingest(event)

    assert len(index.blocks) == 1
    block = index.blocks[0]
    assert block.address == 0x1000
    assert block.size == PAGE_SIZE
    assert block.events == [event]
    assert index.total_time == 1


def test_blocks_stay_sorted_for_any_address_order():
    addresses = [0x9000, 0x1000, 0x5008, 0x1FFF, 0x3000, 0x0, 0xFFFFFFFFFFFFF010, 0x5FF0]
    index = TraceIndex()
    index.begin()
    for time, address in enumerate(addresses):
        index.ingest(make_event(time, address))

    starts = [block.address for block in index.blocks]
    assert starts == sorted(starts)
    assert starts == [0x0, 0x1000, 0x3000, 0x5000, 0x9000, 0xFFFFFFFFFFFFF000]


def test_events_in_a_block_keep_arrival_order():
    index = TraceIndex()
    index.begin()
    events = [
        make_event(1, 0x1010),
        make_event(2, 0x7000),
        make_event(2, 0x1020),
        make_event(5, 0x1000),
    ]
    for event in events:
        index.ingest(event)

    block = index.find_block(0x1000)
    assert [e.time for e in block.events] == [1, 2, 5]
    assert index.event_count == 4


def test_total_time_is_the_latest_event():
    index = TraceIndex()
    index.begin()
    index.ingest(make_event(3, 0x1000))
    index.ingest(make_event(42, 0x2000))
    index.ingest(make_event(42, 0x3000))
    assert index.total_time == 42


def test_find_block_misses_uncovered_addresses():
    index = TraceIndex()
    index.begin()
    index.ingest(make_event(0, 0x1000))
    index.ingest(make_event(1, 0x3000))

    assert index.find_block(0x0FFF) is None
    assert index.find_block(0x2000) is None
    assert index.find_block(0x1FFF).address == 0x1000
    assert index.find_block(0x3000).address == 0x3000


def test_finish_moves_to_ready_and_computes_regions():
    index = TraceIndex()
    assert index.state == TraceState.NO_TRACE

    index.begin()
    assert index.state == TraceState.PROCESSING
    index.ingest(make_event(0, 0x1000))
    index.finish()

    assert index.ready
    assert index.total_bytes == PAGE_SIZE
    assert len(index.regions) == 1


def test_begin_drops_the_previous_trace():
    index = TraceIndex()
    index.begin()
    index.ingest(make_event(10, 0x1000))
    index.finish()

    index.begin()

    assert index.blocks == []
    assert index.regions == []
    assert index.total_time == 0
    assert index.total_bytes == 0


def test_ingest_outside_of_a_load_is_rejected():
    index = TraceIndex()
    with pytest.raises(AssertionError):
        index.ingest(make_event(0, 0x1000))


def test_out_of_order_events_are_not_checked_by_default():
    index = TraceIndex()
    index.begin()
    index.ingest(make_event(10, 0x1000))
    index.ingest(make_event(5, 0x1000))
    assert index.event_count == 2


def test_dev_mode_rejects_out_of_order_events(monkeypatch):
    monkeypatch.setenv("TRACEGRAPH_DEV", "1")
    index = TraceIndex()
    index.begin()
    index.ingest(make_event(10, 0x1000))

    with pytest.raises(AssertionError):
        index.ingest(make_event(5, 0x2000))


def test_ingest_all_drains_an_iterator():
    index = TraceIndex()
    index.begin()
    count = index.ingest_all(make_event(t, 0x1000 * t) for t in range(5))
    assert count == 5
    assert len(index.blocks) == 5
