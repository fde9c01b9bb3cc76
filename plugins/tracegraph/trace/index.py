import bisect
import logging

#-----------------------------------------------------------------------------
# index.py -- Trace Index
#-----------------------------------------------------------------------------
#
#    This file contains the address / time index that a trace is loaded
#    into before it can be explored. Events are delivered one at a time by
#    whatever owns the trace (a database client, a file parser, ...) and
#    are bucketed into page-sized memory blocks keyed by address.
#
#    The lifetime of an index is split into three, strictly sequenced
#    phases:
#
#      1. ingestion -- begin() followed by any number of ingest() calls
#      2. compression -- finish() marks the end of the stream and assigns
#         regions / display addresses to the blocks (exactly once)
#      3. exploration -- address translation and queries, read-only
#
#    There is no locking here. The owner of the index is responsible for
#    never overlapping these phases (eg, querying while still ingesting).
#
#    IMPORTANT: events MUST be delivered in non-decreasing time order
#    across the whole stream. This is what keeps the event list of each
#    block sorted, and it is not re-validated unless running in developer
#    mode (TRACEGRAPH_DEV).
#

from tracegraph.types import PAGE_SIZE, PAGE_MASK, TraceState
from tracegraph.util.misc import is_dev_mode
from tracegraph.util.debug import TimeIt
from tracegraph.trace.types import MemoryBlock
from tracegraph.trace.analysis import compress_regions, RegionMap

logger = logging.getLogger("TraceGraph.Trace.Index")

class TraceIndex(object):
    """
    A dense, query-able index over the events of a sparse memory trace.
    """

    def __init__(self):
        self.reset()

    #-------------------------------------------------------------------------
    # Properties
    #-------------------------------------------------------------------------

    @property
    def blocks(self):
        """
        Return the memory blocks of the trace, sorted by address.
        """
        return self._blocks

    @property
    def regions(self):
        """
        Return the regions computed for the trace, sorted by address.
        """
        return list(self._region_map)

    @property
    def event_count(self):
        """
        Return the number of events held by the index.
        """
        return sum(len(block.events) for block in self._blocks)

    @property
    def ready(self):
        return self.state == TraceState.READY

    #-------------------------------------------------------------------------
    # Lifecycle
    #-------------------------------------------------------------------------

    def reset(self):
        """
        Drop everything held by the index.
        """
        self.state = TraceState.NO_TRACE
        self.total_time = 0
        self.total_bytes = 0

        self._blocks = []
        self._block_starts = []
        self._region_map = RegionMap()

        self._last_time = 0
        self._validate_order = is_dev_mode()

    def begin(self):
        """
        Prepare the index to ingest a new trace.
        """
        self.reset()
        self.state = TraceState.PROCESSING
        logger.info("Ingesting a new trace...")

    def finish(self):
        """
        Mark the end of the event stream, and compute regions for the trace.
        """
        assert self.state == TraceState.PROCESSING, f"No trace is being ingested ({self.state})"
        self.compress()
        self.state = TraceState.READY
        logger.info(f"Trace ready: {len(self._blocks):,} blocks, {self.total_bytes:,} display bytes, {self.total_time:,} time units")

    #-------------------------------------------------------------------------
    # Ingestion
    #-------------------------------------------------------------------------

    def ingest(self, event):
        """
        Place a single trace event into the index.

        The caller MUST deliver events with non-decreasing time.
        """
        assert self.state == TraceState.PROCESSING, "Events can only be ingested between begin() and finish()"

        if self._validate_order:
            assert event.time >= self._last_time, \
                f"Out of order event (time {event.time} < {self._last_time})"
            self._last_time = event.time

        block = self.find_block(event.address)

        # we need to create a new memory block for our event
        if block is None:
            block = MemoryBlock(event.address & PAGE_MASK, PAGE_SIZE)
            index = bisect.bisect_right(self._block_starts, block.address)
            self._blocks.insert(index, block)
            self._block_starts.insert(index, block.address)

        block.events.append(event)

        if event.time > self.total_time:
            self.total_time = event.time

    def ingest_all(self, events):
        """
        Drain an iterable of (time ordered) events into the index.

        Returns the number of events ingested.
        """
        count = 0
        for event in events:
            self.ingest(event)
            count += 1
        return count

    #-------------------------------------------------------------------------
    # Compression
    #-------------------------------------------------------------------------

    def compress(self):
        """
        Merge address-contiguous blocks into regions and assign display addresses.

        Running this again without new events yields the same result.
        """
        with TimeIt("Region compression"):
            regions, self.total_bytes = compress_regions(self._blocks)
        self._region_map.load(regions)

    #-------------------------------------------------------------------------
    # Lookup / Translation
    #-------------------------------------------------------------------------

    def find_block(self, address):
        """
        Return the memory block covering the given real address, or None.
        """
        index = bisect.bisect_right(self._block_starts, address) - 1
        if index < 0:
            return None

        block = self._blocks[index]
        if address in block:
            return block

        return None

    def real_to_display(self, address):
        """
        Translate a real address to a display address.
        """
        return self._region_map.real_to_display(address)

    def display_to_real(self, address):
        """
        Translate a display address to a real address.
        """
        return self._region_map.display_to_real(address)
