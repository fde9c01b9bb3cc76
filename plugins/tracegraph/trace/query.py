import logging

from tracegraph.types import EventType, CorruptTraceError, INVALID_ADDRESS
from tracegraph.trace.types import UFO_EVENT

logger = logging.getLogger("TraceGraph.Trace.Query")

#-----------------------------------------------------------------------------
# query.py -- Trace Queries
#-----------------------------------------------------------------------------
#
#    This file translates screen (viewport) coordinates back into the real
#    address / time coordinates of a trace, and looks up the events that
#    live there.
#
#    All queries are pure: they only read from a trace index that has
#    finished ingestion, and a viewport value. Asking the same question
#    twice will always yield the same answer.
#

HEX_WIDTH = \
{
    1: 2,
    2: 4,
    4: 8,
    8: 16,
}

def format_value(value, size):
    """
    Format an accessed value as fixed-width hex, based on the access size.
    """
    try:
        width = HEX_WIDTH[size]
    except KeyError:
        raise CorruptTraceError(f"Bad memory access size ({size}) in trace") from None
    return f"{value:0{width}X}"

#-----------------------------------------------------------------------------
# Point Queries
#-----------------------------------------------------------------------------

def resolve_point(index, viewport, x, y):
    """
    Convert a viewport coordinate to a real (address, time) pair.
    """
    address = index.display_to_real(viewport.display_address_at(x))
    time = viewport.time_at(y)
    return (address, time)

def point_query(index, viewport, x, y):
    """
    Return the event drawn at the given viewport coordinate.

    If there is no event at that position, UFO_EVENT is returned.
    """
    address, time = resolve_point(index, viewport, x, y)

    block = index.find_block(address)
    if block is None:
        return UFO_EVENT

    #
    # events are widened to at least 'size_px' worth of screen space on
    # either axis, the same as they are drawn. this keeps tiny events
    # clickable when zoomed far out
    #

    min_duration = max(1, viewport.size_px / viewport.time_zoom_factor)
    min_width = viewport.size_px / viewport.address_zoom_factor

    for event in block.events:

        # we are too far in time
        if time < event.time:
            break

        if time < event.time + min_duration and \
           event.address <= address < event.address + max(event.size, min_width):
            return event

    return UFO_EVENT

#-----------------------------------------------------------------------------
# Range Queries
#-----------------------------------------------------------------------------

class Annotation(object):
    """
    A formatted memory access, as listed in a range report.
    """

    def __init__(self, event):
        self.event = event
        self.kind = EventType.W if event.type == EventType.W else EventType.R
        self.text = format_value(event.value, event.size)

    @property
    def is_write(self):
        return self.kind == EventType.W

    def __str__(self):
        return f"{self.kind.name}:{self.text}"

    def __repr__(self):
        return f"<Annotation {self}>"

class RangeReport(object):
    """
    The memory accesses found within a rectangle of the trace graph.
    """

    def __init__(self, address_start, address_end, time_start, time_end, annotations):
        self.address_start = address_start
        self.address_end = address_end
        self.time_start = time_start
        self.time_end = time_end
        self.annotations = annotations

    def __len__(self):
        return len(self.annotations)

    def __iter__(self):
        return iter(self.annotations)

    def __str__(self):
        data = ' '.join(str(annotation) for annotation in self.annotations)
        return '\n'.join([
            f"Address: 0x{self.address_start:x} - 0x{self.address_end:x}",
            f"Time: {self.time_start} - {self.time_end}",
            f"Data: {data}"
        ])

def normalize_rect(rect):
    """
    Return the given (x1, y1, x2, y2) rectangle as (left, top, right, bottom).
    """
    x1, y1, x2, y2 = rect
    return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))

def range_query(index, viewport, rect):
    """
    Collect the memory reads / writes within a rectangle of the viewport.

    Only memory blocks that entirely contain the address range of the
    rectangle are considered, so a selection that straddles two blocks
    reports no data.
    """
    left, top, right, bottom = normalize_rect(rect)
    a_start, t_start = resolve_point(index, viewport, left, top)
    a_end, t_end = resolve_point(index, viewport, right, bottom)

    annotations = []
    for block in index.blocks:

        # we are too far in memory space
        if a_end < block.address:
            break

        if not (a_start >= block.address and a_end <= block.end_address):
            continue

        for event in block.events:

            # we are too far in time
            if t_end < event.time:
                break

            if event.type not in (EventType.R, EventType.W):
                continue

            if t_start <= event.time <= t_end and a_start <= event.address <= a_end:
                annotations.append(Annotation(event))

    if a_start == INVALID_ADDRESS or a_end == INVALID_ADDRESS:
        logger.debug("Range query landed outside of the mapped regions")

    return RangeReport(a_start, a_end, t_start, t_end, annotations)

#-----------------------------------------------------------------------------
# Visibility
#-----------------------------------------------------------------------------

def visible_blocks(index, viewport, width):
    """
    Yield the memory blocks that intersect the visible window.
    """
    view_end = viewport.view_address + width / viewport.address_zoom_factor

    for block in index.blocks:

        # blocks are ordered in display space too, so the rest are off-screen
        if block.display_address > view_end:
            break

        if block.display_end_address > viewport.view_address:
            yield block

def visible_events(index, viewport, width, height):
    """
    Yield (block, event) pairs for every event in the visible window.
    """
    time_end = viewport.view_time + height / viewport.time_zoom_factor

    for block in visible_blocks(index, viewport, width):
        for event in block.events:
            if event.time > time_end:
                break
            if event.time >= viewport.view_time:
                yield (block, event)
