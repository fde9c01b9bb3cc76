import collections

from tracegraph.types import EventType

#-----------------------------------------------------------------------------
# Trace Events
#-----------------------------------------------------------------------------

class Event(collections.namedtuple("Event", ["time", "address", "size", "id", "type", "value"])):
    """
    A single memory access or instruction execution from a trace.
    """
    __slots__ = ()

    def __new__(cls, time=0, address=0, size=0, id=-1, type=EventType.UFO, value=0):
        return super(Event, cls).__new__(cls, time, address, size, id, EventType(type), value)

    @property
    def end_address(self):
        return self.address + self.size

    @property
    def is_ufo(self):
        return bool(self.type & EventType.UFO)

    def __str__(self):
        return f"{self.type.name}@{self.time} 0x{self.address:X}:{self.size} = 0x{self.value:X}"

# returned by point queries that do not land on any event
UFO_EVENT = Event()

#-----------------------------------------------------------------------------
# Memory Blocks & Regions
#-----------------------------------------------------------------------------

class MemoryBlock(object):
    """
    A page-aligned span of memory and the (time ordered) events touching it.
    """

    def __init__(self, address, size):
        self.address = address
        self.size = size
        self.events = []

        # assigned when regions are computed, after ingestion is complete
        self.display_address = 0
        self.start_region = False

    def __contains__(self, address):
        if self.address <= address < self.end_address:
            return True
        return False

    def __repr__(self):
        return f"<MemoryBlock 0x{self.address:X}-0x{self.end_address:X} ({len(self.events)} events)>"

    @property
    def end_address(self):
        return self.address + self.size

    @property
    def display_end_address(self):
        return self.display_address + self.size

class Region(object):
    """
    A maximal run of address-contiguous memory blocks.
    """

    def __init__(self, address, size, display_address):
        self.address = address
        self.size = size
        self.display_address = display_address

    def __eq__(self, other):
        if not isinstance(other, Region):
            return NotImplemented
        return (self.address, self.size, self.display_address) == \
               (other.address, other.size, other.display_address)

    def __repr__(self):
        return f"<Region 0x{self.address:X}-0x{self.end_address:X} @ display 0x{self.display_address:X}>"

    @property
    def end_address(self):
        return self.address + self.size

    @property
    def display_end_address(self):
        return self.display_address + self.size

    def contains_real(self, address):
        """
        Return True if the given real address falls within this region.
        """
        return self.address <= address < self.end_address

    def contains_display(self, address):
        """
        Return True if the given display address falls within this region.
        """
        return self.display_address <= address < self.display_end_address
