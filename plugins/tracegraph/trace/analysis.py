import bisect
import logging

from tracegraph.types import INVALID_ADDRESS
from tracegraph.trace.types import Region

logger = logging.getLogger("TraceGraph.Trace.Analysis")

#-----------------------------------------------------------------------------
# analysis.py -- Trace Analysis
#-----------------------------------------------------------------------------
#
#    This file contains the post-processing that runs over a fully ingested
#    trace index. Execution traces tend to touch a handful of small islands
#    scattered across a huge 64-bit address space (code, stack, heap, ...)
#    so drawing 'all of memory' linearly would leave the viewer almost
#    entirely empty.
#
#    To avoid this, address-contiguous memory blocks are merged into
#    regions, and every block is assigned a 'display address' in a compact
#    coordinate space where the gaps between regions simply do not exist.
#
#    NOTE: no cosmetic spacing is reserved between two unrelated regions.
#    they end up visually touching each other, and it is up to the renderer
#    to draw a marker line where a block starts a new region.
#

def compress_regions(blocks):
    """
    Merge the given (sorted) memory blocks into regions, and assign display addresses.

    Returns a tuple of (regions, total_bytes).
    """
    regions = []
    cur_address = 0

    i, num_blocks = 0, len(blocks)
    while i < num_blocks:
        block = blocks[i]

        # create a new region, starting at this block
        region = Region(block.address, block.size, cur_address)
        block.display_address = cur_address
        block.start_region = True
        cur_address += block.size
        i += 1

        # absorb the following blocks that are directly adjacent to the region
        while i < num_blocks and region.end_address == blocks[i].address:
            block = blocks[i]
            region.size += block.size
            block.display_address = cur_address
            block.start_region = False
            cur_address += block.size
            i += 1

        regions.append(region)

    if regions:
        total_bytes = regions[-1].display_end_address
    else:
        total_bytes = 0

    logger.debug(f"Compressed {num_blocks} blocks into {len(regions)} regions ({total_bytes:,} display bytes)")
    return (regions, total_bytes)

class RegionMap(object):
    """
    Bidirectional translation between real and display addresses.
    """

    def __init__(self, regions=None):
        self._regions = []
        self._real_starts = []
        self._display_starts = []
        self.load(regions or [])

    def __len__(self):
        return len(self._regions)

    def __iter__(self):
        return iter(self._regions)

    def load(self, regions):
        """
        Replace the regions used for address translation.
        """
        self._regions = list(regions)
        self._real_starts = [r.address for r in self._regions]
        self._display_starts = [r.display_address for r in self._regions]

    def real_to_display(self, address):
        """
        Return the display address of a given real address.

        If no region covers the address, INVALID_ADDRESS is returned.
        """
        region = self._lookup(self._real_starts, address)
        if region and region.contains_real(address):
            return address - region.address + region.display_address
        return INVALID_ADDRESS

    def display_to_real(self, address):
        """
        Return the real address of a given display address.

        If no region covers the address, INVALID_ADDRESS is returned.
        """
        region = self._lookup(self._display_starts, address)
        if region and region.contains_display(address):
            return address - region.display_address + region.address
        return INVALID_ADDRESS

    def _lookup(self, starts, address):
        """
        Return the last region that starts at or before the given address.
        """
        index = bisect.bisect_right(starts, address) - 1
        if index < 0:
            return None
        return self._regions[index]
