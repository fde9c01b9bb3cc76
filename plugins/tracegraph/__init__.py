from tracegraph.util.log import logging_started, start_logging

if not logging_started():
    logger = start_logging()

from tracegraph.types import *
from tracegraph.trace.types import Event, MemoryBlock, Region, UFO_EVENT
from tracegraph.trace.index import TraceIndex
from tracegraph.trace.query import point_query, range_query, RangeReport, Annotation
from tracegraph.viewport import Viewport
from tracegraph.graph import TraceGraphController, TraceGraphModel

__version__ = "0.1.0"
