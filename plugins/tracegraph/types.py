import enum

#-----------------------------------------------------------------------------
# types.py -- Core Types
#-----------------------------------------------------------------------------
#
#    The purpose of this file is to host basic types / primitives that
#    are shared across the trace index, the query engine, and the viewport
#    controller, and could be prone to causing cyclic dependency problems
#    if left with their respective subsystems.
#

#-----------------------------------------------------------------------------
# Address Space
#-----------------------------------------------------------------------------

MAX_U64 = 0xFFFFFFFFFFFFFFFF

# returned by address translation when no region covers the given address
INVALID_ADDRESS = MAX_U64

# blocks are made the same size as memory pages on x86
PAGE_SIZE = 0x1000
PAGE_MASK = MAX_U64 ^ (PAGE_SIZE - 1)

# drags shorter than this (in display units) on either axis are misclicks
MISCLICK_DISTANCE = 10

#-----------------------------------------------------------------------------
# Event Types
#-----------------------------------------------------------------------------

class EventType(enum.IntFlag):
    R   = 1 << 0
    W   = 1 << 1
    INS = 1 << 2
    UFO = 1 << 3

class TraceState(enum.Enum):
    NO_TRACE   = 0
    PROCESSING = 1
    READY      = 2

#-----------------------------------------------------------------------------
# Viewport / Gesture Types
#-----------------------------------------------------------------------------

class ZoomAxis(enum.IntFlag):
    NONE    = 0
    ADDRESS = 1 << 0
    TIME    = 1 << 1
    BOTH    = (ADDRESS | TIME)

class ZoomDirection(enum.Enum):
    NONE     = 0
    FORWARD  = 1
    BACKWARD = 2

class Modifier(enum.Enum):
    NONE    = 0
    CONTROL = 1
    SHIFT   = 2
    ALT     = 3

class MouseButton(enum.Enum):
    LEFT  = 0
    RIGHT = 1

class Key(enum.Enum):
    UP    = 0
    DOWN  = 1
    LEFT  = 2
    RIGHT = 3
    PLUS  = 4
    MINUS = 5

#-----------------------------------------------------------------------------
# Errors
#-----------------------------------------------------------------------------

class CorruptTraceError(RuntimeError):
    """
    Raised when the trace holds data that cannot come from a sane tracer.

    This is not a recoverable condition, it means the trace (or whatever
    fed it to the index) is broken. Callers should let it propagate.
    """
    pass
