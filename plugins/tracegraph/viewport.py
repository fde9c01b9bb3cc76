import collections

from tracegraph.types import MAX_U64, MISCLICK_DISTANCE, ZoomAxis, ZoomDirection

#------------------------------------------------------------------------------
# viewport.py -- Viewport Arithmetic
#------------------------------------------------------------------------------
#
#    The viewport describes the window of the (display address, time) plane
#    that is currently visible, and how 'exaggerated' events are drawn so
#    that they remain visible (and clickable) when zoomed far out.
#
#    A viewport is an immutable value. Every pan / zoom operation in this
#    file is a pure function that returns a new viewport, leaving it up to
#    the owner of the viewing session (see graph.py) to store the result
#    and notify anyone that cares.
#
#    The view origins are unsigned 64-bit quantities. Panning saturates at
#    both ends of that range rather than wrapping around.
#

class Viewport(collections.namedtuple("Viewport", [
        "view_address",
        "view_time",
        "address_zoom_factor",
        "time_zoom_factor",
        "size_factor",
        "size_px"
    ])):
    """
    The visible window of a trace graph.

    Zoom factors are expressed as display units (pixels) per real unit.
    """
    __slots__ = ()

    def __new__(cls, view_address=0, view_time=0, address_zoom_factor=1.0,
                time_zoom_factor=1.0, size_factor=1.0, size_px=1):
        return super(Viewport, cls).__new__(
            cls,
            view_address,
            view_time,
            address_zoom_factor,
            time_zoom_factor,
            size_factor,
            size_px
        )

    @property
    def at_origin(self):
        """
        Return True if the view is anchored at the start of the trace.
        """
        return self.view_address == 0 and self.view_time == 0

    def display_address_at(self, x):
        """
        Return the display address under the given x coordinate.
        """
        return saturating_add(self.view_address, int(x / self.address_zoom_factor))

    def time_at(self, y):
        """
        Return the trace time under the given y coordinate.
        """
        return saturating_add(self.view_time, int(y / self.time_zoom_factor))

#------------------------------------------------------------------------------
# Panning
#------------------------------------------------------------------------------

def saturating_add(value, delta):
    """
    Add a signed delta to an unsigned 64-bit value, clamping instead of wrapping.
    """
    result = value + delta
    if result < 0:
        return 0
    if result > MAX_U64:
        return MAX_U64
    return result

def address_move(viewport, delta):
    """
    Pan the view along the address axis by delta display units.
    """
    return viewport._replace(view_address=saturating_add(viewport.view_address, delta))

def time_move(viewport, delta):
    """
    Pan the view along the time axis by delta time units.
    """
    return viewport._replace(view_time=saturating_add(viewport.view_time, delta))

def move_to(viewport, view_address=None, view_time=None):
    """
    Jump the view origin(s) to absolute positions.
    """
    if view_address is not None:
        viewport = viewport._replace(view_address=view_address)
    if view_time is not None:
        viewport = viewport._replace(view_time=view_time)
    return viewport

#------------------------------------------------------------------------------
# Zooming
#------------------------------------------------------------------------------

def fit_zoom(viewport, width, height, total_bytes, total_time):
    """
    Compute zoom factors that fit the whole trace into the given dimensions.

    An axis with no pixels to fit into (a collapsed host widget) keeps its
    current zoom factor.
    """
    address_zoom_factor = viewport.address_zoom_factor
    if width > 0:
        if total_bytes > 0:
            address_zoom_factor = width / float(total_bytes)
        else:
            address_zoom_factor = 1.0

    time_zoom_factor = viewport.time_zoom_factor
    if height > 0:
        if total_time > 0:
            time_zoom_factor = height / float(total_time)
        else:
            time_zoom_factor = 1.0

    return viewport._replace(
        address_zoom_factor=address_zoom_factor,
        time_zoom_factor=time_zoom_factor
    )

def overview(viewport, width, height, total_bytes, total_time):
    """
    Reset the view to show the entire trace.
    """
    viewport = viewport._replace(view_address=0, view_time=0)
    return fit_zoom(viewport, width, height, total_bytes, total_time)

def _scale(f):
    return (1 + f) / (1 - f)

def wheel_zoom(viewport, x, y, f, axes=ZoomAxis.BOTH):
    """
    Zoom the view in (f > 0) or out (f < 0) around the given cursor position.

    The origin is panned so the point under the cursor stays put as the
    zoom factor is rescaled by (1+f)/(1-f).
    """
    if not (-1.0 < f < 1.0) or f == 0:
        return viewport

    if axes & ZoomAxis.ADDRESS:
        zoom = viewport.address_zoom_factor
        viewport = address_move(viewport, int(x / zoom * (2 * f) / (1 + f)))
        viewport = viewport._replace(address_zoom_factor=zoom * _scale(f))

    if axes & ZoomAxis.TIME:
        zoom = viewport.time_zoom_factor
        viewport = time_move(viewport, int(y / zoom * (2 * f) / (1 + f)))
        viewport = viewport._replace(time_zoom_factor=zoom * _scale(f))

    return viewport

def size_zoom(viewport, f):
    """
    Grow or shrink the drawn size of events, never below their real size.
    """
    if not (-1.0 < f < 1.0):
        return viewport
    size_factor = max(1.0, viewport.size_factor * _scale(f))
    return viewport._replace(size_factor=size_factor)

def adjust_size_px(viewport, step):
    """
    Change the minimum drawn size of an event (in pixels), never below 1.
    """
    return viewport._replace(size_px=max(1, viewport.size_px + step))

def is_misclick(start, end):
    """
    Return True if a drag from start to end is too small to be intentional.
    """
    return abs(start[0] - end[0]) < MISCLICK_DISTANCE or \
           abs(start[1] - end[1]) < MISCLICK_DISTANCE

def rect_zoom(viewport, start, end, width, height, direction=ZoomDirection.FORWARD):
    """
    Zoom to (or out from) the rectangle dragged from start to end.

    Zooming forward fits the dragged rectangle to the full viewport, while
    zooming backward shrinks the full viewport into the dragged rectangle.
    """
    if is_misclick(start, end):
        return viewport

    # nothing sensible to scale against while the host has no area
    if width <= 0 or height <= 0:
        return viewport

    dx = abs(start[0] - end[0])
    dy = abs(start[1] - end[1])
    left = min(start[0], end[0])
    top = min(start[1], end[1])

    if direction == ZoomDirection.FORWARD:
        viewport = address_move(viewport, int(left / viewport.address_zoom_factor))
        viewport = time_move(viewport, int(top / viewport.time_zoom_factor))
        viewport = viewport._replace(
            address_zoom_factor=viewport.address_zoom_factor * (width / float(dx)),
            time_zoom_factor=viewport.time_zoom_factor * (height / float(dy))
        )

    elif direction == ZoomDirection.BACKWARD:
        viewport = viewport._replace(
            address_zoom_factor=viewport.address_zoom_factor * (dx / float(width)),
            time_zoom_factor=viewport.time_zoom_factor * (dy / float(height))
        )
        viewport = address_move(viewport, -int(left / viewport.address_zoom_factor))
        viewport = time_move(viewport, -int(top / viewport.time_zoom_factor))

    else:
        raise ValueError("UNKNOWN ZOOM DIRECTION", direction)

    return viewport
