import logging

from tracegraph.types import *
from tracegraph.util.log import pmsg
from tracegraph.util.debug import timeit
from tracegraph.util.misc import register_callback, notify_callback
from tracegraph.trace.index import TraceIndex
from tracegraph.trace.query import point_query, range_query, resolve_point
from tracegraph import viewport as vp

logger = logging.getLogger("TraceGraph.Graph")

#------------------------------------------------------------------------------
# graph.py -- Trace Graph Controller
#------------------------------------------------------------------------------
#
#    The purpose of this file is to house the 'headless' components of the
#    trace graph (a memory address / time plot of a trace) and its
#    underlying functionality. This is split into a model and controller
#    component, of a typical 'MVC' design pattern.
#
#    The view itself (painting, widget plumbing) belongs to whatever UI
#    hosts the graph. The host forwards its raw input (wheel, mouse, key
#    events, resizes) to the controller, and subscribes to the model's
#    callbacks to learn when it should redraw or show something.
#
#    NOTE: the controller performs no locking. All calls into it (and into
#    the trace index it owns) must be serialized by the host.
#

class TraceGraphController(object):
    """
    The Trace Graph Controller (Logic)
    """

    # fraction of the viewport to pan per arrow key press
    KEY_PAN_SPEED = 0.05

    # divisor applied to raw wheel angle deltas to produce a zoom delta
    WHEEL_DIVISOR = 2000.0

    def __init__(self, width=200, height=200, index=None):
        self.index = index if index is not None else TraceIndex()
        self.model = TraceGraphModel(width, height)

    #-------------------------------------------------------------------------
    # Properties
    #-------------------------------------------------------------------------

    @property
    def viewport(self):
        return self.model.viewport

    @property
    def state(self):
        return self.index.state

    #-------------------------------------------------------------------------
    # Trace Loading
    #-------------------------------------------------------------------------

    @timeit
    def load_trace(self, events):
        """
        Load a trace from an iterable of (time ordered) events.
        """
        self.begin_trace()
        num_events = self.index.ingest_all(events)
        self.finish_trace()
        pmsg(f"Loaded {num_events:,} events")

    def begin_trace(self):
        """
        Prepare the graph for a new trace, dropping any loaded trace.
        """
        self.index.begin()
        self.model.reset_gestures()

    def ingest(self, event):
        """
        Add a single event to the trace being loaded.
        """
        self.index.ingest(event)

    def finish_trace(self):
        """
        Complete the trace being loaded, and show all of it.
        """
        self.index.finish()
        self.zoom_to_overview()
        self.model._notify_trace_loaded()

    def reset(self):
        """
        Unload the trace and return to a pristine view.
        """
        self.index.reset()
        self.model.reset()

    #-------------------------------------------------------------------------
    # Viewport
    #-------------------------------------------------------------------------

    def _apply(self, viewport):
        """
        Commit a new viewport, and notify listeners of the new position.
        """
        self.model.viewport = viewport
        real_address = self.index.display_to_real(viewport.view_address)
        self.model._notify_position_changed(real_address, viewport.view_time)

    def address_move(self, delta):
        """
        Pan the view along the address axis (display units).
        """
        self._apply(vp.address_move(self.viewport, delta))

    def time_move(self, delta):
        """
        Pan the view along the time axis.
        """
        self._apply(vp.time_move(self.viewport, delta))

    def set_address(self, address):
        """
        Move the view to start at the given real address.
        """
        display_address = self.index.real_to_display(address)
        self.model.viewport = vp.move_to(self.viewport, view_address=display_address)
        self.model._notify_position_changed(address, self.viewport.view_time)

    def set_time(self, time):
        """
        Move the view to start at the given time.
        """
        self._apply(vp.move_to(self.viewport, view_time=time))

    def update_zoom_factors(self, width=None, height=None):
        """
        Fit the zoom factors so the whole trace spans the given dimensions.
        """
        if width is None:
            width = self.model.width
        if height is None:
            height = self.model.height

        self._apply(vp.fit_zoom(
            self.viewport,
            width,
            height,
            self.index.total_bytes,
            self.index.total_time
        ))

    def zoom_to_overview(self):
        """
        Reset the view to show the entire trace.
        """
        self._apply(vp.overview(
            self.viewport,
            self.model.width,
            self.model.height,
            self.index.total_bytes,
            self.index.total_time
        ))

    def resize(self, width, height):
        """
        Handle a change of the host viewport dimensions (in pixels).
        """
        self.model.width = width
        self.model.height = height

        # an overview stays an overview, otherwise the zoom level is kept
        if self.viewport.at_origin:
            self.update_zoom_factors()
        else:
            self._apply(self.viewport)

    def wheel(self, x, y, angle_x, angle_y, modifier=Modifier.NONE):
        """
        Handle a mouse wheel event at the given position.
        """
        f = (angle_y + angle_x) / self.WHEEL_DIVISOR

        if modifier == Modifier.ALT:
            self._apply(vp.size_zoom(self.viewport, f))
            return

        axes = {
            Modifier.NONE: ZoomAxis.BOTH,
            Modifier.CONTROL: ZoomAxis.ADDRESS,
            Modifier.SHIFT: ZoomAxis.TIME,
        }.get(modifier)

        if axes is None:
            raise ValueError("UNKNOWN MODIFIER", modifier)

        self.wheel_zoom(x, y, f, axes)

    def wheel_zoom(self, x, y, f, axes=ZoomAxis.BOTH):
        """
        Zoom in (f > 0) or out (f < 0) around the given cursor position.
        """
        self._apply(vp.wheel_zoom(self.viewport, x, y, f, axes))

    def rect_zoom(self, start, end, direction=ZoomDirection.FORWARD):
        """
        Zoom into (or out of) the rectangle dragged from start to end.

        Returns False if the drag was discarded as a misclick.
        """
        if vp.is_misclick(start, end):
            logger.debug(f"Ignoring zoom drag {start} -> {end} (misclick)")
            return False

        self._apply(vp.rect_zoom(
            self.viewport,
            start,
            end,
            self.model.width,
            self.model.height,
            direction
        ))
        return True

    def key_press(self, key):
        """
        Handle a keyboard key press.
        """
        width, height = self.model.width, self.model.height
        viewport, speed = self.viewport, self.KEY_PAN_SPEED

        if key == Key.UP:
            self.time_move(int(-height * speed / viewport.time_zoom_factor))
        elif key == Key.DOWN:
            self.time_move(int(height * speed / viewport.time_zoom_factor))
        elif key == Key.LEFT:
            self.address_move(int(-width * speed / viewport.address_zoom_factor))
        elif key == Key.RIGHT:
            self.address_move(int(width * speed / viewport.address_zoom_factor))
        elif key == Key.PLUS:
            self._apply(vp.adjust_size_px(viewport, 1))
        elif key == Key.MINUS:
            self._apply(vp.adjust_size_px(viewport, -1))
        else:
            raise ValueError("UNKNOWN KEY", key)

    #-------------------------------------------------------------------------
    # Mouse Gestures
    #-------------------------------------------------------------------------

    def mouse_press(self, x, y, button, modifier=Modifier.NONE):
        """
        Handle a mouse button press.
        """
        model = self.model

        if button == MouseButton.LEFT:
            model.drag_start = (x, y)
            model.drag_last_pos = (x, y)
            model.selecting_range = (modifier == Modifier.CONTROL)

        elif button == MouseButton.RIGHT:
            model.zoom_start = (x, y)
            if modifier == Modifier.CONTROL:
                model.zoom_state = ZoomDirection.BACKWARD
            else:
                model.zoom_state = ZoomDirection.FORWARD

        else:
            raise ValueError("UNKNOWN BUTTON", button)

    def mouse_move(self, x, y, buttons=()):
        """
        Handle mouse movement, with the given buttons held down.
        """
        model = self.model

        if MouseButton.LEFT in buttons and model.drag_start:

            # selecting a range of events, so describe what's in it
            if model.selecting_range:
                self.describe_range(model.drag_start + (x, y))

            # dragging the view around
            else:
                last_x, last_y = model.drag_last_pos
                viewport = self.viewport
                self.address_move(int((last_x - x) / viewport.address_zoom_factor))
                self.time_move(int((last_y - y) / viewport.time_zoom_factor))
                model.drag_last_pos = (x, y)

        self.hover(x, y)

    def mouse_release(self, x, y, button):
        """
        Handle a mouse button release.
        """
        model = self.model

        if button == MouseButton.LEFT:
            start = model.drag_start
            selecting_range = model.selecting_range
            model.drag_start = None
            model.selecting_range = False

            if start is None or selecting_range:
                return

            # a (near) stationary click selects the event under the cursor
            if vp.is_misclick(start, (x, y)):
                self.select_event(x, y)

        elif button == MouseButton.RIGHT:
            start, direction = model.zoom_start, model.zoom_state
            model.zoom_start = None
            model.zoom_state = ZoomDirection.NONE

            if start is None or direction == ZoomDirection.NONE:
                return

            self.rect_zoom(start, (x, y), direction)

        else:
            raise ValueError("UNKNOWN BUTTON", button)

    def hover(self, x, y):
        """
        Report the real address / time under the cursor.
        """
        address, time = resolve_point(self.index, self.viewport, x, y)
        self.model._notify_cursor_position_changed(address, time)

    #-------------------------------------------------------------------------
    # Queries
    #-------------------------------------------------------------------------

    def event_at(self, x, y):
        """
        Return the event drawn at the given position (UFO_EVENT if none).
        """
        return point_query(self.index, self.viewport, x, y)

    def select_event(self, x, y):
        """
        Select the event at the given position, and notify listeners.
        """
        event = self.event_at(x, y)
        self.model._notify_event_selected(event)
        return event

    def describe_range(self, rect):
        """
        Describe the memory accesses within the given rectangle, and notify listeners.
        """
        report = range_query(self.index, self.viewport, rect)
        self.model._notify_range_described(report)
        return report

class TraceGraphModel(object):
    """
    The Trace Graph Model (Data)
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.reset()

        #----------------------------------------------------------------------
        # Callbacks
        #----------------------------------------------------------------------

        self._position_changed_callbacks = []
        self._cursor_position_changed_callbacks = []
        self._event_selected_callbacks = []
        self._range_described_callbacks = []
        self._trace_loaded_callbacks = []

    def reset(self):
        self.viewport = vp.Viewport()
        self.reset_gestures()

    def reset_gestures(self):
        self.drag_start = None
        self.drag_last_pos = (0, 0)
        self.selecting_range = False
        self.zoom_start = None
        self.zoom_state = ZoomDirection.NONE

    #----------------------------------------------------------------------
    # Callbacks
    #----------------------------------------------------------------------

    def position_changed(self, callback):
        """
        Subscribe a callback for a view position changed event.
        """
        register_callback(self._position_changed_callbacks, callback)

    def _notify_position_changed(self, address, time):
        """
        Notify listeners of a view position changed event.
        """
        notify_callback(self._position_changed_callbacks, address, time)

    def cursor_position_changed(self, callback):
        """
        Subscribe a callback for a cursor position changed event.
        """
        register_callback(self._cursor_position_changed_callbacks, callback)

    def _notify_cursor_position_changed(self, address, time):
        """
        Notify listeners of a cursor position changed event.
        """
        notify_callback(self._cursor_position_changed_callbacks, address, time)

    def event_selected(self, callback):
        """
        Subscribe a callback for an event selected event.
        """
        register_callback(self._event_selected_callbacks, callback)

    def _notify_event_selected(self, event):
        """
        Notify listeners of an event selected event.
        """
        notify_callback(self._event_selected_callbacks, event)

    def range_described(self, callback):
        """
        Subscribe a callback for a range described event.
        """
        register_callback(self._range_described_callbacks, callback)

    def _notify_range_described(self, report):
        """
        Notify listeners of a range described event.
        """
        notify_callback(self._range_described_callbacks, report)

    def trace_loaded(self, callback):
        """
        Subscribe a callback for a trace loaded event.
        """
        register_callback(self._trace_loaded_callbacks, callback)

    def _notify_trace_loaded(self):
        """
        Notify listeners of a trace loaded event.
        """
        notify_callback(self._trace_loaded_callbacks)
