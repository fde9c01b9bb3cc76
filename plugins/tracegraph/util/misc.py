import os
import weakref

#------------------------------------------------------------------------------
# Environment / Config
#------------------------------------------------------------------------------

DEFAULT_LOG_DIR = os.path.join(os.path.expanduser("~"), ".tracegraph", "logs")

def is_dev_mode():
    """
    Return True if TraceGraph is running in developer mode.
    """
    return bool(os.getenv("TRACEGRAPH_DEV"))

def is_logging_requested():
    """
    Return True if the user asked for TraceGraph logs to be written to disk.
    """
    return bool(os.getenv("TRACEGRAPH_LOGGING")) or is_dev_mode()

def get_log_dir():
    """
    Return the directory that TraceGraph log files should be written to.
    """
    return os.getenv("TRACEGRAPH_LOG_DIR") or DEFAULT_LOG_DIR

#------------------------------------------------------------------------------
# Model Notifications
#------------------------------------------------------------------------------
#
#    The graph model announces view changes, selections and loaded traces to
#    whatever UI is hosting it. Listeners are held weakly so that a closed
#    view (and its bound handlers) can be collected without first having to
#    unsubscribe from the model.
#

def register_callback(callback_list, callback):
    """
    Subscribe a function or bound method to a model notification list.
    """
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        callback_list.append(weakref.WeakMethod(callback))
    else:
        callback_list.append(weakref.ref(callback))

def notify_callback(callback_list, *args):
    """
    Call every live listener in the list with the given arguments.

    Listeners that have been garbage collected are pruned in place.
    """
    for callback_ref in list(callback_list):
        callback = callback_ref()

        # the listener (or the view owning it) is gone
        if callback is None:
            callback_list.remove(callback_ref)
            continue

        callback(*args)
