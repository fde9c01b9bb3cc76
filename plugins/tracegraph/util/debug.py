import time
import logging

logger = logging.getLogger("TraceGraph.Debug")

#------------------------------------------------------------------------------
# Debug / Profiling Helpers
#------------------------------------------------------------------------------

def timeit(method):
    """
    Log how long each call to the decorated function takes.
    """
    def timed(*args, **kw):
        ts = time.perf_counter()
        result = method(*args, **kw)
        te = time.perf_counter()
        logger.debug("%r  %2.2f ms", method.__name__, (te - ts) * 1000)
        return result

    return timed

class TimeIt(object):
    """
    Context manager to log how long a block of code took.
    """

    def __init__(self, name):
        self.name = name
        self.start = 0.0
        self.end = 0.0

    @property
    def elapsed(self):
        return self.end - self.start

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.end = time.perf_counter()
        logger.debug(f"{self.name} took {self.elapsed:0.4f} seconds")
        return False
