import os
import sys
import errno
import logging

from tracegraph.util.misc import get_log_dir, is_logging_requested

#------------------------------------------------------------------------------
# Log / Print helpers
#------------------------------------------------------------------------------

MAX_LOGS = 10
LOG_FORMAT = "%(asctime)s | %(name)28s | %(levelname)7s: %(message)s"
LOG_DATE_FORMAT = "%m-%d-%Y %H:%M:%S"

def pmsg(message):
    """
    Print a 'user' message, and mirror it to the log.
    """
    print(f"[TraceGraph] {message}", file=sys.stdout)
    logging.getLogger("TraceGraph").info(message)

def logging_started():
    """
    Check if logging has been started.
    """
    return 'logger' in globals()

#------------------------------------------------------------------------------
# Initialize Logging
#------------------------------------------------------------------------------

def cleanup_log_directory(log_directory, max_logs=MAX_LOGS):
    """
    Retain only the last N logs in the given directory.
    """
    filetimes = {}

    # build a dictionary of log files mapped by their modification time
    for log_name in os.listdir(log_directory):
        filepath = os.path.join(log_directory, log_name)
        if os.path.isfile(filepath):
            filetimes[filepath] = os.path.getmtime(filepath)

    # oldest first
    ordered = sorted(filetimes, key=filetimes.get)

    # delete all but the most recent logs
    for filepath in ordered[:-max_logs]:
        try:
            os.remove(filepath)
        except OSError as e:
            if e.errno != errno.ENOENT:
                raise

def start_logging():
    """
    Start the TraceGraph logger.

    Logging is silent unless requested through the environment, in which
    case records are written to a per-process file in the log directory.
    """
    global logger

    logger = logging.getLogger("TraceGraph")

    # only enable logging if the user explicitly asked for it
    if not is_logging_requested():
        logger.disabled = True
        return logger

    log_dir = get_log_dir()
    log_path = os.path.join(log_dir, f"tracegraph.{os.getpid()}.log")

    # create the log directory if it does not already exist
    os.makedirs(log_dir, exist_ok=True)

    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))

    logger.disabled = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)

    # only keep the newest logs around
    cleanup_log_directory(log_dir)

    return logger
