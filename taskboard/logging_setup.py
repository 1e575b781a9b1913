import logging
import sys

_HANDLER_NAME = "taskboard-console"


def setup_logging(level="INFO") -> None:
    """Install a single stderr handler on the root logger.

    Safe to call more than once: the handler installed by a previous call is
    replaced, handlers added by others (uvicorn, pytest) are left alone.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
    logging.getLogger("taskboard").setLevel(level)
