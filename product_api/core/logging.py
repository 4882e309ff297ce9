import logging, sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_handler = None

def setup_logging(level: str = "INFO", fmt: str = LOG_FORMAT):
    """Install one stdout handler on the root logger; later calls only adjust the level."""
    global _handler
    root = logging.getLogger()
    root.setLevel(level)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        root.addHandler(_handler)
    # uvicorn keeps its own loggers; align them with ours
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    return _handler
