import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the ``upload_broker`` logger hierarchy.

    Safe to call more than once; the handler is only installed the first time.
    """
    package_logger = logging.getLogger("upload_broker")
    package_logger.setLevel(level.upper())
    if not any(h.get_name() == "upload_broker" for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name("upload_broker")
        package_logger.addHandler(handler)
