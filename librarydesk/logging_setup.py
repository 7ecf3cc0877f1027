import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(settings, force=False):
    """Attach file and console handlers to the root logger once per process."""
    global _configured
    if _configured and not force:
        return logging.getLogger()

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(settings.log_level).upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    if force:
        for handler in list(root.handlers):
            if getattr(handler, "_librarydesk", False):
                root.removeHandler(handler)
                handler.close()

    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(settings.log_file, maxBytes=1_048_576, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler._librarydesk = True
        root.addHandler(file_handler)

    if settings.log_to_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console._librarydesk = True
        root.addHandler(console)

    _configured = True
    return root
