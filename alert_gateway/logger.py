import logging
import sys

LOG_FORMAT = "%(asctime)s %(message)s"
ERROR_LOG_FORMAT = "[ERROR] %(asctime)s %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


class _BelowErrorFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Configura o logger raiz do pacote:
      - INFO (e DEBUG, em modo debug) vai para stdout
      - ERROR e acima vai para stderr com prefixo [ERROR]
    """
    root = logging.getLogger("alert_gateway")
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)

    info_handler = logging.StreamHandler(sys.stdout)
    info_handler.addFilter(_BelowErrorFilter())
    info_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(ERROR_LOG_FORMAT, DATE_FORMAT))

    root.addHandler(info_handler)
    root.addHandler(error_handler)
    return root
