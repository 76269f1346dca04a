import logging
from pythonjsonlogger import jsonlogger

QUIET_LOGGERS = ['urllib3', 'cachecontrol', 'google.auth']


def setup_logger(level: str = 'INFO'):
    """JSON log lines on stderr for the root logger. Safe to call twice."""
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    if any(isinstance(handler.formatter, jsonlogger.JsonFormatter) for handler in logger.handlers):
        return

    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
