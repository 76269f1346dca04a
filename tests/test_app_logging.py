import logging

from pythonjsonlogger import jsonlogger

from family_tree.app_logging import setup_logger


def test_setup_logger_once():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logger('debug')
        setup_logger('debug')
        added = [h for h in root.handlers if h not in before]
        assert len(added) <= 1
        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, jsonlogger.JsonFormatter) for h in root.handlers)
    finally:
        for handler in [h for h in root.handlers if h not in before]:
            root.removeHandler(handler)
        root.setLevel(level)
