import logging

from insiders.core.logging import configure_logging

def test_configure_logging_sets_level_and_format():
    """
    Goal: The service's root logger picks up the configured level and the shared line format.
    """
    root = logging.getLogger()
    previous_level = root.level
    previous_formatters = [h.formatter for h in root.handlers]
    try:
        configure_logging("debug")

        assert root.level == logging.DEBUG
        assert root.handlers
        assert all("%(name)s" in h.formatter._fmt for h in root.handlers)
    finally:
        root.setLevel(previous_level)
        for handler, formatter in zip(root.handlers, previous_formatters):
            handler.setFormatter(formatter)

def test_configure_logging_unknown_level_is_info():
    root = logging.getLogger()
    previous_level = root.level
    try:
        configure_logging("chatty")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous_level)
