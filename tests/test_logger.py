import logging

from block_crush.logger import configure_logging


def test_configure_logging_is_idempotent():
    root = configure_logging(logging.DEBUG)
    count = len(root.handlers)
    again = configure_logging("INFO")
    assert again is root
    assert len(again.handlers) == count
    assert again.level == logging.INFO
    assert logging.getLogger("block_crush.game.core").getEffectiveLevel() == logging.INFO
