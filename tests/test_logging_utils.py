import logging

from acrofill.logging_utils import LOG_ENV_VAR, get_logger


def _own_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]


def test_single_handler_per_logger():
    logger = get_logger("acrofill.tests.single")
    get_logger("acrofill.tests.single")

    assert len(_own_handlers(logger)) == 1


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv(LOG_ENV_VAR, "debug")

    assert get_logger("acrofill.tests.level").level == logging.DEBUG


def test_handler_defers_to_configured_root(monkeypatch):
    handler = _own_handlers(get_logger("acrofill.tests.root"))[0]
    record = logging.LogRecord("acrofill.tests.root", logging.INFO, __file__, 1, "msg", None, None)
    root = logging.getLogger()

    monkeypatch.setattr(root, "handlers", [])
    assert handler.filter(record)

    monkeypatch.setattr(root, "handlers", [logging.NullHandler()])
    assert not handler.filter(record)
