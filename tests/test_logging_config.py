import logging

from trefoil.logging_config import PACKAGE_LOGGER, setup_logging


def test_setup_logging_writes_to_file(tmp_path):
    log_file = tmp_path / "trefoil.log"
    logger = setup_logging(logging.DEBUG, str(log_file))
    try:
        assert logger.name == PACKAGE_LOGGER
        logging.getLogger("trefoil.model.tube").debug("tube built")
        for handler in logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Logging initialized" in text
        assert "trefoil.model.tube - DEBUG - tube built" in text
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path):
    logger = setup_logging(logging.INFO)
    setup_logging(logging.INFO)
    try:
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
