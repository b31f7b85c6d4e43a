import logging

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo the handler and propagation changes init_logging makes."""
    yield
    logger = logging.getLogger('mdreflow')
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
