import sys

import pytest
from loguru import logger


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    # Keep test output readable; warnings and errors still show.
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
    yield
    logger.remove()
