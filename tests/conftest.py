import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_logger():
    # run.py instala sinks propios; se restaura el de consola tras cada prueba
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
