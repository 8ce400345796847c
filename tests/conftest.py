"""
Shared fixtures.
"""

import logging

import pytest

from contextizer import Contextizer
from contextizer.config.singleton import GlobalConfig
from contextizer.utils.logging import ROOT_LOGGER, reset_logging_state


@pytest.fixture
def ctx():
    return Contextizer()


@pytest.fixture(autouse=True)
def clean_global_state():
    """Keep the global config and package logger from leaking between tests."""
    yield
    GlobalConfig.reset_config()
    reset_logging_state()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
