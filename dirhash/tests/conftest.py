from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_dirhash_logger():
    """CLI tests attach handlers bound to captured streams; drop them after each test."""
    yield
    logger = logging.getLogger("dirhash")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)
