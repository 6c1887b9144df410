"""Shared fixtures: every test runs against a fresh in-memory weechat host."""
import logging
import sys

import pytest

from tests import fakeweechat

sys.modules["weechat"] = fakeweechat


@pytest.fixture(autouse=True)
def host():
    from weeapi.buffer import Buffer
    from weeapi.hooks import Hook
    from weeapi.plugin import BarItem
    from weeapi.log import ROOT_LOGGER, WeechatHandler

    fakeweechat.reset()
    yield fakeweechat
    Hook.unhook_all()
    # the fake host reuses pointers after reset, so drop stale registrations
    Buffer._callbacks.clear()
    BarItem._callbacks.clear()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, WeechatHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    fakeweechat.reset()
