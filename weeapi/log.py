import logging

import weechat as w

ROOT_LOGGER = "weeapi"


class WeechatHandler(logging.Handler):
    """Send log records to the core buffer, and optionally to weechat.log."""

    def __init__(self, level=logging.NOTSET, log_file: bool = False):
        super().__init__(level)
        self.log_file = log_file

    def emit(self, record: logging.LogRecord):
        try:
            text = self.format(record)
            if record.levelno >= logging.WARNING:
                text = w.prefix("error") + text
            w.prnt("", text)
            if self.log_file:
                w.log_print(text)
        except Exception:
            self.handleError(record)


def setup(level=logging.WARNING, log_file: bool = False, name: str = ROOT_LOGGER):
    """Attach a WeechatHandler to the named logger, once."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, WeechatHandler):
            handler.log_file = log_file
            return handler
    handler = WeechatHandler(log_file=log_file)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    return handler
