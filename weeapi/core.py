from datetime import datetime
from pprint import pformat
from typing import Any, Callable, Dict, Optional

import weechat as w

from .utilities import ReturnCode, integer_to_bool


class Color:
    """A named WeeChat color; ``str()`` gives the color code."""

    def __init__(self, name: str):
        self.name = name

    @property
    def color(self) -> str:
        return w.color(self.name)

    def __str__(self):
        return self.color

    def __eq__(self, other):
        return isinstance(other, Color) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return "Color({!r})".format(self.name)


def command(text: str, buffer: Any = None) -> int:
    """Run a command (or say text) in `buffer`, the core buffer by default."""
    return w.command("" if buffer is None else str(buffer), text)


exec = command


def puts(text: Any, buffer: Any = None) -> None:
    """Print text to a buffer. ``"current"`` means the current buffer."""
    if buffer is None:
        buffer = ""
    elif buffer == "current":
        buffer = w.current_buffer()
    w.prnt(str(buffer), str(text))


prnt = puts


def pp(obj: Any, buffer: Any = None) -> None:
    puts(pformat(obj), buffer)


def log(text: str) -> None:
    """Write to weechat.log."""
    w.log_print(text)


def prefix(name: str) -> Optional[str]:
    ret = w.prefix(name)
    return ret or None


def color(name: str) -> Optional[str]:
    ret = w.color(name)
    return ret or None


def strip_colors(text: str, replacement: str = "") -> str:
    return w.string_remove_color(text, replacement)


def mkdir_home(directory: str, mode: int = 0o755) -> bool:
    return integer_to_bool(w.mkdir_home(directory, mode))


def mkdir(directory: str, mode: int = 0o755) -> bool:
    return integer_to_bool(w.mkdir(directory, mode))


def mkdir_parents(directory: str, mode: int = 0o755) -> bool:
    return integer_to_bool(w.mkdir_parents(directory, mode))


def fifo() -> str:
    return w.info_get("fifo_filename", "")


def compilation_date() -> datetime:
    return datetime.strptime(w.info_get("date", ""), "%b %d %Y")


def is_filtering() -> bool:
    return integer_to_bool(w.info_get("filters_enabled", ""))


def keyboard_inactivity() -> int:
    return int(w.info_get("inactivity", "") or 0)


inactivity = keyboard_inactivity


def version() -> str:
    return w.info_get("version", "")


def charsets() -> Dict[str, str]:
    return {
        "internal": w.info_get("charset_internal", ""),
        "terminal": w.info_get("charset_terminal", ""),
    }


def directories() -> Dict[str, str]:
    return {
        "weechat": w.info_get("weechat_dir", ""),
        "lib": w.info_get("weechat_libdir", ""),
        "locale": w.info_get("weechat_localedir", ""),
        "share": w.info_get("weechat_sharedir", ""),
        "separator": w.info_get("dir_separator", ""),
    }


dirs = directories


def set_terminal_title(title: Any) -> None:
    w.window_set_title(str(title))


def set_timeout(delay: int, cb: Callable[[int], Any]) -> Callable[[], None]:
    """Call `cb` once after `delay` milliseconds.

    Returns a function that cancels the timeout.
    """
    from .hooks import Timer

    timer = Timer(delay, 0, 1, cb)

    def cancel():
        if timer.hooked:
            timer.unhook()

    return cancel


def say(target: str, msg: str) -> None:
    """Send `msg` to the buffer with the full name `target`."""
    from .buffer import Buffer

    buf = Buffer.find(target, "==")
    if buf is None:
        raise RuntimeError("no buffer named {}".format(target))
    ret = w.command(buf.ptr, "/say {}".format(msg))
    if ret == ReturnCode.ERROR.value:
        raise RuntimeError("weechat.command() failed")
