from datetime import datetime
from typing import Any, Dict, List, Union

import weechat as w

from .utilities import integer_to_bool


class Tags:
    """Common tags WeeChat attaches to printed lines."""

    NO_FILTER = "no_filter"
    NO_HIGHLIGHT = "no_highlight"
    NO_LOG = "no_log"
    LOG0 = "log0"
    LOG1 = "log1"
    LOG2 = "log2"
    LOG3 = "log3"
    LOG4 = "log4"
    LOG5 = "log5"
    LOG6 = "log6"
    LOG7 = "log7"
    LOG8 = "log8"
    LOG9 = "log9"
    NOTIFY_NONE = "notify_none"
    NOTIFY_MESSAGE = "notify_message"
    NOTIFY_PRIVATE = "notify_private"
    NOTIFY_HIGHLIGHT = "notify_highlight"
    SELF_MSG = "self_msg"
    IRC_NUMERIC = "irc_numeric"
    IRC_ERROR = "irc_error"
    IRC_ACTION = "irc_action"
    IRC_CTCP = "irc_ctcp"
    IRC_CTCP_REPLY = "irc_ctcp_reply"
    IRC_SMART_FILTER = "irc_smart_filter"
    AWAY_INFO = "away_info"

    @staticmethod
    def NICK(nick: str) -> str:
        return "nick_{}".format(nick)

    @staticmethod
    def PREFIX_NICK(color: str) -> str:
        return "prefix_nick_{}".format(color)

    @staticmethod
    def HOST(host: str) -> str:
        return "host_{}".format(host)

    @staticmethod
    def IRC(command_or_numeric: Union[int, str]) -> str:
        return "irc_{}".format(str(command_or_numeric).lower())


class Line:
    """A line as WeeChat prints it: an optional prefix and a text."""

    def __init__(self, prefix: str = "", text: str = "", **extra: Any):
        self.prefix = prefix
        self.text = text
        self.extra = extra

    @classmethod
    def parse(cls, line: str) -> "Line":
        if "\t" in line:
            prefix, text = line.split("\t", 1)
            return cls(prefix, text)
        return cls("", line)

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "Line":
        """Build a line from a ``buffer_lines`` infolist item."""
        extra = dict(item)
        prefix = extra.pop("prefix", "")
        text = extra.pop("message", "")
        count = int(extra.get("tags_count", 0) or 0)
        extra["tags"] = [extra.pop("tag_{:05d}".format(i + 1), "") for i in range(count)]
        return cls(prefix, text, **extra)

    @property
    def message(self) -> str:
        return self.text

    @property
    def tags(self) -> List[str]:
        return self.extra.get("tags", [])

    def strip_colors(self) -> "Line":
        return Line(
            w.string_remove_color(self.prefix, ""),
            w.string_remove_color(self.text, ""),
            **self.extra
        )

    def __str__(self):
        if not self.prefix:
            return self.text
        return "{}\t{}".format(self.prefix, self.text)

    def __eq__(self, other):
        return isinstance(other, Line) and (self.prefix, self.text) == (
            other.prefix,
            other.text,
        )

    def __repr__(self):
        return "Line({!r}, {!r})".format(self.prefix, self.text)


class PrintedLine:
    """A line caught by a print hook, after it was displayed."""

    def __init__(self, buffer, date, tags: str, displayed, highlight, prefix: str, message: str):
        self.buffer = buffer
        self.date = datetime.fromtimestamp(int(date))
        self.tags = [t for t in tags.split(",") if t]
        self.displayed = integer_to_bool(displayed)
        self.highlight = integer_to_bool(highlight)
        self.prefix = prefix
        self.message = message

    @property
    def line(self) -> Line:
        return Line(self.prefix, self.message)

    @property
    def prefix2(self) -> str:
        return w.string_remove_color(self.prefix, "")

    @property
    def message2(self) -> str:
        return w.string_remove_color(self.message, "")

    def __repr__(self):
        return "<PrintedLine {!r} {!r}>".format(self.prefix, self.message)


class LineData:
    """A line caught by a line hook, before it is displayed.

    Fields may be reassigned (with values of the same type); only modified
    fields are sent back to the host.
    """

    buffer: str
    buffer_name: str
    buffer_type: str
    y: int
    date: datetime
    date_printed: datetime
    str_time: str
    tags: List[str]
    displayed: int
    notify_level: int
    highlight: int
    prefix: str
    message: str

    def __init__(self, htable: Dict[str, str]):
        data: Dict[str, Any] = {
            "buffer": htable.get("buffer", ""),
            "buffer_name": htable.get("buffer_name", ""),
            "buffer_type": htable.get("buffer_type", "formatted"),
            "y": int(htable.get("y") or -1),
            "date": datetime.fromtimestamp(int(htable.get("date") or 0)),
            "date_printed": datetime.fromtimestamp(int(htable.get("date_printed") or 0)),
            "str_time": htable.get("str_time", ""),
            "tags": [t for t in htable.get("tags", "").split(",") if t],
            "displayed": int(htable.get("displayed") or 0),
            "notify_level": int(htable.get("notify_level") or 0),
            "highlight": int(htable.get("highlight") or 0),
            "prefix": htable.get("prefix", ""),
            "message": htable.get("message", ""),
        }
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_modified", set())

    @property
    def is_free(self) -> bool:
        return self._data["buffer_type"] == "free"

    @property
    def prefix2(self) -> str:
        return w.string_remove_color(self.prefix, "")

    @property
    def message2(self) -> str:
        return w.string_remove_color(self.message, "")

    @property
    def modified(self):
        return frozenset(self._modified)

    def __getattr__(self, name: str):
        data = object.__getattribute__(self, "_data")
        if name in data:
            return data[name]
        raise AttributeError(
            "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
        )

    def __setattr__(self, name: str, value: Any):
        if name not in self._data:
            raise AttributeError(
                "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
            )
        expected = type(self._data[name])
        if not isinstance(value, expected):
            raise TypeError(
                "Invalid type: Provided: {}; '{}.{}': {}".format(
                    type(value), self.__class__.__name__, name, expected
                )
            )
        self._data[name] = value
        self._modified.add(name)

    def diff(self) -> Dict[str, str]:
        """The modified fields, as strings the host understands."""
        res = {}
        for name in self._modified:
            value = self._data[name]
            if isinstance(value, datetime):
                res[name] = str(int(value.timestamp()))
            elif isinstance(value, list):
                res[name] = ",".join(value)
            else:
                res[name] = str(value)
        return res
