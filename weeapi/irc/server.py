from datetime import datetime
from typing import Any, Dict, List

from ..buffer import Buffer
from ..errors import UnknownServer
from ..infolist import Infolist
from ..utilities import apply_transformation, integer_to_bool


def _buffer(ptr):
    return Buffer.from_ptr(ptr) if ptr else None


def _time(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromtimestamp(int(value or 0))


class Server:
    """An IRC server as configured in the irc plugin.

    Anything in the ``irc_server`` infolist can be read as an attribute, e.g.
    ``server.nick``, ``server.lag`` or ``server.connected``.
    """

    PROCESSORS = {
        ("buffer",): _buffer,
        (
            "ipv6", "ssl", "tls", "ssl_verify", "tls_verify", "autoconnect",
            "autoreconnect", "autorejoin", "temp_server", "is_connected",
            "ssl_connected", "tls_connected", "reconnect_join",
            "disable_autojoin", "is_away",
        ): integer_to_bool,
        (
            "reconnect_start", "command_time", "away_time", "lag_next_check",
            "lag_last_refresh", "last_user_message",
        ): _time,
    }

    MAPPINGS = {
        "connected": "is_connected",
        "away": "is_away",
    }

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def from_name(cls, name: str) -> "Server":
        """
        Raises:
            UnknownServer: no server with this name is configured
        """
        if not Infolist.parse("irc_server", "", name, None, "name"):
            raise UnknownServer(name)
        return cls(name)

    @classmethod
    def all(cls) -> List["Server"]:
        return [cls(item["name"]) for item in Infolist.parse("irc_server", "", "", None, "name")]

    @property
    def data(self) -> Dict[str, Any]:
        items = Infolist.parse("irc_server", "", self.name)
        return items[0] if items else {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        key = self.MAPPINGS.get(name, name)
        data = self.data
        if key not in data:
            raise AttributeError(
                "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
            )
        return apply_transformation(key, data[key], self.PROCESSORS)

    @property
    def is_autojoin_enabled(self) -> bool:
        return not self.disable_autojoin

    autojoin = is_autojoin_enabled

    def channels(self):
        """Joined channels of this server."""
        from .channel import Channel

        ret = []
        for item in Infolist.parse("irc_channel", "", self.name, None, "buffer", "type"):
            # type 0 is a channel, 1 a private conversation
            if item.get("type", 0) == 0 and item.get("buffer"):
                ret.append(Channel(Buffer.from_ptr(item["buffer"])))
        return ret

    def command(self, *parts: str) -> str:
        """Run a command in the server buffer."""
        buffer = self.buffer
        if buffer is None:
            raise UnknownServer("{} has no buffer".format(self.name))
        return buffer.command(*parts)

    exec = command

    def __eq__(self, other):
        return isinstance(other, Server) and self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __str__(self):
        return self.name

    def __repr__(self):
        return "Server({!r})".format(self.name)
