from typing import Any, Callable, Dict, Optional

from ..utilities import integer_to_bool
from .host import Host

# bit order of the legacy "flags" field of the irc_nick infolist
FLAGS = ("chanowner", "chanadmin", "chanadmin2", "op", "halfop", "voice", "away", "chanuser")

PREFIX_MODES = {
    "~": "chanowner",
    "&": "chanadmin",
    "@": "op",
    "%": "halfop",
    "+": "voice",
}


class User:
    """A nick in a channel's nicklist."""

    def __init__(self, data: Dict[str, Any], channel=None):
        self.name: str = data.get("name", "")
        self.host = Host(data.get("host", ""))
        self.flags: Optional[int] = data.get("flags")
        self.prefixes: str = data.get("prefixes", "")
        self.color: str = data.get("color", "")
        self.channel = channel
        self._away = data.get("away")

    @property
    def server(self):
        return self.channel.server if self.channel is not None else None

    def _has_mode(self, mode: str) -> bool:
        if self.flags is not None:
            return bool(self.flags & (1 << FLAGS.index(mode)))
        return any(PREFIX_MODES.get(c) == mode for c in self.prefixes)

    def is_chanowner(self) -> bool:
        return self._has_mode("chanowner")

    def is_chanadmin(self) -> bool:
        return self._has_mode("chanadmin")

    def is_op(self) -> bool:
        return self._has_mode("op")

    is_opped = is_op

    def is_halfop(self) -> bool:
        return self._has_mode("halfop")

    def is_voice(self) -> bool:
        return self._has_mode("voice")

    is_voiced = is_voice

    def is_away(self) -> bool:
        if self._away is not None:
            return integer_to_bool(self._away)
        return self._has_mode("away") if self.flags is not None else False

    def _mode_command(self, command: str, *extra: str) -> str:
        return self.channel.command(command, self.name, *extra)

    def op(self):
        return self._mode_command("/op")

    def deop(self):
        return self._mode_command("/deop")

    def halfop(self):
        return self._mode_command("/halfop")

    def dehalfop(self):
        return self._mode_command("/dehalfop")

    def voice(self):
        return self._mode_command("/voice")

    def devoice(self):
        return self._mode_command("/devoice")

    def kick(self, reason: str = ""):
        return self._mode_command("/kick", reason)

    def ban(self):
        return self._mode_command("/ban")

    def unban(self):
        return self._mode_command("/unban")

    def kickban(self, reason: str = ""):
        self.kick(reason)
        return self.ban()

    def whois(self, callback: Optional[Callable] = None):
        """Send a WHOIS for this user; `callback` gets the finished Whois."""
        from .whois import Whois

        return Whois(self, callback)

    def __eq__(self, other):
        return isinstance(other, User) and (self.name, self.host) == (other.name, other.host)

    def __hash__(self):
        return hash((self.name, self.host))

    def __repr__(self):
        return "<User {} {}>".format(self.name, self.host)
