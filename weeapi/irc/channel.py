from typing import Any, List, Optional, Union

from ..buffer import Buffer
from ..errors import NotAChannel
from ..infolist import Infolist, InfolistItem
from ..pointer import Pointer
from ..properties import Properties
from .server import Server
from .user import User


class Channel(Properties, Pointer):
    """An IRC channel, identified by its buffer.

    Properties come from the ``irc_channel`` infolist: ``name``, ``topic``,
    ``modes``, ``key``, ``limit``, ``nicks_count`` and so on.
    """

    weechat_type = "irc_channel"

    def __init__(self, buffer: Union[Buffer, str]):
        buffer = Buffer.from_ptr(str(buffer))
        object.__setattr__(self, "_ptr", buffer.ptr)
        object.__setattr__(self, "_buffer", buffer)
        if buffer.get_property("localvar_type") != "channel":
            raise NotAChannel(buffer.ptr)

    @classmethod
    def all(cls) -> List["Channel"]:
        return [b.channel for b in Buffer.all() if b.is_channel()]

    @classmethod
    def find(cls, server: Union[Server, str], channel: Any) -> Optional["Channel"]:
        server = getattr(server, "name", server)
        channel = getattr(channel, "name", channel)
        buffer = Buffer.find("{}.{}".format(server, channel), "irc")
        return buffer.channel if buffer else None

    @property
    def buffer(self) -> Buffer:
        return self._buffer

    @property
    def server(self) -> Server:
        return Server(self._buffer.get_property("localvar_server"))

    def get_infolist(self, *fields: str) -> List[InfolistItem]:
        return Infolist.parse(
            "irc_channel", "", self.server.name, {"buffer": self.ptr}, *fields
        )

    def part(self, reason: str = "") -> str:
        return self.command("/part", self.name, reason)

    def join(self, password: str = "") -> str:
        return self.command("/join", self.name, password)

    def rejoin(self, reason: str = "", password: str = "") -> str:
        self.part(reason)
        return self.join(password)

    cycle = rejoin

    def nicks(self) -> List[User]:
        items = Infolist.parse("irc_nick", "", "{},{}".format(self.server.name, self.name))
        return [User(item, channel=self) for item in items]

    users = nicks

    def command(self, *parts: str) -> str:
        return self._buffer.command(*(p for p in parts if p))

    send_command = command
    exec = command

    def send(self, *text: str) -> str:
        return self._buffer.send(*text)

    privmsg = send
    say = send

    def __repr__(self):
        return "<Channel ptr={!r}>".format(self.ptr)
