from typing import Dict, List, Optional, Union

from pydle.features.ctcp import is_ctcp, parse_ctcp
from pydle.features.ircv3.tags import TaggedMessage
from pydle.protocol import ProtocolViolation

from .host import Prefix

TAG_ESCAPES = (("\\", "\\\\"), (";", "\\:"), (" ", "\\s"), ("\r", "\\r"), ("\n", "\\n"))


def _escape_tag(value: str) -> str:
    for raw, escaped in TAG_ESCAPES:
        value = value.replace(raw, escaped)
    return value


class IrcMessage:
    """A single IRC protocol line, split into prefix, command and params.

    Numeric replies keep their three-digit string form (``"001"``).
    """

    server: Optional[str]
    prefix: Optional[Prefix]
    command: str
    params: List[str]
    tags: Dict[str, Union[str, bool]]

    def __init__(self, line: str, server: Optional[str] = None):
        try:
            msg = TaggedMessage.parse(line.encode())
        except ProtocolViolation as e:
            raise ValueError("not an IRC message: {!r}".format(line)) from e

        if isinstance(msg.command, int):
            command = "{:03}".format(msg.command)
        else:
            command = msg.command.upper()

        self.line = line
        self.server = server
        self.prefix = Prefix(msg.source) if msg.source else None
        self.command = command
        self.params = list(msg.params)
        self.tags = dict(msg.tags or {})
        self._original = self._snapshot()

    def _snapshot(self):
        return (
            str(self.prefix) if self.prefix else None,
            self.command,
            tuple(self.params),
            tuple(self.tags.items()),
        )

    @classmethod
    def parse_message(cls, line: str, server: Optional[str] = None) -> "IrcMessage":
        """Parse a line into the most specific message class available."""
        msg = cls(line, server)
        if msg.command == "PRIVMSG":
            return Privmsg(line, server)
        return msg

    @property
    def nick(self) -> Optional[str]:
        return self.prefix.nick if self.prefix else None

    @property
    def user(self) -> Optional[str]:
        return self.prefix.user if self.prefix else None

    @property
    def host(self) -> Optional[str]:
        return self.prefix.host if self.prefix else None

    def is_ctcp(self) -> bool:
        return len(self.params) == 2 and len(self.params[-1]) > 1 and is_ctcp(self.params[-1])

    def to_ctcp(self) -> "Ctcp":
        if not self.is_ctcp():
            raise ValueError("not a CTCP message")
        return Ctcp(self.line, self.server)

    def __str__(self):
        if self._snapshot() == self._original:
            return self.line.rstrip("\r\n")
        parts = []
        if self.tags:
            serialized = ";".join(
                k if v is True else "{}={}".format(k, _escape_tag(str(v)))
                for k, v in self.tags.items()
            )
            parts.append("@{}".format(serialized))

        if self.prefix:
            parts.append(":{}".format(self.prefix))

        parts.append(self.command)

        if self.params:
            *middle, last = self.params
            parts.extend(middle)
            if not last or " " in last or last.startswith(":"):
                last = ":" + last
            parts.append(last)

        return " ".join(parts)

    def __repr__(self):
        return "<{} {!r}>".format(self.__class__.__name__, str(self))


class Ctcp(IrcMessage):
    """A PRIVMSG or NOTICE carrying a CTCP request or reply."""

    receiver: str
    ctcp_command: str
    ctcp_param: str

    def __init__(self, line: str, server: Optional[str] = None):
        super().__init__(line, server)
        self.receiver = self.params[0]
        command, param = parse_ctcp(self.params[-1])
        self.ctcp_command = command
        self.ctcp_param = param or ""

    def is_ctcp(self) -> bool:
        return True


class Privmsg(IrcMessage):
    """A message to a channel or a user."""

    def __init__(self, line: str, server: Optional[str] = None):
        super().__init__(line, server)
        self.target = self.params[0] if self.params else ""
        self.message = self.params[1] if len(self.params) > 1 else ""

    @property
    def msgtarget(self) -> str:
        return self.target

    def is_private(self) -> bool:
        """True if the message was sent to a nick rather than a channel."""
        return self.target[:1] not in ("#", "&", "!", "+")
