from typing import Optional

from pydle.features.rfc1459.parsing import parse_user


class Prefix:
    """The source of an IRC message: ``nick!user@host`` or a server name."""

    nick: Optional[str]
    user: Optional[str]
    host: Optional[str]

    def __init__(self, source: str):
        self.nick, self.user, self.host = parse_user(source)

    def __str__(self):
        if not self.host or self.user is None:
            return self.nick or ""
        return "{}!{}@{}".format(self.nick, self.user, self.host)

    def __eq__(self, other):
        return isinstance(other, Prefix) and str(self) == str(other)

    def __hash__(self):
        return hash(str(self))

    def __repr__(self):
        return "Prefix({!r})".format(str(self))


class Host:
    """The ``user@host`` part of a nick's mask, as listed in a channel."""

    user: str
    host: str

    def __init__(self, mask: str):
        mask = mask or ""
        if "@" in mask:
            self.user, self.host = mask.split("@", 1)
        else:
            self.user, self.host = mask, ""

    def is_identd(self) -> bool:
        """True unless the server marked the username as unverified (``~``)."""
        return not self.user.startswith("~")

    is_ident = is_identd

    def __str__(self):
        if not self.host:
            return self.user
        return "{}@{}".format(self.user, self.host)

    def __eq__(self, other):
        return isinstance(other, Host) and (self.user, self.host) == (other.user, other.host)

    def __hash__(self):
        return hash((self.user, self.host))
