import logging
import re
from typing import Any, Callable, Dict, List, Optional

from ..hooks import Modifier
from .message import IrcMessage

logger = logging.getLogger(__name__)

RPL_AWAY = "301"
RPL_WHOISUSER = "311"
RPL_WHOISSERVER = "312"
RPL_WHOISOPERATOR = "313"
RPL_WHOISIDLE = "317"
RPL_ENDOFWHOIS = "318"
RPL_WHOISCHANNELS = "319"
RPL_WHOISACCOUNT = "330"
ERR_NOSUCHNICK = "401"
RPL_WHOISSECURE = "671"

NUMERICS = (301, 307, 310, 311, 312, 313, 317, 318, 319, 320, 330, 338, 378, 379, 401, 671)

STATUS_PREFIX = re.compile(r"^[~&@%+]+(?=[#&!+])")


class Whois:
    """An asynchronous WHOIS.

    Replies about the user are caught (and hidden) until the end of the WHOIS
    arrives; then `callback` is called with this object. Results are available
    as attributes: nick, user, host, real_name, server, operator, idle,
    away_reason, account, secure, channels.
    """

    def __init__(self, user, callback: Optional[Callable[["Whois"], Any]] = None):
        self.target = user
        self.data: Dict[str, Any] = {
            "nick": "",
            "user": "",
            "host": "",
            "real_name": "",
            "server": "",
            "operator": False,
            "idle": 0,
            "away_reason": "",
            "account": "",
            "secure": False,
            "channels": [],
        }
        self.populated = False
        self._callback = callback
        self._server_name = user.server.name
        self._hooks: List[Modifier] = [
            Modifier("irc_in_{}".format(numeric), self.process_reply) for numeric in NUMERICS
        ]
        try:
            user.server.command("/whois", user.name)
        except Exception:
            self._unhook()
            raise

    def _unhook(self) -> None:
        for hook in self._hooks:
            hook.unhook(False)
        self._hooks = []

    def _concerns_us(self, server: str, msg: IrcMessage) -> bool:
        if server != self._server_name or len(msg.params) < 2:
            return False
        return msg.params[1].lower() == self.target.name.lower()

    def process_reply(self, server: str, msg: IrcMessage) -> Optional[IrcMessage]:
        """Modifier callback; returns None for replies that belong to this WHOIS."""
        if self.populated or not self._concerns_us(server, msg):
            return msg

        params = msg.params[1:]
        command = msg.command
        if command in (RPL_ENDOFWHOIS, ERR_NOSUCHNICK):
            # 401 doesn't always come with a 318
            self.finish()
        elif command == RPL_WHOISUSER:
            self.data["nick"] = params[0]
            self.data["user"] = params[1]
            self.data["host"] = params[2]
            self.data["real_name"] = params[-1]
        elif command == RPL_WHOISSERVER:
            self.data["server"] = params[1]
        elif command == RPL_WHOISOPERATOR:
            self.data["operator"] = True
        elif command == RPL_WHOISIDLE:
            self.data["idle"] = int(params[1])
        elif command == RPL_AWAY:
            self.data["away_reason"] = params[-1]
        elif command == RPL_WHOISACCOUNT:
            self.data["account"] = params[1]
        elif command == RPL_WHOISSECURE:
            self.data["secure"] = True
        elif command == RPL_WHOISCHANNELS:
            for channel in params[-1].split():
                self.data["channels"].append(STATUS_PREFIX.sub("", channel))
        return None

    def finish(self) -> None:
        self._unhook()
        self.populated = True
        if self._callback is not None:
            try:
                self._callback(self)
            except Exception:
                logger.exception("whois callback raised")

    def __getattr__(self, name: str) -> Any:
        data = self.__dict__.get("data", {})
        if name in data:
            return data[name]
        raise AttributeError(
            "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
        )
