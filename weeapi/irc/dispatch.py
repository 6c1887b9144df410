import re
from abc import abstractmethod
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional, Pattern, Sequence, Tuple, Type, Union

from ..hooks import Signal
from ..utilities import ReturnCode, return_code
from .message import IrcMessage


class Matcher:
    spec: Any

    @abstractmethod
    def matches(self, target: str) -> bool:
        pass

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.spec)


class String(Matcher):
    spec: str

    def __init__(self, spec: str):
        self.spec = spec

    def matches(self, target: str) -> bool:
        return target == self.spec


class RegExp(Matcher):
    spec: Pattern

    def __init__(self, spec: Union[str, Pattern]):
        self.spec = re.compile(spec)

    def matches(self, target: str) -> bool:
        return self.spec.fullmatch(target) is not None


class Glob(RegExp):
    """``*`` matches any run of characters, everything else is literal."""

    def __init__(self, spec: str):
        super().__init__(re.escape(spec.replace("*", "\x00")).replace("\x00", ".*"))


def match_array(spec: Sequence[Optional[Matcher]], target: Sequence[str]) -> bool:
    """Positional match; a ``None`` matcher accepts anything."""
    if len(spec) > len(target):
        return False

    for idx, item in enumerate(spec):
        if item is not None and not item.matches(target[idx]):
            return False

    return True


MessageFilter = Callable[[IrcMessage], bool]


def match_message(command: str, params: Sequence[Optional[Matcher]]) -> MessageFilter:
    command = command.upper()
    return lambda msg: msg.command == command and match_array(params, msg.params)


IrcCallback = Callable[[str, IrcMessage], Any]
IrcCallbackTuple = Tuple[MessageFilter, IrcCallback]


class IrcDispatcher:
    """Route incoming IRC messages to callbacks by command and params.

    Example:

        irc = IrcDispatcher()
        irc.on(on_join, "JOIN", ["#weechat"])
        irc.on(on_ping, "PRIVMSG", [None, Glob("!ping*")])
        irc.install()

    Callbacks get ``(server, message)``. The first one returning something other
    than OK stops the dispatch and its result is handed back to WeeChat.
    """

    message_class: Type[IrcMessage] = IrcMessage

    def __init__(self):
        self.callbacks: DefaultDict[str, List[IrcCallbackTuple]] = defaultdict(list)
        self.hook: Optional[Signal] = None

    def on(
        self,
        callback: IrcCallback,
        command: str,
        params: Sequence[Union[None, str, Matcher]] = (),
    ) -> None:
        ps: List[Optional[Matcher]] = [
            p if p is None or isinstance(p, Matcher) else String(p) for p in params
        ]
        self.callbacks[command.upper()].append((match_message(command, ps), callback))

    def install(self, signal: str = "*,irc_raw_in_*") -> Signal:
        if self.hook is not None and self.hook.hooked:
            self.hook.unhook()
        self.hook = Signal(signal, self._callback)
        return self.hook

    def uninstall(self) -> None:
        if self.hook is not None:
            self.hook.unhook(False)
            self.hook = None

    def dispatch(self, server: str, msg: IrcMessage) -> ReturnCode:
        for filter, callback in self.callbacks.get(msg.command, ()):
            if not filter(msg):
                continue

            r = return_code(callback(server, msg))
            if r != ReturnCode.OK.value:
                return ReturnCode(r)

        return ReturnCode.OK

    def _callback(self, signal: str, msg: Any) -> ReturnCode:
        if not isinstance(msg, IrcMessage):
            return ReturnCode.OK

        if self.message_class is not IrcMessage and not isinstance(msg, self.message_class):
            msg = self.message_class(msg.line, msg.server)

        return self.dispatch(msg.server or signal.split(",", 1)[0], msg)
