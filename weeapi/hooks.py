"""Hooks: timers, commands, signals, modifiers, processes and friends.

Every hook gets an id that is unique for the lifetime of the script. The host
calls one exported trampoline per hook class with that id as callback data,
and the trampoline hands the call to the right hook object::

    def tick(remaining):
        prnt("", "tick")

    timer = Timer(1000, callback=tick)
    ...
    timer.stop()

Hooks can also be subclassed, overriding :meth:`Hook.run` instead of passing
a callback::

    class Hello(Command):
        def run(self, buffer, args):
            buffer.print("hello " + args)

    Hello("hello", "say hello")
"""
import logging
import re
import shlex
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

import weechat as w

from .buffer import Buffer
from .callbacks import Callback, EvaluatedCallback, compute_free_id, export
from .errors import HookError, NotHooked
from .irc.message import IrcMessage
from .line import Line, LineData, PrintedLine
from .plugin import Plugin
from .pointer import Pointer
from .utilities import ReturnCode, bool_to_integer, find_transformation, integer_to_bool
from .window import Window

logger = logging.getLogger(__name__)


def _make_trampoline(cls: Type["Hook"]) -> Callable:
    def trampoline(data, *args):
        hook = cls.find_by_id(data)
        if hook is None:
            logger.warning("%s %s is not registered anymore", cls.__name__, data)
            return cls.on_missing(*args)
        return hook.dispatch(*args)

    trampoline.__name__ = cls.callback_name
    return trampoline


class Hook(Pointer):
    """Base class of all hooks."""

    callback_name = "weeapi_hook_cb"
    missing_result: Any = ReturnCode.OK.value
    callback_class: Type[Callback] = EvaluatedCallback

    _hook_classes: List[Type["Hook"]] = []
    _hooks: Dict[int, "Hook"] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._hooks = {}
        Hook._hook_classes.append(cls)
        if "callback_name" not in cls.__dict__:
            cls.callback_name = "weeapi_{}_cb".format(cls.__name__.lower())
        cls._trampoline = staticmethod(_make_trampoline(cls))

    def __init__(self, callback: Optional[Callable] = None):
        if callback is None:
            if type(self).run is Hook.run:
                raise TypeError("No callback specified")
            callback = self.run
        self.id = compute_free_id()
        self._ptr = ""
        self._hooked = False
        self.callback = self.callback_class(callback)

    def run(self, *args):
        """Override in subclasses instead of passing a callback."""
        raise NotImplementedError("callback method not implemented")

    def callback_args(self) -> Tuple[str, str]:
        """The callback name and data to hand to a host ``hook_*`` function."""
        return export(self.callback_name, self._trampoline), str(self.id)

    def _install(self, ptr: str) -> None:
        if not ptr:
            raise HookError("weechat refused {}".format(self.__class__.__name__))
        self._ptr = ptr
        self._hooked = True
        type(self).register(self)

    def _forget(self) -> None:
        """Drop a hook the host already removed on its own."""
        type(self).unregister(self)
        self._hooked = False

    @property
    def hooked(self) -> bool:
        return self._hooked

    def unhook(self, raise_if_unhooked: bool = True) -> bool:
        if not self._hooked:
            if raise_if_unhooked:
                raise NotHooked(repr(self))
            return False
        w.unhook(self._ptr)
        self._forget()
        return True

    @classmethod
    def on_missing(cls, *args) -> Any:
        """What to tell the host when a callback arrives for an unknown id."""
        return cls.missing_result

    def call(self, *args) -> Any:
        return self.callback(*args)

    def dispatch(self, *args) -> Any:
        """Translate the host's callback arguments and call the callback."""
        return self.call(*args)

    @classmethod
    def register(cls, hook: "Hook") -> None:
        cls._hooks[hook.id] = hook

    @classmethod
    def unregister(cls, hook: "Hook") -> None:
        cls._hooks.pop(hook.id, None)

    @classmethod
    def all(cls) -> List["Hook"]:
        if cls is Hook:
            return [h for klass in Hook._hook_classes for h in klass._hooks.values()]
        return list(cls._hooks.values())

    @classmethod
    def find_by_id(cls, id) -> Optional["Hook"]:
        try:
            id = int(id)
        except (TypeError, ValueError):
            return None
        if cls is Hook:
            for klass in Hook._hook_classes:
                if id in klass._hooks:
                    return klass._hooks[id]
            return None
        return cls._hooks.get(id)

    @staticmethod
    def unhook_ptr(ptr: str) -> None:
        """Remove a hook by pointer, e.g. one not created through this library."""
        w.unhook(ptr)

    @staticmethod
    def unhook_all() -> None:
        """Remove every hook of the script, including ones made without this library."""
        for klass in Hook._hook_classes:
            for hook in list(klass._hooks.values()):
                hook._forget()
        w.unhook_all()

    def __repr__(self):
        return "<{} id={} ptr={!r}>".format(self.__class__.__name__, self.id, self._ptr)


class Timer(Hook):
    """Call the callback every `interval` milliseconds.

    `max_calls` of 0 means forever. The callback receives the number of
    calls remaining (-1 when unlimited).
    """

    def __init__(
        self,
        interval: int,
        align: int = 0,
        max_calls: int = 0,
        callback: Optional[Callable[[int], Any]] = None,
    ):
        super().__init__(callback)
        self.interval = interval
        self.align = align
        self.max_calls = max_calls
        self.remaining: Optional[int] = None
        self._hook(max_calls)

    def _hook(self, max_calls: int) -> None:
        self._install(
            w.hook_timer(int(self.interval), int(self.align), int(max_calls), *self.callback_args())
        )

    def dispatch(self, remaining_calls) -> int:
        self.remaining = int(remaining_calls)
        ret = self.call(self.remaining)
        if self.remaining == 0:
            # the host removes a timer after its last call
            self._forget()
        return ret

    def stop(self) -> None:
        self.unhook()

    def start(self) -> None:
        """Start the timer again, resuming with the calls it had left."""
        if self._hooked:
            return
        if not self.remaining:
            max_calls = self.max_calls
        else:
            max_calls = self.remaining
        self._hook(max_calls)

    def restart(self) -> None:
        self.unhook(False)
        self.remaining = None
        self.start()


def _format_args_description(value) -> str:
    if isinstance(value, dict):
        if not value:
            return ""
        white = w.color("white")
        reset = w.color("reset")
        width = max(len(k) for k in value)
        return "\n".join(
            "{}{}: {}{}".format(white, key.rjust(width), reset, desc)
            for key, desc in value.items()
        )
    if isinstance(value, (list, tuple)):
        return "\n".join(str(v) for v in value)
    return str(value or "")


class Command(Hook):
    """A new ``/command``; the callback receives ``(buffer, args)``."""

    def __init__(
        self,
        command: str,
        description: str = "",
        args: str = "",
        args_description: Union[str, Dict[str, str], List[str]] = "",
        completion: Union[str, List[str]] = "",
        callback: Optional[Callable[[Buffer, str], Any]] = None,
    ):
        super().__init__(callback)
        self.command = command[1:] if command.startswith("/") else command
        self.description = description
        self.args = args
        self.args_description = _format_args_description(args_description)
        if isinstance(completion, (list, tuple)):
            completion = " || ".join(completion)
        self.completion = completion or ""
        self._install(
            w.hook_command(
                self.command,
                str(self.description),
                str(self.args),
                self.args_description,
                self.completion,
                *self.callback_args()
            )
        )

    name = property(lambda self: self.command)

    def dispatch(self, buffer: str, args: str) -> int:
        return self.call(Buffer.from_ptr(buffer), args)

    @classmethod
    def find_by_command(cls, name: str) -> Optional["Command"]:
        if name.startswith("/"):
            name = name[1:]
        for klass in Hook._hook_classes:
            if not issubclass(klass, cls):
                continue
            for hook in klass._hooks.values():
                if hook.command == name:
                    return hook
        return None

    find_by_name = find_by_command


class CommandRunHook(Hook):
    """Catch a command when it is run, before it executes.

    With `also_arguments`, both ``/command`` alone and ``/command <args>``
    are caught. Returning ``ReturnCode.OK_EAT`` stops the command.
    """

    def __init__(
        self,
        command: Union[str, Command],
        also_arguments: bool = False,
        callback: Optional[Callable[[Buffer, str], Any]] = None,
    ):
        super().__init__(callback)
        if isinstance(command, Command):
            command = "/" + command.command
        self.command = str(command)
        self._ptr2 = ""
        self._install(w.hook_command_run(self.command, *self.callback_args()))
        if also_arguments:
            self._ptr2 = w.hook_command_run("{} *".format(self.command), *self.callback_args())

    def dispatch(self, buffer: str, command: str) -> int:
        return self.call(Buffer.from_ptr(buffer), command)

    def unhook(self, raise_if_unhooked: bool = True) -> bool:
        ret = super().unhook(raise_if_unhooked)
        if ret and self._ptr2:
            w.unhook(self._ptr2)
            self._ptr2 = ""
        return ret


def _irc_signal_message(signal: str, data: str) -> IrcMessage:
    server = signal.split(",", 1)[0]
    return IrcMessage.parse_message(data, server)


SIGNAL_TRANSFORMATIONS = {
    (re.compile(r".+,irc_(raw_)?(in2?|out1?)_.+"),): _irc_signal_message,
    (
        re.compile(r"buffer_.+"),
        re.compile(r"logger_.+"),
        "irc_channel_opened",
        "irc_pv_opened",
    ): lambda signal, data: Buffer.from_ptr(data),
    (re.compile(r"window_.+"),): lambda signal, data: Window.from_ptr(data),
}

SIGNAL_TYPES = {
    "string": w.WEECHAT_HOOK_SIGNAL_STRING,
    "int": w.WEECHAT_HOOK_SIGNAL_INT,
    "pointer": w.WEECHAT_HOOK_SIGNAL_POINTER,
}


class Signal(Hook):
    """Catch a signal; the callback receives ``(signal, data)``.

    `signal` may use ``*`` wildcards. Signal data is converted where its meaning
    is known: IRC messages become :class:`IrcMessage`, buffer and window
    signals carry :class:`Buffer` and :class:`Window` objects.
    """

    def __init__(self, signal: str = "*", callback: Optional[Callable[[str, Any], Any]] = None):
        super().__init__(callback)
        self.signal = signal
        self._install(w.hook_signal(signal, *self.callback_args()))

    def dispatch(self, signal: str, data: Any) -> int:
        transformation = find_transformation(signal, SIGNAL_TRANSFORMATIONS)
        if transformation is not None and isinstance(data, str):
            try:
                data = transformation(signal, data)
            except ValueError:
                logger.debug("could not convert data of signal %s", signal)
        return self.call(signal, data)

    @staticmethod
    def send(signal: str, type: str = "string", data: Any = "") -> int:
        if type not in SIGNAL_TYPES:
            raise ValueError("signal type must be one of {}".format(", ".join(SIGNAL_TYPES)))
        return w.hook_signal_send(str(signal), SIGNAL_TYPES[type], str(data))

    exec = send


class ConfigHook(Hook):
    """Watch an option; the callback receives ``(option, value)``."""

    def __init__(self, option: str, callback: Optional[Callable[[str, str], Any]] = None):
        super().__init__(callback)
        self.option = option
        self._install(w.hook_config(option, *self.callback_args()))


class PrintHook(Hook):
    """Catch lines after they were printed.

    By default every line in every buffer is caught; `buffer`, `tags` and
    `message` narrow it down. The callback receives a :class:`PrintedLine`.
    """

    def __init__(
        self,
        buffer: Optional[Union[str, Buffer]] = None,
        tags: Iterable[str] = (),
        message: str = "",
        strip_colors: bool = False,
        callback: Optional[Callable[[PrintedLine], Any]] = None,
    ):
        super().__init__(callback)
        if isinstance(tags, str):
            tags = [tags]
        self.buffer = buffer
        self.tags = list(tags)
        self.message = message
        self.strip_colors = strip_colors
        self._install(
            w.hook_print(
                "" if buffer is None else str(buffer),
                ",".join(self.tags),
                message,
                bool_to_integer(strip_colors),
                *self.callback_args()
            )
        )

    def dispatch(self, buffer, date, tags, displayed, highlight, prefix, message) -> int:
        line = PrintedLine(Buffer.from_ptr(buffer), date, tags, displayed, highlight, prefix, message)
        return self.call(line)


class LineHook(Hook):
    """Catch lines before they are displayed and optionally change them.

    The callback receives a :class:`LineData`; fields it reassigns are sent
    back to the host. It may also return a dict of fields itself.
    """

    callback_class = Callback
    missing_result: Any = {}

    def __init__(
        self,
        buffer_type: str = "",
        buffer_name: str = "",
        tags: str = "",
        callback: Optional[Callable[[LineData], Any]] = None,
    ):
        super().__init__(callback)
        self.buffer_type = buffer_type
        self.buffer_name = buffer_name
        self.tags = tags
        self._install(w.hook_line(buffer_type, buffer_name, tags, *self.callback_args()))

    def dispatch(self, line: Dict[str, str]) -> Dict[str, str]:
        data = LineData(line)
        try:
            ret = self.call(data)
        except Exception:
            logger.exception("line hook %s raised", self.id)
            return {}
        if isinstance(ret, dict):
            return ret
        return data.diff()


def _print_modifier_data(data: str) -> Tuple[Any, ...]:
    parts = data.split(";")
    if len(parts) >= 3:
        # plugin;buffer_name;tags
        plugin = Plugin.find(parts[0])
        buffer = Buffer.find(parts[1], plugin or parts[0])
        return plugin, buffer, [t for t in parts[2].split(",") if t]
    ptr = parts[0]
    tags = parts[1] if len(parts) > 1 else ""
    return Buffer.from_ptr(ptr), [t for t in tags.split(",") if t]


IRC_MODIFIER = re.compile(r"irc_(in2?|out1?)_.+")

MODIFIER_DATA_TRANSFORMATIONS = {
    ("irc_color_decode", "irc_color_encode"): lambda v: (integer_to_bool(v or 0),),
    (re.compile(r"bar_condition_.+"),): lambda v: (Window.from_ptr(v),),
    (
        "input_text_content",
        "input_text_display",
        "input_text_display_with_cursor",
        "history_add",
    ): lambda v: (Buffer.from_ptr(v),),
    ("weechat_print",): _print_modifier_data,
}

MODIFIER_RESULT_TRANSFORMATIONS = {
    (re.compile(r"bar_condition_.+"),): lambda v: str(bool_to_integer(v)),
}


class Modifier(Hook):
    """Catch a modifier and change the string it carries.

    The callback receives the converted modifier data followed by the string
    (a :class:`Line` for ``weechat_print``, an :class:`IrcMessage` for
    ``irc_in_*``/``irc_out_*``) and returns the new string. Returning None
    drops it.

    ========================  ===========================  ==================
    modifier                  arguments                    result
    ========================  ===========================  ==================
    irc_color_decode/encode   keep colors (bool), str      str
    irc_in_xxx, irc_in2_xxx   server name, IrcMessage      message or None
    irc_out_xxx               server name, IrcMessage      message or None
    bar_condition_yyy         Window, str                  bool
    history_add               Buffer, str                  str
    input_text_*              Buffer, str                  str
    weechat_print             Buffer, tags, Line           str or Line
    ========================  ===========================  ==================
    """

    callback_class = Callback

    def __init__(self, modifier: str, callback: Optional[Callable[..., Any]] = None):
        super().__init__(callback)
        self.modifier = str(modifier)
        self._install(w.hook_modifier(self.modifier, *self.callback_args()))

    def dispatch(self, modifier: str, modifier_data: str, string: str) -> str:
        try:
            args = self.convert_arguments(modifier, modifier_data, string)
            ret = self.call(*args)
        except Exception:
            logger.exception("modifier %s raised", modifier)
            return string
        return self.convert_result(modifier, ret)

    @classmethod
    def on_missing(cls, modifier, modifier_data, string) -> str:
        return string

    @staticmethod
    def convert_arguments(modifier: str, modifier_data: str, string: str) -> Tuple[Any, ...]:
        if IRC_MODIFIER.fullmatch(modifier):
            return modifier_data, IrcMessage.parse_message(string, modifier_data)
        transformation = find_transformation(modifier, MODIFIER_DATA_TRANSFORMATIONS)
        data = transformation(modifier_data) if transformation else (modifier_data,)
        payload: Any = string
        if modifier == "weechat_print":
            payload = Line.parse(string)
        return tuple(data) + (payload,)

    @staticmethod
    def convert_result(modifier: str, value: Any) -> str:
        if value is None:
            return ""
        transformation = find_transformation(modifier, MODIFIER_RESULT_TRANSFORMATIONS)
        if transformation:
            return transformation(value)
        return str(value)

    @staticmethod
    def exec(modifier: str, data: Any, string: Any) -> str:
        """Run a modifier, as the host would, and return the resulting string."""
        return w.hook_modifier_exec(str(modifier), str(data), str(string))


class PrintModifier(Modifier):
    """A ``weechat_print`` modifier. On error the line is printed unchanged."""

    def __init__(self, callback: Optional[Callable[..., Any]] = None):
        super().__init__("weechat_print", callback)


class Process(Hook):
    """Run a command in the background.

    The callback receives ``(return_code, stdout, stderr)``. Without `collect`
    it is called for each chunk of output, with a return code of
    ``WEECHAT_HOOK_PROCESS_RUNNING`` until the process ends. With `collect`
    it is called once, with all the output.
    """

    RUNNING = w.WEECHAT_HOOK_PROCESS_RUNNING
    ERROR = w.WEECHAT_HOOK_PROCESS_ERROR

    def __init__(
        self,
        command: str,
        timeout: int = 0,
        collect: bool = False,
        callback: Optional[Callable[[int, str, str], Any]] = None,
    ):
        super().__init__(callback)
        self.command = command
        self.timeout = timeout
        self.collect = collect
        self._stdout: List[str] = []
        self._stderr: List[str] = []
        self.return_code: Optional[int] = None
        self._install(w.hook_process(command, int(timeout), *self.callback_args()))

    @property
    def stdout(self) -> str:
        return "".join(self._stdout)

    @property
    def stderr(self) -> str:
        return "".join(self._stderr)

    @property
    def finished(self) -> bool:
        return self.return_code is not None and self.return_code != self.RUNNING

    def dispatch(self, command: str, return_code, out: str, err: str) -> int:
        return_code = int(return_code)
        self.return_code = return_code
        if self.collect:
            self._stdout.append(out or "")
            self._stderr.append(err or "")
        running = return_code == self.RUNNING
        if not running:
            # the host removes the hook once the process has ended
            self._forget()
        if self.collect:
            if running:
                return ReturnCode.OK.value
            return self.call(return_code, self.stdout, self.stderr)
        return self.call(return_code, out or "", err or "")


class Info(Hook):
    """Provide an info for ``weechat.info_get``.

    Arguments are split like a shell would before the callback sees them; the
    callback receives ``(info_name, *arguments)`` and its result is returned as
    a string.
    """

    callback_class = Callback
    missing_result: Any = ""

    def __init__(
        self,
        name: str,
        description: str = "",
        args_description: str = "",
        callback: Optional[Callable[..., Any]] = None,
    ):
        super().__init__(callback)
        self.name = name
        self.description = description
        self.args_description = args_description
        self._install(w.hook_info(name, description, args_description, *self.callback_args()))

    def dispatch(self, info_name: str, arguments: str) -> str:
        try:
            args = shlex.split(arguments or "")
        except ValueError:
            args = (arguments or "").split()
        try:
            ret = self.call(info_name, *args)
        except Exception:
            logger.exception("info %s raised", info_name)
            return ""
        return "" if ret is None else str(ret)
