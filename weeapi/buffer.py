"""Wrapper around WeeChat buffers.

Buffers are created with :meth:`Buffer.create`, which accepts any callables
for input and closing::

    buf = Buffer.create("my buffer",
                        lambda buffer, text: buffer.print(text.upper()),
                        lambda buffer: None)

Existing buffers are looked up with :meth:`Buffer.find`, :meth:`Buffer.search`
or :meth:`Buffer.current`.

Getters (besides local variables, ``buffer.localvar_<name>``, and anything in
the buffer infolist):

    plugin, name, short_name, title, number (position), num_displayed,
    notify (never/highlights/messages/always), lines_hidden, prefix_max_length,
    time_for_each_line (show_times), text_search (none/backward/forward),
    text_search_exact, text_search_found, type (formatted/free),
    highlight_words, highlight_tags

The library does not check whether the pointer still refers to an existing
buffer; use :meth:`Buffer.is_valid` after the buffer may have been closed.
"""
import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple, Union

import weechat as w

from .callbacks import CallbackRegistry, EvaluatedCallback, compute_free_id, export
from .errors import DuplicateBufferName, InvalidPropertyValue, UnknownServer
from .infolist import Infolist
from .line import Line
from .plugin import Plugin
from .pointer import Pointer
from .properties import Properties
from .utilities import ReturnCode, bool_to_integer, integer_to_bool

NOTIFY_LEVELS = ("never", "highlights", "messages", "always")
TEXT_SEARCH = ("none", "backward", "forward")
BUFFER_TYPES = ("formatted", "free")

INPUT_CALLBACK = "weeapi_input_cb"
CLOSE_CALLBACK = "weeapi_close_cb"


def _highlight_list(value: str) -> List[str]:
    if value in ("", "-"):
        return []
    return value.split(",")


def _highlight_string(value) -> str:
    if isinstance(value, str):
        value = [value]
    s = ",".join(value)
    return s or "-"


def _notify_level(value) -> int:
    if value in NOTIFY_LEVELS:
        return NOTIFY_LEVELS.index(value)
    raise InvalidPropertyValue(str(value))


def _buffer_type(value) -> str:
    value = str(value)
    if value not in BUFFER_TYPES:
        raise InvalidPropertyValue(value)
    return value


def _input_cb(data, buffer, input_data):
    return Buffer.call_input_callback(data, buffer, input_data)


def _close_cb(data, buffer):
    return Buffer.call_close_callback(data, buffer)


class Input:
    """The input line of a buffer."""

    def __init__(self, buffer: "Buffer"):
        self.buffer = buffer

    @property
    def text(self) -> str:
        return self.buffer.get_property("input")

    @text.setter
    def text(self, value: str):
        self.buffer.set_property("input", value)

    content = text

    @property
    def size(self) -> int:
        return self.buffer.get_property("input_length")

    @property
    def pos(self) -> int:
        return self.buffer.get_property("input_pos")

    @pos.setter
    def pos(self, value: int):
        self.buffer.set_property("input_pos", value)

    @property
    def get_unknown_commands(self) -> bool:
        return self.buffer.get_property("input_get_unknown_commands")

    @get_unknown_commands.setter
    def get_unknown_commands(self, value: bool):
        self.buffer.set_property("input_get_unknown_commands", value)

    def __str__(self):
        return self.text


class Buffer(Properties, Pointer, CallbackRegistry):
    known_string_properties = ("name", "full_name", "short_name", "title", "input")
    known_integer_properties = (
        "number", "num_displayed", "notify", "lines_hidden", "prefix_max_length",
        "time_for_each_line", "text_search", "text_search_exact",
        "text_search_found", "type", "input_size", "input_length", "input_pos",
        "input_get_unknown_commands", "hidden",
    )
    known_pointer_properties = ("plugin",)
    settable_properties = (
        "hotlist", "unread", "display", "number", "name", "short_name", "type",
        "notify", "title", "time_for_each_line", "nicklist",
        "nicklist_case_sensitive", "nicklist_display_groups", "highlight_words",
        "highlight_tags", "input", "input_pos", "input_get_unknown_commands",
        "hidden",
    )
    transformations = {
        (
            "lines_hidden", "time_for_each_line", "text_search_exact",
            "text_search_found", "input_get_unknown_commands", "hidden",
            "nicklist", "nicklist_case_sensitive", "nicklist_display_groups",
        ): integer_to_bool,
        ("highlight_words", "highlight_tags"): _highlight_list,
        ("notify",): lambda v: NOTIFY_LEVELS[int(v)],
        ("text_search",): lambda v: TEXT_SEARCH[int(v)],
        ("type",): lambda v: BUFFER_TYPES[int(v)],
        ("plugin",): lambda v: Plugin.from_ptr(v) if v else None,
    }
    rtransformations = {
        (
            "lines_hidden", "time_for_each_line", "text_search_exact",
            "text_search_found", "input_get_unknown_commands", "hidden",
            "nicklist", "nicklist_case_sensitive", "nicklist_display_groups",
        ): bool_to_integer,
        ("display",): lambda v: v if v == "auto" else bool_to_integer(v),
        ("unread",): lambda v: "1" if v else None,
        ("highlight_words", "highlight_tags"): _highlight_string,
        ("notify",): _notify_level,
        ("type",): _buffer_type,
    }
    mappings = {
        "show_times": "time_for_each_line",
        "position": "number",
    }

    def __init__(self, ptr: str = ""):
        object.__setattr__(self, "_ptr", ptr)
        self._init_from_ptr()

    def _init_from_ptr(self):
        object.__setattr__(self, "_input", Input(self))
        object.__setattr__(self, "_keybinds", {})

    # lookup

    @classmethod
    def find(cls, name: str, plugin: Union[str, Plugin] = "python") -> Optional["Buffer"]:
        """Find a buffer by name and plugin. ``"=="`` as plugin takes a full name."""
        if isinstance(plugin, Plugin):
            plugin = plugin.name
        ptr = w.buffer_search(str(plugin), name)
        return cls.from_ptr(ptr) if ptr else None

    @classmethod
    def search(cls, pattern: Union[str, Pattern], **requirements: Any) -> List["Buffer"]:
        """All buffers whose name matches `pattern` (a name or a regex).

        Keyword arguments filter on buffer infolist fields.
        """
        if isinstance(pattern, str):
            pattern = re.compile("^{}$".format(re.escape(pattern)))
        items = Infolist.parse("buffer", "", "", requirements, "name", "pointer")
        return [cls.from_ptr(item["pointer"]) for item in items if pattern.search(item["name"])]

    @classmethod
    def all(cls) -> List["Buffer"]:
        return [cls.from_ptr(item["pointer"]) for item in Infolist.parse("buffer", "", "", None, "pointer")]

    @classmethod
    def current(cls) -> "Buffer":
        return cls.from_ptr(w.current_buffer())

    # creation and callbacks

    @classmethod
    def create(
        cls,
        name: str,
        input_callback: Optional[Callable] = None,
        close_callback: Optional[Callable] = None,
    ) -> "Buffer":
        """Create a new buffer.

        Raises:
            DuplicateBufferName: a buffer with that name already exists
        """
        id = compute_free_id()
        ptr = w.buffer_new(
            str(name),
            export(INPUT_CALLBACK, _input_cb),
            str(id),
            export(CLOSE_CALLBACK, _close_cb),
            str(id),
        )
        if not ptr:
            raise DuplicateBufferName(str(name))
        cls.register_callback(
            id,
            input_callback=EvaluatedCallback(input_callback) if input_callback else None,
            close_callback=EvaluatedCallback(close_callback) if close_callback else None,
            ptr=ptr,
        )
        return cls.from_ptr(ptr)

    @classmethod
    def call_input_callback(cls, id, buffer: str, input_data: str) -> int:
        ret = cls.call_callback(id, "input_callback", cls.from_ptr(buffer), input_data)
        return ReturnCode.OK.value if ret is None else ret

    @classmethod
    def call_close_callback(cls, id, buffer: str) -> int:
        ret = cls.call_callback(id, "close_callback", cls.from_ptr(buffer))
        cls.unregister_callback(int(id))
        return ReturnCode.OK.value if ret is None else ret

    @property
    def input_callback(self):
        return Buffer.find_callbacks(ptr=self.ptr).get("input_callback")

    @property
    def close_callback(self):
        return Buffer.find_callbacks(ptr=self.ptr).get("close_callback")

    # input line

    @property
    def input(self) -> Input:
        return self._input

    @input.setter
    def input(self, value: str):
        self._input.text = value

    # operations

    def display(self, auto: bool = False):
        """Show the buffer in the current window.

        With `auto`, the read marker of the previously shown buffer is kept.
        """
        self.set_property("display", "auto" if auto else 1)

    show = display

    def is_valid(self) -> bool:
        return self.ptr in (b.ptr for b in Buffer.all())

    exists = is_valid

    def is_current(self) -> bool:
        return self == Buffer.current()

    def is_channel(self) -> bool:
        return self.get_property("localvar_type") == "channel"

    @property
    def channel(self):
        """The IRC channel shown in this buffer.

        Raises:
            NotAChannel: the buffer doesn't represent a channel
        """
        from .irc.channel import Channel

        return Channel(self)

    @property
    def server(self):
        """The IRC server this buffer belongs to, or None."""
        from .irc.server import Server

        plugin = self.plugin
        if plugin is None or plugin.name not in ("core", "irc"):
            return None
        parts = self.name.split(".")
        first, rest = parts[0], ".".join(parts[1:])
        for name in (first, rest):
            if not name:
                continue
            try:
                return Server.from_name(name)
            except UnknownServer:
                continue
        return None

    def command(self, *parts: str) -> str:
        """Run a command in this buffer; a leading slash is added if missing.

        >>> buffer.command("whois", "nick")
        '/whois nick'
        """
        line = " ".join(str(p) for p in parts)
        if not line.startswith("/"):
            line = "/" + line
        w.command(self.ptr, line)
        return line

    send_command = command
    exec = command

    def send(self, *text: str) -> str:
        """Send text to the buffer; a leading slash is escaped."""
        line = " ".join(str(t) for t in text)
        if line.startswith("/"):
            line = "/" + line
        w.command(self.ptr, line)
        return line

    privmsg = send
    say = send

    def close(self):
        w.buffer_close(self.ptr)

    def move(self, number: int) -> int:
        self.set_property("number", number)
        return number

    move_to = move

    def update_marker(self):
        """Move the read marker to the bottom."""
        self.set_property("unread", True)

    update_read_marker = update_marker

    def clear(self):
        w.buffer_clear(self.ptr)

    def print(self, text: Any):
        w.prnt(self.ptr, str(text))

    puts = print

    def print_y(self, y: int, text: Any):
        w.prnt_y(self.ptr, y, str(text))

    def lines(self, strip_colors: bool = False) -> List[Line]:
        lines = [Line.from_dict(item) for item in Infolist.parse("buffer_lines", self.ptr)]
        if strip_colors:
            lines = [line.strip_colors() for line in lines]
        return lines

    def text(self, strip_colors: bool = False) -> str:
        return "\n".join(str(line) for line in self.lines(strip_colors))

    content = text

    def __len__(self):
        return len(Infolist.parse("buffer_lines", self.ptr, "", None, "y"))

    def __bool__(self):
        return True

    size = __len__

    def set_localvar(self, name: str, value: Any):
        self.set("localvar_set_{}".format(name), value)

    def del_localvar(self, name: str):
        self.set("localvar_del_{}".format(name), "")

    def bind_keys(self, *args) -> str:
        """Bind a key chain to a command: ``bind_keys("meta-a", "x", "/cmd")``.

        The last argument is the command, either a string or a Command hook.
        """
        from .hooks import Command

        *keys, command = args
        if isinstance(command, Command):
            command = "/" + command.command
        keychain = "-".join(keys)
        self.set("key_bind_{}".format(keychain), command)
        self._keybinds[tuple(keys)] = command
        return keychain

    def unbind_keys(self, *keys: str) -> Optional[str]:
        keychain = "-".join(keys)
        self.set("key_unbind_{}".format(keychain), "")
        return self._keybinds.pop(tuple(keys), None)

    @property
    def key_binds(self) -> Dict[Tuple[str, ...], str]:
        return self._keybinds

    def windows(self):
        from .window import Window

        return [window for window in Window.all() if window.buffer == self]


class CustomBuffer(Buffer):
    """Subclass to build a buffer with its own input and close behaviour.

    Override :meth:`handle_input` and :meth:`buffer_closed`.
    """

    def __init__(self, name: str):
        buf = Buffer.create(name, self._on_input, self._on_close)
        super().__init__(buf.ptr)

    def _on_input(self, buffer, text):
        return self.handle_input(text)

    def _on_close(self, buffer):
        return self.buffer_closed()

    def handle_input(self, text: str):
        pass

    def buffer_closed(self):
        pass


class CustomFreeContentBuffer(CustomBuffer):
    """A custom buffer with free content, written line by line with print_line."""

    def __init__(self, name: str):
        super().__init__(name)
        self.type = "free"

    def print_line(self, y: int, text: Any):
        self.print_y(y, text)


CORE = Buffer("")
