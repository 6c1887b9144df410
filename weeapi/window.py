from typing import List

import weechat as w

from .buffer import Buffer
from .infolist import Infolist
from .pointer import Pointer
from .properties import Properties
from .utilities import integer_to_bool


class Window(Properties, Pointer):
    """A WeeChat window.

    Getters: x, y, width, height, width_pct, height_pct (relative to the
    parent window), first_line_displayed, scrolling, scrolling_lines, buffer.
    The chat area is available as :attr:`chat`.
    """

    class Chat:
        """The chat area of a window."""

        def __init__(self, window: "Window"):
            self.window = window

        @property
        def x(self) -> int:
            return self.window.get_property("win_chat_x")

        @property
        def y(self) -> int:
            return self.window.get_property("win_chat_y")

        @property
        def width(self) -> int:
            return self.window.get_property("win_chat_width")

        @property
        def height(self) -> int:
            return self.window.get_property("win_chat_height")

        def __eq__(self, other):
            return isinstance(other, Window.Chat) and self.window == other.window

        def __hash__(self):
            return hash(self.window)

    known_integer_properties = (
        "number", "win_x", "win_y", "win_width", "win_height", "win_width_pct",
        "win_height_pct", "win_chat_x", "win_chat_y", "win_chat_width",
        "win_chat_height", "first_line_displayed", "scrolling",
        "lines_after",
    )
    known_pointer_properties = ("buffer",)
    transformations = {
        ("first_line_displayed", "scrolling"): integer_to_bool,
        ("buffer",): lambda v: Buffer.from_ptr(v),
    }
    mappings = {
        "x": "win_x",
        "y": "win_y",
        "width": "win_width",
        "height": "win_height",
        "width_pct": "win_width_pct",
        "height_pct": "win_height_pct",
        "scroll": "scrolling",
        "scrolling_lines": "lines_after",
        "scroll_lines_after": "lines_after",
    }

    @classmethod
    def current(cls) -> "Window":
        return cls.from_ptr(w.current_window())

    @classmethod
    def all(cls) -> List["Window"]:
        return [cls.from_ptr(item["pointer"]) for item in Infolist.parse("window")]

    windows = all

    def _init_from_ptr(self):
        object.__setattr__(self, "_chat", Window.Chat(self))

    @property
    def chat(self) -> "Window.Chat":
        return self._chat
