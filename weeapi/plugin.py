import logging
from typing import Any, Callable, List, Optional

import weechat as w

from .callbacks import Callback, CallbackRegistry, compute_free_id, export
from .errors import HookError
from .infolist import Infolist, InfolistItem
from .pointer import Pointer
from .properties import Properties
from .utilities import integer_to_bool

logger = logging.getLogger(__name__)


class Plugin(Properties, Pointer):
    """A loaded WeeChat plugin. All properties come from the plugin infolist."""

    transformations = {("debug",): integer_to_bool}
    mappings = {"licence": "license"}

    @classmethod
    def all(cls) -> List["Plugin"]:
        return [cls.from_ptr(item["pointer"]) for item in Infolist.parse("plugin")]

    @classmethod
    def find(cls, name: str) -> Optional["Plugin"]:
        for plugin in cls.all():
            if plugin.name == name:
                return plugin
        return None

    @property
    def name(self) -> str:
        return w.plugin_get_name(self.ptr)

    def scripts(self) -> List["LoadedScript"]:
        return [
            LoadedScript.from_plugin(item["pointer"], self)
            for item in Infolist.parse("{}_script".format(self.name))
        ]


class LoadedScript(Properties, Pointer):
    """A script loaded by one of the scripting plugins."""

    weechat_type = "script"

    @classmethod
    def from_plugin(cls, ptr: str, plugin: Plugin) -> "LoadedScript":
        o = cls.from_ptr(ptr)
        o._plugin = plugin
        return o

    @classmethod
    def all(cls) -> List["LoadedScript"]:
        return [script for plugin in Plugin.all() for script in plugin.scripts()]

    @property
    def plugin(self) -> Plugin:
        return self._plugin

    def get_infolist(self, *fields: str) -> List[InfolistItem]:
        return Infolist.parse(
            "{}_script".format(self._plugin.name), self.ptr, "", None, *fields
        )


def _bar_items(value: str) -> List[Any]:
    ret: List[Any] = []
    for item in value.split(","):
        parts = item.split("+")
        ret.append(parts[0] if len(parts) == 1 else parts)
    return ret


def _bar_items_to_string(items) -> str:
    return ",".join("+".join(item) if isinstance(item, (list, tuple)) else str(item) for item in items)


def _color_name(value) -> str:
    return getattr(value, "name", value)


def _window(ptr):
    from .window import Window

    return Window.from_ptr(ptr) if ptr else None


def _on_off(value) -> str:
    return "on" if value else "off"


class Bar(Properties, Pointer):
    """A WeeChat bar. Properties are read from the bar infolist."""

    BAR_TYPES = ("root", "window")
    POSITIONS = ("top", "bottom", "left", "right")
    FILLINGS = ("horizontal", "vertical", "columns_horizontal", "columns_vertical")

    settable_properties = (
        "name", "hidden", "priority", "conditions", "position",
        "filling_top_bottom", "filling_left_right", "size", "size_max",
        "color_fg", "color_delim", "color_bg", "separator", "items",
    )
    transformations = {
        ("hidden", "separator"): integer_to_bool,
        ("type",): lambda v: Bar.BAR_TYPES[int(v)],
        ("position",): lambda v: Bar.POSITIONS[int(v)],
        ("filling_top_bottom", "filling_left_right"): lambda v: Bar.FILLINGS[int(v)],
        ("color_fg", "color_delim", "color_bg"): lambda v: _color(v),
        ("bar_window",): _window,
        ("items",): _bar_items,
    }
    rtransformations = {
        ("hidden", "separator"): _on_off,
        ("color_fg", "color_delim", "color_bg"): _color_name,
        ("items",): _bar_items_to_string,
    }
    mappings = {"has_separator": "separator"}

    @classmethod
    def find(cls, name: str) -> Optional["Bar"]:
        ptr = w.bar_search(name)
        return cls.from_ptr(ptr) if ptr else None

    @classmethod
    def create(
        cls,
        name: str,
        hidden: bool = False,
        priority: int = 0,
        type: str = "root",
        conditions: str = "",
        position: str = "top",
        filling_top_bottom: str = "horizontal",
        filling_left_right: str = "vertical",
        size: int = 0,
        size_max: int = 0,
        color_fg: Any = "default",
        color_delim: Any = "default",
        color_bg: Any = "default",
        color_bg_inactive: Any = "default",
        separator: bool = False,
        items: Any = (),
    ) -> "Bar":
        ptr = w.bar_new(
            name, _on_off(hidden), str(priority), type, conditions, position,
            filling_top_bottom, filling_left_right, str(size), str(size_max),
            _color_name(color_fg), _color_name(color_delim), _color_name(color_bg),
            _color_name(color_bg_inactive), _on_off(separator),
            items if isinstance(items, str) else _bar_items_to_string(items),
        )
        if not ptr:
            raise HookError("could not create bar {}".format(name))
        return cls.from_ptr(ptr)

    def update(self):
        w.bar_update(self.name)

    def remove(self):
        w.bar_remove(self.ptr)

    delete = remove


def _color(name):
    from .core import Color

    return Color(name)


BAR_ITEM_CALLBACK = "weeapi_bar_item_cb"


def _bar_item_cb(data, item, window, *args):
    return BarItem.call_build_callback(data, window, *args)


class BarItem(Properties, Pointer, CallbackRegistry):
    weechat_type = "bar_item"

    transformations = {("plugin",): lambda v: Plugin.from_ptr(v)}

    @classmethod
    def create(cls, name: str, build_callback: Callable) -> "BarItem":
        """Create a bar item whose content is rendered by `build_callback(window)`."""
        id = compute_free_id()
        ptr = w.bar_item_new(name, export(BAR_ITEM_CALLBACK, _bar_item_cb), str(id))
        if not ptr:
            raise HookError("could not create bar item {}".format(name))
        cls.register_callback(id, build_callback=Callback(build_callback), ptr=ptr)
        o = cls.from_ptr(ptr)
        o._name = name
        o._id = id
        return o

    @classmethod
    def call_build_callback(cls, id, window, *args) -> str:
        try:
            ret = cls.call_callback(id, "build_callback", _window(window), *args)
        except Exception:
            logger.exception("bar item build callback raised")
            return ""
        return "" if ret is None else str(ret)

    @classmethod
    def find(cls, name: str) -> Optional["BarItem"]:
        ptr = w.bar_item_search(name)
        if not ptr:
            return None
        o = cls.from_ptr(ptr)
        o._name = name
        return o

    @classmethod
    def all(cls) -> List["BarItem"]:
        items = (cls.find(item["name"]) for item in Infolist.parse("bar_item", "", "", None, "name"))
        return [item for item in items if item is not None]

    @property
    def name(self) -> str:
        return self._name

    def update(self):
        w.bar_item_update(self._name)

    def remove(self):
        w.bar_item_remove(self.ptr)
        id = getattr(self, "_id", None)
        if id is not None:
            self.unregister_callback(id)

    delete = remove
