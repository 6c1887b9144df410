import json
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

import weechat as w

from . import log
from .callbacks import export
from .core import Color
from .hooks import Command, Hook
from .utilities import ReturnCode, escaped_join, escaped_split

logger = logging.getLogger(__name__)

SHUTDOWN_CALLBACK = "weeapi_shutdown_cb"

OptionSpec = Union[Tuple[type, Any], Tuple[type, Any, str]]


def _to_bool(value: str) -> bool:
    return bool(w.config_string_to_boolean(value))


def _from_bool(value: Any) -> str:
    return "on" if value else "off"


def _to_list(value: str) -> List[str]:
    return escaped_split(value, ",") if value else []


def _to_dict(value: str) -> Dict[str, Any]:
    return json.loads(value) if value else {}


DECODERS: Dict[type, Callable[[str], Any]] = {
    bool: _to_bool,
    int: int,
    float: float,
    str: str,
    list: _to_list,
    dict: _to_dict,
    Color: Color,
}

ENCODERS: Dict[type, Callable[[Any], str]] = {
    bool: _from_bool,
    int: str,
    float: str,
    str: str,
    list: lambda value: escaped_join(value, ","),
    dict: lambda value: json.dumps(value, sort_keys=True),
    Color: lambda value: getattr(value, "name", str(value)),
}


class Config:
    """Script options, stored by WeeChat as ``plugins.var.python.<script>.<option>``.

    Options are declared with their type and default, and optionally a
    description::

        config = Config({
            "enabled": (bool, True, "turn the script on or off"),
            "channels": (list, ["#weechat"]),
            "color": (Color, Color("red")),
        })

    Values read back through ``config.get("enabled")``, ``config["enabled"]`` or
    ``config.enabled`` are converted to the declared type.
    """

    def __init__(self, options: Optional[Dict[str, OptionSpec]] = None):
        object.__setattr__(self, "options", dict(options or {}))

    def _spec(self, name: str) -> OptionSpec:
        try:
            return self.options[name]
        except KeyError:
            raise KeyError("unknown option {!r}".format(name)) from None

    def encode(self, name: str, value: Any) -> str:
        return ENCODERS[self._spec(name)[0]](value)

    def decode(self, name: str, value: str) -> Any:
        type = self._spec(name)[0]
        try:
            return DECODERS[type](value)
        except ValueError:
            logger.warning("invalid value %r for option %s, using default", value, name)
            return self.default(name)

    def default(self, name: str) -> Any:
        return self._spec(name)[1]

    def get(self, name: str) -> Any:
        if not self.is_set(name):
            return self.default(name)
        return self.decode(name, w.config_get_plugin(name))

    def set(self, name: str, value: Any) -> int:
        return w.config_set_plugin(name, self.encode(name, value))

    def is_set(self, name: str) -> bool:
        return bool(w.config_is_set_plugin(name))

    def unset(self, name: str) -> int:
        return w.config_unset_plugin(name)

    def clear(self) -> None:
        """Unset every declared option."""
        for name in self.options:
            self.unset(name)

    def populate(self) -> None:
        """Write defaults (and descriptions) for options that aren't set yet."""
        for name, spec in self.options.items():
            if not self.is_set(name):
                self.set(name, spec[1])
            if len(spec) > 2:
                w.config_set_desc_plugin(name, spec[2])

    def reset(self) -> None:
        """Put every option back to its default."""
        for name, spec in self.options.items():
            self.set(name, spec[1])

    def keys(self) -> List[str]:
        return list(self.options)

    def items(self) -> List[Tuple[str, Any]]:
        return [(name, self.get(name)) for name in self.options]

    def __contains__(self, name):
        return name in self.options

    def __iter__(self) -> Iterator[str]:
        return iter(self.options)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any):
        self.set(name, value)

    def __delitem__(self, name: str):
        self.unset(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name not in self.__dict__.get("options", {}):
            raise AttributeError(
                "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
            )
        return self.get(name)

    def __setattr__(self, name: str, value: Any):
        if name in self.options:
            self.set(name, value)
        else:
            object.__setattr__(self, name, value)


class Script:
    def __init__(
        self,
        name: str,
        author: str,
        version: str,
        license: str,
        description: str,
        charset: str = "",
        config: Optional[Config] = None,
    ) -> None:
        """Define a script

        Args:
            name (str): Name of script
            author (str): Author of script
            version (str): Version of script
            license (str): License of script
            description (str): Description of script
            charset (str): Charset of script, empty for UTF-8
            config (Config): Options of the script
        """
        self.name = name
        self.author = author
        self.version = version
        self.license = license
        self.description = description
        self.charset = charset
        self.config = config if config is not None else Config()
        self.registered = False
        self.pending: List[Callable[[], Hook]] = []
        self.hooks: List[Hook] = []

    def register_command(self, command: str, description: str = "", args: str = "",
                         args_description: Any = "", completion: Any = "",
                         callback: Optional[Callable] = None) -> None:
        """Add a command, hooked on :meth:`install` (or right away once installed)."""
        self.register_hook(
            lambda: Command(command, description, args, args_description, completion, callback)
        )

    def register_hook(self, hook: Union[Hook, Callable[[], Hook]]) -> None:
        """Add a hook factory, or keep track of a hook that already exists."""
        if isinstance(hook, Hook):
            self.hooks.append(hook)
        elif self.registered:
            self._hook(hook)
        else:
            self.pending.append(hook)

    def _hook(self, factory: Callable[[], Hook]) -> None:
        try:
            self.hooks.append(factory())
        except Exception:
            logger.exception("failed to hook %r", factory)

    def install(self) -> bool:
        """Register a script

        Returns:
            bool: whether WeeChat accepted the registration
        """
        ok = w.register(
            self.name,
            self.author,
            self.version,
            self.license,
            self.description,
            export(SHUTDOWN_CALLBACK, self.shutdown),
            self.charset,
        )
        if not ok:
            return False
        self.registered = True

        log.setup()
        self.config.populate()

        pending, self.pending = self.pending, []
        for factory in pending:
            self._hook(factory)

        self.on_register()
        return True

    def shutdown(self) -> int:
        try:
            self.before_shutdown()
        except Exception:
            logger.exception("before_shutdown raised")
        Hook.unhook_all()
        self.hooks.clear()
        self.registered = False
        return ReturnCode.OK.value

    def before_shutdown(self):
        """This function is called before shutting down the script"""
        pass

    def on_register(self):
        """This function is called on successful registration with WeeChat"""
        pass
