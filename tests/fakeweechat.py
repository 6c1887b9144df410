"""In-memory stand-in for the ``weechat`` module, for tests only.

Callbacks are looked up by name in ``__main__``, as the real plugin does.
All state lives in :data:`state`; :func:`reset` reinitializes it in place so
modules holding a reference to this module keep working.
"""
import re
import sys
import time
from fnmatch import fnmatchcase

WEECHAT_RC_OK = 0
WEECHAT_RC_OK_EAT = 1
WEECHAT_RC_ERROR = -1

WEECHAT_HOOK_PROCESS_RUNNING = -1
WEECHAT_HOOK_PROCESS_ERROR = -2

WEECHAT_HOOK_SIGNAL_STRING = "string"
WEECHAT_HOOK_SIGNAL_INT = "int"
WEECHAT_HOOK_SIGNAL_POINTER = "pointer"

WEECHAT_CONFIG_OPTION_SET_OK_CHANGED = 2
WEECHAT_CONFIG_OPTION_SET_OK_SAME_VALUE = 1
WEECHAT_CONFIG_OPTION_UNSET_OK_NO_RESET = 0
WEECHAT_CONFIG_OPTION_UNSET_OK_REMOVED = 2

COLOR = re.compile("\x19[^\x1c]*\x1c")

BUFFER_INTEGERS = (
    "number", "num_displayed", "notify", "lines_hidden", "prefix_max_length",
    "time_for_each_line", "text_search", "text_search_exact",
    "text_search_found", "type", "input_size", "input_length", "input_pos",
    "input_get_unknown_commands", "hidden", "nicklist",
)

PREFIXES = {
    "error": "=!=\t",
    "network": "--\t",
    "action": " *\t",
    "join": "-->\t",
    "quit": "<--\t",
}


class Time(int):
    """An infolist field of kind ``t``."""


class State:
    def __init__(self):
        self.next_ptr = 0x1000
        self.buffers = {}
        self.windows = {}
        self.plugins = {}
        self.hooks = {}
        self.infolists = {}
        self.freed = []
        self.extra_infolists = {}
        self.irc_servers = {}
        self.irc_channels = {}
        self.bars = {}
        self.bar_items = {}
        self.bar_item_updates = []
        self.plugin_config = {}
        self.plugin_config_desc = {}
        self.commands = []
        self.printed = []
        self.log = []
        self.directories = []
        self.title = None
        self.script = None
        self.infos = {
            "version": "3.8",
            "date": "Jan 10 2023",
            "fifo_filename": "/run/weechat/weechat_fifo",
            "filters_enabled": "1",
            "inactivity": "42",
            "charset_internal": "UTF-8",
            "charset_terminal": "UTF-8",
            "weechat_dir": "/home/user/.weechat",
            "weechat_libdir": "/usr/lib/weechat",
            "weechat_localedir": "/usr/share/locale",
            "weechat_sharedir": "/usr/share/weechat",
            "dir_separator": "/",
        }
        for name in ("core", "python", "irc"):
            self.plugins[self.new_ptr()] = {
                "name": name,
                "filename": "{}.so".format(name),
                "description": "{} plugin".format(name),
                "author": "Sébastien Helleu",
                "version": "3.8",
                "license": "GPL3",
                "debug": 0,
            }
        self.core_buffer = self.add_buffer("weechat", "core", number=1)
        self.current_buffer = self.core_buffer
        self.current_window = self.new_ptr()
        self.windows[self.current_window] = {
            "number": 1,
            "buffer": self.core_buffer,
            "win_x": 0,
            "win_y": 0,
            "win_width": 80,
            "win_height": 24,
            "win_width_pct": 100,
            "win_height_pct": 100,
            "win_chat_x": 0,
            "win_chat_y": 1,
            "win_chat_width": 80,
            "win_chat_height": 21,
            "first_line_displayed": 1,
            "scrolling": 0,
            "lines_after": 0,
        }

    def new_ptr(self):
        self.next_ptr += 0x10
        return "0x{:x}".format(self.next_ptr)

    def plugin_ptr(self, name):
        for ptr, plugin in self.plugins.items():
            if plugin["name"] == name:
                return ptr
        return ""

    def add_buffer(self, name, plugin="python", **properties):
        ptr = self.new_ptr()
        buffer = {
            "name": name,
            "full_name": "{}.{}".format(plugin, name),
            "short_name": name,
            "title": "",
            "input": "",
            "plugin": plugin,
            "localvars": {"plugin": plugin, "name": name},
            "lines": [],
            "keys": {},
            "callbacks": {},
        }
        for prop in BUFFER_INTEGERS:
            buffer[prop] = 0
        buffer["number"] = len(self.buffers) + 1
        buffer["num_displayed"] = 1
        buffer.update(properties)
        self.buffers[ptr] = buffer
        return ptr


state = State()


def reset():
    state.__init__()


def _main_call(name, *args):
    return getattr(sys.modules["__main__"], name)(*args)


def _buffer(ptr):
    if not ptr:
        return state.buffers[state.core_buffer]
    return state.buffers.get(ptr)


def _buffer_ptr(ptr):
    return ptr or state.core_buffer


def _split_line(line):
    if "\t" in line:
        prefix, text = line.split("\t", 1)
        return prefix, text
    return "", line


def _add_hook(kind, callback, data, **args):
    ptr = state.new_ptr()
    state.hooks[ptr] = dict(args, kind=kind, callback=callback, data=data)
    return ptr


def _hooks(kind):
    return [(ptr, hook) for ptr, hook in list(state.hooks.items()) if hook["kind"] == kind]


# test helpers


def add_irc_server(name, **fields):
    """Create a connected server with its buffer."""
    buffer = state.add_buffer("server.{}".format(name), "irc")
    state.buffers[buffer]["localvars"].update(type="server", server=name)
    data = {
        "name": name,
        "buffer": buffer,
        "addresses": "irc.{}.chat/6697".format(name),
        "nick": "me",
        "is_connected": 1,
        "ssl": 1,
        "autoconnect": 0,
        "disable_autojoin": 0,
        "is_away": 0,
        "lag": 12,
        "away_time": Time(0),
    }
    data.update(fields)
    state.irc_servers[name] = data
    state.irc_channels[name] = []
    return buffer


def add_irc_channel(server, name, nicks=(), topic="", type=0):
    """Create a joined channel (or, with type 1, a private buffer)."""
    buffer = state.add_buffer("{}.{}".format(server, name), "irc")
    state.buffers[buffer]["localvars"].update(
        type="channel" if type == 0 else "private", server=server, channel=name
    )
    state.irc_channels[server].append(
        {
            "buffer": buffer,
            "name": name,
            "topic": topic,
            "type": type,
            "modes": "+nt",
            "key": "",
            "limit": 0,
            "nicks_count": len(nicks),
            "nicks": [dict(n) for n in nicks],
        }
    )
    return buffer


def add_lines(buffer, *lines, tags=()):
    for line in lines:
        prefix, message = _split_line(line)
        _buffer(buffer)["lines"].append((prefix, message, list(tags)))


def add_infolist(name, items):
    """Serve `items` (a list of dicts) for the infolist `name`."""
    state.extra_infolists[name] = [dict(item) for item in items]


def fire_timer(ptr):
    hook = state.hooks[ptr]
    if hook["max_calls"] == 0:
        remaining = -1
    else:
        hook["remaining"] -= 1
        remaining = hook["remaining"]
        if remaining == 0:
            del state.hooks[ptr]
    return _main_call(hook["callback"], hook["data"], remaining)


def process_output(ptr, return_code, out="", err=""):
    hook = state.hooks[ptr]
    if return_code != WEECHAT_HOOK_PROCESS_RUNNING:
        del state.hooks[ptr]
    return _main_call(hook["callback"], hook["data"], hook["command"], return_code, out, err)


def fire_line(line):
    ret = {}
    for ptr, hook in _hooks("line"):
        ret = _main_call(hook["callback"], hook["data"], dict(line))
    return ret


def user_input(buffer, text):
    buf = _buffer(buffer)
    callback, data = buf["callbacks"].get("input", (None, None))
    if callback is None:
        return WEECHAT_RC_OK
    return _main_call(callback, data, _buffer_ptr(buffer), text)


def build_bar_item(name, window=""):
    item = state.bar_items[bar_item_search(name)]
    return _main_call(item["callback"], item["data"], bar_item_search(name), window)


def unload_script():
    return _main_call(state.script["shutdown"])


def find_hooks(kind):
    return [hook for _, hook in _hooks(kind)]


# registration


def register(name, author, version, license, description, shutdown_function, charset):
    if state.script is not None:
        return 0
    state.script = {
        "name": name,
        "author": author,
        "version": version,
        "license": license,
        "description": description,
        "shutdown": shutdown_function,
        "charset": charset,
    }
    return 1


def plugin_get_name(ptr):
    if not ptr:
        return "core"
    return state.plugins[ptr]["name"]


# strings and output


def color(name):
    if not name:
        return ""
    return "\x19{}\x1c".format(name)


def prefix(name):
    return PREFIXES.get(name, "")


def string_remove_color(text, replacement):
    return COLOR.sub(replacement, text)


def prnt(buffer, message):
    ptr = _buffer_ptr(buffer)
    prefix, text = _split_line(message)
    _buffer(ptr)["lines"].append((prefix, text, []))
    state.printed.append((ptr, message))
    for _, hook in _hooks("print"):
        if hook["buffer"] and hook["buffer"] != ptr:
            continue
        if hook["message"] and hook["message"] not in message:
            continue
        _main_call(
            hook["callback"], hook["data"], ptr, str(int(time.time())), "", 1, 0, prefix, text
        )
    return WEECHAT_RC_OK


def prnt_y(buffer, y, message):
    state.printed.append((_buffer_ptr(buffer), y, message))


def log_print(message):
    state.log.append(message)


def mkdir_home(directory, mode):
    state.directories.append(("home", directory, mode))
    return 1


def mkdir(directory, mode):
    state.directories.append(("", directory, mode))
    return 1


def mkdir_parents(directory, mode):
    state.directories.append(("parents", directory, mode))
    return 1


def window_set_title(title):
    state.title = title


def info_get(name, arguments):
    for _, hook in _hooks("info"):
        if hook["name"] == name:
            return _main_call(hook["callback"], hook["data"], name, arguments)
    return state.infos.get(name, "")


# commands


def command(buffer, text):
    ptr = _buffer_ptr(buffer)
    state.commands.append((ptr, text))
    if not text.startswith("/") or text.startswith("//"):
        return WEECHAT_RC_OK

    for _, hook in _hooks("command_run"):
        if fnmatchcase(text, hook["command"]):
            if _main_call(hook["callback"], hook["data"], ptr, text) == WEECHAT_RC_OK_EAT:
                return WEECHAT_RC_OK

    name, _, args = text[1:].partition(" ")
    for _, hook in _hooks("command"):
        if hook["command"] == name:
            return _main_call(hook["callback"], hook["data"], ptr, args)
    return WEECHAT_RC_OK


# buffers


def buffer_new(name, input_callback, input_data, close_callback, close_data):
    for buf in state.buffers.values():
        if buf["plugin"] == "python" and buf["name"] == name:
            return ""
    ptr = state.add_buffer(name)
    state.buffers[ptr]["callbacks"] = {
        "input": (input_callback, input_data),
        "close": (close_callback, close_data),
    }
    return ptr


def buffer_search(plugin, name):
    for ptr, buf in state.buffers.items():
        if plugin == "==":
            if buf["full_name"] == name:
                return ptr
        elif buf["plugin"] == plugin and buf["name"] == name:
            return ptr
    return ""


def current_buffer():
    return state.current_buffer


def buffer_get_string(buffer, prop):
    buf = _buffer(buffer)
    if buf is None:
        return ""
    if prop.startswith("localvar_"):
        return buf["localvars"].get(prop[len("localvar_"):], "")
    if prop == "plugin":
        return buf["plugin"]
    return str(buf.get(prop, ""))


def buffer_get_integer(buffer, prop):
    buf = _buffer(buffer)
    if buf is None:
        return -1
    if prop == "input_length":
        return len(buf["input"])
    return int(buf.get(prop, 0))


def buffer_get_pointer(buffer, prop):
    buf = _buffer(buffer)
    if buf is None or prop != "plugin":
        return ""
    return state.plugin_ptr(buf["plugin"])


def buffer_set(buffer, prop, value):
    ptr = _buffer_ptr(buffer)
    buf = _buffer(ptr)
    if prop.startswith("localvar_set_"):
        buf["localvars"][prop[len("localvar_set_"):]] = value
    elif prop.startswith("localvar_del_"):
        buf["localvars"].pop(prop[len("localvar_del_"):], None)
    elif prop.startswith("key_bind_"):
        buf["keys"][prop[len("key_bind_"):]] = value
    elif prop.startswith("key_unbind_"):
        buf["keys"].pop(prop[len("key_unbind_"):], None)
    elif prop == "display":
        state.current_buffer = ptr
        state.windows[state.current_window]["buffer"] = ptr
    elif prop == "unread":
        buf["unread"] = True
    elif prop in BUFFER_INTEGERS:
        if prop == "type":
            buf[prop] = 1 if value == "free" else 0
        else:
            buf[prop] = int(value)
    else:
        buf[prop] = value


def buffer_clear(buffer):
    _buffer(buffer)["lines"] = []


def buffer_close(buffer):
    buf = state.buffers.get(buffer)
    if buf is None:
        return
    callback, data = buf["callbacks"].get("close", (None, None))
    if callback:
        _main_call(callback, data, buffer)
    del state.buffers[buffer]
    if state.current_buffer == buffer:
        state.current_buffer = state.core_buffer


# windows


def current_window():
    return state.current_window


def window_get_integer(window, prop):
    return int(state.windows[window].get(prop, 0))


def window_get_string(window, prop):
    return ""


def window_get_pointer(window, prop):
    if prop == "buffer":
        return state.windows[window]["buffer"]
    return ""


# infolists


def _kind(value):
    if isinstance(value, Time):
        return "t"
    if isinstance(value, int):
        return "i"
    if isinstance(value, str) and value.startswith("0x"):
        return "p"
    return "s"


def _buffer_items(ptr):
    items = []
    for p, buf in state.buffers.items():
        if ptr and p != ptr:
            continue
        items.append(
            {
                "pointer": p,
                "plugin_name": buf["plugin"],
                "name": buf["name"],
                "full_name": buf["full_name"],
                "short_name": buf["short_name"],
                "number": buf["number"],
                "type": buf["type"],
            }
        )
    return items


def _buffer_lines(ptr):
    items = []
    for y, (prefix, message, tags) in enumerate(_buffer(ptr)["lines"]):
        item = {
            "y": y,
            "date": Time(0),
            "displayed": 1,
            "highlight": 0,
            "prefix": prefix,
            "message": message,
            "tags_count": len(tags),
        }
        for i, tag in enumerate(tags):
            item["tag_{:05d}".format(i + 1)] = tag
        items.append(item)
    return items


def _infolist_items(name, ptr, arguments):
    if name in state.extra_infolists:
        return state.extra_infolists[name]
    if name == "buffer":
        return _buffer_items(ptr)
    if name == "buffer_lines":
        return _buffer_lines(ptr)
    if name == "window":
        return [
            {"pointer": p, "number": win["number"], "buffer": win["buffer"]}
            for p, win in state.windows.items()
        ]
    if name == "plugin":
        return [
            dict(plugin, pointer=p)
            for p, plugin in state.plugins.items()
            if not ptr or p == ptr
        ]
    if name == "irc_server":
        return [
            dict(data)
            for server, data in state.irc_servers.items()
            if not arguments or server == arguments
        ]
    if name == "irc_channel":
        return [
            {k: v for k, v in channel.items() if k != "nicks"}
            for channel in state.irc_channels.get(arguments, [])
        ]
    if name == "irc_nick":
        server, _, channel = arguments.partition(",")
        for data in state.irc_channels.get(server, []):
            if data["name"] == channel:
                return data["nicks"]
        return []
    if name == "bar":
        return [dict(bar, pointer=p) for p, bar in state.bars.items() if not ptr or p == ptr]
    if name == "bar_item":
        return [
            {"pointer": p, "name": item["name"], "plugin": state.plugin_ptr("python")}
            for p, item in state.bar_items.items()
            if not ptr or p == ptr
        ]
    return None


def infolist_get(name, ptr, arguments):
    items = _infolist_items(name, ptr, arguments)
    if items is None:
        return ""
    infolist = state.new_ptr()
    state.infolists[infolist] = {"items": [dict(i) for i in items], "pos": -1}
    return infolist


def infolist_next(infolist):
    data = state.infolists[infolist]
    data["pos"] += 1
    return 1 if data["pos"] < len(data["items"]) else 0


def _current(infolist):
    data = state.infolists[infolist]
    return data["items"][data["pos"]]


def infolist_fields(infolist):
    return ",".join("{}:{}".format(_kind(v), k) for k, v in _current(infolist).items())


def infolist_integer(infolist, name):
    return int(_current(infolist).get(name, 0))


def infolist_string(infolist, name):
    return str(_current(infolist).get(name, ""))


def infolist_pointer(infolist, name):
    return _current(infolist).get(name, "")


def infolist_time(infolist, name):
    return int(_current(infolist).get(name, 0))


def infolist_free(infolist):
    state.infolists.pop(infolist, None)
    state.freed.append(infolist)


# bars


def bar_new(name, hidden, priority, type, conditions, position, filling_top_bottom,
            filling_left_right, size, size_max, color_fg, color_delim, color_bg,
            color_bg_inactive, separator, items):
    if bar_search(name):
        return ""
    ptr = state.new_ptr()
    state.bars[ptr] = {
        "name": name,
        "hidden": 1 if hidden == "on" else 0,
        "priority": int(priority),
        "type": ("root", "window").index(type),
        "conditions": conditions,
        "position": ("top", "bottom", "left", "right").index(position),
        "filling_top_bottom": 0,
        "filling_left_right": 1,
        "size": int(size),
        "size_max": int(size_max),
        "color_fg": color_fg,
        "color_delim": color_delim,
        "color_bg": color_bg,
        "color_bg_inactive": color_bg_inactive,
        "separator": 1 if separator == "on" else 0,
        "items": items,
    }
    return ptr


def bar_search(name):
    for ptr, bar in state.bars.items():
        if bar["name"] == name:
            return ptr
    return ""


def bar_set(bar, prop, value):
    if prop in ("hidden", "separator"):
        state.bars[bar][prop] = 1 if value == "on" else 0
    else:
        state.bars[bar][prop] = value
    return 1


def bar_update(name):
    state.bars[bar_search(name)]["updated"] = 1


def bar_remove(bar):
    state.bars.pop(bar, None)


def bar_item_new(name, callback, data):
    if bar_item_search(name):
        return ""
    ptr = state.new_ptr()
    state.bar_items[ptr] = {"name": name, "callback": callback, "data": data}
    return ptr


def bar_item_search(name):
    for ptr, item in state.bar_items.items():
        if item["name"] == name:
            return ptr
    return ""


def bar_item_update(name):
    state.bar_item_updates.append(name)


def bar_item_remove(item):
    state.bar_items.pop(item, None)


# hooks


def hook_timer(interval, align_second, max_calls, callback, data):
    return _add_hook(
        "timer", callback, data,
        interval=interval, align=align_second, max_calls=max_calls, remaining=max_calls,
    )


def hook_command(command, description, args, args_description, completion, callback, data):
    return _add_hook(
        "command", callback, data,
        command=command, description=description, args=args,
        args_description=args_description, completion=completion,
    )


def hook_command_run(command, callback, data):
    return _add_hook("command_run", callback, data, command=command)


def hook_signal(signal, callback, data):
    return _add_hook("signal", callback, data, signal=signal)


def hook_signal_send(signal, type_data, signal_data):
    rc = WEECHAT_RC_OK
    for _, hook in _hooks("signal"):
        if fnmatchcase(signal, hook["signal"]):
            rc = _main_call(hook["callback"], hook["data"], signal, signal_data)
            if rc == WEECHAT_RC_OK_EAT:
                break
    return rc


def hook_config(option, callback, data):
    return _add_hook("config", callback, data, option=option)


def hook_print(buffer, tags, message, strip_colors, callback, data):
    return _add_hook(
        "print", callback, data,
        buffer=buffer, tags=tags, message=message, strip_colors=strip_colors,
    )


def hook_line(buffer_type, buffer_name, tags, callback, data):
    return _add_hook(
        "line", callback, data, buffer_type=buffer_type, buffer_name=buffer_name, tags=tags
    )


def hook_modifier(modifier, callback, data):
    return _add_hook("modifier", callback, data, modifier=modifier)


def hook_modifier_exec(modifier, modifier_data, string):
    for _, hook in _hooks("modifier"):
        if hook["modifier"] == modifier:
            string = _main_call(hook["callback"], hook["data"], modifier, modifier_data, string)
    return string


def hook_process(command, timeout, callback, data):
    return _add_hook("process", callback, data, command=command, timeout=timeout)


def hook_info(name, description, args_description, callback, data):
    return _add_hook(
        "info", callback, data,
        name=name, description=description, args_description=args_description,
    )


def unhook(hook):
    state.hooks.pop(hook, None)


def unhook_all():
    state.hooks.clear()


# plugin configuration


def _option_name(name):
    script = state.script["name"] if state.script else "test"
    return "plugins.var.python.{}.{}".format(script, name)


def config_get_plugin(name):
    return state.plugin_config.get(name, "")


def config_is_set_plugin(name):
    return 1 if name in state.plugin_config else 0


def config_set_plugin(name, value):
    old = state.plugin_config.get(name)
    state.plugin_config[name] = value
    option = _option_name(name)
    for _, hook in _hooks("config"):
        if fnmatchcase(option, hook["option"]):
            _main_call(hook["callback"], hook["data"], option, value)
    if old == value:
        return WEECHAT_CONFIG_OPTION_SET_OK_SAME_VALUE
    return WEECHAT_CONFIG_OPTION_SET_OK_CHANGED


def config_unset_plugin(name):
    if state.plugin_config.pop(name, None) is None:
        return WEECHAT_CONFIG_OPTION_UNSET_OK_NO_RESET
    return WEECHAT_CONFIG_OPTION_UNSET_OK_REMOVED


def config_set_desc_plugin(name, description):
    state.plugin_config_desc[name] = description


def config_string_to_boolean(text):
    return 1 if text.lower() in ("on", "yes", "y", "true", "t", "1") else 0

