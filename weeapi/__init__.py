"""Object-oriented access to the WeeChat plugin API for Python scripts.

A minimal script::

    from weeapi import Command, Script

    script = Script("hello", "me", "1.0", "MIT", "say hello")

    def hello(buffer, args):
        buffer.print("hello " + args)

    script.register_command("hello", "say hello", callback=hello)
    script.install()
"""
__version__ = "0.1.0"

from .errors import (
    CannotSetProperties,
    DuplicateBufferName,
    HookError,
    InvalidPropertyValue,
    NotAChannel,
    NotHooked,
    NotJoined,
    ReturnError,
    ReturnOk,
    ReturnOkEat,
    ReturnSignal,
    UnknownProperty,
    UnknownServer,
    UnsettableProperty,
    WeechatError,
)
from .utilities import ReturnCode
from .core import (
    Color,
    color,
    command,
    prefix,
    prnt,
    puts,
    say,
    set_timeout,
    strip_colors,
)
from . import log
from .infolist import Infolist
from .buffer import CORE, Buffer, CustomBuffer, CustomFreeContentBuffer, Input
from .window import Window
from .plugin import Bar, BarItem, LoadedScript, Plugin
from .line import Line, LineData, PrintedLine, Tags
from .hooks import (
    Command,
    CommandRunHook,
    ConfigHook,
    Hook,
    Info,
    LineHook,
    Modifier,
    PrintHook,
    PrintModifier,
    Process,
    Signal,
    Timer,
)
from .irc import Channel, Ctcp, Host, IrcMessage, Prefix, Privmsg, Server, User
from .irc.whois import Whois
from .irc.dispatch import Glob, IrcDispatcher, RegExp, String
from .script import Config, Script
