from .host import Host, Prefix
from .message import Ctcp, IrcMessage, Privmsg
from .server import Server
from .channel import Channel
from .user import User
