import weechat as w


class WeechatError(RuntimeError):
    pass


class UnknownProperty(WeechatError):
    """Raised when reading a property that doesn't exist."""


class UnsettableProperty(WeechatError):
    """Raised when setting a property that cannot be set."""


class InvalidPropertyValue(WeechatError):
    """Raised when a value does not suit the property it is set on."""


class CannotSetProperties(WeechatError):
    """Raised when the host offers no setter for an object type."""


class DuplicateBufferName(WeechatError):
    """Raised when creating a buffer with the name of an existing one."""


class NotAChannel(WeechatError):
    """Raised when a buffer that doesn't represent a channel is used as one."""


class UnknownServer(WeechatError):
    pass


class NotJoined(WeechatError):
    pass


class NotHooked(WeechatError):
    pass


class HookError(WeechatError):
    """Raised when the host refuses to install a hook."""


class ReturnSignal(Exception):
    """Leave a callback early with a specific host return code."""

    code = w.WEECHAT_RC_OK


class ReturnOk(ReturnSignal):
    code = w.WEECHAT_RC_OK


class ReturnOkEat(ReturnSignal):
    code = w.WEECHAT_RC_OK_EAT


class ReturnError(ReturnSignal):
    code = w.WEECHAT_RC_ERROR
