import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Pattern, Tuple, Union

import weechat as w

from .errors import ReturnSignal

logger = logging.getLogger(__name__)


class ReturnCode(Enum):
    OK = w.WEECHAT_RC_OK
    OK_EAT = w.WEECHAT_RC_OK_EAT
    ERROR = w.WEECHAT_RC_ERROR


TransformationKey = Tuple[Union[str, Pattern], ...]
TransformationTable = Dict[TransformationKey, Callable[[Any], Any]]


def integer_to_bool(value) -> bool:
    return int(value or 0) != 0


def bool_to_integer(value) -> int:
    return 1 if value else 0


def _key_matches(key: TransformationKey, name: str) -> bool:
    for entry in key:
        if isinstance(entry, str):
            if entry == name:
                return True
        elif entry.fullmatch(name):
            return True
    return False


def find_transformation(name: str, table: TransformationTable):
    for key, transformation in table.items():
        if _key_matches(key, name):
            return transformation
    return None


def apply_transformation(name: str, value: Any, table: TransformationTable) -> Any:
    transformation = find_transformation(str(name), table)
    if transformation is None:
        return value
    return transformation(value)


def return_code(result: Any) -> int:
    """Translate whatever a callback returned into a host return code."""
    if result is None or result is True:
        return ReturnCode.OK.value
    if result is False:
        return ReturnCode.ERROR.value
    if isinstance(result, ReturnCode):
        return result.value
    if isinstance(result, int):
        return result
    return ReturnCode.OK.value


def evaluate_call(fn: Callable[[], Any]) -> int:
    try:
        return return_code(fn())
    except ReturnSignal as e:
        return e.code
    except Exception:
        logger.exception("callback raised")
        return ReturnCode.ERROR.value


def escaped_split(value: str, sep: str = ",") -> List[str]:
    """Split on `sep`, honouring backslash escapes."""
    parts: List[str] = []
    current = []
    chars = iter(value)
    for c in chars:
        if c == "\\":
            nxt = next(chars, "")
            current.append(nxt)
        elif c == sep:
            parts.append("".join(current))
            current = []
        else:
            current.append(c)
    if current or parts or value:
        parts.append("".join(current))
    return parts


def escaped_join(items: Iterable[Any], sep: str = ",") -> str:
    escape = re.compile("([\\\\{}])".format(re.escape(sep)))
    return sep.join(escape.sub(r"\\\1", str(item)) for item in items)
