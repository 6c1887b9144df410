from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import weechat as w

InfolistItem = Dict[str, Any]


class Infolist:
    """A host infolist, read one item at a time.

    Use as a context manager so the host list is always freed::

        with Infolist("buffer") as infolist:
            for item in infolist:
                ...
    """

    def __init__(self, name: str, ptr: str = "", arguments: str = ""):
        self.name = name
        self.ptr = w.infolist_get(name, ptr, arguments)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.free()

    def __bool__(self):
        return bool(self.ptr)

    def free(self):
        if self.ptr:
            w.infolist_free(self.ptr)
            self.ptr = ""

    def fields(self) -> Dict[str, str]:
        """Field name to kind (i, s, p, t, b) of the current item."""
        ret = {}
        for item in w.infolist_fields(self.ptr).split(","):
            if ":" not in item:
                continue
            kind, name = item.split(":", 1)
            ret[name] = kind
        return ret

    def read(self, *fields: str) -> InfolistItem:
        item: InfolistItem = {}
        for name, kind in self.fields().items():
            if fields and name not in fields:
                continue
            if kind == "i":
                item[name] = w.infolist_integer(self.ptr, name)
            elif kind == "s":
                item[name] = w.infolist_string(self.ptr, name)
            elif kind == "p":
                item[name] = w.infolist_pointer(self.ptr, name)
            elif kind == "t":
                item[name] = datetime.fromtimestamp(int(w.infolist_time(self.ptr, name)))
            # "b" (buffer) fields aren't exposed to scripts
        return item

    def __iter__(self) -> Iterator[InfolistItem]:
        if not self.ptr:
            return
        while w.infolist_next(self.ptr):
            yield self.read()

    @classmethod
    def parse(
        cls,
        name: str,
        ptr: str = "",
        arguments: str = "",
        requirements: Optional[Dict[str, Any]] = None,
        *fields: str
    ) -> List[InfolistItem]:
        """Read a whole infolist into a list of dicts.

        Only items whose fields equal every value in `requirements` are kept.
        When `fields` are given, only those fields (plus the required ones
        for filtering) are read.
        """
        requirements = requirements or {}
        wanted = tuple(fields) + tuple(requirements) if fields else ()
        ret = []
        with cls(name, ptr, arguments) as infolist:
            if not infolist:
                return ret
            while w.infolist_next(infolist.ptr):
                item = infolist.read(*wanted)
                if any(item.get(k) != v for k, v in requirements.items()):
                    continue
                if fields:
                    item = {k: v for k, v in item.items() if k in fields}
                ret.append(item)
        return ret
