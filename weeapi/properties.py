"""Generic property access for wrappers around WeeChat objects.

A subclass declares which properties the host can return and how, e.g.::

    class Buffer(Properties, Pointer):
        known_string_properties = ("name", "title")
        known_integer_properties = ("number", "lines_hidden")
        settable_properties = ("name", "title", "number")
        transformations = {("lines_hidden",): integer_to_bool}
        rtransformations = {("lines_hidden",): bool_to_integer}
        mappings = {"position": "number"}

Reading ``buffer.title`` then calls ``weechat.buffer_get_string(ptr, "title")``
and ``buffer.position = 3`` calls ``weechat.buffer_set(ptr, "number", "3")``.
Names not declared anywhere are looked up in the object's infolist.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

import weechat as w

from .errors import CannotSetProperties, UnknownProperty, UnsettableProperty
from .infolist import Infolist, InfolistItem
from .utilities import TransformationTable, apply_transformation

LOCALVAR = re.compile(r"^localvar_.+$")

PROPERTY_KINDS = ("all", "string", "integer", "pointer", "localvar", "infolist")


class Properties:
    weechat_type: str = ""
    known_string_properties: Tuple[str, ...] = ()
    known_integer_properties: Tuple[str, ...] = ()
    known_pointer_properties: Tuple[str, ...] = ()
    settable_properties: Tuple[str, ...] = ()
    transformations: TransformationTable = {}
    rtransformations: TransformationTable = {}
    mappings: Dict[str, str] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if not cls.weechat_type:
            cls.weechat_type = cls.__name__.lower()

    @classmethod
    def known_properties(cls) -> Tuple[str, ...]:
        return (
            cls.known_integer_properties
            + cls.known_pointer_properties
            + cls.known_string_properties
        )

    @classmethod
    def apply_transformation(cls, name: str, value: Any) -> Any:
        return apply_transformation(name, value, cls.transformations)

    @classmethod
    def apply_rtransformation(cls, name: str, value: Any) -> Any:
        return apply_transformation(name, value, cls.rtransformations)

    def _host_function(self, suffix: str):
        return getattr(w, "{}_{}".format(self.weechat_type, suffix), None)

    # reading

    def get_property(self, name: str) -> Any:
        """Get a property with its transformation applied.

        Raises:
            UnknownProperty: the property can't be read from the host
        """
        return self.apply_transformation(name, self._get_raw_property(str(name)))

    def _get_raw_property(self, name: str) -> Any:
        if self.is_valid_property(name, "integer"):
            return self.get_integer(name)
        if self.is_valid_property(name, "pointer"):
            return self.get_pointer(name)
        if self.is_valid_property(name, "string"):
            return self.get_string(name)
        if self.is_valid_property(name, "infolist"):
            return self.get_infolist_property(name)
        raise UnknownProperty(name)

    def get_integer_property(self, name: str) -> int:
        if not self.is_valid_property(name, "integer"):
            raise UnknownProperty(name)
        return self.get_integer(name)

    def get_string_property(self, name: str) -> str:
        if not self.is_valid_property(name, "string"):
            raise UnknownProperty(name)
        return self.get_string(name)

    def get_pointer_property(self, name: str) -> str:
        if not self.is_valid_property(name, "pointer"):
            raise UnknownProperty(name)
        return self.get_pointer(name)

    def get_integer(self, name: str) -> int:
        return int(self._host_function("get_integer")(self.ptr, name))

    def get_string(self, name: str) -> str:
        return self._host_function("get_string")(self.ptr, name)

    def get_pointer(self, name: str) -> str:
        return self._host_function("get_pointer")(self.ptr, name)

    def get_infolist(self, *fields: str) -> List[InfolistItem]:
        return Infolist.parse(self.weechat_type, self.ptr, "", None, *fields)

    def get_infolist_property(self, name: str) -> Any:
        items = self.get_infolist(name)
        if not items or name not in items[0]:
            raise UnknownProperty(name)
        return items[0][name]

    def is_valid_property(self, name: str, kind: str = "all") -> bool:
        name = str(name)
        if kind == "all":
            return any(
                self.is_valid_property(name, k)
                for k in ("string", "integer", "pointer", "infolist")
            )
        if kind == "string":
            return name in self.known_string_properties or self.is_valid_property(
                name, "localvar"
            )
        if kind == "integer":
            return name in self.known_integer_properties
        if kind == "pointer":
            return name in self.known_pointer_properties
        if kind == "localvar":
            return LOCALVAR.match(name) is not None
        if kind == "infolist":
            items = self.get_infolist(name)
            return bool(items) and name in items[0]
        raise ValueError("unknown property kind {!r}".format(kind))

    # writing

    def is_settable_property(self, name: str) -> bool:
        if self._host_function("set") is None:
            return False
        return str(name) in self.settable_properties

    def set_property(self, name: str, value: Any) -> Any:
        """Set a property with its reverse transformation applied.

        Returns the value as it was sent to the host.

        Raises:
            UnsettableProperty: the property isn't settable
            InvalidPropertyValue: the value doesn't suit the property
        """
        name = str(name)
        if not self.is_settable_property(name):
            raise UnsettableProperty(name)
        value = self.apply_rtransformation(name, value)
        return self.set(name, value)

    def set_string_property(self, name: str, value: str) -> str:
        name = str(name)
        if not self.is_settable_property(name):
            raise UnsettableProperty(name)
        return self.set(name, value)

    def set(self, name: str, value: Any) -> Any:
        """Set a property without any checks or conversions."""
        setter = self._host_function("set")
        if setter is None:
            raise CannotSetProperties(self.weechat_type)
        setter(self.ptr, str(name), "" if value is None else str(value))
        return value

    # attribute protocol

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        target = self.mappings.get(name, name)
        if self.is_valid_property(target):
            return self.get_property(target)
        raise AttributeError(
            "'{}' object has no attribute '{}'".format(self.__class__.__name__, name)
        )

    def __setattr__(self, name: str, value: Any):
        # properties with a setter handle their own assignment
        if name.startswith("_") or hasattr(getattr(type(self), name, None), "__set__"):
            object.__setattr__(self, name, value)
            return
        target = self.mappings.get(name, name)
        if target in self.settable_properties:
            self.set_property(target, value)
        else:
            object.__setattr__(self, name, value)

    def to_dict(self, infolist: Optional[bool] = True) -> Dict[str, Any]:
        ret = {name: self.get_property(name) for name in self.known_properties()}
        if infolist:
            items = self.get_infolist()
            if items:
                for name, value in items[0].items():
                    ret.setdefault(name, self.apply_transformation(name, value))
        return ret
