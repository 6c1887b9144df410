class Pointer:
    """Mixin for objects backed by a WeeChat C pointer.

    Instances compare and hash by pointer value, so two wrappers around the
    same host object are interchangeable.
    """

    _ptr: str = ""

    @classmethod
    def from_ptr(cls, ptr: str):
        o = cls.__new__(cls)
        object.__setattr__(o, "_ptr", ptr)
        o._init_from_ptr()
        return o

    def _init_from_ptr(self):
        pass

    @property
    def ptr(self) -> str:
        return self._ptr

    pointer = ptr

    def __str__(self):
        return self._ptr

    def __eq__(self, other):
        return hasattr(other, "ptr") and self._ptr == other.ptr

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._ptr)

    def __repr__(self):
        return "<{} ptr={!r}>".format(self.__class__.__name__, self._ptr)
