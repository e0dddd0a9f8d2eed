#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import inspect
import typing

from .Slot import HostSlot, FConst


_MISSING = object()


def classAnnotations(cls):
    try:
        return inspect.get_annotations(cls)
    except Exception:
        return {}


def _qualifier(ann):
    """Return ("final" | "classvar" | None, inner type) for an annotation."""
    if isinstance(ann, str):
        text = ann.strip()
        for prefix, kind in (("typing.Final", "final"), ("Final", "final"),
                             ("typing.ClassVar", "classvar"), ("ClassVar", "classvar")):
            if text == prefix:
                return kind, None
            if text.startswith(prefix + "["):
                return kind, text[len(prefix) + 1:-1].strip()
        return None, ann
    if ann is typing.Final:
        return "final", None
    if ann is typing.ClassVar:
        return "classvar", None
    origin = typing.get_origin(ann)
    if origin is typing.Final or origin is typing.ClassVar:
        args = typing.get_args(ann)
        kind = "final" if origin is typing.Final else "classvar"
        return kind, args[0] if args else None
    return None, ann


def _slots(cls):
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def _isFrozenDataclass(cls):
    params = cls.__dict__.get("__dataclass_params__")
    return params is not None and getattr(params, "frozen", False)


class HostField(HostSlot):
    """Field reflection - a host field found on a declaring class.

    Fields come from class annotations, properties, __slots__ entries and
    plain class attributes.  A field may also be adhoc: an attribute that
    only exists in one instance's __dict__.
    """

    def __init__(self, parent=None, name="", flags=0, type_=None, attrName=None):
        super().__init__(parent, name, flags, attrName)
        self._type = type_

    @staticmethod
    def reflect(parent, name, attrName):
        """Build a HostField for attrName declared directly on parent, or
        return None."""
        if attrName.startswith("__") and attrName.endswith("__"):
            return None

        base_flags = FConst.Private if HostSlot.isPrivateName(name) else FConst.Public
        raw = parent.__dict__.get(attrName, _MISSING)

        if isinstance(raw, property):
            flags = base_flags | FConst.Getter
            if raw.fset is None:
                flags |= FConst.Final
            else:
                flags |= FConst.Setter
            type_ = None
            if raw.fget is not None:
                type_ = classAnnotations(raw.fget).get("return")
            return HostField(parent, name, flags, type_, attrName)

        anns = classAnnotations(parent)
        if attrName in anns:
            kind, type_ = _qualifier(anns[attrName])
            flags = base_flags
            if kind == "classvar":
                flags |= FConst.Static
            elif kind == "final":
                flags |= FConst.Final
                if raw is not _MISSING:
                    flags |= FConst.Static
            if _isFrozenDataclass(parent) and not (flags & FConst.Static):
                flags |= FConst.Final
            return HostField(parent, name, flags, type_, attrName)

        if attrName in _slots(parent):
            return HostField(parent, name, base_flags, None, attrName)

        if raw is _MISSING:
            return None
        if isinstance(raw, (staticmethod, classmethod, type)) or inspect.isroutine(raw):
            return None
        if inspect.isdatadescriptor(raw) or inspect.ismethoddescriptor(raw):
            return None
        return HostField(parent, name, base_flags | FConst.Static, type(raw), attrName)

    @staticmethod
    def adhoc(cls, name):
        """A field that only lives in an instance __dict__."""
        return HostField(cls, name, FConst.Public | FConst.Adhoc, None, name)

    def isField(self):
        return True

    def isAdhoc(self):
        return (self._flags & FConst.Adhoc) != 0

    def isProperty(self):
        return (self._flags & FConst.Getter) != 0

    def type_(self):
        return self._type

    def get(self, obj=None):
        """Get field value; obj is ignored for static fields."""
        if self.isStatic() or obj is None:
            return getattr(self._parent, self._attrName)
        return getattr(obj, self._attrName)

    def set_(self, obj, val):
        """Set field value.

        Raises:
            ImmutableFieldWriteErr: if the field is final
        """
        if self.isFinal():
            from .Err import ImmutableFieldWriteErr
            raise ImmutableFieldWriteErr.make(f"Cannot set final field {self.qname()}")
        if self.isStatic() or obj is None:
            setattr(self._parent, self._attrName, val)
        else:
            setattr(obj, self._attrName, val)
