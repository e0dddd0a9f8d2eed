#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class FConst:
    """Host member flag constants."""
    Public = 0x00000001
    Private = 0x00000002
    Final = 0x00000080
    Ctor = 0x00000100
    Static = 0x00000800
    Getter = 0x00010000
    Setter = 0x00020000
    ClassBound = 0x00040000
    Adhoc = 0x00080000


class HostSlot:
    """Base class for HostField and HostMethod handles.

    A slot records the declaring class, the runtime name it was found
    under and the attribute name it is stored as.  The two differ only for
    private names, which Python stores mangled.
    """

    def __init__(self, parent=None, name="", flags=0, attrName=None):
        self._parent = parent
        self._name = name
        self._flags = flags
        self._attrName = attrName or name
        self._accessible = False

    @staticmethod
    def isPrivateName(name):
        return name.startswith("__") and not name.endswith("__")

    @staticmethod
    def storageNames(cls, name):
        """Attribute names a runtime member name may be stored under."""
        if HostSlot.isPrivateName(name):
            owner = cls.__name__.lstrip("_")
            if owner:
                return (f"_{owner}{name}", name)
        return (name,)

    def parent(self):
        """Get declaring class."""
        return self._parent

    def name(self):
        """Get runtime name."""
        return self._name

    def attrName(self):
        return self._attrName

    def flags_(self):
        return self._flags

    def qname(self):
        if self._parent is not None:
            return f"{self._parent.__module__}.{self._parent.__qualname__}.{self._name}"
        return self._name

    def isField(self):
        return False

    def isMethod(self):
        return False

    def isCtor(self):
        return (self._flags & FConst.Ctor) != 0

    def isPublic(self):
        return not self.isPrivate()

    def isPrivate(self):
        return (self._flags & FConst.Private) != 0

    def isStatic(self):
        return (self._flags & FConst.Static) != 0

    def isFinal(self):
        return (self._flags & FConst.Final) != 0

    def isAccessible(self):
        return self._accessible

    def makeAccessible(self):
        """Mark the handle usable; the mangled storage name has already
        been resolved, so this only records the fact once."""
        self._accessible = True
        return self

    def toStr(self):
        return self.qname()

    def __repr__(self):
        return self.toStr()
