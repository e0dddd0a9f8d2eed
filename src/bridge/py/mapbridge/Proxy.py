#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from enum import Enum

from .Value import ProxyObject, ProxyExecutable, ProxyInstantiable


class ProxyKind(Enum):
    """Tag of every capability proxy variant."""
    OBJECT = "object"
    CLASS = "class"
    LAZY_CLASS = "lazyClass"
    NAMESPACE = "namespace"
    EXTENDER = "extender"
    EXTENDED_INSTANCE = "extendedInstance"
    SUPER = "super"


class ScriptProxy(ProxyObject):
    """Base of the capability proxies.

    Subclasses implement getMember/hasMember/putMember/getMemberKeys and
    set kind.  This base maps attribute and item syntax onto those four
    operations so script code can write proxy.getX() or proxy["health$"].
    Internal state lives in __slots__ written with object.__setattr__.
    """

    __slots__ = ()
    kind = None

    def _init(self, **slots):
        for name, val in slots.items():
            object.__setattr__(self, name, val)

    def __getattr__(self, name):
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return self.getMember(name)

    def __setattr__(self, name, value):
        self.putMember(name, value)

    def __delattr__(self, name):
        from .Err import UnsupportedErr
        raise UnsupportedErr.make(f"Cannot delete member '{name}'")

    def __getitem__(self, key):
        return self.getMember(key)

    def __setitem__(self, key, value):
        self.putMember(key, value)

    def __contains__(self, key):
        return self.hasMember(key)

    def __dir__(self):
        return list(self.getMemberKeys())

    def __call__(self, *args, **kwargs):
        if isinstance(self, ProxyInstantiable):
            return self.newInstance(*args, **kwargs)
        if isinstance(self, ProxyExecutable):
            return self.execute(*args, **kwargs)
        from .Err import UnsupportedErr
        raise UnsupportedErr.make(f"{self.kind.value} proxy is not callable")

    def toStr(self):
        return f"<{type(self).__name__}>"

    def __repr__(self):
        return self.toStr()


def unwrap(value):
    """Strip every proxy layer and return the underlying host value.

    Object and extended-instance proxies yield their host instance, class
    proxies and lazy holders yield the host class, an extender yields its
    generated class, and a super proxy yields the host instance it serves.
    Namespaces and non-proxy values are returned unchanged.
    """
    if not isinstance(value, ScriptProxy):
        return value
    kind = value.kind
    if kind is ProxyKind.OBJECT or kind is ProxyKind.EXTENDED_INSTANCE or kind is ProxyKind.SUPER:
        inner = value.hostInstance()
    elif kind is ProxyKind.CLASS:
        inner = value.hostClass()
    elif kind is ProxyKind.LAZY_CLASS:
        inner = value.resolve()
    elif kind is ProxyKind.EXTENDER:
        inner = value.prototype()
    else:
        return value
    return unwrap(inner)
