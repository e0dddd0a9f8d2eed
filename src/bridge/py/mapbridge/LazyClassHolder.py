#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import threading

from .Log import Log
from .Proxy import ScriptProxy, ProxyKind
from .Value import ProxyInstantiable


class LazyClassHolder(ScriptProxy, ProxyInstantiable):
    """Stands in for a mapped class that has not been loaded yet.

    Nothing is imported until the first member access, membership test or
    construction; after that every operation delegates to the resolved
    ClassProxy.
    """

    __slots__ = ("_context", "_symbolic", "_runtime", "_resolved", "_lock")
    kind = ProxyKind.LAZY_CLASS

    def __init__(self, context, symbolic, runtime):
        self._init(_context=context, _symbolic=symbolic, _runtime=runtime,
                   _resolved=None, _lock=threading.Lock())

    def symbolicName(self):
        return self._symbolic

    def runtimeName(self):
        return self._runtime

    def isResolved(self):
        return self._resolved is not None

    def resolve(self):
        """Load the class and return its ClassProxy.

        Raises:
            ClassResolutionErr: if the class cannot be loaded
        """
        resolved = self._resolved
        if resolved is not None:
            return resolved
        with self._lock:
            if self._resolved is None:
                Log.get("mapbridge.classes").debug(f"Resolving {self._symbolic} -> {self._runtime}")
                object.__setattr__(self, "_resolved", self._context.classProxy(self._runtime))
            return self._resolved

    def hostClass(self):
        return self.resolve().hostClass()

    def getMember(self, key):
        return self.resolve().getMember(key)

    def hasMember(self, key):
        return self.resolve().hasMember(key)

    def putMember(self, key, value):
        self.resolve().putMember(key, value)

    def getMemberKeys(self):
        return self.resolve().getMemberKeys()

    def newInstance(self, *args, **kwargs):
        return self.resolve().newInstance(*args, **kwargs)

    def toStr(self):
        state = "resolved" if self.isResolved() else "unresolved"
        return f"<LazyClassHolder {self._symbolic} ({state})>"
