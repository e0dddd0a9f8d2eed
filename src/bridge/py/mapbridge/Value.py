#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from abc import ABC, abstractmethod
from numbers import Real


#################################################################
# Protocol
#################################################################

class ProxyObject(ABC):
    """A scripting value with members."""

    __slots__ = ()

    @abstractmethod
    def getMember(self, key):
        pass

    @abstractmethod
    def hasMember(self, key):
        pass

    @abstractmethod
    def putMember(self, key, value):
        pass

    @abstractmethod
    def getMemberKeys(self):
        pass


class ProxyExecutable(ABC):
    """A scripting value that can be called."""

    __slots__ = ()

    @abstractmethod
    def execute(self, *args, **kwargs):
        pass

    def __call__(self, *args, **kwargs):
        return self.execute(*args, **kwargs)


class ProxyInstantiable(ABC):
    """A scripting value that can be called as a constructor."""

    __slots__ = ()

    @abstractmethod
    def newInstance(self, *args, **kwargs):
        pass


#################################################################
# Predicates
#################################################################

def isNull(value):
    return value is None


def isString(value):
    return isinstance(value, str)


def isNumber(value):
    return isinstance(value, Real) and not isinstance(value, bool)


def isBoolean(value):
    return isinstance(value, bool)


def isArray(value):
    return isinstance(value, (list, tuple))


def isProxyLike(value):
    return isinstance(value, (ProxyObject, ProxyExecutable, ProxyInstantiable))


def hasMembers(value):
    return isinstance(value, (ProxyObject, dict))


def canExecute(value):
    return callable(value)


#################################################################
# Generic member operations
#################################################################

def getMember(value, key, defVal=None):
    """Read a member of any scripting value: proxy member, dict entry,
    or attribute."""
    if isinstance(value, ProxyObject):
        if not value.hasMember(key):
            return defVal
        return value.getMember(key)
    if isinstance(value, dict):
        return value.get(key, defVal)
    return getattr(value, key, defVal)


def hasMember(value, key):
    if isinstance(value, ProxyObject):
        return value.hasMember(key)
    if isinstance(value, dict):
        return key in value
    return hasattr(value, key)


def memberKeys(value):
    if isinstance(value, ProxyObject):
        return tuple(value.getMemberKeys())
    if isinstance(value, dict):
        return tuple(value.keys())
    return tuple(k for k in dir(value) if not k.startswith("_"))
