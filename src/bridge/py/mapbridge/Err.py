#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#


class Err(Exception):
    """Base error class"""

    def __init__(self, msg=None, cause=None):
        Exception.__init__(self, msg)
        self._msg = msg
        self._cause = cause

    @classmethod
    def make(cls, msg=None, cause=None):
        """Factory method - creates instance of the calling class"""
        return cls(msg, cause)

    def msg(self):
        return self._msg if self._msg is not None else ""

    def cause(self):
        return self._cause

    def qname(self):
        return f"mapbridge::{type(self).__name__}"

    def toStr(self):
        if self._msg:
            return f"{self.qname()}: {self._msg}"
        return self.qname()

    def traceToStr(self):
        """Return stack trace as string"""
        import traceback

        s = self.toStr()

        tb = getattr(self, '__traceback__', None)
        if tb:
            lines = traceback.format_tb(tb)
            s += "\n" + "".join(lines)

        if self._cause:
            if hasattr(self._cause, 'traceToStr'):
                s += "\n  Caused by: " + self._cause.traceToStr()
            else:
                s += f"\n  Caused by: {self._cause!r}"

        return s

    def __str__(self):
        return self.toStr()


class ArgErr(Err):
    """Argument error"""
    pass


class UnsupportedErr(Err):
    """Unsupported operation error"""
    pass


class MappingNotFoundErr(Err):
    """Symbolic name is not present in the mapping table"""
    pass


class MemberNotFoundErr(Err, AttributeError):
    """Member lookup failed on a proxy.

    Also an AttributeError so getattr() defaults and hasattr() behave
    normally against attribute-style access.
    """
    pass


class AmbiguousOverrideErr(Err):
    """Override name resolves to more than one extension target"""
    pass


class AmbiguousWriteErr(Err):
    """Write to a name that is both a method and a field"""
    pass


class ImmutableFieldWriteErr(Err):
    """Write to a static or final field"""
    pass


class NoMatchingOverloadErr(Err):
    """No overload accepts the given argument count"""
    pass


class ClassResolutionErr(Err):
    """Host class is missing or its module failed to import"""
    pass


class ConstructionErr(Err):
    """Host instantiation failed for an extended class"""
    pass
