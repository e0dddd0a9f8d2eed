#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import array
import collections.abc
import ctypes
import typing

from .Log import Log
from .Proxy import ScriptProxy, unwrap
from .Value import isNumber


_INT_CODES = "bBhHiIlLqQ"
_FLOAT_CODES = "fdg"

_NAMED_TYPES = {
    "int": int,
    "float": float,
    "bool": bool,
    "str": str,
}

_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)

_PASS_THROUGH = (bool, int, float, complex, str, bytes, bytearray)


def _resolve(expected):
    if isinstance(expected, str):
        return _NAMED_TYPES.get(expected.strip(), None)
    return expected


def _isCtypesScalar(expected):
    return (isinstance(expected, type) and issubclass(expected, ctypes._SimpleCData)
            and isinstance(getattr(expected, "_type_", None), str))


def _isPlainClass(expected):
    return (isinstance(expected, type) and typing.get_origin(expected) is None
            and not _isCtypesScalar(expected))


class Marshal:
    """Converts values crossing the bridge.

    toHost() prepares a scripting value for a host parameter of an
    expected type; toScript() prepares a host result for the script,
    wrapping mapped host objects in an ObjectProxy.
    """

    def __init__(self, context):
        self._context = context
        self._log = Log.get("mapbridge.proxy")

    #################################################################
    # Scripting -> Host
    #################################################################

    def toHost(self, value, expected=None):
        """Convert a scripting value to the host representation.

        Args:
            value: Scripting value
            expected: Host annotation of the target parameter, or None

        Returns:
            Host value
        """
        expected = _resolve(expected)

        if value is None or isinstance(value, (bool, str)):
            return value

        if isinstance(value, ScriptProxy):
            host = unwrap(value)
            if _isPlainClass(expected) and host is not None and not isinstance(host, expected):
                self._log.warn(f"Type mismatch: expected {expected.__qualname__}, "
                               f"got {type(host).__qualname__}")
            return host

        if isNumber(value):
            return self._toNumber(value, expected)

        if isinstance(value, (list, tuple)):
            return self._toSequence(value, expected)

        return value

    def toHostArgs(self, args, method):
        """Convert positional scripting arguments for a HostMethod."""
        return [self.toHost(arg, method.paramType(i)) for i, arg in enumerate(args)]

    def _toNumber(self, value, expected):
        if expected is int:
            return int(value)
        if expected is float:
            return float(value)
        if _isCtypesScalar(expected):
            code = expected._type_
            if code in _INT_CODES:
                return expected(int(value)).value
            if code in _FLOAT_CODES:
                return expected(float(value)).value
        return float(value)

    def _toSequence(self, value, expected):
        origin = typing.get_origin(expected) or expected
        args = typing.get_args(expected)
        if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            # fixed shape tuple[A, B, C]
            return tuple(self.toHost(v, args[i] if i < len(args) else None) for i, v in enumerate(value))
        component = args[0] if args and origin in _SEQUENCE_ORIGINS else None
        items = [self.toHost(v, component) for v in value]
        if origin is tuple:
            return tuple(items)
        return items

    #################################################################
    # Host -> Scripting
    #################################################################

    def toScript(self, value):
        """Convert a host value to its scripting representation.

        Primitives and strings pass through, sequences are reboxed element
        by element, proxies are returned unchanged, an extended host object
        yields its composite proxy and an instance of a mapped class is
        wrapped in a fresh ObjectProxy.  Anything else is passed through as
        an opaque host reference.
        """
        if value is None or isinstance(value, _PASS_THROUGH):
            return value
        if isinstance(value, ScriptProxy):
            return value
        if isinstance(value, (list, tuple, array.array)):
            return [self.toScript(v) for v in value]

        from .ExtendedInstance import bindingOf
        binding = bindingOf(value)
        if binding is not None:
            return binding

        if isinstance(value, type):
            return value

        from .ClassLoader import HostClassLoader
        cls = type(value)
        table = self._context.mappings().table()
        if table.symbolicName(HostClassLoader.runtimeName(cls)) is None:
            return value

        from .ObjectProxy import ObjectProxy
        return ObjectProxy(self._context, value)

    def wrap(self, value):
        """Wrap a host value in an ObjectProxy; proxies are returned as is."""
        from .Proxy import ProxyKind
        if value is None:
            from .Err import ArgErr
            raise ArgErr.make("Cannot wrap null")
        if isinstance(value, ScriptProxy):
            if value.kind is ProxyKind.OBJECT or value.kind is ProxyKind.EXTENDED_INSTANCE:
                return value
            value = unwrap(value)
        from .ExtendedInstance import bindingOf
        binding = bindingOf(value)
        if binding is not None:
            return binding
        from .ObjectProxy import ObjectProxy
        return ObjectProxy(self._context, value)
