#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .ClassLoader import HostClassLoader
from .Err import (ArgErr, MemberNotFoundErr, AmbiguousWriteErr,
                  ImmutableFieldWriteErr, NoMatchingOverloadErr)
from .Field import HostField
from .Log import Log
from .Proxy import ScriptProxy, ProxyKind
from .Value import ProxyExecutable


class BoundMethod(ProxyExecutable):
    """Callable for one member name bound to a receiver.

    Holds every candidate overload in traversal order and picks the first
    whose arity accepts the argument count.  Argument types never take
    part in the choice.
    """

    __slots__ = ("_context", "_methods", "_receiver", "_name")

    def __init__(self, context, methods, receiver, name):
        self._context = context
        self._methods = tuple(methods)
        self._receiver = receiver
        self._name = name

    def methods(self):
        return self._methods

    def name(self):
        return self._name

    def select(self, count):
        for method in self._methods:
            if method.accepts(count):
                return method
        raise NoMatchingOverloadErr.make(
            f"No overload for method '{self._name}' with {count} arguments")

    @staticmethod
    def checkPositional(name, kwargs):
        """Raise ArgErr if keyword arguments were passed to a host call."""
        if kwargs:
            raise ArgErr.make(
                f"'{name}' takes positional arguments only, got: {', '.join(kwargs)}")

    def execute(self, *args, **kwargs):
        BoundMethod.checkPositional(self._name, kwargs)
        method = self.select(len(args))
        marshal = self._context.marshal()
        host_args = marshal.toHostArgs(args, method)
        log = Log.get("mapbridge.proxy")
        if log.isDebug():
            log.debug(f"Invoking {method} for '{self._name}'")
        return marshal.toScript(method.invoke(self._receiver, host_args))

    def __repr__(self):
        return f"<BoundMethod {self._name} [{', '.join(m.arityStr() for m in self._methods)}]>"


class ObjectProxy(ScriptProxy):
    """Capability proxy for a host instance.

    Reads resolve, in order: _self, a suffixed name as a field only, a
    mapped method, a direct method of the literal name, then a mapped or
    direct field.  Writes only ever target fields.
    """

    __slots__ = ("_context", "_host", "_cls", "_mapping")
    kind = ProxyKind.OBJECT

    def __init__(self, context, host, mapping=None):
        if host is None:
            raise ArgErr.make("Host instance cannot be null")
        cls = type(host)
        if mapping is None:
            mapping = context.composer().compose(cls)
        self._init(_context=context, _host=host, _cls=cls, _mapping=mapping)

    def hostInstance(self):
        return self._host

    def hostClass(self):
        return self._cls

    def mapping(self):
        return self._mapping

    def _suffix(self):
        return self._context.config().fieldSuffix()

    def _splitSuffix(self, key):
        suffix = self._suffix()
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[:-len(suffix)]
        return None

    def _mappedMethods(self, key):
        names = self._mapping.runtimeMethods(key)
        if not names:
            return ()
        return self._context.locator().findMethods(self._cls, names, False)

    def _directMethods(self, key):
        return self._context.locator().findMethods(self._cls, (key,), False)

    def findField(self, key):
        """Field handle for a symbolic or literal name, or None."""
        locator = self._context.locator()
        runtime = self._mapping.runtimeField(key)
        for name in ((runtime, key) if runtime is not None else (key,)):
            field = locator.findField(self._cls, name)
            if field is not None:
                return field
            attrs = getattr(self._host, "__dict__", None)
            if attrs is not None and name in attrs:
                return HostField.adhoc(self._cls, name)
        return None

    def _typeName(self):
        symbolic = self._context.mappings().table().symbolicName(HostClassLoader.runtimeName(self._cls))
        return symbolic or HostClassLoader.runtimeName(self._cls)

    def _notFound(self, key):
        return MemberNotFoundErr.make(f"Member '{key}' not found on {self._typeName()}")

    def _readField(self, field):
        return self._context.marshal().toScript(field.get(self._host))

    def getMember(self, key):
        if key == "_self":
            return self._host

        base = self._splitSuffix(key)
        if base is not None:
            field = self.findField(base)
            if field is None:
                raise self._notFound(key)
            return self._readField(field)

        methods = self._mappedMethods(key)
        if methods:
            return BoundMethod(self._context, methods, self._host, key)

        methods = self._directMethods(key)
        if methods:
            return BoundMethod(self._context, methods, self._host, key)

        field = self.findField(key)
        if field is not None:
            return self._readField(field)

        raise self._notFound(key)

    def hasMember(self, key):
        if key == "_self":
            return True
        base = self._splitSuffix(key)
        if base is not None:
            return self.findField(base) is not None
        if self._mapping.runtimeMethods(key):
            return True
        if self._directMethods(key):
            return True
        return self.findField(key) is not None

    def putMember(self, key, value):
        base = self._splitSuffix(key)
        field = self.findField(key if base is None else base)
        if field is None:
            raise self._notFound(key)
        if base is None:
            base = key
            if self._mappedMethods(key) or self._directMethods(key):
                raise AmbiguousWriteErr.make(
                    f"'{key}' is both a method and a field on {self._typeName()}; "
                    f"use '{key}{self._suffix()}' to write the field")
        if field.isStatic():
            raise ImmutableFieldWriteErr.make(f"Cannot write static field '{base}' through an instance")
        if field.isFinal():
            raise ImmutableFieldWriteErr.make(f"Cannot write final field '{base}'")
        field.set_(self._host, self._context.marshal().toHost(value, field.type_()))

    def getMemberKeys(self):
        keys = dict.fromkeys(self._mapping.keys())
        for name in self._context.locator().memberNames(self._cls, False):
            keys.setdefault(name)
        for name in getattr(self._host, "__dict__", {}):
            if not name.startswith("_"):
                keys.setdefault(name)
        keys.setdefault("_self")
        return tuple(keys)

    def __eq__(self, other):
        if isinstance(other, ObjectProxy):
            return self._host is other._host
        return NotImplemented

    def __hash__(self):
        return id(self._host)

    def toStr(self):
        return f"<ObjectProxy {self._typeName()}>"
