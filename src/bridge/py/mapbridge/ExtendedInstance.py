#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import functools
import inspect

from .Err import MemberNotFoundErr, UnsupportedErr
from .ObjectProxy import ObjectProxy, BoundMethod
from .Proxy import ScriptProxy, ProxyKind


BINDING = "_mapbridge_this"

_RESERVED = ("_self", "_super", "instance")


def bindingOf(value):
    """The ExtendedInstanceProxy bound to a host object, or None."""
    attrs = getattr(value, "__dict__", None)
    if not isinstance(attrs, dict):
        return None
    return attrs.get(BINDING)


def bind(host, proxy):
    object.__setattr__(host, BINDING, proxy)


class ExtendedInstanceProxy(ScriptProxy):
    """Composite proxy for an instance of a generated subclass.

    Members resolve, in order: _self (the host object), _super (one
    generation back), instance (a plain ObjectProxy of the host object),
    addon properties, then the host object's own members.  The proxy that
    an override receives as this is a view of the same instance framed at
    the generation that defined the override; views share their properties.
    """

    __slots__ = ("_context", "_host", "_generation", "_frame", "_root", "_properties", "_instance")
    kind = ProxyKind.EXTENDED_INSTANCE

    def __init__(self, context, host, generation, frame=None, root=None):
        if root is None:
            self._init(_context=context, _host=host, _generation=generation,
                       _frame=frame or generation, _root=None, _properties={},
                       _instance=ObjectProxy(context, host))
            object.__setattr__(self, "_root", self)
            for key, value in generation.mergedAddons().items():
                self._properties[key] = functools.partial(value, self) if inspect.isroutine(value) else value
        else:
            self._init(_context=context, _host=host, _generation=generation,
                       _frame=frame, _root=root, _properties=root._properties,
                       _instance=root._instance)

    def _at(self, generation):
        """A view of this instance framed at generation."""
        return ExtendedInstanceProxy(self._context, self._host, self._generation, generation, self._root)

    def hostInstance(self):
        return self._host

    def generation(self):
        return self._generation

    def frame(self):
        return self._frame

    def root(self):
        return self._root

    def properties(self):
        return self._properties

    def getMember(self, key):
        if key == "_self":
            return self._host
        if key == "_super":
            return SuperProxy(self._root, self._frame.parent())
        if key == "instance":
            return self._instance
        if key in self._properties:
            return self._properties[key]
        return self._instance.getMember(key)

    def hasMember(self, key):
        return key in _RESERVED or key in self._properties or self._instance.hasMember(key)

    def putMember(self, key, value):
        if key in _RESERVED:
            raise UnsupportedErr.make(f"Cannot assign reserved member '{key}'")
        if key in self._properties:
            self._properties[key] = value
        elif self._instance.hasMember(key):
            self._instance.putMember(key, value)
        else:
            self._properties[key] = value

    def getMemberKeys(self):
        keys = dict.fromkeys(_RESERVED)
        for key in self._properties:
            keys.setdefault(key)
        for key in self._instance.getMemberKeys():
            keys.setdefault(key)
        return tuple(keys)

    def dispatch(self, runtimeName, args, kwargs):
        """Run the newest override of runtimeName for a call made on the
        host object."""
        found = self._generation.findOverride(runtimeName)
        if found is None:
            raise MemberNotFoundErr.make(f"No override of '{runtimeName}'")
        gen, fn = found
        marshal = self._context.marshal()
        script_args = [marshal.toScript(a) for a in args]
        script_kwargs = {k: marshal.toScript(v) for k, v in kwargs.items()}
        result = fn(self._root._at(gen), *script_args, **script_kwargs)
        return marshal.toHost(result, self._returnType(runtimeName))

    def _returnType(self, runtimeName):
        locator = self._context.locator()
        for target in self._generation.targets():
            methods = locator.findMethods(target.hostClass(), (runtimeName,), False)
            if methods:
                return methods[0].returns()
        return None

    def __eq__(self, other):
        if isinstance(other, ExtendedInstanceProxy):
            return self._host is other._host and self._frame is other._frame
        return NotImplemented

    def __hash__(self):
        return id(self._host)

    def toStr(self):
        return f"<ExtendedInstanceProxy {self._generation.base().symbolicName()} gen={self._frame.depth()}>"


class SuperProxy(ScriptProxy):
    """Access to the implementation one generation back.

    A method resolves to the newest override at or before the start
    generation, called with this framed at that generation, and otherwise
    to the native method of the base class or an interface.
    """

    __slots__ = ("_root", "_start")
    kind = ProxyKind.SUPER

    def __init__(self, root, start):
        self._init(_root=root, _start=start)

    def hostInstance(self):
        return self._root.hostInstance()

    def start(self):
        return self._start

    def _resolve(self, key):
        root = self._root
        names = root.generation().runtimeNamesFor(key)
        if self._start is not None:
            for gen in self._start.lineage():
                for name in names:
                    fn = gen.overrides().get(name)
                    if fn is not None:
                        return functools.partial(fn, root._at(gen))

        context = root._context
        locator = context.locator()
        for target in root.generation().targets():
            methods = locator.findMethods(target.hostClass(), names, False)
            if methods:
                return BoundMethod(context, methods, root.hostInstance(), key)
        return None

    def getMember(self, key):
        member = self._resolve(key)
        if member is None:
            raise MemberNotFoundErr.make(f"No super implementation of '{key}'")
        return member

    def hasMember(self, key):
        return self._resolve(key) is not None

    def putMember(self, key, value):
        raise UnsupportedErr.make("_super is read-only")

    def getMemberKeys(self):
        keys = {}
        for target in self._root.generation().targets():
            for key in target.mapping().methods():
                keys.setdefault(key)
        return tuple(keys)

    def toStr(self):
        depth = self._start.depth() if self._start is not None else 0
        return f"<SuperProxy gen={depth}>"
