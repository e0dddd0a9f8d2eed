#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import functools
import itertools
import threading
import types

from .Err import ArgErr, UnsupportedErr, MemberNotFoundErr, ConstructionErr
from .ExtendedInstance import ExtendedInstanceProxy, bind, bindingOf
from .Generation import Generation, MappedClassInfo
from .Log import Log
from .ObjectProxy import BoundMethod
from .Proxy import ScriptProxy, ProxyKind
from .Value import ProxyInstantiable, hasMembers, getMember, isArray


GENERATED_MODULE = "mapbridge.extended"

_counter = itertools.count(1)


def _makeDispatcher(runtimeName, attrName, native, owner):
    """Method installed on a generated class for one overridden name.

    A bound instance routes the call to its newest override; an unbound
    instance, such as one of a plain subclass of the prototype, runs the
    native method.
    """
    def dispatch(self, *args, **kwargs):
        this = bindingOf(self)
        if this is not None and this.generation().findOverride(runtimeName) is not None:
            return this.dispatch(runtimeName, args, kwargs)
        return getattr(super(owner[0], self), attrName)(*args, **kwargs)

    if native is not None:
        functools.update_wrapper(dispatch, native)
    dispatch.__name__ = attrName
    dispatch.__isabstractmethod__ = False
    return dispatch


def _dedupe(base, interfaces):
    """Drop interfaces the base already subclasses, repeats, and any
    interface that another listed interface already extends."""
    base_cls = base.hostClass()
    result = []
    for info in interfaces:
        cls = info.hostClass()
        if issubclass(base_cls, cls) or any(r.hostClass() is cls for r in result):
            continue
        result.append(info)
    return tuple(i for i in result
                 if not any(o is not i and issubclass(o.hostClass(), i.hostClass()) for o in result))


class Extender(ScriptProxy, ProxyInstantiable):
    """Result of extend(): constructs extended instances of a host class.

    Calling the extender (or its new member) builds an instance of a
    generated subclass of the base class that implements the requested
    interfaces and routes every overridden method to the script.  The
    generated class itself is exposed as prototype.
    """

    __slots__ = ("_context", "_generation", "_classes", "_lock")
    kind = ProxyKind.EXTENDER

    def __init__(self, context, generation):
        self._init(_context=context, _generation=generation, _classes={}, _lock=threading.Lock())
        self.classFor(generation)

    @staticmethod
    def define(context, config):
        """Parse an extension configuration.

        The configuration holds extends (a class reference, an Extender or
        an extended instance), and optionally implements (one class
        reference or a list), overrides and addons.

        Raises:
            ArgErr: if the configuration is malformed
            AmbiguousOverrideErr: if a plain override key is ambiguous
        """
        if not hasMembers(config):
            raise ArgErr.make("extend() requires a configuration object")
        extends = getMember(config, "extends")
        if extends is None:
            raise ArgErr.make("Configuration object must have an 'extends' property")

        parent = None
        interfaces = []
        if isinstance(extends, ScriptProxy) and extends.kind in (ProxyKind.EXTENDER, ProxyKind.EXTENDED_INSTANCE):
            parent = extends.generation()
            base = parent.base()
            interfaces.extend(parent.interfaces())
        else:
            base = MappedClassInfo.of(context, extends)

        implements = getMember(config, "implements")
        if implements is not None:
            for ref in (implements if isArray(implements) else (implements,)):
                interfaces.append(MappedClassInfo.of(context, ref))

        generation = Generation.build(base, _dedupe(base, interfaces),
                                      getMember(config, "overrides"), getMember(config, "addons"), parent)
        return Extender(context, generation)

    def generation(self):
        return self._generation

    def prototype(self):
        """The generated host subclass."""
        return self.classFor(self._generation)

    def classFor(self, generation):
        """Generated subclass for the override names of a generation."""
        names = generation.runtimeNames()
        with self._lock:
            cls = self._classes.get(names)
            if cls is None:
                cls = self._buildClass(generation, names)
                self._classes[names] = cls
            return cls

    def _native(self, generation, runtimeName):
        locator = self._context.locator()
        for target in generation.targets():
            methods = locator.findMethods(target.hostClass(), (runtimeName,), False)
            if methods:
                return methods[0].attrName(), methods[0].func()
        return runtimeName, None

    def _buildClass(self, generation, names):
        base = generation.base().hostClass()
        bases = (base,) + tuple(i.hostClass() for i in generation.interfaces())
        owner = []
        namespace = {}
        for name in sorted(names):
            attr, native = self._native(generation, name)
            namespace[attr] = _makeDispatcher(name, attr, native, owner)

        cls_name = f"{base.__name__}_Ext{next(_counter)}"

        def body(ns):
            ns.update(namespace)
            ns["__module__"] = GENERATED_MODULE
            ns["__qualname__"] = cls_name

        try:
            cls = types.new_class(cls_name, bases, exec_body=body)
        except TypeError as e:
            raise ArgErr.make(f"Cannot extend {generation.base().symbolicName()}: {e}", e) from e
        owner.append(cls)
        Log.get("mapbridge.extend").debug(f"Generated {cls_name} overriding {sorted(names)}")
        return cls

    def newInstance(self, *args, overrides=None, addons=None):
        """Construct an extended instance.

        Args:
            args: Constructor arguments for the base class
            overrides: Optional overrides for this instance only
            addons: Optional addon properties for this instance only

        Returns:
            ExtendedInstanceProxy

        Raises:
            NoMatchingOverloadErr: if the constructor does not accept len(args)
            ConstructionErr: if host instantiation fails
        """
        generation = self._generation
        if overrides is not None or addons is not None:
            generation = generation.layer(overrides, addons)
        cls = self.classFor(generation)

        context = self._context
        base = generation.base()
        ctor = BoundMethod(context, context.locator().findConstructors(base.hostClass()),
                           base.hostClass(), "new").select(len(args))
        host_args = context.marshal().toHostArgs(args, ctor)

        try:
            if cls.__new__ is object.__new__:
                host = object.__new__(cls)
            else:
                host = cls.__new__(cls, *host_args)
        except Exception as e:
            raise ConstructionErr.make(f"Cannot instantiate {base.symbolicName()}: {e}", e) from e

        proxy = ExtendedInstanceProxy(context, host, generation)
        bind(host, proxy)
        try:
            host.__init__(*host_args)
        except Exception as e:
            raise ConstructionErr.make(f"Cannot construct {base.symbolicName()}: {e}", e) from e
        return proxy

    def getMember(self, key):
        if key == "prototype":
            return self.prototype()
        if key == "new":
            return _ExtenderConstructor(self)
        raise MemberNotFoundErr.make(f"Extender has no member '{key}'")

    def hasMember(self, key):
        return key in ("prototype", "new")

    def putMember(self, key, value):
        raise UnsupportedErr.make("Extender is read-only")

    def getMemberKeys(self):
        return ("prototype", "new")

    def toStr(self):
        return f"<Extender {self._generation.base().symbolicName()} gen={self._generation.depth()}>"


class _ExtenderConstructor(BoundMethod):
    """The new member of an Extender."""

    __slots__ = ("_owner",)

    def __init__(self, owner):
        base = owner.generation().base().hostClass()
        super().__init__(owner._context, owner._context.locator().findConstructors(base), base, "new")
        self._owner = owner

    def execute(self, *args, **kwargs):
        return self._owner.newInstance(*args, **kwargs)
