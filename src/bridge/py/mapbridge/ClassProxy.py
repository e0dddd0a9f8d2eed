#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .ClassLoader import HostClassLoader
from .Err import (ArgErr, MemberNotFoundErr, AmbiguousWriteErr,
                  ImmutableFieldWriteErr)
from .ObjectProxy import BoundMethod
from .Proxy import ScriptProxy, ProxyKind
from .Value import ProxyInstantiable


class ClassProxy(ScriptProxy, ProxyInstantiable):
    """Capability proxy for a host class.

    Exposes static methods and static fields under their symbolic and
    literal names, the raw class as _class, and the constructor as new.
    Calling the proxy constructs an instance.
    """

    __slots__ = ("_context", "_cls", "_mapping", "_ctors")
    kind = ProxyKind.CLASS

    def __init__(self, context, cls, mapping=None):
        if not isinstance(cls, type):
            raise ArgErr.make(f"Not a class: {cls!r}")
        if mapping is None:
            mapping = context.composer().compose(cls)
        self._init(_context=context, _cls=cls, _mapping=mapping, _ctors=None)

    def hostClass(self):
        return self._cls

    def mapping(self):
        return self._mapping

    def runtimeName(self):
        return HostClassLoader.runtimeName(self._cls)

    def symbolicName(self):
        return self._context.mappings().table().symbolicName(self.runtimeName())

    def constructors(self):
        ctors = self._ctors
        if ctors is None:
            ctors = self._context.locator().findConstructors(self._cls)
            object.__setattr__(self, "_ctors", ctors)
        return ctors

    def newInstance(self, *args, **kwargs):
        """Construct a host instance and wrap it as an ObjectProxy."""
        BoundMethod.checkPositional("new", kwargs)
        ctor = BoundMethod(self._context, self.constructors(), self._cls, "new").select(len(args))
        marshal = self._context.marshal()
        instance = ctor.invoke(self._cls, marshal.toHostArgs(args, ctor))
        return marshal.wrap(instance)

    def _suffix(self):
        return self._context.config().fieldSuffix()

    def _splitSuffix(self, key):
        suffix = self._suffix()
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[:-len(suffix)]
        return None

    def _staticMethods(self, key):
        locator = self._context.locator()
        names = self._mapping.runtimeMethods(key)
        if names:
            found = locator.findMethods(self._cls, names, True)
            if found:
                return found
        return locator.findMethods(self._cls, (key,), True)

    def findStaticField(self, key):
        locator = self._context.locator()
        runtime = self._mapping.runtimeField(key)
        for name in ((runtime, key) if runtime is not None else (key,)):
            field = locator.findField(self._cls, name)
            if field is not None and field.isStatic():
                return field
        return None

    def _typeName(self):
        return self.symbolicName() or self.runtimeName()

    def _notFound(self, key):
        return MemberNotFoundErr.make(f"Static member '{key}' not found on {self._typeName()}")

    def getMember(self, key):
        if key == "_class":
            return self._cls
        if key == "new":
            return _Constructor(self)

        base = self._splitSuffix(key)
        if base is not None:
            field = self.findStaticField(base)
            if field is None:
                raise self._notFound(key)
            return self._context.marshal().toScript(field.get())

        methods = self._staticMethods(key)
        if methods:
            return BoundMethod(self._context, methods, self._cls, key)

        field = self.findStaticField(key)
        if field is not None:
            return self._context.marshal().toScript(field.get())

        raise self._notFound(key)

    def hasMember(self, key):
        if key in ("_class", "new"):
            return True
        base = self._splitSuffix(key)
        if base is not None:
            return self.findStaticField(base) is not None
        return bool(self._staticMethods(key)) or self.findStaticField(key) is not None

    def putMember(self, key, value):
        base = self._splitSuffix(key)
        field = self.findStaticField(key if base is None else base)
        if field is None:
            raise self._notFound(key)
        if base is None:
            base = key
            if self._staticMethods(key):
                raise AmbiguousWriteErr.make(
                    f"'{key}' is both a method and a field on {self._typeName()}; "
                    f"use '{key}{self._suffix()}' to write the field")
        if field.isFinal():
            raise ImmutableFieldWriteErr.make(f"Cannot write final static field '{base}'")
        field.set_(None, self._context.marshal().toHost(value, field.type_()))

    def getMemberKeys(self):
        keys = dict.fromkeys(("_class", "new"))
        for key in self._mapping.methods():
            keys.setdefault(key)
        for key in self._mapping.fields():
            keys.setdefault(key)
            keys.setdefault(key + self._suffix())
        for name in self._context.locator().memberNames(self._cls, True):
            keys.setdefault(name)
        return tuple(keys)

    def __eq__(self, other):
        if isinstance(other, ClassProxy):
            return self._cls is other._cls
        return NotImplemented

    def __hash__(self):
        return hash(self._cls)

    def toStr(self):
        return f"<ClassProxy {self._typeName()}>"


class _Constructor(BoundMethod):
    """The new member of a ClassProxy."""

    __slots__ = ("_owner",)

    def __init__(self, owner):
        super().__init__(owner._context, owner.constructors(), owner._cls, "new")
        self._owner = owner

    def execute(self, *args, **kwargs):
        return self._owner.newInstance(*args, **kwargs)
