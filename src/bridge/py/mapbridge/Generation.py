#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from types import MappingProxyType

from .ClassLoader import HostClassLoader
from .Err import ArgErr, AmbiguousOverrideErr
from .Log import Log
from .Proxy import ScriptProxy, ProxyKind
from .Value import hasMembers, memberKeys, getMember


_EMPTY = MappingProxyType({})


class MappedClassInfo:
    """A host class together with its symbolic name and composed mapping."""

    __slots__ = ("_symbolic", "_cls", "_mapping")

    def __init__(self, symbolic, cls, mapping):
        self._symbolic = symbolic
        self._cls = cls
        self._mapping = mapping

    @staticmethod
    def of(context, value):
        """Resolve a class reference given by a script.

        Accepts a ClassProxy, a LazyClassHolder, a raw host class, or an
        Extender or extended instance (yielding its base class).

        Raises:
            ArgErr: if value is not a class reference
        """
        if isinstance(value, ScriptProxy):
            kind = value.kind
            if kind is ProxyKind.EXTENDER or kind is ProxyKind.EXTENDED_INSTANCE:
                return value.generation().base()
            if kind is ProxyKind.CLASS or kind is ProxyKind.LAZY_CLASS:
                cls = value.hostClass()
            else:
                raise ArgErr.make(f"Expected a class reference, got {kind.value} proxy")
        elif isinstance(value, type):
            cls = value
        else:
            raise ArgErr.make(f"Expected a class reference, got {type(value).__name__}")

        runtime = HostClassLoader.runtimeName(cls)
        symbolic = context.mappings().table().symbolicName(runtime) or runtime
        return MappedClassInfo(symbolic, cls, context.composer().compose(cls))

    def symbolicName(self):
        return self._symbolic

    def runtimeName(self):
        return HostClassLoader.runtimeName(self._cls)

    def hostClass(self):
        return self._cls

    def mapping(self):
        return self._mapping

    def matches(self, name):
        return name == self._symbolic or name == self.runtimeName() or name == self._cls.__name__

    def __repr__(self):
        return f"MappedClassInfo({self._symbolic})"


class Generation:
    """One immutable layer of an extension chain.

    A generation owns its own overrides (keyed by runtime method name) and
    addon properties, and links to the generation it extends.  Nothing
    ever mutates a parent; lookups walk the chain newest first.
    """

    __slots__ = ("_base", "_interfaces", "_overrides", "_addons", "_parent", "_depth")

    def __init__(self, base, interfaces=(), overrides=None, addons=None, parent=None):
        self._base = base
        self._interfaces = tuple(interfaces)
        self._overrides = MappingProxyType(dict(overrides)) if overrides else _EMPTY
        self._addons = MappingProxyType(dict(addons)) if addons else _EMPTY
        self._parent = parent
        self._depth = 1 if parent is None else parent._depth + 1

    @staticmethod
    def build(base, interfaces=(), overrides=None, addons=None, parent=None):
        """Build a generation, resolving override keys to runtime names.

        Raises:
            AmbiguousOverrideErr: if a plain override key names different
                methods on more than one target class
            ArgErr: if an override is neither callable nor a per-target map
        """
        interfaces = tuple(interfaces)
        table = _overrideTable((base,) + interfaces, overrides)
        addon_map = {key: getMember(addons, key) for key in memberKeys(addons)} if addons is not None else None
        gen = Generation(base, interfaces, table, addon_map, parent)
        Log.get("mapbridge.extend").debug(
            f"Generation {gen._depth} of {base.symbolicName()}: "
            f"{len(gen._overrides)} overrides, {len(gen._addons)} addons")
        return gen

    def base(self):
        return self._base

    def interfaces(self):
        return self._interfaces

    def targets(self):
        """Base class followed by the implemented interfaces."""
        return (self._base,) + self._interfaces

    def overrides(self):
        return self._overrides

    def addons(self):
        return self._addons

    def parent(self):
        return self._parent

    def depth(self):
        return self._depth

    def lineage(self):
        """Yield this generation, then each ancestor generation."""
        gen = self
        while gen is not None:
            yield gen
            gen = gen._parent

    def findOverride(self, runtimeName):
        """Return (generation, fn) for the newest override of runtimeName,
        or None."""
        for gen in self.lineage():
            fn = gen._overrides.get(runtimeName)
            if fn is not None:
                return gen, fn
        return None

    def runtimeNames(self):
        """Every runtime name overridden anywhere in the chain."""
        names = set()
        for gen in self.lineage():
            names.update(gen._overrides)
        return frozenset(names)

    def runtimeNamesFor(self, key):
        """Runtime names a symbolic method key may refer to on the
        targets, followed by the key itself."""
        names = []
        for target in self.targets():
            for name in target.mapping().runtimeMethods(key):
                if name not in names:
                    names.append(name)
        if key not in names:
            names.append(key)
        return tuple(names)

    def mergedAddons(self):
        """Addons of the whole chain; a child shadows its ancestors."""
        merged = {}
        for gen in reversed(list(self.lineage())):
            merged.update(gen._addons)
        return merged

    def layer(self, overrides=None, addons=None):
        """A child generation with the same base and interfaces."""
        return Generation.build(self._base, self._interfaces, overrides, addons, self)

    def __repr__(self):
        return f"Generation({self._base.symbolicName()}, depth={self._depth})"


def _checkCallable(key, fn):
    if not callable(fn):
        raise ArgErr.make(f"Override '{key}' must be a function, got {type(fn).__name__}")


def _overrideTable(targets, overrides):
    """Map script override keys onto runtime method names."""
    result = {}
    if overrides is None:
        return result
    if not hasMembers(overrides):
        raise ArgErr.make(f"Overrides must be an object, got {type(overrides).__name__}")

    log = Log.get("mapbridge.extend")
    for key in memberKeys(overrides):
        value = getMember(overrides, key)

        if hasMembers(value):
            for target_name in memberKeys(value):
                fn = getMember(value, target_name)
                target = next((t for t in targets if t.matches(target_name)), None)
                if target is None:
                    log.warn(f"Override target '{target_name}' for '{key}' is not extended or "
                             f"implemented; skipping")
                    continue
                _checkCallable(key, fn)
                for name in target.mapping().runtimeMethods(key) or (key,):
                    result[name] = fn
            continue

        _checkCallable(key, value)
        matched = {}
        for target in targets:
            names = target.mapping().runtimeMethods(key)
            if names:
                matched.setdefault(names, []).append(target.symbolicName())
        if len(matched) > 1:
            owners = ", ".join(name for group in matched.values() for name in group)
            raise AmbiguousOverrideErr.make(
                f"Override '{key}' is ambiguous between {owners}; "
                f"use {{'{key}': {{targetName: fn}}}} to choose")
        names = next(iter(matched)) if matched else (key,)
        for name in names:
            result[name] = value
    return result
