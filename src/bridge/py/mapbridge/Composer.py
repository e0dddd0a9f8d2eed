#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from types import MappingProxyType

from .ClassLoader import HostClassLoader


class ComposedMapping:
    """Merged symbolic to runtime maps for one concrete class."""

    __slots__ = ("_methods", "_fields")

    def __init__(self, methods=None, fields=None):
        self._methods = MappingProxyType(dict(methods or {}))
        self._fields = MappingProxyType(dict(fields or {}))

    def methods(self):
        """{symbolic method: (runtime names...)}"""
        return self._methods

    def fields(self):
        """{symbolic field: runtime name}"""
        return self._fields

    def runtimeMethods(self, key):
        return self._methods.get(key, ())

    def runtimeField(self, key):
        return self._fields.get(key)

    def keys(self):
        return tuple(dict.fromkeys([*self._methods, *self._fields]))

    def isEmpty(self):
        return not self._methods and not self._fields

    def __repr__(self):
        return f"ComposedMapping(methods={len(self._methods)}, fields={len(self._fields)})"


ComposedMapping.EMPTY = ComposedMapping()


class MappingComposer:
    """Computes and memoizes the composed mapping of a class.

    The walk visits the class, then its superclass subtree, then each
    interface subtree, so a name from the class itself shadows the same
    name on any ancestor or interface.  Entries are computed at most once
    per class; a concurrent duplicate computation produces an equal value.
    """

    def __init__(self, mappings):
        self._mappings = mappings
        self._cache = {}

    def compose(self, cls):
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        table = self._mappings.table()
        methods = {}
        fields = {}
        for node in HostClassLoader.hierarchy(cls):
            symbolic = table.symbolicName(HostClassLoader.runtimeName(node))
            if symbolic is None:
                continue
            for key, names in table.methodsOf(symbolic).items():
                methods.setdefault(key, names)
            for key, name in table.fieldsOf(symbolic).items():
                fields.setdefault(key, name)

        result = ComposedMapping(methods, fields) if methods or fields else ComposedMapping.EMPTY
        self._cache[cls] = result
        return result

    def isCached(self, cls):
        return cls in self._cache

    def clear(self):
        self._cache.clear()
