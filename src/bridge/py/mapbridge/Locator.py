#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .ClassLoader import HostClassLoader
from .Field import HostField, classAnnotations
from .Method import HostMethod
from .Slot import HostSlot


_MISS = object()


class MemberLocator:
    """Finds and memoizes reflective member handles.

    Methods are searched across the whole hierarchy in traversal order and
    deduplicated by name and signature, so an override hides the method it
    overrides.  Every handle is made accessible once, when its cache entry
    is first built.
    """

    def __init__(self):
        self._methods = {}
        self._fields = {}
        self._ctors = {}
        self._names = {}

    def findMethods(self, cls, names, isStatic):
        """Find methods of cls named by any of the runtime names.

        Args:
            cls: Host class to search
            names: Iterable of runtime method names
            isStatic: True for static and class methods, False for instance methods

        Returns:
            Tuple of HostMethod in traversal order
        """
        if isinstance(names, str):
            names = (names,)
        names = tuple(names)
        key = (cls, names, isStatic)
        cached = self._methods.get(key)
        if cached is not None:
            return cached

        found = []
        seen = set()
        for node in HostClassLoader.hierarchy(cls):
            declared = node.__dict__
            for name in names:
                for attr in HostSlot.storageNames(node, name):
                    raw = declared.get(attr, _MISS)
                    if raw is _MISS:
                        continue
                    method = HostMethod.reflect(node, name, attr, raw)
                    if method is None or method.isStatic() != isStatic:
                        break
                    sig = method.signatureKey()
                    if sig not in seen:
                        seen.add(sig)
                        found.append(method.makeAccessible())
                    break

        result = tuple(found)
        self._methods[key] = result
        return result

    def findField(self, cls, name):
        """Find the first field of cls with the runtime name, or None."""
        key = (cls, name)
        cached = self._fields.get(key, _MISS)
        if cached is not _MISS:
            return cached

        result = None
        for node in HostClassLoader.hierarchy(cls):
            for attr in HostSlot.storageNames(node, name):
                field = HostField.reflect(node, name, attr)
                if field is not None:
                    result = field.makeAccessible()
                    break
            if result is not None:
                break

        self._fields[key] = result
        return result

    def findConstructors(self, cls):
        """Constructor handles of cls; Python classes have exactly one."""
        cached = self._ctors.get(cls)
        if cached is not None:
            return cached
        result = (HostMethod.constructor(cls).makeAccessible(),)
        self._ctors[cls] = result
        return result

    def memberNames(self, cls, isStatic):
        """Public member names declared on cls or its ancestors: methods and
        fields matching isStatic.  Instance listings also include fields."""
        key = (cls, isStatic)
        cached = self._names.get(key)
        if cached is not None:
            return cached

        names = {}
        for node in HostClassLoader.hierarchy(cls):
            if node is object:
                continue
            candidates = list(node.__dict__) + list(classAnnotations(node))
            for attr in candidates:
                if attr.startswith("_") or attr in names:
                    continue
                method = self.findMethods(cls, (attr,), isStatic)
                if method:
                    names[attr] = True
                    continue
                field = self.findField(cls, attr)
                if field is not None and (field.isStatic() == isStatic or not isStatic):
                    names[attr] = True

        result = tuple(names)
        self._names[key] = result
        return result

    def clear(self):
        self._methods.clear()
        self._fields.clear()
        self._ctors.clear()
        self._names.clear()
