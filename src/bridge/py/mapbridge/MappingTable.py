#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from types import MappingProxyType


_EMPTY = MappingProxyType({})


class MappingTable:
    """Frozen symbolic/runtime name maps shared by every proxy.

    classMap maps symbolic class names to runtime class names and
    reverseClassMap the other way.  methodMap maps a symbolic class to
    {symbolic method: (runtime names...)} and fieldMap maps a symbolic class
    to {symbolic field: runtime name}.  Package prefixes and the child
    segment index used by namespaces are computed once on construction.
    """

    def __init__(self, classes=None, methods=None, fields=None):
        classes = dict(classes or {})
        reverse = {}
        for symbolic, runtime in classes.items():
            reverse.setdefault(runtime, symbolic)

        method_map = {}
        for cls_name, members in (methods or {}).items():
            method_map[cls_name] = MappingProxyType(
                {k: tuple(v) if not isinstance(v, str) else (v,) for k, v in members.items()})

        field_map = {}
        for cls_name, members in (fields or {}).items():
            field_map[cls_name] = MappingProxyType(dict(members))

        self._classMap = MappingProxyType(classes)
        self._reverseClassMap = MappingProxyType(reverse)
        self._methodMap = MappingProxyType(method_map)
        self._fieldMap = MappingProxyType(field_map)
        self._packages, self._children = MappingTable._index(classes)

    @staticmethod
    def _index(classes):
        packages = set()
        children = {}
        for symbolic in classes:
            parts = symbolic.split(".")
            path = ""
            for i, seg in enumerate(parts):
                children.setdefault(path, set()).add(seg)
                path = seg if not path else f"{path}.{seg}"
                if i < len(parts) - 1:
                    packages.add(path)
        frozen = {k: tuple(sorted(v)) for k, v in children.items()}
        return frozenset(packages), MappingProxyType(frozen)

    @staticmethod
    def empty():
        return MappingTable()

    @staticmethod
    def fromDicts(classes, methods=None, fields=None):
        return MappingTable(classes, methods, fields)

    @staticmethod
    def coerce(value):
        """Accept a MappingTable, a MappingTableBuilder, or a dict with
        classes/methods/fields keys, as produced by a mapping loader."""
        if isinstance(value, MappingTable):
            return value
        if isinstance(value, MappingTableBuilder):
            return value.build()
        if isinstance(value, dict):
            return MappingTable(value.get("classes"), value.get("methods"), value.get("fields"))
        from .Err import ArgErr
        raise ArgErr(f"Mapping loader returned unsupported value: {type(value).__name__}")

    def classMap(self):
        return self._classMap

    def reverseClassMap(self):
        return self._reverseClassMap

    def methodMap(self):
        return self._methodMap

    def fieldMap(self):
        return self._fieldMap

    def runtimeName(self, symbolic):
        return self._classMap.get(symbolic)

    def symbolicName(self, runtime):
        return self._reverseClassMap.get(runtime)

    def methodsOf(self, symbolic):
        return self._methodMap.get(symbolic, _EMPTY)

    def fieldsOf(self, symbolic):
        return self._fieldMap.get(symbolic, _EMPTY)

    def isClass(self, path):
        return path in self._classMap

    def isPackage(self, path):
        return path in self._packages

    def packages(self):
        return self._packages

    def childSegments(self, path=""):
        """Known child segments below a package path, sorted."""
        return self._children.get(path, ())

    def topLevelPackages(self):
        return tuple(seg for seg in self.childSegments("") if self.isPackage(seg))

    def classCount(self):
        return len(self._classMap)

    def methodCount(self):
        return sum(len(v) for v in self._methodMap.values())

    def fieldCount(self):
        return sum(len(v) for v in self._fieldMap.values())

    def __repr__(self):
        return (f"MappingTable(classes={self.classCount()}, "
                f"methods={self.methodCount()}, fields={self.fieldCount()})")


class MappingTableBuilder:
    """Append-only accumulator used while a loader reads mapping data.

    build() freezes the data into a MappingTable; any further add raises.
    """

    def __init__(self):
        self._classes = {}
        self._methods = {}
        self._fields = {}
        self._built = None

    def _checkOpen(self):
        if self._built is not None:
            from .Err import UnsupportedErr
            raise UnsupportedErr("Mapping table already built")

    def addClass(self, symbolic, runtime):
        self._checkOpen()
        existing = self._classes.get(symbolic)
        if existing is not None and existing != runtime:
            from .Err import ArgErr
            raise ArgErr(f"Class {symbolic} already mapped to {existing}")
        self._classes[symbolic] = runtime
        return self

    def addMethod(self, symbolicClass, symbolic, runtime):
        self._checkOpen()
        names = self._methods.setdefault(symbolicClass, {}).setdefault(symbolic, [])
        if runtime not in names:
            names.append(runtime)
        return self

    def addField(self, symbolicClass, symbolic, runtime):
        self._checkOpen()
        members = self._fields.setdefault(symbolicClass, {})
        existing = members.get(symbolic)
        if existing is not None and existing != runtime:
            from .Err import ArgErr
            raise ArgErr(f"Field {symbolicClass}.{symbolic} already mapped to {existing}")
        members[symbolic] = runtime
        return self

    def build(self):
        if self._built is None:
            self._built = MappingTable(self._classes, self._methods, self._fields)
        return self._built

    def isBuilt(self):
        return self._built is not None
