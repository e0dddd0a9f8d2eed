#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Err import MemberNotFoundErr, UnsupportedErr, ClassResolutionErr
from .LazyClassHolder import LazyClassHolder
from .Log import Log
from .Proxy import ScriptProxy, ProxyKind


class NamespaceNode(ScriptProxy):
    """One node of the symbolic package tree.

    get() on a segment yields a LazyClassHolder when the accumulated path
    is a known class, a deeper node when it is a known package, and an
    unresolved node when the segment merely looks like a package name.
    Anything else is absent.  Children are cached once created.
    """

    __slots__ = ("_context", "_path", "_known", "_children", "_omitted")
    kind = ProxyKind.NAMESPACE

    def __init__(self, context, path="", known=True):
        self._init(_context=context, _path=path, _known=known,
                   _children={}, _omitted=set())

    @staticmethod
    def isPlausibleSegment(segment):
        """Package segments are identifiers starting in lower case."""
        return segment.isidentifier() and segment[:1].islower()

    def path(self):
        return self._path

    def isResolved(self):
        """False for nodes created optimistically for unknown packages."""
        return self._known

    def _childPath(self, segment):
        return segment if not self._path else f"{self._path}.{segment}"

    def getMember(self, key):
        """Child for segment key, or None when absent."""
        child = self._children.get(key)
        if child is not None:
            return child
        if key in self._omitted or not key:
            return None

        path = self._childPath(key)
        table = self._context.mappings().table()
        if table.isClass(path):
            child = LazyClassHolder(self._context, path, table.runtimeName(path))
        elif table.isPackage(path):
            child = NamespaceNode(self._context, path)
        elif NamespaceNode.isPlausibleSegment(key):
            child = NamespaceNode(self._context, path, known=False)
        else:
            return None
        return self._children.setdefault(key, child)

    def __getattr__(self, name):
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        child = self.getMember(name)
        if child is None:
            raise MemberNotFoundErr.make(f"'{name}' not found in namespace '{self._path or '<root>'}'")
        return child

    def __getitem__(self, key):
        return self.__getattr__(key)

    def hasMember(self, key):
        if key in self._omitted or not key:
            return False
        if key in self._children:
            return True
        path = self._childPath(key)
        table = self._context.mappings().table()
        return table.isClass(path) or table.isPackage(path) or NamespaceNode.isPlausibleSegment(key)

    def putMember(self, key, value):
        raise UnsupportedErr.make(f"Namespace '{self._path or '<root>'}' is read-only")

    def getMemberKeys(self):
        table = self._context.mappings().table()
        return tuple(seg for seg in table.childSegments(self._path) if seg not in self._omitted)

    def populate(self):
        """Resolve every known class below this node up front.

        A class that fails to load is logged and omitted from the tree.
        Returns the number of classes resolved.
        """
        log = Log.get("mapbridge.namespace")
        count = 0
        for key in self.getMemberKeys():
            child = self.getMember(key)
            if isinstance(child, NamespaceNode):
                count += child.populate()
                continue
            if not isinstance(child, LazyClassHolder):
                continue
            try:
                child.resolve()
                count += 1
            except ClassResolutionErr as e:
                log.warn(f"Omitting {child.symbolicName()} from namespace: {e.msg()}")
                self._children.pop(key, None)
                self._omitted.add(key)
        return count

    def toStr(self):
        return f"<NamespaceNode {self._path or '<root>'}>"
