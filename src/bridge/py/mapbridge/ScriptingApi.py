#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Err import ArgErr, MappingNotFoundErr, ClassResolutionErr
from .Extender import Extender
from .LazyClassHolder import LazyClassHolder
from .Log import Log
from .Namespace import NamespaceNode


class ScriptingApi:
    """
    The functions a script sees: importSymbol, wrap and extend, plus the
    root namespace and one binding per top-level package.
    """

    ROOT_BINDING = "Packages"

    def __init__(self, context):
        self._context = context
        self._root = None
        self._log = Log.get("mapbridge")

    def context(self):
        return self._context

    def importSymbol(self, name, lazy=False):
        """Import a class by symbolic name.

        Args:
            name: Symbolic class name; an unmapped runtime class name is
                also accepted
            lazy: Return a LazyClassHolder instead of loading the class now

        Returns:
            ClassProxy or LazyClassHolder

        Raises:
            MappingNotFoundErr: if name is neither mapped nor a loadable class
            ClassResolutionErr: if a mapped class cannot be loaded
        """
        if not isinstance(name, str) or not name:
            raise ArgErr.make(f"importSymbol() requires a class name, got {name!r}")
        table = self._context.table()
        runtime = table.runtimeName(name)
        if runtime is not None:
            if lazy:
                return LazyClassHolder(self._context, name, runtime)
            return self._context.classProxy(runtime)

        try:
            return self._context.classProxy(name)
        except ClassResolutionErr as e:
            raise MappingNotFoundErr.make(f"No mapping found for class: {name}", e) from e

    def wrap(self, value):
        """Wrap a host value as an ObjectProxy; proxies are returned unchanged."""
        return self._context.marshal().wrap(value)

    def extend(self, config=None, **kwargs):
        """Define an extension of a host class.

        The configuration may be given as a dict, as keyword arguments, or
        both (keywords win): extends, implements, overrides, addons.

        Returns:
            Extender
        """
        if config is None:
            config = {}
        elif not isinstance(config, dict):
            raise ArgErr.make(f"extend() requires a configuration object, got {type(config).__name__}")
        if kwargs:
            config = {**config, **kwargs}
        return Extender.define(self._context, config)

    def root(self):
        """Root NamespaceNode of the symbolic package tree."""
        if self._root is None:
            self._root = NamespaceNode(self._context)
            if self._context.config().eagerNamespace():
                count = self._root.populate()
                self._log.info(f"Namespace populated with {count} classes")
        return self._root

    def bindings(self):
        """Names to install into a script's global scope."""
        root = self.root()
        result = {
            "importSymbol": self.importSymbol,
            "wrap": self.wrap,
            "extend": self.extend,
            ScriptingApi.ROOT_BINDING: root,
        }
        for segment in self._context.table().topLevelPackages():
            result.setdefault(segment, root.getMember(segment))
        return result

    def install(self, scope):
        scope.update(self.bindings())
        return scope
