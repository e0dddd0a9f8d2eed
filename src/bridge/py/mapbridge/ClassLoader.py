#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import importlib
import threading

from .Err import ClassResolutionErr
from .Log import Log


class HostClassLoader:
    """Resolves host classes by runtime name.

    A runtime name is the defining module followed by the class qualname,
    e.g. "a.b.C" or "a.b.Outer.Inner".  Importing the module is the class's
    static initialization, so load() is only called when a class is really
    needed.
    """

    def __init__(self):
        self._registry = {}
        self._lock = threading.Lock()
        self._log = Log.get("mapbridge.classes")

    @staticmethod
    def runtimeName(cls):
        return f"{cls.__module__}.{cls.__qualname__}"

    @staticmethod
    def hierarchy(cls, visited=None):
        """Yield cls and its ancestors depth first: the class itself, then
        the superclass subtree, then each interface subtree.  Every class is
        yielded at most once."""
        if visited is None:
            visited = set()
        if cls is None or cls in visited:
            return
        visited.add(cls)
        yield cls
        bases = getattr(cls, "__bases__", ())
        if not bases:
            return
        yield from HostClassLoader.hierarchy(bases[0], visited)
        for iface in bases[1:]:
            yield from HostClassLoader.hierarchy(iface, visited)

    def register(self, cls, runtimeName=None):
        """Register a class that cannot be found by import, such as one
        created at runtime."""
        name = runtimeName or HostClassLoader.runtimeName(cls)
        with self._lock:
            self._registry[name] = cls
        return name

    def load(self, runtimeName):
        """Load the host class with the given runtime name.

        Raises:
            ClassResolutionErr: if the class is missing or its module fails to import
        """
        cls = self._registry.get(runtimeName)
        if cls is not None:
            return cls

        parts = runtimeName.split(".")
        for i in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:i])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                if e.name is not None and (module_name == e.name or module_name.startswith(e.name + ".")):
                    # this prefix is not a module, try a shorter one
                    continue
                raise self._fail(runtimeName, e) from e
            except Exception as e:
                raise self._fail(runtimeName, e) from e
            return self._walk(module, parts[i:], runtimeName)

        raise self._fail(runtimeName, None)

    def tryLoad(self, runtimeName):
        """Load a class or log and return None."""
        try:
            return self.load(runtimeName)
        except ClassResolutionErr as e:
            self._log.warn(f"Skipping class {runtimeName}: {e.msg()}")
            return None

    def _walk(self, module, names, runtimeName):
        target = module
        for name in names:
            try:
                target = getattr(target, name)
            except AttributeError as e:
                raise self._fail(runtimeName, e) from e
        if not isinstance(target, type):
            raise ClassResolutionErr.make(f"{runtimeName} is not a class: {type(target).__name__}")
        return target

    def _fail(self, runtimeName, cause):
        if cause is None:
            err = ClassResolutionErr.make(f"Class not found: {runtimeName}")
        else:
            err = ClassResolutionErr.make(f"Cannot load class {runtimeName}: {cause!r}", cause)
        self._log.err(err.msg())
        return err
