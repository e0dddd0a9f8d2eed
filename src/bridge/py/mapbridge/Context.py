#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Cache import BoundedCache
from .ClassLoader import HostClassLoader
from .Composer import MappingComposer
from .Config import BridgeConfig
from .Locator import MemberLocator
from .Log import Log
from .MappingsManager import MappingsManager
from .Marshal import Marshal


class BridgeContext:
    """
    Owns every shared component of one bridge: configuration, the
    mapping bootstrap, class loading, the composer and locator caches,
    value marshaling and the class proxy cache.  Components receive the
    context explicitly.

    Usage:
        with BridgeContext(loader) as ctx:
            api = ScriptingApi(ctx)
    """

    def __init__(self, loader, config=None, classLoader=None):
        """Create a context.

        Args:
            loader: Callable returning the mapping data; run once on a
                background thread by init()
            config: BridgeConfig, loaded from the environment when None
            classLoader: HostClassLoader to resolve runtime class names
        """
        self._config = config if config is not None else BridgeConfig.load()
        self._log = Log.get("mapbridge")
        self._mappings = MappingsManager(loader)
        self._classLoader = classLoader if classLoader is not None else HostClassLoader()
        self._composer = MappingComposer(self._mappings)
        self._locator = MemberLocator()
        self._marshal = Marshal(self)
        self._classProxies = BoundedCache(self._config.classCacheSize())
        self._closed = False

    def init(self):
        """Apply the configured log level and start the mapping build."""
        Log.defaultLevel(self._config.logLevel())
        self._mappings.init()
        self._log.debug(f"Bridge context initialized ({self._config!r})")
        return self

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._mappings.close()
        self._classProxies.clear()
        self._composer.clear()
        self._locator.clear()
        self._log.debug("Bridge context closed")

    def isClosed(self):
        return self._closed

    def __enter__(self):
        return self.init()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def config(self):
        return self._config

    def log(self):
        return self._log

    def mappings(self):
        return self._mappings

    def table(self):
        """The frozen mapping table; blocks until it is built."""
        return self._mappings.table()

    def classLoader(self):
        return self._classLoader

    def composer(self):
        return self._composer

    def locator(self):
        return self._locator

    def marshal(self):
        return self._marshal

    def classProxyCache(self):
        return self._classProxies

    def classProxy(self, runtimeName):
        """ClassProxy for a runtime class name, loading the class if needed.

        Raises:
            ClassResolutionErr: if the class cannot be loaded
        """
        from .ClassProxy import ClassProxy
        return self._classProxies.getOrAdd(
            runtimeName, lambda: ClassProxy(self, self._classLoader.load(runtimeName)))
