#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import threading
from concurrent.futures import ThreadPoolExecutor

from .Err import Err
from .Log import Log


class MappingsManager:
    """
    Builds the mapping table exactly once on a background thread and
    hands it to every consumer.  Consumers block in table() until the
    build has finished; afterwards reads are unsynchronized.
    """

    THREAD_NAME = "MappingsManager-Initializer"

    def __init__(self, loader):
        if not callable(loader):
            from .Err import ArgErr
            raise ArgErr.make("Mapping loader must be callable")
        self._loader = loader
        self._lock = threading.Lock()
        self._executor = None
        self._future = None
        self._log = Log.get("mapbridge.mappings")

    def init(self):
        """Start the asynchronous build; calling again is a no-op."""
        with self._lock:
            if self._future is not None:
                return self
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=MappingsManager.THREAD_NAME)
            self._future = self._executor.submit(self._build)
            # single task, release the worker once it completes
            self._executor.shutdown(wait=False)
        return self

    def _build(self):
        from .MappingTable import MappingTable
        self._log.debug("Building mapping table")
        table = MappingTable.coerce(self._loader())
        self._log.info(f"Mappings initialized: {table.classCount()} classes, "
                       f"{table.methodCount()} methods, {table.fieldCount()} fields")
        return table

    def table(self):
        """Await and return the frozen MappingTable.

        Raises:
            Err: if the loader failed; the loader's exception is the cause
        """
        if self._future is None:
            self.init()
        try:
            return self._future.result()
        except Exception as e:
            self._log.err("Failed to initialize mappings", e)
            raise Err.make("Mapping table initialization failed", e) from e

    def isReady(self):
        return self._future is not None and self._future.done()

    def isInitialized(self):
        return self._future is not None

    def close(self):
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
