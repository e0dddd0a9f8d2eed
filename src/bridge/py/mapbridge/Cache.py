#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import threading
from collections import OrderedDict


class BoundedCache:
    """Thread-safe least-recently-used cache with a fixed capacity.

    Eviction only bounds memory; an evicted entry is simply rebuilt by
    the next getOrAdd().
    """

    def __init__(self, capacity=256):
        if capacity < 1:
            from .Err import ArgErr
            raise ArgErr.make(f"Cache capacity must be >= 1, not {capacity}")
        self._capacity = capacity
        self._lock = threading.RLock()
        self._map = OrderedDict()
        self._evictions = 0

    def capacity(self):
        return self._capacity

    def size(self):
        with self._lock:
            return len(self._map)

    def isEmpty(self):
        return self.size() == 0

    def evictions(self):
        return self._evictions

    def containsKey(self, key):
        with self._lock:
            return key in self._map

    def get(self, key, defVal=None):
        with self._lock:
            if key not in self._map:
                return defVal
            self._map.move_to_end(key)
            return self._map[key]

    def set(self, key, val):
        with self._lock:
            self._map[key] = val
            self._map.move_to_end(key)
            self._trim()
        return self

    def getOrAdd(self, key, factory):
        """Get the value for key, or build it with factory() and add it.

        The factory runs outside the lock; if it raises, nothing is cached.
        """
        with self._lock:
            if key in self._map:
                self._map.move_to_end(key)
                return self._map[key]
        val = factory()
        with self._lock:
            if key in self._map:
                self._map.move_to_end(key)
                return self._map[key]
            self._map[key] = val
            self._trim()
            return val

    def remove(self, key):
        with self._lock:
            return self._map.pop(key, None)

    def clear(self):
        with self._lock:
            self._map.clear()

    def _trim(self):
        while len(self._map) > self._capacity:
            self._map.popitem(last=False)
            self._evictions += 1
