#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import logging
import threading
from datetime import datetime
from enum import Enum


class LogLevel(Enum):
    """Severity of a log record, ordered debug < info < warn < err < silent."""

    DEBUG = (0, logging.DEBUG)
    INFO = (1, logging.INFO)
    WARN = (2, logging.WARNING)
    ERR = (3, logging.ERROR)
    SILENT = (4, logging.CRITICAL + 10)

    def __init__(self, ordinal, pyLevel):
        self._ordinal = ordinal
        self._pyLevel = pyLevel

    @staticmethod
    def fromStr(name, checked=True):
        """Parse a level name such as "warn", ignoring case."""
        level = LogLevel.__members__.get(name.strip().upper())
        if level is None and checked:
            from .Err import ArgErr
            raise ArgErr.make(f"Unknown log level: {name}")
        return level

    def ordinal(self):
        return self._ordinal

    def pyLevel(self):
        return self._pyLevel

    def toStr(self):
        return self.name.lower()

    def __lt__(self, other):
        return self._ordinal < other._ordinal

    def __le__(self, other):
        return self._ordinal <= other._ordinal

    def __gt__(self, other):
        return self._ordinal > other._ordinal

    def __ge__(self, other):
        return self._ordinal >= other._ordinal


class LogRec:
    """One record handed to log handlers."""

    __slots__ = ("_time", "_level", "_logName", "_msg", "_err")

    def __init__(self, time, level, logName, msg, err=None):
        self._time = time
        self._level = level
        self._logName = logName
        self._msg = msg
        self._err = err

    def time(self):
        return self._time

    def level(self):
        return self._level

    def logName(self):
        return self._logName

    def msg(self):
        return self._msg

    def err(self):
        return self._err

    def toStr(self):
        return f"[{self._level.toStr()}] {self._logName}: {self._msg}"

    def __repr__(self):
        return self.toStr()


class Log:
    """
    Named bridge log.  Each Log has its own level gate and writes through
    to the stdlib logger of the same name; records that pass the gate are
    also handed to every handler registered with addHandler().
    """

    _lock = threading.Lock()
    _logs = {}
    _handlers = []
    _defaultLevel = LogLevel.INFO

    def __init__(self, name, level=None):
        if not name or not all(c.isalnum() or c in "._" for c in name):
            from .Err import ArgErr
            raise ArgErr.make(f"Invalid log name: {name!r}")
        self._name = name
        self._level = level or Log._defaultLevel
        self._pyLogger = logging.getLogger(name)

    @staticmethod
    def get(name):
        """Get the registered log for name, creating it on first use."""
        with Log._lock:
            log = Log._logs.get(name)
            if log is None:
                log = Log(name)
                Log._logs[name] = log
            return log

    @staticmethod
    def find(name, checked=True):
        log = Log._logs.get(name)
        if log is None and checked:
            from .Err import Err
            raise Err.make(f"Unknown log: {name}")
        return log

    @staticmethod
    def list_():
        with Log._lock:
            return list(Log._logs.values())

    @staticmethod
    def defaultLevel(level=None):
        """Get the default level, or set it on every registered log and on
        logs created later."""
        if level is None:
            return Log._defaultLevel
        with Log._lock:
            Log._defaultLevel = level
            for log in Log._logs.values():
                log._level = level
        return None

    def name(self):
        return self._name

    def level(self, value=None):
        """Get the level, or set it when called with one."""
        if value is None:
            return self._level
        self._level = value
        return None

    def isEnabled(self, level):
        return level >= self._level

    def isDebug(self):
        return self.isEnabled(LogLevel.DEBUG)

    def debug(self, msg, err=None):
        self._emit(LogLevel.DEBUG, msg, err)

    def info(self, msg, err=None):
        self._emit(LogLevel.INFO, msg, err)

    def warn(self, msg, err=None):
        self._emit(LogLevel.WARN, msg, err)

    def err(self, msg, err=None):
        self._emit(LogLevel.ERR, msg, err)

    def _emit(self, level, msg, err):
        if self.isEnabled(level):
            self.log(LogRec(datetime.now(), level, self._name, msg, err))

    def log(self, rec):
        """Dispatch a record to the handlers, then to the stdlib logger."""
        for handler in Log.handlers():
            try:
                handler(rec)
            except Exception:
                self._pyLogger.exception(f"Log handler failed: {handler!r}")
        self._pyLogger.log(rec.level().pyLevel(), rec.msg(), exc_info=rec.err())

    def toStr(self):
        return self._name

    def __repr__(self):
        return f"Log({self._name}, {self._level.toStr()})"

    @staticmethod
    def handlers():
        with Log._lock:
            return list(Log._handlers)

    @staticmethod
    def addHandler(handler):
        if not callable(handler):
            from .Err import ArgErr
            raise ArgErr.make("Log handler must be callable")
        with Log._lock:
            Log._handlers.append(handler)

    @staticmethod
    def removeHandler(handler):
        with Log._lock:
            if handler in Log._handlers:
                Log._handlers.remove(handler)
