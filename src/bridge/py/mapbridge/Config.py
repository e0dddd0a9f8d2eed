#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import os
from pathlib import Path
from types import MappingProxyType


class BridgeConfig:
    """Bridge configuration backed by a props file.

    The file is located by, in order: an explicit path, the
    MAPBRIDGE_CONFIG environment variable, then etc/mapbridge/config.props
    relative to the working directory.  A missing file yields defaults.
    """

    ENV_VAR = "MAPBRIDGE_CONFIG"
    DEFAULT_PATH = "etc/mapbridge/config.props"

    _defaults = {
        "fieldSuffix": "$",
        "classCacheSize": "256",
        "eagerNamespace": "false",
        "logLevel": "info",
    }

    def __init__(self, props=None, uri=None):
        merged = dict(BridgeConfig._defaults)
        if props:
            merged.update({str(k): str(v) for k, v in props.items()})
        self._props = MappingProxyType(merged)
        self._uri = uri
        self._validate()

    @staticmethod
    def load(path=None):
        """Load configuration from a props file.

        Args:
            path: Optional path; overrides the environment and default lookup

        Returns:
            BridgeConfig
        """
        if path is None:
            path = os.environ.get(BridgeConfig.ENV_VAR) or BridgeConfig.DEFAULT_PATH
        file = Path(path)
        if not file.is_file():
            return BridgeConfig(uri=str(file))
        return BridgeConfig(BridgeConfig.readProps(file.read_text(encoding="utf-8")), str(file))

    @staticmethod
    def readProps(content):
        """Parse key=value lines, skipping blanks and # or // comments."""
        if isinstance(content, bytes):
            content = content.decode('utf-8')

        result = {}
        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith('#') or line.startswith('//'):
                continue

            eq_pos = line.find('=')
            if eq_pos > 0:
                key = line[:eq_pos].strip()
                value = line[eq_pos + 1:].strip()
                result[key] = value

        return result

    def _validate(self):
        from .Err import ArgErr
        if not self.fieldSuffix():
            raise ArgErr("fieldSuffix must not be empty")
        if self.classCacheSize() < 1:
            raise ArgErr(f"classCacheSize must be positive: {self._props['classCacheSize']}")
        self.eagerNamespace()
        self.logLevel()

    def uri(self):
        return self._uri

    def props(self):
        return self._props

    def get(self, key, defVal=None):
        return self._props.get(key, defVal)

    def fieldSuffix(self):
        return self._props["fieldSuffix"]

    def classCacheSize(self):
        raw = self._props["classCacheSize"]
        try:
            return int(raw)
        except ValueError as e:
            from .Err import ArgErr
            raise ArgErr.make(f"Invalid classCacheSize: {raw}", e) from e

    def eagerNamespace(self):
        raw = self._props["eagerNamespace"].lower()
        if raw in ("true", "yes", "1"):
            return True
        if raw in ("false", "no", "0"):
            return False
        from .Err import ArgErr
        raise ArgErr(f"Invalid eagerNamespace: {raw}")

    def logLevel(self):
        from .Log import LogLevel
        return LogLevel.fromStr(self._props["logLevel"])

    def __repr__(self):
        return f"BridgeConfig({dict(self._props)!r})"
