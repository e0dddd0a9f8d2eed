#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# mapbridge - name-mapped reflective bridge

# Support
from .Err import (Err, ArgErr, UnsupportedErr, MappingNotFoundErr, MemberNotFoundErr,
                  AmbiguousOverrideErr, AmbiguousWriteErr, ImmutableFieldWriteErr,
                  NoMatchingOverloadErr, ClassResolutionErr, ConstructionErr)
from .Log import Log, LogLevel, LogRec
from .Config import BridgeConfig

# Mappings
from .MappingTable import MappingTable, MappingTableBuilder
from .MappingsManager import MappingsManager
from .Composer import MappingComposer, ComposedMapping

# Reflection
from .ClassLoader import HostClassLoader
from .Slot import HostSlot, FConst
from .Method import HostMethod
from .Field import HostField
from .Locator import MemberLocator
from .Cache import BoundedCache

# Proxies
from .Value import ProxyObject, ProxyExecutable, ProxyInstantiable
from .Proxy import ProxyKind, ScriptProxy, unwrap
from .Marshal import Marshal
from .ObjectProxy import ObjectProxy, BoundMethod
from .ClassProxy import ClassProxy
from .LazyClassHolder import LazyClassHolder
from .Namespace import NamespaceNode

# Extension
from .Generation import Generation, MappedClassInfo
from .ExtendedInstance import ExtendedInstanceProxy, SuperProxy
from .Extender import Extender

# Entry points
from .Context import BridgeContext
from .ScriptingApi import ScriptingApi
