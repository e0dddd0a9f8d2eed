#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import inspect

from .Slot import HostSlot, FConst


_UNBOUNDED = float("inf")


def _signature(target):
    """Signature with string annotations evaluated when possible."""
    try:
        return inspect.signature(target, eval_str=True)
    except Exception:
        pass
    try:
        return inspect.signature(target)
    except (ValueError, TypeError):
        return None


def _annotation(value):
    return None if value is inspect.Parameter.empty else value


class HostMethod(HostSlot):
    """Method reflection - a host method, static method or constructor.

    The arity is the range of positional argument counts the method
    accepts, not counting the receiver.  Overload selection only ever asks
    whether a method accepts a given number of arguments.
    """

    def __init__(self, parent=None, name="", flags=0, func=None, params=None,
                 returns=None, minArgs=0, maxArgs=0, attrName=None):
        """Create a HostMethod.

        Args:
            parent: Declaring class
            name: Runtime name
            flags: FConst flags
            func: Underlying function (unwrapped from staticmethod/classmethod)
            params: Tuple of parameter annotations, None where absent
            returns: Return annotation or None
            minArgs: Required positional argument count
            maxArgs: Maximum positional argument count, inf for *args
            attrName: Name the function is stored under in the class dict
        """
        super().__init__(parent, name, flags, attrName)
        self._func = func
        self._params = tuple(params or ())
        self._returns = returns
        self._minArgs = minArgs
        self._maxArgs = maxArgs

    @staticmethod
    def reflect(parent, name, attrName, raw):
        """Build a HostMethod from a raw class __dict__ entry or return None
        if the entry is not a method."""
        flags = FConst.Private if HostSlot.isPrivateName(name) else FConst.Public
        if isinstance(raw, staticmethod):
            func = raw.__func__
            flags |= FConst.Static
            skip = 0
        elif isinstance(raw, classmethod):
            func = raw.__func__
            flags |= FConst.Static | FConst.ClassBound
            skip = 1
        elif inspect.isfunction(raw):
            func = raw
            skip = 1
        elif inspect.ismethoddescriptor(raw) and not inspect.isdatadescriptor(raw):
            func = raw
            skip = 1
        else:
            return None
        return HostMethod._fromSignature(parent, name, flags, func, _signature(func), skip, attrName)

    @staticmethod
    def constructor(cls):
        """The constructor of a class, as seen through cls(*args)."""
        flags = FConst.Public | FConst.Ctor | FConst.Static
        return HostMethod._fromSignature(cls, "<init>", flags, cls, _signature(cls), 0, "__init__")

    @staticmethod
    def _fromSignature(parent, name, flags, func, sig, skip, attrName):
        if sig is None:
            return HostMethod(parent, name, flags, func, (), None, 0, _UNBOUNDED, attrName)

        params = list(sig.parameters.values())[skip:]
        types = []
        min_args = 0
        max_args = 0
        for p in params:
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
                types.append(_annotation(p.annotation))
                max_args += 1
                if p.default is p.empty:
                    min_args += 1
            elif p.kind == p.VAR_POSITIONAL:
                max_args = _UNBOUNDED
        return HostMethod(parent, name, flags, func, types, _annotation(sig.return_annotation),
                          min_args, max_args, attrName)

    def isMethod(self):
        return True

    def func(self):
        return self._func

    def params(self):
        """Positional parameter annotations, None where absent."""
        return self._params

    def paramType(self, index):
        """Annotation for the positional argument at index; varargs
        positions report None."""
        if index < len(self._params):
            return self._params[index]
        return None

    def returns(self):
        return self._returns

    def minArgs(self):
        return self._minArgs

    def maxArgs(self):
        return self._maxArgs

    def accepts(self, count):
        return self._minArgs <= count <= self._maxArgs

    def signatureKey(self):
        """Identity used to dedupe overridden methods across a hierarchy."""
        return (self._name, self._minArgs, self._maxArgs, tuple(repr(t) for t in self._params))

    def invoke(self, receiver, args):
        """Invoke against a receiver with already marshaled arguments.

        Args:
            receiver: Host instance, or the host class for static members
                and constructors
            args: Sequence of positional arguments

        Returns:
            The raw host result; host exceptions propagate unchanged
        """
        if self.isCtor():
            return receiver(*args)
        if self._flags & FConst.ClassBound:
            owner = receiver if isinstance(receiver, type) else type(receiver)
            return self._func(owner, *args)
        if self.isStatic():
            return self._func(*args)
        if receiver is None:
            from .Err import ArgErr
            raise ArgErr.make(f"Instance method {self.qname()} requires a receiver")
        return self._func(receiver, *args)

    def arityStr(self):
        if self._maxArgs == _UNBOUNDED:
            return f"{self._minArgs}+"
        if self._minArgs == self._maxArgs:
            return str(self._minArgs)
        return f"{self._minArgs}..{self._maxArgs}"

    def toStr(self):
        return f"{self.qname()}/{self.arityStr()}"
