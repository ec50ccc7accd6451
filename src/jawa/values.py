## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Runtime values.  Every variant supports the two capabilities `get_member` and `invoke`, or
# rejects them with a `JawaCapabilityError`; nothing fails silently.
#

import math
from typing import Any, Callable, ClassVar
from dataclasses import dataclass

from .errors import JawaCapabilityError, JawaArityError, JawaNameError
from .environment import Environment


CLASS_MEMBER = '$class'           # reserved instance member that yields the originating class


def format_number(x: float) -> str:
    if math.isnan(x): return 'NaN'
    if math.isinf(x): return 'Infinity' if x > 0 else '-Infinity'
    if x.is_integer() and abs(x) < 1e21: return str(int(x))
    return repr(x)


class Value:
    kind: ClassVar[str] = 'value'

    def get_member(self, name: str) -> "Value":
        raise JawaCapabilityError(f"{self.kind.capitalize()} values are not dot accessible (member `{name}`).", jawa_token=name)

    def invoke(self, args: list["Value"]) -> "Value":
        raise JawaCapabilityError(f"{self.kind.capitalize()} values are not callable.")

    def to_text(self) -> str:
        """Textual representation, as used by string concatenation and printing."""
        raise NotImplementedError


@dataclass(frozen=True)
class StringValue(Value):
    value: str
    kind: ClassVar[str] = 'string'

    def to_text(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumberValue(Value):
    value: float
    kind: ClassVar[str] = 'number'

    def __post_init__(self):
        # Doubles only, so `NumberValue(14) == NumberValue(14.0)` and text never shows a Python int.
        object.__setattr__(self, 'value', float(self.value))

    def to_text(self) -> str:
        return format_number(self.value)


class NullValue(Value):
    kind: ClassVar[str] = 'null'
    _singleton = None

    def __new__(cls):
        # Only one instance is ever created, and it's `null` just below.
        if cls._singleton is None:
            cls._singleton = super().__new__(cls)
            return cls._singleton
        raise ValueError("Use the canonical `null` instance for absent values")

    def to_text(self) -> str:
        return 'null'

    def __repr__(self):
        return 'null'

# All checks for absent values must be done by comparing to this.
null = NullValue()


class PackageValue(Value):
    """Named bundle of children, for hierarchical namespaces like `java.util`."""
    kind: ClassVar[str] = 'package'

    def __init__(self, name: str, members: dict[str, Value] | None = None):
        self.name = name
        self.members: dict[str, Value] = dict(members or {})

    def get_member(self, name: str) -> Value:
        if name in self.members:
            return self.members[name]
        raise JawaNameError(f"Package `{self.name}` has no member `{name}`.", jawa_token=name)

    def invoke(self, args):
        raise JawaCapabilityError(f"Package `{self.name}` is not callable.", jawa_token=self.name)

    # Same lookup protocol as `Environment`, so imports can walk either.
    get = get_member

    def keys(self) -> list[str]:
        return list(self.members)

    def to_text(self) -> str:
        return f"package {self.name}"

    def __repr__(self):
        return f"<package {self.name}: {', '.join(self.members)}>"


class ClassValue(Value):
    kind: ClassVar[str] = 'class'

    def __init__(self, name: str, statics: dict[str, Value] | None = None, members: dict[str, Value] | None = None):
        self.name = name
        self.statics: dict[str, Value] = dict(statics or {})
        self.members: dict[str, Value] = dict(members or {})    # instance template, copied on construction

    def get_member(self, name: str) -> Value:
        if name in self.statics:
            return self.statics[name]
        raise JawaNameError(f"Class `{self.name}` has no static member `{name}`.", jawa_token=name)

    def invoke(self, args: list[Value]) -> "InstanceValue":
        return InstanceValue(self.members, class_name=self.name)

    @property
    def has_entry_point(self) -> bool:
        return isinstance(self.statics.get('main'), UserMethodValue)

    def to_text(self) -> str:
        return f"class {self.name}"

    def __repr__(self):
        return f"<class {self.name}>"


class HostClassValue(ClassValue):
    """Class provided by the host, e.g. `java.util.Scanner`."""
    pass


class UserClassValue(ClassValue):
    """Class declared in source; methods close over the environment of the declaration."""

    def __init__(self, declaration, environment: Environment, interpreter):
        super().__init__(declaration.name.text)
        self.declaration = declaration
        self.environment = environment
        for method in declaration.methods:
            value = UserMethodValue(environment, method, interpreter)
            (self.statics if method.is_static else self.members)[method.name.text] = value

    def invoke(self, args: list[Value]) -> "UserInstanceValue":
        return UserInstanceValue(self, self.members)


class InstanceValue(Value):
    kind: ClassVar[str] = 'instance'

    def __init__(self, members: dict[str, Value] | None = None, class_name: str | None = None):
        self.members: dict[str, Value] = dict(members or {})
        self.class_name = class_name

    def get_member(self, name: str) -> Value:
        if name in self.members:
            return self.members[name]
        raise JawaNameError(f"Instance of `{self.class_name or 'Object'}` has no member `{name}`.", jawa_token=name)

    def invoke(self, args):
        raise JawaCapabilityError(f"Instances of `{self.class_name or 'Object'}` are not callable.")

    def to_text(self) -> str:
        return f"{self.class_name or 'Object'}@{id(self):x}"

    def __repr__(self):
        return f"<{self.to_text()}: {', '.join(self.members)}>"


class UserInstanceValue(InstanceValue):
    def __init__(self, cls: UserClassValue, members: dict[str, Value]):
        super().__init__(members, class_name=cls.name)
        self.cls = cls

    def get_member(self, name: str) -> Value:
        if name == CLASS_MEMBER:
            return self.cls
        return super().get_member(name)


class MethodValue(Value):
    kind: ClassVar[str] = 'method'
    variadic: bool = False

    def __init__(self, environment: Environment, name: str, parameters: tuple[str, ...]):
        self.environment = environment
        self.name = name
        self.parameters = tuple(parameters)

    def get_member(self, name: str) -> Value:
        raise JawaCapabilityError(f"Method `{self.name}` is not dot accessible (member `{name}`).", jawa_token=name)

    def invoke(self, args: list[Value]) -> Value:
        if not self.variadic and len(args) != len(self.parameters):
            raise JawaArityError(f"Wrong number of arguments for `{self.name}`. Expected {len(self.parameters)}, got {len(args)}.",
                                 expected=len(self.parameters), given=len(args), jawa_token=self.name)

        frame = self.environment.child()
        for name, arg in zip(self.parameters, args):
            frame.set(name, arg)
        return self._call(frame, list(args))

    def _call(self, frame: Environment, args: list[Value]) -> Value:
        raise NotImplementedError

    def to_text(self) -> str:
        return f"method {self.name}"

    def __repr__(self):
        return f"<method {self.name}({', '.join(self.parameters)})>"


class UserMethodValue(MethodValue):
    def __init__(self, environment: Environment, declaration, interpreter):
        super().__init__(environment, declaration.name.text, tuple(p.name.text for p in declaration.parameters))
        self.declaration = declaration
        self.interpreter = interpreter

    def _call(self, frame: Environment, args: list[Value]) -> Value:
        self.interpreter.execute_body(self.declaration.body, frame)
        return null


class HostMethodValue(MethodValue):
    def __init__(self, environment: Environment, name: str, parameters: tuple[str, ...],
                 implementation: Callable[..., Any], variadic: bool = False):
        super().__init__(environment, name, parameters)
        self.implementation = implementation
        self.variadic = variadic

    def _call(self, frame: Environment, args: list[Value]) -> Value:
        result = self.implementation(*args)
        return null if result is None else result
