## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from collections import ChainMap

from .errors import JawaNameError


class Environment:
    """Chained lexical scope.  Reads walk up the parent chain, writes always go to the local table,
    so assigning a name from a nested scope shadows the outer binding instead of mutating it.
    """

    def __init__(self, parent: "Environment | None" = None, bindings: dict | None = None):
        self.parent = parent
        self.bindings: dict = dict(bindings or {})
        # Parent tables are shared by reference; later writes to them stay visible here.
        self._scope = ChainMap(self.bindings, *(parent._scope.maps if parent is not None else ()))

    def get(self, name: str):
        try:
            return self._scope[name]
        except KeyError:
            raise JawaNameError(f"Undefined variable `{name}`.", jawa_token=name) from None

    def set(self, name: str, value) -> None:
        self.bindings[name] = value

    def keys(self) -> list[str]:
        """Every reachable name, innermost scope first, each listed once."""
        return list(dict.fromkeys(k for m in self._scope.maps for k in m))

    def child(self) -> "Environment":
        return Environment(parent=self)

    @property
    def root(self) -> "Environment":
        env = self
        while env.parent is not None:
            env = env.parent
        return env

    def __contains__(self, name: str) -> bool:
        return name in self._scope

    def __repr__(self):
        return f"<Environment {sorted(self.bindings)} parent={'yes' if self.parent else 'no'}>"
