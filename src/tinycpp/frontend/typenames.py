"""
Tentative Type Names
====================

tinycpp shares the unfortunate problem of the C and C++ grammars that makes
it impossible to tell a declaration from an expression by the grammar alone.
Take for instance

    foo * a;

Is this a declaration of variable ``a`` with type ``foo *``, or the
multiplication of two variables ``foo`` and ``a``? The parser resolves it by
tracking every name that is currently a type, so that an identifier can be
classified as either a type or a variable.

Because the parser backtracks, registrations made during a failed attempt
must be undone together with the token cursor. The environment therefore
keeps an append-only history of registrations that can be truncated back to
any earlier length. The same name may be registered several times (forward
declared structs); it remains a type as long as any registration survives.
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)


BUILTIN_TYPES: tuple[str, ...] = ("void", "char", "int", "double")


class TypeEnvironment:
    """
    Set of names currently classified as types, with exact rollback.

    Builtin types are permanent. Everything else is registered through
    add_type_name() and can be unrolled with rollback_to().

    Example:
        types = TypeEnvironment()
        mark = types.mark()
        types.add_type_name("Point")
        types.is_type_name("Point")    # True
        types.rollback_to(mark)
        types.is_type_name("Point")    # False
    """

    def __init__(self, builtins: Iterable[str] = BUILTIN_TYPES):
        self._builtins: frozenset[str] = frozenset(builtins)
        self._history: list[str] = []
        # Number of surviving registrations per name; a name is a type
        # exactly while its count is present.
        self._counts: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._history)

    def __contains__(self, name: str) -> bool:
        return self.is_type_name(name)

    @property
    def builtins(self) -> frozenset[str]:
        return self._builtins

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    @property
    def known_types(self) -> frozenset[str]:
        """Every name currently classified as a type."""
        return self._builtins.union(self._counts)

    def is_type_name(self, name: str) -> bool:
        """Return True if the name is a builtin or a live registration."""
        return name in self._builtins or name in self._counts

    def add_type_name(self, name: str) -> None:
        """
        Register a tentative type name.

        The same name can be added multiple times for forward declared
        structs and classes.
        """
        self._history.append(name)
        self._counts[name] = self._counts.get(name, 0) + 1

    def mark(self) -> int:
        """Current history length, to be passed to rollback_to()."""
        return len(self._history)

    def rollback_to(self, size: int) -> None:
        """
        Truncate the history to ``size`` registrations.

        A name stops being a type only when its last remaining
        registration is removed.
        """
        if size < 0 or size > len(self._history):
            raise ValueError(f"cannot roll back to {size}, history has {len(self._history)} entries")

        while len(self._history) > size:
            name = self._history.pop()
            remaining = self._counts[name] - 1
            if remaining:
                self._counts[name] = remaining
            else:
                del self._counts[name]
                logger.debug(f"Type name '{name}' unregistered")
