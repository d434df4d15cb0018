"""Bidirectional code <-> enum mapping for closed FHIR vocabularies.

Every value set the tool understands (conformance expectations, FHIR
versions, ...) is a fixed list of wire codes. `EnumFactory` holds that list
as an ordered table and looks members up in both directions:

- `decode` is the only way to turn external input into a member and rejects
  anything outside the table (no default member).
- `encode` never fails: a member missing from the table maps to
  `UNKNOWN_CODE` so that adding members to an enum cannot break existing
  encoders.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, Iterable, TypeVar

from core.domain.errors import UnrecognizedCodeError

E = TypeVar("E", bound=Enum)

UNKNOWN_CODE = "?"


class EnumFactory(Generic[E]):
    """Table-driven `decode`/`encode` pair over one enumeration."""

    def __init__(self, vocabulary: str, table: Iterable[tuple[str, E]]) -> None:
        self.vocabulary = vocabulary
        self._by_code: dict[str, E] = {}
        self._by_member: dict[E, str] = {}
        for code, member in table:
            if not code:
                raise ValueError(f"{vocabulary}: empty code for {member!r}")
            if code in self._by_code:
                raise ValueError(f"{vocabulary}: duplicate code '{code}'")
            if member in self._by_member:
                raise ValueError(f"{vocabulary}: duplicate member {member!r}")
            self._by_code[code] = member
            self._by_member[member] = code

    @classmethod
    def from_enum(cls, enum_cls: type[E], vocabulary: str | None = None) -> "EnumFactory[E]":
        """Build a factory whose codes are the members' own values."""

        return cls(vocabulary or enum_cls.__name__, ((str(m.value), m) for m in enum_cls))

    def decode(self, code: str | None) -> E:
        if code is None or code == "":
            raise UnrecognizedCodeError(code, self.vocabulary)
        try:
            return self._by_code[code]
        except KeyError:
            raise UnrecognizedCodeError(code, self.vocabulary) from None

    def encode(self, member: E) -> str:
        return self._by_member.get(member, UNKNOWN_CODE)

    def codes(self) -> list[str]:
        return list(self._by_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code in self._by_code
