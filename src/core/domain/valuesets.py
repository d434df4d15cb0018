"""Closed FHIR vocabularies used by termload.

Each vocabulary is a `str` Enum plus the `EnumFactory` that maps its wire
codes. Keeping them in the domain layer lets the CLI, the config layer and
the services share one source of truth for the accepted codes.
"""

from __future__ import annotations

from enum import Enum

from core.domain.enum_factory import EnumFactory


class ConformanceExpectation(str, Enum):
    """Normative strength of a conformance statement."""

    SHALL = "SHALL"
    SHOULD = "SHOULD"
    MAY = "MAY"
    SHOULD_NOT = "SHOULD-NOT"

    def definition(self) -> str:
        return _CONFORMANCE_DEFINITIONS[self]


_CONFORMANCE_DEFINITIONS = {
    ConformanceExpectation.SHALL: "Support for the specified capability is required to be considered conformant.",
    ConformanceExpectation.SHOULD: "Support for the specified capability is strongly encouraged and failure to support it should only occur after careful consideration.",
    ConformanceExpectation.MAY: "Support for the specified capability is not necessary to be considered conformant and the requirement should be considered strictly optional.",
    ConformanceExpectation.SHOULD_NOT: "Support for the specified capability is strongly discouraged and should occur only after careful consideration.",
}


class FhirVersion(str, Enum):
    """FHIR release a client and server agree on before exchanging resources."""

    DSTU2 = "dstu2"
    DSTU2_1 = "dstu2_1"
    DSTU3 = "dstu3"
    R4 = "r4"

    @classmethod
    def default(cls) -> "FhirVersion":
        """Version the upload operation is encoded for."""

        return cls.DSTU3

    def label(self) -> str:
        """Human readable label for messages and logging."""

        return self.name


CONFORMANCE_EXPECTATION = EnumFactory("ConformanceExpectation", [
    ("SHALL", ConformanceExpectation.SHALL),
    ("SHOULD", ConformanceExpectation.SHOULD),
    ("MAY", ConformanceExpectation.MAY),
    ("SHOULD-NOT", ConformanceExpectation.SHOULD_NOT),
])

FHIR_VERSION = EnumFactory.from_enum(FhirVersion)
