"""Domain models and vocabularies.

Why:
- Pure, strict data structures (Pydantic v2) and closed FHIR value sets.
- The domain knows nothing about HTTP, the CLI or SDKs: only upload concepts.
"""
