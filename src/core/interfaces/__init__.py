"""Core interfaces/abstractions.

Why:
- Contracts (Protocol) that concrete adapters implement.
- Dependency inversion: the core depends on abstractions, never on httpx.
"""
