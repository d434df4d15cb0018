"""Adapters: concrete HTTP/FHIR and export implementations."""
