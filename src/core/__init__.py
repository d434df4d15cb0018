"""Core: domain models, configuration and services."""
