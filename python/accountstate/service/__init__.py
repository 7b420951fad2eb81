"""
Services.

This module implements:
- MetadataPersister: Timer-driven metadata persist/restore job
"""

from .metadata_persister import MetadataPersister

__all__ = [
    "MetadataPersister",
]
