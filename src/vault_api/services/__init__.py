"""
Vault API services.

Ingestion writes uploads into the storage directory; the catalog lists what is there.
"""

from .ingestion import IngestionService
from .catalog import CatalogService

__all__ = [
    'IngestionService',
    'CatalogService',
]
