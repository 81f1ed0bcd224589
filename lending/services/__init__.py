# lending/services/__init__.py
from .lending import LendingService
from .inventory import InventoryService, CoverUpload, reconcile_quantity
from .catalog import CatalogService, TitlePage

__all__ = [
    'LendingService',
    'InventoryService',
    'CoverUpload',
    'reconcile_quantity',
    'CatalogService',
    'TitlePage'
]
