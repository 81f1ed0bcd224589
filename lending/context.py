# lending/context.py
from dataclasses import dataclass
from typing import Optional

from lending.config import Settings, get_settings
from lending.sa.database import Database
from lending.services import CatalogService, InventoryService, LendingService
from lending.utils.covers import BlobStore, LocalBlobStore


@dataclass
class LendingContext:
    """The services of one deployment, wired to one database"""
    settings: Settings
    database: Database
    lending: LendingService
    inventory: InventoryService
    catalog: CatalogService

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        database: Optional[Database] = None,
        blob_store: Optional[BlobStore] = None
    ) -> "LendingContext":
        settings = settings or get_settings()
        database = database or Database(settings=settings)
        blob_store = blob_store or LocalBlobStore(settings.cover_storage_dir, settings.cover_url_prefix)

        return cls(
            settings=settings,
            database=database,
            lending=LendingService(database),
            inventory=InventoryService(
                database,
                blob_store=blob_store,
                allowed_extensions=settings.cover_extensions,
                max_cover_bytes=settings.cover_max_bytes
            ),
            catalog=CatalogService.from_settings(database, settings)
        )
