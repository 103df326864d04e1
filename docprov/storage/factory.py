from docprov.config.settings import Settings
from docprov.storage.base import BaseContentBackend, BaseObjectBackend
from docprov.storage.ipfs_backend import IpfsBackend
from docprov.storage.memory_backend import MemoryContentBackend, MemoryObjectBackend
from docprov.storage.s3_backend import S3Backend
from docprov.storage.store import RedundantStore


class StorageFactory:
    """Creates the configured backends and the redundant store over them."""

    PRIMARY_BACKENDS = ("ipfs", "memory")
    SECONDARY_BACKENDS = ("s3", "memory")

    @classmethod
    def create(cls, settings: Settings) -> RedundantStore:
        return RedundantStore(
            primary=cls.create_primary(settings),
            secondary=cls.create_secondary(settings),
            max_workers=settings.storage_max_workers,
            delete_wait_seconds=settings.storage_delete_wait_seconds,
        )

    @classmethod
    def create_primary(cls, settings: Settings) -> BaseContentBackend:
        backend = settings.storage_primary_backend.lower()
        if backend == "ipfs":
            return IpfsBackend(
                api_url=settings.ipfs_api_url,
                timeout_seconds=settings.ipfs_timeout_seconds,
            )
        if backend == "memory":
            return MemoryContentBackend()
        raise ValueError(
            f"Unknown primary storage backend '{backend}'. "
            f"Choose from: {list(cls.PRIMARY_BACKENDS)}"
        )

    @classmethod
    def create_secondary(cls, settings: Settings) -> BaseObjectBackend:
        backend = settings.storage_secondary_backend.lower()
        if backend == "s3":
            return S3Backend(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                timeout_seconds=settings.s3_timeout_seconds,
                endpoint_url=settings.s3_endpoint_url,
                access_key=settings.s3_access_key,
                secret_key=settings.s3_secret_key,
            )
        if backend == "memory":
            return MemoryObjectBackend()
        raise ValueError(
            f"Unknown secondary storage backend '{backend}'. "
            f"Choose from: {list(cls.SECONDARY_BACKENDS)}"
        )
