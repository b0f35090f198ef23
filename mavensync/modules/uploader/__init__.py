"""Local Maven tree to remote repository upload module."""

from .service import SyncPipeline, UploadWorkerPool

__all__ = ["SyncPipeline", "UploadWorkerPool"]
