from .pipeline import SyncPipeline
from .worker_pool import UploadWorker, UploadWorkerPool

__all__ = ["SyncPipeline", "UploadWorker", "UploadWorkerPool"]
