from poolbuilder.db.blob_store import BlobStore, SqlBlobStore, StoredBlob, WriteConflictError
from poolbuilder.db.database import get_session, init_db

__all__ = [
    "BlobStore",
    "SqlBlobStore",
    "StoredBlob",
    "WriteConflictError",
    "get_session",
    "init_db",
]
