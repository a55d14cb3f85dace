from .config import StoreConfig
from .errors import *
from .store import Store, StoredFile, StoredUpload, UploadRequest
from .purge import sweep, PurgeResult
