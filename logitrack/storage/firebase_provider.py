# logitrack/storage/firebase_provider.py

from firebase_admin import storage

from logitrack.storage.provider import StorageProvider
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


class FirebaseStorageProvider(StorageProvider):
    def __init__(self, bucket_name: str, app=None):
        self.bucket = storage.bucket(bucket_name, app=app)

    def upload(self, data, path, content_type="application/octet-stream"):
        blob = self.bucket.blob(path)
        blob.upload_from_string(data, content_type=content_type)
        blob.make_public()
        logger.info(f"[STORAGE] ✅ Uploaded to {self.bucket.name}/{path}")
        return blob.public_url
