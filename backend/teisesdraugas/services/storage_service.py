# teisesdraugas/services/storage_service.py
"""
Evidence file storage. Keys are per case: uploads/{case_id}/{timestamp_ms}-{name}
"""
import os
import time
from pathlib import Path
from uuid import UUID

import boto3
from botocore.exceptions import ClientError

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.utils.exceptions import UploadFailedError
from teisesdraugas.utils.helpers import safe_filename

KEY_PREFIX = "uploads"


def build_storage_key(case_id: UUID, filename: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"{KEY_PREFIX}/{case_id}/{timestamp}-{safe_filename(filename)}"


class LocalStorage:
    """Writes evidence under a base directory on the local filesystem"""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        return self.base_dir / key

    def save(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write {key}: {str(e)}")
            raise UploadFailedError(str(e)) from e
        logger.info(f"Stored {len(data)} bytes at {key}")
        return key

    def read(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def delete(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            logger.warning(f"Stored file already gone: {key}")
        except OSError as e:
            logger.error(f"Failed to delete {key}: {str(e)}")


class S3Storage:
    """
    Service layer for evidence kept in AWS S3.
    """

    def __init__(self, config: Settings, client=None):
        self.s3_client = client or boto3.client(
            "s3",
            region_name=config.AWS_REGION,
            aws_access_key_id=config.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=config.AWS_SECRET_ACCESS_KEY or None,
        )
        self.bucket = config.S3_BUCKET_NAME

    def save(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ServerSideEncryption="AES256",
            )
        except ClientError as e:
            logger.error(f"Failed to upload {key} to S3: {str(e)}")
            raise UploadFailedError("storage unavailable") from e
        logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
        return key

    def read(self, key: str) -> bytes:
        response = self.s3_client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            logger.error(f"Failed to delete s3://{self.bucket}/{key}: {str(e)}")


def create_storage(config: Settings):
    if config.STORAGE_BACKEND == "s3":
        return S3Storage(config)
    if config.STORAGE_BACKEND == "local":
        return LocalStorage(config.LOCAL_STORAGE_DIR)
    raise ValueError(f"Unknown STORAGE_BACKEND: {config.STORAGE_BACKEND}")
