# lawhelper/services/s3_service.py

import uuid
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import boto3
from botocore.exceptions import ClientError

from lawhelper.core.config import settings
from lawhelper.core.logger import logger


class S3Service:
    """
    Archive of uploaded source documents in S3. Only used when
    UPLOAD_ARCHIVE_ENABLED is set.
    """

    def __init__(self, client: Any = None, bucket: Optional[str] = None):
        self.s3_client = client if client is not None else boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None
        )
        self.bucket = bucket or settings.S3_BUCKET_NAME

    @staticmethod
    def build_key(user_id: UUID, filename: str) -> str:
        """uploads/<user>/<yyyy>/<mm>/<random>-<filename>"""
        safe_name = "".join(c if c.isalnum() or c in "-_." else "_" for c in (filename or "document"))
        now = datetime.utcnow()
        return f"uploads/{user_id}/{now:%Y}/{now:%m}/{uuid.uuid4().hex[:12]}-{safe_name}"

    def upload_bytes(self, s3_key: str, data: bytes, content_type: str) -> str:
        """
        Store ``data`` under ``s3_key`` with server-side encryption.
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket,
                Key=s3_key,
                Body=data,
                ContentType=content_type,
                ServerSideEncryption='AES256'
            )
            logger.info(f"Archived upload to s3://{self.bucket}/{s3_key} ({len(data)} bytes)")
            return s3_key

        except ClientError as e:
            logger.error(f"Failed to archive upload {s3_key}: {str(e)}")
            raise

    def archive_upload(self, user_id: UUID, filename: str, data: bytes, content_type: str) -> Optional[str]:
        """Archive an uploaded document when archiving is enabled; returns the key or None."""
        if not settings.UPLOAD_ARCHIVE_ENABLED:
            return None
        return self.upload_bytes(self.build_key(user_id, filename), data, content_type)


s3_service = S3Service()
