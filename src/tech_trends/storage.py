"""Avatar object storage: presigned direct-upload URLs on S3."""
import asyncio
import logging
from dataclasses import dataclass

import boto3

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")
UPLOAD_URL_EXPIRES_IN = 300


@dataclass(frozen=True)
class UploadTicket:
    """A presigned PUT URL and the public URL the object will be served from."""

    upload_url: str
    avatar_url: str
    expires_in: int


def create_s3_client(region_name: str):
    return boto3.client("s3", region_name=region_name)


def extension_for(content_type: str) -> str:
    """File extension for an allowed image content type ("image/jpeg" -> "jpg")."""
    subtype = content_type.split("/", 1)[1]
    return "jpg" if subtype == "jpeg" else subtype


def avatar_key(subject_id: str, content_type: str) -> str:
    """Deterministic object key: one avatar per user, per extension."""
    return f"avatars/{subject_id}.{extension_for(content_type)}"


class AvatarStorage:
    """Issues time-limited upload credentials; never touches the image bytes."""

    def __init__(self, s3_client, bucket: str, expires_in: int = UPLOAD_URL_EXPIRES_IN) -> None:
        self._s3 = s3_client
        self._bucket = bucket
        self._expires_in = expires_in

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"

    async def create_upload(self, subject_id: str, content_type: str) -> UploadTicket:
        """Presign a PUT for the user's avatar object.

        Raises:
            ValueError: ``content_type`` is not an allowed image type.
        """
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ValueError(f"Unsupported content type: {content_type}")
        key = avatar_key(subject_id, content_type)
        upload_url = await asyncio.to_thread(
            self._s3.generate_presigned_url,
            "put_object",
            Params={"Bucket": self._bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=self._expires_in,
        )
        logger.info("Issued avatar upload URL for %s (%s)", subject_id, key)
        return UploadTicket(
            upload_url=upload_url,
            avatar_url=self.public_url(key),
            expires_in=self._expires_in,
        )
