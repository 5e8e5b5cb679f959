"""스토리지 서비스 — MinIO(S3 호환) 객체 저장.

Storage Service — Object storage on MinIO through the S3 API (boto3).
Object names are built from a sanitized folder and a random UUID, so
client-supplied file names never reach the bucket.
"""

import re
import uuid

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError
from loguru import logger

from app.config import settings

DEFAULT_FOLDER: str = "uploads"
MAX_EXTENSION_LENGTH: int = 10
MAX_FOLDER_LENGTH: int = 50

_MISSING_KEY_CODES: frozenset[str] = frozenset({"NoSuchKey", "404", "NotFound"})
_MISSING_BUCKET_CODES: frozenset[str] = frozenset({"NoSuchBucket", "404", "NotFound"})


def sanitize_extension(extension: str | None) -> str:
    """파일 확장자를 안전한 문자만 남기도록 정리합니다.

    Keep only ``[a-zA-Z0-9.-]`` after dropping path separators, lowercase
    the result and cap it at 10 characters.
    """
    if extension is None or not extension.strip():
        return ""
    cleaned: str = re.sub(r"[/\\]", "", extension)
    cleaned = re.sub(r"[^a-zA-Z0-9.-]", "", cleaned).lower()
    return cleaned[:MAX_EXTENSION_LENGTH]


def sanitize_folder(folder: str | None) -> str:
    """폴더 이름의 경로 조작을 제거합니다. 비면 "uploads".

    Remove path traversal sequences, surrounding slashes and anything
    outside ``[a-zA-Z0-9_-]``; at most 50 characters, "uploads" when empty.
    """
    if folder is None or not folder.strip():
        return DEFAULT_FOLDER
    cleaned: str = folder.replace("..", "")
    cleaned = re.sub(r"^/+|/+$", "", cleaned)
    cleaned = re.sub(r"[^a-zA-Z0-9_-]", "", cleaned)[:MAX_FOLDER_LENGTH]
    return cleaned or DEFAULT_FOLDER


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class StorageService:
    """MinIO 버킷에 대한 업로드/다운로드/삭제 서비스."""

    def __init__(self) -> None:
        self._client = None

    @property
    def bucket(self) -> str:
        return settings.MINIO_BUCKET_NAME

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.MINIO_ENDPOINT,
                region_name=settings.MINIO_REGION,
                aws_access_key_id=settings.MINIO_ACCESS_KEY,
                aws_secret_access_key=settings.MINIO_SECRET_KEY,
                config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        return self._client

    def ensure_bucket(self) -> bool:
        """버킷이 없으면 생성합니다. 생성했으면 True.

        Create the bucket on first start.
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
            return False
        except ClientError as e:
            if _error_code(e) not in _MISSING_BUCKET_CODES:
                raise
        self.client.create_bucket(Bucket=self.bucket)
        logger.info(f"Created storage bucket: {self.bucket}")
        return True

    def upload_file(
        self,
        data: bytes,
        filename: str | None,
        content_type: str,
        folder: str | None = DEFAULT_FOLDER,
    ) -> str:
        """파일을 업로드하고 객체 이름을 반환합니다.

        Upload bytes and return the object name
        ``{sanitized_folder}/{uuid4}{sanitized_extension}``.

        Args:
            data: 파일 내용 (File content)
            filename: 원본 파일명, 확장자만 사용 (Original name, only its extension is kept)
            content_type: MIME 타입 (MIME type stored with the object)
            folder: 대상 폴더 (Target folder)

        Returns:
            str: 객체 이름 (Object name inside the bucket)

        Raises:
            ValueError: 빈 파일 (Empty content)
        """
        if not data:
            raise ValueError("File must not be empty")

        extension: str = ""
        if filename and "." in filename:
            extension = sanitize_extension(filename[filename.rindex("."):])

        object_name: str = f"{sanitize_folder(folder)}/{uuid.uuid4()}{extension}"
        self.client.put_object(
            Bucket=self.bucket,
            Key=object_name,
            Body=data,
            ContentType=content_type,
            ContentLength=len(data),
        )
        logger.info(f"Uploaded object {object_name} ({len(data)} bytes)")
        return object_name

    def get_presigned_url(self, object_name: str) -> str:
        """객체에 대한 presigned GET URL을 생성합니다."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": object_name},
            ExpiresIn=settings.MINIO_PRESIGNED_EXPIRY_SECONDS,
        )

    def delete_file(self, object_name: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=object_name)
        logger.info(f"Deleted object {object_name}")

    def download_file(self, object_name: str) -> bytes:
        """객체 내용을 다운로드합니다.

        Raises:
            FileNotFoundError: 객체가 없을 때 (Object does not exist)
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=object_name)
        except ClientError as e:
            if _error_code(e) in _MISSING_KEY_CODES:
                raise FileNotFoundError(object_name) from e
            raise
        return response["Body"].read()


storage_service: StorageService = StorageService()
