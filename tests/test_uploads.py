"""프로필 사진 업로드 API 테스트.

Profile picture upload tests. The S3 client is replaced with an in-memory
fake so no MinIO instance is needed.
"""

from io import BytesIO

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.avatar_service import MAX_AVATAR_SIZE
from app.services.storage_service import sanitize_extension, sanitize_folder, storage_service
from tests.conftest import auth_header

URL = "/api/v1/app/upload/profile-picture"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


class FakeS3:
    """필요한 S3 호출만 흉내 내는 메모리 저장소."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.buckets: set[str] = set()

    def head_bucket(self, Bucket):
        if Bucket not in self.buckets:
            raise ClientError({"Error": {"Code": "404"}}, "HeadBucket")

    def create_bucket(self, Bucket):
        self.buckets.add(Bucket)

    def put_object(self, Bucket, Key, Body, ContentType, ContentLength):
        self.objects[Key] = (Body, ContentType)

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)

    def get_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
        return {"Body": BytesIO(self.objects[Key][0])}

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"http://minio.test/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture
def s3(monkeypatch: pytest.MonkeyPatch) -> FakeS3:
    fake = FakeS3()
    monkeypatch.setattr(storage_service, "_client", fake)
    return fake


def _file(content: bytes, name: str = "avatar.png", content_type: str = "image/png"):
    return {"file": (name, content, content_type)}


class TestUpload:
    """업로드 테스트."""

    async def test_upload_png(self, client: AsyncClient, s3: FakeS3, member_user: User, member_token):
        res = await client.post(URL, files=_file(PNG_BYTES), headers=auth_header(member_token))
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Profile picture uploaded successfully"
        assert data["objectName"].startswith("profile-pictures/")
        assert data["objectName"].endswith(".png")
        assert data["url"].startswith("http://minio.test/")
        assert member_user.avatar_path == data["objectName"]
        assert s3.objects[data["objectName"]] == (PNG_BYTES, "image/png")

    async def test_replaces_previous_picture(self, client: AsyncClient, s3: FakeS3, member_user: User, member_token):
        first = (await client.post(URL, files=_file(PNG_BYTES), headers=auth_header(member_token))).json()
        second = (
            await client.post(
                URL, files=_file(JPEG_BYTES, "foto.JPG", "image/jpeg"), headers=auth_header(member_token)
            )
        ).json()
        assert first["objectName"] not in s3.objects
        assert second["objectName"].endswith(".jpg")
        assert list(s3.objects) == [second["objectName"]]

    async def test_unsupported_type(self, client: AsyncClient, s3: FakeS3, member_token):
        res = await client.post(URL, files=_file(b"GIF89a....", "a.gif", "image/gif"), headers=auth_header(member_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid file type. Only JPEG, PNG, and WebP images are allowed"

    async def test_content_mismatch(self, client: AsyncClient, s3: FakeS3, member_token):
        res = await client.post(URL, files=_file(JPEG_BYTES, "a.png", "image/png"), headers=auth_header(member_token))
        assert res.status_code == 400
        assert "does not match declared type" in res.json()["detail"]
        assert s3.objects == {}

    async def test_not_an_image(self, client: AsyncClient, s3: FakeS3, member_token):
        res = await client.post(URL, files=_file(b"<html></html>"), headers=auth_header(member_token))
        assert res.status_code == 400

    async def test_empty_file(self, client: AsyncClient, s3: FakeS3, member_token):
        res = await client.post(URL, files=_file(b""), headers=auth_header(member_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "File is empty or null"

    async def test_oversized_file(self, client: AsyncClient, s3: FakeS3, member_token):
        data = PNG_BYTES + b"\x00" * MAX_AVATAR_SIZE
        res = await client.post(URL, files=_file(data), headers=auth_header(member_token))
        assert res.status_code == 400
        assert res.json()["detail"] == "File size exceeds maximum allowed size of 5MB"
        assert s3.objects == {}


class TestDownload:
    """조회 테스트."""

    async def test_get_picture(self, client: AsyncClient, s3: FakeS3, member_user: User, member_token, admin_token):
        await client.post(URL, files=_file(PNG_BYTES), headers=auth_header(member_token))

        res = await client.get(f"{URL}/{member_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.content == PNG_BYTES
        assert res.headers["content-type"] == "image/png"
        assert res.headers["cache-control"] == "max-age=3600"

    async def test_no_picture(self, client: AsyncClient, s3: FakeS3, member_user: User, member_token):
        res = await client.get(f"{URL}/{member_user.id}", headers=auth_header(member_token))
        assert res.status_code == 404

    async def test_missing_object_clears_path(
        self, client: AsyncClient, db: AsyncSession, s3: FakeS3, member_user: User, member_token
    ):
        member_user.avatar_path = "profile-pictures/verschwunden.png"
        await db.flush()

        res = await client.get(f"{URL}/{member_user.id}", headers=auth_header(member_token))
        assert res.status_code == 404
        assert member_user.avatar_path is None


class TestSanitize:
    """객체 이름 정리 테스트."""

    def test_extension(self):
        assert sanitize_extension(".PNG") == ".png"
        assert sanitize_extension("./../x.jpg") == "...x.jpg"
        assert sanitize_extension(".p n<g>") == ".png"
        assert sanitize_extension(".abcdefghijklmnop") == ".abcdefghi"
        assert sanitize_extension(None) == ""

    def test_folder(self):
        assert sanitize_folder("../../etc") == "etc"
        assert sanitize_folder("/avatars/") == "avatars"
        assert sanitize_folder("   ") == "uploads"
        assert sanitize_folder("../") == "uploads"
        assert sanitize_folder("a" * 60) == "a" * 50


class TestEnsureBucket:
    """버킷 생성 테스트."""

    def test_creates_missing_bucket(self, s3: FakeS3):
        assert storage_service.ensure_bucket() is True
        assert storage_service.ensure_bucket() is False
