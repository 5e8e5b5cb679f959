"""이미지 매직 바이트 검증 테스트."""

from app.utils.file_validator import detect_image_type, validate_image_content

JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF"
PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
WEBP = b"RIFF\x24\x00\x00\x00WEBPVP8 "


class TestDetectImageType:
    def test_known_signatures(self):
        assert detect_image_type(JPEG) == "image/jpeg"
        assert detect_image_type(PNG) == "image/png"
        assert detect_image_type(WEBP) == "image/webp"

    def test_riff_without_webp_marker(self):
        assert detect_image_type(b"RIFF\x24\x00\x00\x00WAVEfmt ") is None

    def test_unknown(self):
        assert detect_image_type(b"GIF89a") is None


class TestValidateImageContent:
    def test_valid_with_declared_type(self):
        result = validate_image_content(PNG, "image/png")
        assert result.is_valid
        assert result.message == "Valid PNG file"

    def test_jpg_alias(self):
        assert validate_image_content(JPEG, "image/jpg").is_valid

    def test_mismatch(self):
        result = validate_image_content(PNG, "image/jpeg")
        assert not result.is_valid
        assert result.detected_type == "image/png"
        assert result.message == "File content (image/png) does not match declared type (image/jpeg)"

    def test_empty(self):
        assert validate_image_content(b"").message == "File is empty or null"
        assert not validate_image_content(None).is_valid

    def test_too_small(self):
        assert validate_image_content(b"\xff\xd8").message == "File is too small to be a valid image"

    def test_not_an_image(self):
        result = validate_image_content(b"%PDF-1.7 ...")
        assert not result.is_valid
        assert "does not match any supported image format" in result.message
