"""이미지 파일 내용 검증 — 매직 바이트 검사.

Image content validation by magic bytes.
The declared Content-Type of an upload is client-controlled, so the first
bytes of the payload are checked against the JPEG, PNG and WebP signatures.
"""

from dataclasses import dataclass

JPEG_MAGIC: bytes = b"\xff\xd8\xff"
PNG_MAGIC: bytes = b"\x89PNG\r\n\x1a\n"
WEBP_RIFF: bytes = b"RIFF"
WEBP_MAGIC: bytes = b"WEBP"

# image/jpg는 비표준이지만 브라우저가 보내는 경우가 있음
_CONTENT_TYPE_ALIASES: dict[str, str] = {"image/jpg": "image/jpeg"}


@dataclass(frozen=True)
class FileValidationResult:
    is_valid: bool
    message: str
    detected_type: str | None = None


def detect_image_type(data: bytes) -> str | None:
    """매직 바이트로 이미지 MIME 타입을 판별합니다. (None if unknown)"""
    if data.startswith(JPEG_MAGIC):
        return "image/jpeg"
    if len(data) >= 8 and data.startswith(PNG_MAGIC):
        return "image/png"
    if len(data) >= 12 and data.startswith(WEBP_RIFF) and data[8:12] == WEBP_MAGIC:
        return "image/webp"
    return None


def validate_image_content(data: bytes | None, declared_type: str | None = None) -> FileValidationResult:
    """업로드된 바이트가 지원되는 이미지인지 검증합니다.

    Validate that uploaded bytes are a JPEG, PNG or WebP image and, when a
    content type was declared, that the bytes agree with it.

    Args:
        data: 업로드 파일 내용 (Uploaded file content)
        declared_type: 클라이언트가 보낸 Content-Type (Declared content type, optional)

    Returns:
        FileValidationResult: 검증 결과 (Validation outcome)
    """
    if not data:
        return FileValidationResult(False, "File is empty or null")
    if len(data) < 3:
        return FileValidationResult(False, "File is too small to be a valid image")

    detected: str | None = detect_image_type(data)
    if detected is None:
        return FileValidationResult(
            False,
            "File content does not match any supported image format (JPEG, PNG, WebP). "
            "The file may be corrupted or is not actually an image.",
        )

    if declared_type:
        normalized: str = _CONTENT_TYPE_ALIASES.get(declared_type.lower(), declared_type.lower())
        if normalized != detected:
            return FileValidationResult(
                False,
                f"File content ({detected}) does not match declared type ({declared_type})",
                detected,
            )

    label: str = {"image/jpeg": "JPEG", "image/png": "PNG", "image/webp": "WebP"}[detected]
    return FileValidationResult(True, f"Valid {label} file", detected)
