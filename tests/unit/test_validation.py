import base64
import re

import pytest

from docthumbs.documents.exceptions import DocumentValidationError
from docthumbs.documents.models import DocumentType
from docthumbs.documents.paths import document_file_key, thumbnail_key
from docthumbs.documents.validation import (
    decode_thumbnail_payload,
    document_type_for,
    normalize_mime_type,
    sanitize_name,
    sanitize_tags,
    validate_upload,
)


class TestSanitizeName:
    def test_strips_forbidden_characters(self) -> None:
        assert sanitize_name('re<port>:"2024"/final?.pdf') == "report2024final.pdf"

    def test_collapses_whitespace(self) -> None:
        assert sanitize_name("  my \t\n  notes .txt ") == "my notes .txt"

    def test_truncates_to_255(self) -> None:
        assert len(sanitize_name("a" * 400)) == 255

    def test_rejects_empty_result(self) -> None:
        with pytest.raises(DocumentValidationError, match="must not be empty"):
            sanitize_name(' /\\:*?"<>| ')


class TestSanitizeTags:
    def test_trims_and_deduplicates(self) -> None:
        assert sanitize_tags([" work ", "work", "", "  ", "home"]) == frozenset({"work", "home"})

    def test_removes_control_characters(self) -> None:
        assert sanitize_tags(["to\x07do"]) == frozenset({"todo"})

    def test_limits_length_and_count(self) -> None:
        tags = sanitize_tags(["x" * 80] + [f"tag{i}" for i in range(30)])

        assert len(tags) == 20
        assert "x" * 50 in tags


class TestMimeAndType:
    def test_blank_mime_defaults_to_octet_stream(self) -> None:
        assert normalize_mime_type(None) == "application/octet-stream"
        assert normalize_mime_type("  ") == "application/octet-stream"

    def test_mime_is_lowercased(self) -> None:
        assert normalize_mime_type("Image/PNG") == "image/png"

    @pytest.mark.parametrize(
        ("name", "mime", "expected"),
        [
            ("photo.jpg", "image/jpeg", DocumentType.IMAGE),
            ("scan.pdf", "application/pdf", DocumentType.PDF),
            ("scan.pdf", "application/octet-stream", DocumentType.PDF),
            ("notes.txt", "text/plain", DocumentType.DOC),
            ("letter.docx", "application/octet-stream", DocumentType.DOC),
            ("archive.zip", "application/zip", DocumentType.OTHER),
        ],
    )
    def test_document_type(self, name: str, mime: str, expected: DocumentType) -> None:
        assert document_type_for(name, mime) == expected


class TestValidateUpload:
    def test_accepts_matching_size(self) -> None:
        validate_upload(b"abc", 3, max_bytes=10)

    def test_rejects_empty(self) -> None:
        with pytest.raises(DocumentValidationError, match="empty"):
            validate_upload(b"", None, max_bytes=10)

    def test_rejects_oversized(self) -> None:
        with pytest.raises(DocumentValidationError, match="exceeds"):
            validate_upload(b"x" * 11, None, max_bytes=10)

    def test_rejects_size_mismatch(self) -> None:
        with pytest.raises(DocumentValidationError, match="does not match"):
            validate_upload(b"abc", 5, max_bytes=10)


class TestDecodeThumbnailPayload:
    def test_passes_bytes_through(self) -> None:
        assert decode_thumbnail_payload(b"\x89PNG") == b"\x89PNG"

    def test_decodes_data_url(self) -> None:
        url = "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()
        assert decode_thumbnail_payload(url) == b"\x89PNG"

    def test_rejects_non_image_data_url(self) -> None:
        with pytest.raises(DocumentValidationError, match="data URL"):
            decode_thumbnail_payload("data:text/plain;base64,aGVsbG8=")

    def test_rejects_bad_base64(self) -> None:
        with pytest.raises(DocumentValidationError, match="Invalid base64"):
            decode_thumbnail_payload("data:image/png;base64,@@@@")


class TestPaths:
    def test_document_key_keeps_safe_extension(self) -> None:
        key = document_file_key(7, "Report.PDF")
        assert re.fullmatch(r"users/7/documents/[0-9a-f]{32}\.pdf", key)

    def test_document_key_drops_odd_extension(self) -> None:
        key = document_file_key(7, "weird.ex t")
        assert re.fullmatch(r"users/7/documents/[0-9a-f]{32}", key)

    def test_thumbnail_keys_are_unique(self) -> None:
        assert thumbnail_key(7, "doc") != thumbnail_key(7, "doc")

    def test_high_quality_thumbnail_key(self) -> None:
        key = thumbnail_key(7, "doc", high_quality=True)
        assert re.fullmatch(r"users/7/thumbnails/doc-[0-9a-f]{32}-hq\.png", key)
