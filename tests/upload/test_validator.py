import io
import pytest
from unittest.mock import patch
from PIL import Image

import magic

from dashlight.pipeline.upload import validate_image, sniff_mime_type, ValidatedImage
from dashlight.pipeline.errors import TypeDetectionFailed, UnsupportedMediaType, ErrorKind


def _image_bytes(fmt: str) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', (32, 32), color='red').save(buffer, format=fmt)
    return buffer.getvalue()


PDF_BYTES = (
    b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    b"2 0 obj\n<< /Type /Pages /Kids [] /Count 0 >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
)
TEXT_BYTES = b"This is just a plain text note, renamed to dashboard.png by the client.\n" * 4


class TestSniffMimeType:
    """Content sniffing ignores names and declared types entirely"""

    @pytest.mark.parametrize("fmt,expected", [
        ("PNG", "image/png"),
        ("JPEG", "image/jpeg"),
        ("GIF", "image/gif"),
    ])
    def test_detects_image_formats(self, fmt, expected):
        assert sniff_mime_type(_image_bytes(fmt)) == expected

    def test_detects_pdf(self):
        assert sniff_mime_type(PDF_BYTES) == "application/pdf"

    def test_detects_plain_text_as_non_image(self):
        # libmagic versions differ on the text subtype (text/plain, text/csv, ...)
        sniffed = sniff_mime_type(TEXT_BYTES)
        assert sniffed.startswith("text/")
        assert not sniffed.startswith("image/")

    def test_strips_parameters_and_case(self):
        with patch('dashlight.pipeline.upload.validator.magic.from_buffer', return_value="Image/PNG; charset=binary"):
            assert sniff_mime_type(b"\x89PNG") == "image/png"

    def test_magic_exception_is_detection_failure(self):
        with patch('dashlight.pipeline.upload.validator.magic.from_buffer',
                   side_effect=magic.MagicException("could not find any valid magic files")):
            with pytest.raises(TypeDetectionFailed) as exc_info:
                sniff_mime_type(b"\x00\x01\x02")

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Could not determine file type."

    def test_empty_result_is_detection_failure(self):
        with patch('dashlight.pipeline.upload.validator.magic.from_buffer', return_value=""):
            with pytest.raises(TypeDetectionFailed):
                sniff_mime_type(b"\x00\x01\x02")


class TestValidateImage:

    def test_png_is_accepted(self):
        data = _image_bytes("PNG")
        validated = validate_image(data)

        assert isinstance(validated, ValidatedImage)
        assert validated.mime_type == "image/png"
        assert validated.data == data
        assert validated.size == len(data)

    def test_jpeg_is_accepted_with_sniffed_type(self):
        validated = validate_image(_image_bytes("JPEG"))
        assert validated.mime_type == "image/jpeg"

    def test_pdf_is_rejected(self):
        with pytest.raises(UnsupportedMediaType) as exc_info:
            validate_image(PDF_BYTES)

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_MEDIA_TYPE
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid file type. Only images are allowed."

    def test_text_is_rejected(self):
        with pytest.raises(UnsupportedMediaType):
            validate_image(TEXT_BYTES)

    def test_empty_buffer_is_rejected_without_sniffing(self):
        with patch('dashlight.pipeline.upload.validator.magic.from_buffer') as mock_from_buffer:
            with pytest.raises(UnsupportedMediaType):
                validate_image(b"")
        mock_from_buffer.assert_not_called()

    def test_detection_failure_propagates(self):
        with patch('dashlight.pipeline.upload.validator.magic.from_buffer',
                   side_effect=magic.MagicException("boom")):
            with pytest.raises(TypeDetectionFailed):
                validate_image(_image_bytes("PNG"))

    def test_validated_image_owns_its_bytes(self):
        source = bytearray(_image_bytes("PNG"))
        validated = validate_image(source)
        source[:4] = b"XXXX"

        assert validated.data[:4] == b"\x89PNG"
