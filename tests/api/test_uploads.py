import asyncio
import io
import pytest
from starlette.datastructures import Headers, UploadFile
from starlette.requests import Request

from dashlight.api.dependencies.uploads import accept_upload, read_analysis_input, AcceptedUpload, AnalysisInput
from dashlight.pipeline.errors import DeclaredTypeRejected, FileTooLarge


def _upload(data: bytes, filename="dash.png", content_type="image/png") -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else Headers({})
    return UploadFile(file=io.BytesIO(data), filename=filename, headers=headers)


def _accept(file, max_bytes=1024):
    return asyncio.run(accept_upload(file, max_bytes))


class TestAcceptUpload:

    def test_absent_file(self):
        assert _accept(None) is None

    def test_empty_field_is_absent(self):
        assert _accept(_upload(b"", filename="", content_type="application/octet-stream")) is None

    def test_accepted_upload(self):
        accepted = _accept(_upload(b"\x89PNG\r\n\x1a\n", filename="dash.png", content_type="image/png"))

        assert accepted == AcceptedUpload(
            data=b"\x89PNG\r\n\x1a\n",
            declared_type="image/png",
            size=8,
            filename="dash.png",
        )

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", None])
    def test_declared_type_must_be_image(self, content_type):
        with pytest.raises(DeclaredTypeRejected) as exc_info:
            _accept(_upload(b"\x89PNG\r\n\x1a\n", content_type=content_type))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid file type."

    def test_size_limit_is_inclusive(self):
        assert _accept(_upload(b"x" * 1024), max_bytes=1024).size == 1024

        with pytest.raises(FileTooLarge) as exc_info:
            _accept(_upload(b"x" * 1025), max_bytes=1024)
        assert exc_info.value.status_code == 413

    def test_declared_type_is_not_trusted_for_content(self):
        # coarse pre-filter only: mislabeled bytes pass here and are sniffed later
        accepted = _accept(_upload(b"%PDF-1.4 not an image", content_type="image/png"))
        assert accepted.declared_type == "image/png"


def _request(headers: dict, body: bytes = b"", receive=None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/analyzeDashboardPic",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }

    async def _receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive or _receive)


def _read(request, max_bytes=1024):
    return asyncio.run(read_analysis_input(request, max_bytes=max_bytes))


class TestReadAnalysisInput:

    def test_json_text(self):
        body = b'{"text": "oil light is on"}'
        request = _request({"content-type": "application/json", "content-length": str(len(body))}, body)

        assert _read(request) == AnalysisInput(upload=None, text="oil light is on")

    def test_json_with_charset(self):
        request = _request({"content-type": "application/json; charset=utf-8"}, b'{"text": "hi"}')
        assert _read(request).text == "hi"

    def test_malformed_json_has_no_text(self):
        request = _request({"content-type": "application/json"}, b"{nope")
        assert _read(request) == AnalysisInput(upload=None, text=None)

    def test_urlencoded_image_string_is_ignored(self):
        request = _request({"content-type": "application/x-www-form-urlencoded"}, b"image=notafile&text=hello")
        assert _read(request) == AnalysisInput(upload=None, text="hello")

    def test_content_length_over_limit_rejected_before_reading(self):
        headers = {"content-type": "multipart/form-data; boundary=x", "content-length": str(1024 * 1024)}

        async def receive():
            raise AssertionError("body must not be read")

        request = _request(headers, receive=receive)

        with pytest.raises(FileTooLarge) as exc_info:
            _read(request, max_bytes=1024)
        assert exc_info.value.message == "File too large."
