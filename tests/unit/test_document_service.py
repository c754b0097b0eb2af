import base64

import pytest

from manpoweradmin.records.submission_schema import ManpowerDocument
from manpoweradmin.services.document_service import DocumentError, classify_document, prepare_download

HELLO = base64.b64encode(b"hello, reviewer").decode("ascii")


def _doc(file_type, file_name="file.bin", data=HELLO) -> ManpowerDocument:
    return ManpowerDocument.model_validate({"fileName": file_name, "fileType": file_type, "base64Data": data})


def test_classifier_modes() -> None:
    assert classify_document(_doc("image/png", "scan.png")).mode == "image"
    assert classify_document(_doc("IMAGE/JPEG", "scan.jpg")).mode == "image"
    pdf = classify_document(_doc("application/pdf", "passport.pdf"))
    assert pdf.mode == "pdf"
    assert pdf.data_url.startswith("data:application/pdf;base64,")
    assert classify_document(_doc("application/octet-stream")).mode == "download"
    assert classify_document(_doc("")).mode == "download"


def test_text_mode_decodes_payload() -> None:
    preview = classify_document(_doc("text/plain", "notes.txt"))
    assert preview.mode == "text"
    assert preview.text == "hello, reviewer"


def test_text_extension_without_text_mime() -> None:
    assert classify_document(_doc("application/octet-stream", "export.csv")).mode == "text"
    assert classify_document(_doc("", "NOTES.TXT")).mode == "text"


def test_undecodable_text_falls_through_to_download() -> None:
    assert classify_document(_doc("text/plain", "notes.txt", data="###not base64###")).mode == "download"


def test_missing_document_or_payload_is_reported() -> None:
    with pytest.raises(DocumentError, match="No document data provided"):
        classify_document(None)
    with pytest.raises(DocumentError, match="No document content available"):
        classify_document(_doc("image/png", data=None))
    with pytest.raises(DocumentError):
        prepare_download(_doc("application/pdf", data=""))


def test_download_decodes_bytes_with_declared_type() -> None:
    payload = prepare_download(_doc("application/pdf", "passport.pdf"))
    assert payload.data == b"hello, reviewer"
    assert payload.mime_type == "application/pdf"
    assert payload.file_name == "passport.pdf"


def test_download_defaults_and_errors() -> None:
    doc = ManpowerDocument.model_validate({"fileType": "image/png", "base64Data": HELLO})
    assert prepare_download(doc).file_name == "document"
    with pytest.raises(DocumentError, match="not valid base64"):
        prepare_download(_doc("image/png", data="***"))


def test_browser_data_url_payloads_are_accepted() -> None:
    # the intake form stores FileReader.readAsDataURL output as-is
    url = "data:text/plain;base64," + HELLO
    preview = classify_document(_doc("text/plain", "notes.txt", data=url))
    assert preview.mode == "text"
    assert preview.text == "hello, reviewer"

    pdf = classify_document(_doc("application/pdf", "passport.pdf", data="data:application/pdf;base64," + HELLO))
    assert pdf.data_url == "data:application/pdf;base64," + HELLO

    payload = prepare_download(_doc("", "scan", data="data:image/png;base64," + HELLO))
    assert payload.data == b"hello, reviewer"
    assert payload.mime_type == "image/png"


def test_data_url_with_broken_body_is_still_rejected() -> None:
    with pytest.raises(DocumentError, match="not valid base64"):
        prepare_download(_doc("image/png", data="data:image/png;base64,***"))
