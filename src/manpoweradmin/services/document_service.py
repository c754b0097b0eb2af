from __future__ import annotations

import base64
import binascii
from typing import Literal, Optional, Tuple

from pydantic import BaseModel

from manpoweradmin.records.submission_schema import ManpowerDocument

PreviewMode = Literal["image", "pdf", "text", "download"]

TEXT_EXTENSIONS = (".txt", ".csv")
DEFAULT_FILE_NAME = "document"


class DocumentError(Exception):
    """Attachment is missing or its payload cannot be used; shown to the reviewer."""


class DocumentPreview(BaseModel):
    """
    Description: Render decision for one attached document.
    Layer: L2
    Input: ManpowerDocument
    Output: mode + what the UI needs to render that mode
    """

    mode: PreviewMode
    file_name: str
    mime_type: str
    base64_data: str
    text: Optional[str] = None

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


class DownloadPayload(BaseModel):
    file_name: str
    mime_type: str
    data: bytes


def _require_payload(document: Optional[ManpowerDocument]) -> ManpowerDocument:
    if document is None:
        raise DocumentError("No document data provided")
    if not document.base64_data:
        raise DocumentError("No document content available")
    return document


def split_data_url(payload: str) -> Tuple[Optional[str], str]:
    """Split a browser `data:<mime>;base64,<data>` payload into (mime, data); bare base64 passes through."""
    if payload.startswith("data:") and ";base64," in payload:
        header, _, data = payload.partition(",")
        return header[len("data:"):].split(";", 1)[0] or None, data
    return None, payload


def decode_payload(base64_data: str) -> bytes:
    _, data = split_data_url(base64_data)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DocumentError(f"Document content is not valid base64: {e}") from e


def classify_document(document: Optional[ManpowerDocument]) -> DocumentPreview:
    """
    Description: Pick the preview mode from MIME type, file name and decodability.
    Layer: L2
    Input: attached document (must carry a base64 payload, bare or as a data URL)
    Output: DocumentPreview in one of image | pdf | text | download modes
    """
    doc = _require_payload(document)
    url_mime, data = split_data_url(doc.base64_data or "")
    mime = (doc.file_type or url_mime or "").lower()
    name = doc.file_name or "Unknown file"
    preview = DocumentPreview(mode="download", file_name=name, mime_type=mime, base64_data=data)

    if mime.startswith("image/"):
        return preview.model_copy(update={"mode": "image"})
    if mime == "application/pdf":
        return preview.model_copy(update={"mode": "pdf"})
    if mime.startswith("text/") or name.lower().endswith(TEXT_EXTENSIONS):
        try:
            raw = decode_payload(preview.base64_data)
        except DocumentError:
            return preview
        return preview.model_copy(update={"mode": "text", "text": raw.decode("utf-8", errors="replace")})
    return preview


def prepare_download(document: Optional[ManpowerDocument]) -> DownloadPayload:
    """
    Description: Decode an attachment into bytes for a client-side save.
    Layer: L2
    Input: attached document
    Output: DownloadPayload; DocumentError when payload is absent or undecodable
    """
    doc = _require_payload(document)
    url_mime, _ = split_data_url(doc.base64_data or "")
    return DownloadPayload(
        file_name=doc.file_name or DEFAULT_FILE_NAME,
        mime_type=doc.file_type or url_mime or "application/octet-stream",
        data=decode_payload(doc.base64_data or ""),
    )
