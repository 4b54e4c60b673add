"""Multipart form encoding for upload endpoints.

``build_multipart`` turns a flat field mapping into the ``files`` argument
understood by ``httpx``. Plain fields are encoded as filename-less parts so
the body is always multipart/form-data, even without an upload:

- a mapping with a ``contents`` key is an explicit part; ``filename``,
  ``content_type`` and ``headers`` are honoured (``headers`` win over
  ``content_type``);
- the ``file`` field accepts a filesystem path, raw bytes or a binary file
  object; filename and MIME type are inferred from the path, the file
  object's ``name`` or, failing that, the leading bytes;
- booleans become ``"true"``/``"false"``, mappings and sequences are JSON
  encoded, ``None`` is omitted and other scalars are stringified.

Files opened here are returned to the caller, which must close them.
"""
from __future__ import annotations

import json
import mimetypes
import os
from dataclasses import dataclass, field
from typing import IO, Any, Dict, List, Mapping, Optional, Tuple

from ..base.constants import DEFAULT_UPLOAD_FILENAME

FILE_FIELD = "file"

# (prefix, offset, mime) checked against the first bytes of an upload.
_MAGIC_SIGNATURES: Tuple[Tuple[bytes, int, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", 0, "image/png"),
    (b"\xff\xd8\xff", 0, "image/jpeg"),
    (b"GIF87a", 0, "image/gif"),
    (b"GIF89a", 0, "image/gif"),
    (b"%PDF-", 0, "application/pdf"),
    (b"ID3", 0, "audio/mpeg"),
    (b"\xff\xfb", 0, "audio/mpeg"),
    (b"\xff\xf3", 0, "audio/mpeg"),
    (b"OggS", 0, "audio/ogg"),
    (b"fLaC", 0, "audio/flac"),
    (b"ftypM4A", 4, "audio/mp4"),
    (b"ftyp", 4, "video/mp4"),
)

FilePart = Tuple[Optional[str], Any, Optional[str], Dict[str, str]]


@dataclass
class MultipartBody:
    """Encoded multipart form plus the handles opened while encoding it."""

    parts: List[Tuple[str, FilePart]] = field(default_factory=list)
    opened: List[IO[bytes]] = field(default_factory=list)

    def close(self) -> None:
        for fh in self.opened:
            fh.close()
        self.opened.clear()


def sniff_content_type(head: bytes) -> Optional[str]:
    """Best-effort MIME detection from leading bytes."""
    if head[:4] == b"RIFF" and head[8:12] == b"WAVE":
        return "audio/wav"
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    for prefix, offset, mime in _MAGIC_SIGNATURES:
        if head[offset:offset + len(prefix)] == prefix:
            return mime
    return None


def _peek(fileobj: IO[bytes], size: int = 32) -> bytes:
    if not (hasattr(fileobj, "seekable") and fileobj.seekable()):
        return b""
    pos = fileobj.tell()
    try:
        head = fileobj.read(size)
    finally:
        fileobj.seek(pos)
    return head if isinstance(head, bytes) else b""


def _guess_by_name(name: Optional[str]) -> Optional[str]:
    return mimetypes.guess_type(name)[0] if name else None


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _explicit_part(part: Mapping[str, Any]) -> FilePart:
    contents = part["contents"]
    if not isinstance(contents, (bytes, bytearray, str)) and not hasattr(contents, "read"):
        contents = _encode_scalar(contents)
    filename = part.get("filename")
    filename = filename if isinstance(filename, str) and filename else None
    content_type = part.get("content_type")
    content_type = content_type if isinstance(content_type, str) and content_type else None
    headers: Dict[str, str] = {}
    if content_type:
        headers["Content-Type"] = content_type
    if isinstance(part.get("headers"), Mapping):
        headers.update({str(k): str(v) for k, v in part["headers"].items()})
    return filename, contents, content_type, headers


def _file_part(value: Any, body: MultipartBody) -> FilePart:
    filename: Optional[str] = None
    content_type: Optional[str] = None
    contents: Any = value

    if isinstance(value, (str, os.PathLike)) and os.path.isfile(value) and os.access(value, os.R_OK):
        path = os.fspath(value)
        contents = open(path, "rb")  # noqa: SIM115 - closed by MultipartBody.close
        body.opened.append(contents)
        filename = os.path.basename(path)
        content_type = _guess_by_name(path) or sniff_content_type(_peek(contents))
    elif isinstance(value, (bytes, bytearray)):
        contents = bytes(value)
        content_type = sniff_content_type(contents[:32])
    elif hasattr(value, "read"):
        name = getattr(value, "name", None)
        if isinstance(name, str) and name:
            filename = os.path.basename(name)
        content_type = _guess_by_name(filename) or sniff_content_type(_peek(value))

    return filename or DEFAULT_UPLOAD_FILENAME, contents, content_type, {}


def build_multipart(fields: Mapping[str, Any]) -> MultipartBody:
    """Encode ``fields`` for ``httpx`` (``files=body.parts``)."""
    body = MultipartBody()
    try:
        for name, value in fields.items():
            name = str(name)
            if isinstance(value, Mapping) and "contents" in value:
                body.parts.append((name, _explicit_part(value)))
            elif name == FILE_FIELD:
                body.parts.append((name, _file_part(value, body)))
            elif value is not None:
                body.parts.append((name, (None, _encode_scalar(value), None, {})))
    except BaseException:
        body.close()
        raise
    return body


__all__ = ["MultipartBody", "build_multipart", "sniff_content_type", "FILE_FIELD"]
