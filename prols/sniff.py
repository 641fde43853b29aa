"""Content-type sniffing used for binary classification.

The classification follows the WHATWG MIME sniffing approach: look at the
first 512 bytes, match a handful of well-known signatures, and fall back to
``text/plain`` unless a control byte that never appears in text is found,
in which case the content is ``application/octet-stream``.
"""

from __future__ import annotations

from pathlib import Path

SNIFF_LEN = 512
OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "
_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])

_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)

_RIFF_MASK = b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff"
_EOT_PATTERN = b"\x00" * 34 + b"LP"
_EOT_MASK = b"\x00" * 34 + b"\xff\xff"

# (pattern, mask, content type); a mask of None means an exact prefix match.
_SIGNATURES: tuple[tuple[bytes, bytes | None, str], ...] = (
    (b"%PDF-", None, "application/pdf"),
    (b"%!PS-Adobe-", None, "application/postscript"),
    (b"\xfe\xff\x00\x00", b"\xff\xff\x00\x00", "text/plain; charset=utf-16be"),
    (b"\xff\xfe\x00\x00", b"\xff\xff\x00\x00", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", None, TEXT_PLAIN),
    (b"\x00\x00\x01\x00", None, "image/x-icon"),
    (b"\x00\x00\x02\x00", None, "image/x-icon"),
    (b"BM", None, "image/bmp"),
    (b"GIF87a", None, "image/gif"),
    (b"GIF89a", None, "image/gif"),
    (b"RIFF\x00\x00\x00\x00WEBPVP", _RIFF_MASK + b"\xff\xff", "image/webp"),
    (b"\x89PNG\r\n\x1a\n", None, "image/png"),
    (b"\xff\xd8\xff", None, "image/jpeg"),
    (b"FORM\x00\x00\x00\x00AIFF", _RIFF_MASK, "audio/aiff"),
    (b"ID3", None, "audio/mpeg"),
    (b"OggS\x00", None, "application/ogg"),
    (b"MThd\x00\x00\x00\x06", None, "audio/midi"),
    (b"RIFF\x00\x00\x00\x00AVI ", _RIFF_MASK, "video/avi"),
    (b"RIFF\x00\x00\x00\x00WAVE", _RIFF_MASK, "audio/wave"),
)

# Checked after the mp4 box test, in this order.
_TRAILING_SIGNATURES: tuple[tuple[bytes, bytes | None, str], ...] = (
    (b"\x1a\x45\xdf\xa3", None, "video/webm"),
    (_EOT_PATTERN, _EOT_MASK, "application/vnd.ms-fontobject"),
    (b"\x00\x01\x00\x00", None, "font/ttf"),
    (b"OTTO", None, "font/otf"),
    (b"ttcf", None, "font/collection"),
    (b"wOFF", None, "font/woff"),
    (b"wOF2", None, "font/woff2"),
    (b"\x1f\x8b\x08", None, "application/x-gzip"),
    (b"PK\x03\x04", None, "application/zip"),
    (b"Rar!\x1a\x07\x00", None, "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", None, "application/x-rar-compressed"),
    (b"\x00\x61\x73\x6d", None, "application/wasm"),
)



class DetectionError(RuntimeError):
    """Raised when a file's content cannot be read for sniffing."""


def detect_content_type(path: Path) -> str:
    """Return the sniffed MIME type of a file on disk."""
    try:
        with path.open("rb") as file_obj:
            head = file_obj.read(SNIFF_LEN)
    except OSError as exc:
        raise DetectionError(f"unable to detect content type of {path}: {exc}") from exc
    return sniff_content_type(head)



def sniff_content_type(data: bytes) -> str:
    """Classify up to the first 512 bytes of content."""
    data = data[:SNIFF_LEN]

    stripped = data.lstrip(_WHITESPACE)
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    if _is_html(stripped):
        return "text/html; charset=utf-8"

    content_type = _match_signatures(data, _SIGNATURES)
    if content_type is not None:
        return content_type
    if _is_mp4(data):
        return "video/mp4"
    content_type = _match_signatures(data, _TRAILING_SIGNATURES)
    if content_type is not None:
        return content_type

    if any(byte in _BINARY_BYTES for byte in data):
        return OCTET_STREAM
    return TEXT_PLAIN


def is_binary(content_type: str) -> bool:
    return content_type == OCTET_STREAM


def _match_signatures(
    data: bytes, signatures: tuple[tuple[bytes, bytes | None, str], ...]
) -> str | None:
    for pattern, mask, content_type in signatures:
        if mask is None:
            if data.startswith(pattern):
                return content_type
        elif _masked_match(data, pattern, mask):
            return content_type
    return None


def _masked_match(data: bytes, pattern: bytes, mask: bytes) -> bool:
    if len(data) < len(pattern):
        return False
    return all(byte & bits == expected for byte, bits, expected in zip(data, mask, pattern))


def _is_html(data: bytes) -> bool:
    upper = data[:16].upper()
    for tag in _HTML_TAGS:
        if not upper.startswith(tag):
            continue
        # A tag must be terminated by a space or '>' to count.
        end = data[len(tag) : len(tag) + 1]
        if end in (b" ", b">"):
            return True
    return False


def _is_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return False
    if data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        # Bytes 12-15 hold the minor version, not a brand.
        if start == 12:
            continue
        if data[start : start + 3] == b"mp4":
            return True
    return False
