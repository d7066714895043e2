"""Image blocks, rendered as an HTML ``<img>`` tag with sanitized attributes."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from dnb.engine.schema import BaseBlock, ImageBlock

ALLOWED_URL_SCHEMES = ("http", "https")
ALLOWED_ALIGNMENTS = ("left", "center", "right")

_JAVASCRIPT_URL_RE = re.compile(r"^javascript:", re.IGNORECASE)
_DATA_URL_RE = re.compile(r"^data:", re.IGNORECASE)
_IMAGE_DATA_URL_RE = re.compile(
    r"^data:image/(png|jpeg|jpg|gif|webp|svg\+xml|bmp|ico)(;base64)?,", re.IGNORECASE
)
_NON_DIGIT_RE = re.compile(r"[^0-9]")

# Ampersand first so the entities below are not escaped twice.
_HTML_ATTRIBUTE_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def is_image_block(block: BaseBlock) -> bool:
    return block.type == "image"


def is_valid_image_url(url: str) -> bool:
    """Allow http(s) URLs and inline image data URLs. Empty is allowed."""
    if not url:
        return True
    if _JAVASCRIPT_URL_RE.match(url):
        return False
    if _DATA_URL_RE.match(url):
        return bool(_IMAGE_DATA_URL_RE.match(url))

    try:
        parsed = urlsplit(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in ALLOWED_URL_SCHEMES and bool(parsed.netloc)


def sanitize_image_url(url: str) -> str:
    return url if is_valid_image_url(url) else ""


def escape_html_attribute(value: str) -> str:
    for char, entity in _HTML_ATTRIBUTE_ESCAPES:
        value = value.replace(char, entity)
    return value


def sanitize_width(width: str) -> str:
    return _NON_DIGIT_RE.sub("", width)


def sanitize_alignment(alignment: str) -> str:
    alignment = alignment.lower()
    return alignment if alignment in ALLOWED_ALIGNMENTS else ""


def create_markdown_for_image_block(block: ImageBlock) -> str:
    metadata = block.metadata
    src = escape_html_attribute(sanitize_image_url(metadata.deepnote_img_src or ""))
    width = sanitize_width(metadata.deepnote_img_width or "")
    alignment = sanitize_alignment(metadata.deepnote_img_alignment or "")
    return f'<img src="{src}" width="{width}" align="{alignment}" />'
