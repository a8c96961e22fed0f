"""
Ghar Nari - Record Sanitization
===============================

Stage one of the record pipeline: normalize untrusted input.

Every function here accepts anything (a dict read from disk, a pydantic
record, garbage) and returns a plain dict ready for validation. Nothing
raises: unsafe or malformed values collapse to an empty value and the
validator decides whether that is acceptable.

HTML is cleaned by bleach against an allow-list; markup outside it is
stripped and its text kept as escaped, inert characters.
"""

import html
import re
import unicodedata
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlsplit

import bleach
from pydantic import BaseModel

from gharnari.core.constants import (
    ALLOWED_URL_SCHEMES,
    IMAGE_URL_SCHEMES,
    UPLOADS_PREFIX,
)


# =============================================================================
# Allow-lists
# =============================================================================

# Inline HTML that may appear in post content and the about section
MARKDOWN_TAGS = frozenset({
    "p", "br", "strong", "em", "u", "a", "ul", "ol", "li",
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote",
    "code", "pre", "img",
})
MARKDOWN_ATTRIBUTES = ["href", "src", "alt", "title", "target"]


# =============================================================================
# Patterns
# =============================================================================

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")
_UPLOAD_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")

# Markdown link destinations: inline [text](dest) and reference [id]: dest
_MD_INLINE_DEST_RE = re.compile(r"(\]\(\s*<?)([^\s)>]*)")
_MD_REFERENCE_DEST_RE = re.compile(r"(^[ ]{0,3}\[[^\]\n]+\]:[ \t]*<?)([^\s>]*)", re.MULTILINE)
_URL_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
# Browsers ignore these inside a scheme
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f-\xa0]+")


# =============================================================================
# Field Sanitizers
# =============================================================================

def _clean_string(value: Any) -> str:
    """NFC-normalize, drop control characters. Non-strings become ''."""
    if not isinstance(value, str):
        return ""
    return _CONTROL_RE.sub("", unicodedata.normalize("NFC", value))


def _is_safe_destination(destination: str) -> bool:
    """Relative links and allowed schemes pass; any other scheme does not."""
    target = _URL_NOISE_RE.sub("", html.unescape(destination)).lower()
    match = _URL_SCHEME_RE.match(target)
    return match is None or match.group(1) in ALLOWED_URL_SCHEMES


def _drop_unsafe_destination(match: "re.Match[str]") -> str:
    if _is_safe_destination(match.group(2)):
        return match.group(0)
    return match.group(1)


def sanitize_text(value: Any) -> str:
    """Strip all markup and surrounding whitespace."""
    text = _clean_string(value)
    return bleach.clean(text, tags=[], attributes={}, strip=True, strip_comments=True).strip()


def sanitize_markdown(value: Any) -> str:
    """
    Keep markdown and allow-listed inline HTML, remove anything executable.

    bleach drops every tag, attribute and URL protocol outside the
    allow-lists. Markdown link destinations are plain text to bleach, so
    those with a disallowed scheme are emptied here.
    """
    text = bleach.clean(
        _clean_string(value),
        tags=MARKDOWN_TAGS,
        attributes=MARKDOWN_ATTRIBUTES,
        protocols=ALLOWED_URL_SCHEMES,
        strip=True,
        strip_comments=True,
    )
    # A bare ">" cannot open markup; keep it literal so blockquotes survive
    text = text.replace("&gt;", ">")
    text = _MD_INLINE_DEST_RE.sub(_drop_unsafe_destination, text)
    text = _MD_REFERENCE_DEST_RE.sub(_drop_unsafe_destination, text)
    return text.strip()


def sanitize_slug(value: Any) -> str:
    """Lowercase, whitespace to hyphens, drop everything outside [a-z0-9-]."""
    text = _WHITESPACE_RE.sub("-", sanitize_text(value).lower())
    return _SLUG_STRIP_RE.sub("", text)


def sanitize_email(value: Any) -> str:
    return _WHITESPACE_RE.sub("", sanitize_text(value)).lower()


def sanitize_url(value: Any, schemes: Iterable[str] = ALLOWED_URL_SCHEMES) -> str:
    """Return the URL when its scheme is allowed, '' otherwise."""
    text = _clean_string(value).strip()
    if not text:
        return ""
    try:
        parts = urlsplit(text)
    except ValueError:
        return ""
    scheme = parts.scheme.lower()
    if scheme not in schemes:
        return ""
    if scheme != "mailto" and not parts.netloc:
        return ""
    if any(ch in text for ch in "<>\"' "):
        return ""
    return text


def is_local_upload(value: Any) -> bool:
    """True for /uploads/<name> references produced by the upload handler."""
    if not isinstance(value, str) or not value.startswith(UPLOADS_PREFIX):
        return False
    return bool(_UPLOAD_NAME_RE.match(value[len(UPLOADS_PREFIX):])) and ".." not in value


def sanitize_image_ref(value: Any) -> Optional[str]:
    """Local upload path or http(s) URL; anything else is dropped to None."""
    text = _clean_string(value).strip()
    if not text:
        return None
    if is_local_upload(text):
        return text
    return sanitize_url(text, IMAGE_URL_SCHEMES) or None


# =============================================================================
# Record Sanitizers
# =============================================================================

def _as_mapping(raw: Any) -> Dict[str, Any]:
    """Copy a record into a plain dict keyed by its JSON names."""
    if isinstance(raw, BaseModel):
        return raw.model_dump(mode="json", by_alias=True)
    if isinstance(raw, Mapping):
        return dict(raw)
    return {}


def sanitize_post(raw: Any) -> Dict[str, Any]:
    post = _as_mapping(raw)
    tags = post.get("tags")
    post.update({
        "title": sanitize_text(post.get("title")),
        "slug": sanitize_slug(post.get("slug")),
        "content": sanitize_markdown(post.get("content")),
        "excerpt": sanitize_text(post.get("excerpt")),
        "author": sanitize_text(post.get("author")),
        "category": sanitize_text(post.get("category")),
        "status": sanitize_text(post.get("status")).lower(),
        "tags": [t for t in (sanitize_text(tag) for tag in tags) if t] if isinstance(tags, list) else [],
        "featuredImage": sanitize_image_ref(post.get("featuredImage")),
    })
    return post


def sanitize_comment(raw: Any) -> Dict[str, Any]:
    comment = _as_mapping(raw)
    comment.update({
        "author": sanitize_text(comment.get("author")),
        "email": sanitize_email(comment.get("email")),
        "content": sanitize_text(comment.get("content")),
    })
    return comment


def sanitize_settings(raw: Any) -> Dict[str, Any]:
    settings = _as_mapping(raw)
    links = settings.get("socialLinks")
    settings.update({
        "siteName": sanitize_text(settings.get("siteName")),
        "tagline": sanitize_text(settings.get("tagline")),
        "welcomeMessage": sanitize_text(settings.get("welcomeMessage")),
        "aboutSection": sanitize_markdown(settings.get("aboutSection")),
        "authorName": sanitize_text(settings.get("authorName")),
        "authorBio": sanitize_text(settings.get("authorBio")),
        "socialLinks": {
            sanitize_text(name): sanitize_url(url) or None
            for name, url in links.items()
            if isinstance(name, str) and sanitize_text(name)
        } if isinstance(links, Mapping) else {},
    })
    return settings


def sanitize_analytics(raw: Any) -> Dict[str, Any]:
    entry = _as_mapping(raw)
    entry["postId"] = sanitize_text(entry.get("postId"))
    return entry


__all__ = [
    "sanitize_text",
    "sanitize_markdown",
    "sanitize_slug",
    "sanitize_email",
    "sanitize_url",
    "sanitize_image_ref",
    "is_local_upload",
    "sanitize_post",
    "sanitize_comment",
    "sanitize_settings",
    "sanitize_analytics",
]
