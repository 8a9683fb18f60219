from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from urllib.parse import SplitResult, parse_qs, urlsplit

# Absolute URLs only: a scheme followed by "://". Bare hostnames are not links.
_URL_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9+.-]*://[^\s<>\"'`{}|\\^]+")
_TRAILING_PUNCT = ".,;:!?\"]'"

ZOOM_HOST_SUFFIX = ".zoom.us"
MEETING_ID_PATH_PREFIX = "/j/"
APP_JOIN_URL = "zoommtg://zoom.us/join?confno="


@dataclass(frozen=True)
class ExtractedCall:
    """A Zoom link found in free-form text.

    ``meeting_id`` is only set for ``/j/<id>`` links. Personal rooms
    (``/my/<name>``) keep just the original URL, since the vanity name does
    not map to a numeric meeting the desktop client can join directly.
    """

    original_url: str
    meeting_id: str | None = None
    password: str | None = None

    def join_target(self) -> str:
        """Return the URL the user should open to join the call."""
        if not self.meeting_id:
            return self.original_url
        url = APP_JOIN_URL + self.meeting_id
        # The Zoom client expects the password verbatim, so no query encoding.
        if self.password:
            url = url + "&pwd=" + self.password
        return url


def _trim(url: str) -> str:
    # A closing paren belongs to the URL when it balances one inside it.
    while url:
        last = url[-1]
        if last == ")":
            if url.count("(") >= url.count(")"):
                break
        elif last not in _TRAILING_PUNCT:
            break
        url = url[:-1]
    return url


def _candidate_urls(text: str) -> list[str]:
    out: list[str] = []
    for m in _URL_RE.finditer(text):
        url = _trim(m.group(0))
        if not url.endswith("://"):
            out.append(url)
    return out


def _parse(url: str) -> SplitResult | None:
    try:
        parts = urlsplit(url)
        # Accessing .port validates the netloc; urlsplit alone is lenient.
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def find_provider_url(text: str) -> tuple[str, SplitResult] | None:
    """Return the first URL in ``text`` whose host is a Zoom domain."""
    if not text:
        return None
    for url in _candidate_urls(text):
        parts = _parse(url)
        if parts is None:
            continue
        if (parts.hostname or "").endswith(ZOOM_HOST_SUFFIX):
            return url, parts
    return None


def extract_call(text: str) -> ExtractedCall | None:
    found = find_provider_url(text)
    if found is None:
        return None
    url, parts = found

    meeting_id: str | None = None
    if parts.path.startswith(MEETING_ID_PATH_PREFIX):
        meeting_id = posixpath.basename(parts.path) or None

    password: str | None = None
    pwd = parse_qs(parts.query, keep_blank_values=True).get("pwd")
    if pwd and pwd[0]:
        password = pwd[0]

    return ExtractedCall(original_url=url, meeting_id=meeting_id, password=password)
