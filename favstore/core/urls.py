"""URL normalization and display-name derivation.

Pure helpers; nothing here touches the store or the network.
"""

from __future__ import annotations

from urllib.parse import urlparse

_KNOWN_DOMAINS = {
    "ups": "UPS",
    "fedex": "FedEx",
    "github": "GitHub",
    "google": "Google",
    "youtube": "YouTube",
    "wikipedia": "Wikipedia",
    "facebook": "Facebook",
    "twitter": "Twitter",
    "linkedin": "LinkedIn",
    "amazon": "Amazon",
    "microsoft": "Microsoft",
    "apple": "Apple",
    "netflix": "Netflix",
}

# Trailing path segments that add nothing to a display name
_SKIP_SEGMENTS = {"index", "home", "default", "main"}


def normalize_url(url: object) -> str:
    """Default the scheme to https. Returns "" for empty or non-string input."""
    if not isinstance(url, str):
        return ""
    url = url.strip()
    if not url:
        return ""
    return url if url.startswith("http") else f"https://{url}"


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def derive_display_name(url: object) -> str:
    """
    Human-readable label for a URL.

    ``https://www.github.com/anthropics`` → ``GitHub - Anthropics``,
    ``example.org`` → ``Example (.org)``.
    """
    normalized = normalize_url(url)
    if not normalized:
        return str(url or "")
    try:
        parsed = urlparse(normalized)
    except ValueError:
        return str(url)

    host = parsed.hostname or ""
    if not host:
        return str(url)
    if host.startswith("www."):
        host = host[4:]

    display = host
    parts = host.split(".")
    if len(parts) >= 2:
        main = parts[-2]
        display = _KNOWN_DOMAINS.get(main.lower(), _capitalize(main))
        ext = parts[-1]
        if ext != "com":
            display += f" (.{ext})"

    segments = [p for p in parsed.path.split("/") if p]
    if segments:
        last = segments[-1].split(".")[0]
        if last and last.lower() not in _SKIP_SEGMENTS:
            display += f" - {_capitalize(last)}"

    return display

