"""Canonicalize raw input strings into request targets.

Defaulting rules:

- no scheme and no port: ``http`` on port 80
- no scheme, explicit port 443: ``https`` on 443
- no scheme, any other explicit port: ``http`` on that port
- scheme without port: the scheme's conventional port

Only ``http`` and ``https`` are accepted. Anything that cannot be split into a
host and a path yields a ``MalformedTarget`` failure instead of raising.
"""

import ipaddress
import logging
import re
from urllib.parse import urlsplit

from http_latency.models.result import Failure
from http_latency.models.target import DEFAULT_PORTS, Target

log = logging.getLogger(__name__)

# A colon followed by a digit is a port, not a scheme separator ("host:8080").
_SCHEME_RE = re.compile(r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*):(?!\d)")

_HOSTNAME_RE = re.compile(
    r"^(?!-)[A-Za-z0-9_-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9_-]{1,63}(?<!-))*\.?$"
)


def normalize(raw: str) -> Target | Failure:
    """Turn ``raw`` into a Target, or a MalformedTarget failure.

    Args:
        raw: One user-supplied URL, with or without scheme and port

    Returns:
        The normalized Target, or a Failure of kind ``MalformedTarget``
        describing why the string could not be used.

    """
    text = raw.strip()
    if not text:
        return _malformed(raw, "empty target")
    if any(char.isspace() for char in text):
        return _malformed(raw, "target contains whitespace")

    explicit_scheme: str | None = None
    if match := _SCHEME_RE.match(text):
        explicit_scheme = match["scheme"].lower()
        rest = text[match.end() :]
        if explicit_scheme not in DEFAULT_PORTS:
            return _malformed(raw, f"unsupported scheme '{explicit_scheme}'")
        if not rest.startswith("//"):
            return _malformed(raw, "missing '//' and host after scheme")
    else:
        rest = f"//{text}"

    try:
        parts = urlsplit(f"http:{rest}")
        port = parts.port
    except ValueError as exc:
        return _malformed(raw, str(exc))

    if parts.username is not None or parts.password is not None:
        return _malformed(raw, "credentials are not supported in targets")
    if port == 0:
        return _malformed(raw, "port 0 is not a valid destination")

    host = _validate_host(parts.hostname)
    if host is None:
        return _malformed(raw, f"invalid host '{parts.hostname or ''}'")

    if explicit_scheme is not None:
        scheme = explicit_scheme
    else:
        scheme = "https" if port == DEFAULT_PORTS["https"] else "http"

    target = Target(
        scheme=scheme,  # type: ignore[arg-type]
        host=host,
        port=port if port is not None else DEFAULT_PORTS[scheme],
        path=parts.path or "/",
        query=parts.query,
        raw=raw,
    )
    log.debug("Normalized %r to %s", raw, target.url)
    return target


def _validate_host(hostname: str | None) -> str | None:
    """Return the ASCII form of a usable host, or None."""
    if not hostname:
        return None

    if ":" in hostname:
        try:
            return str(ipaddress.IPv6Address(hostname))
        except ValueError:
            return None

    try:
        ascii_host = hostname.encode("idna").decode("ascii")
    except UnicodeError:
        return None

    if not _HOSTNAME_RE.match(ascii_host):
        return None
    return ascii_host


def _malformed(raw: str, reason: str) -> Failure:
    log.debug("Cannot normalize %r: %s", raw, reason)
    return Failure(kind="MalformedTarget", message=reason)
