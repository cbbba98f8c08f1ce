import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class ConfigurationError(ValueError):
    """Raised before dispatch when the request cannot be built."""


@dataclass(frozen=True)
class RequestTemplate:
    """Method, URL, headers and body replayed unchanged for every unit."""

    method: str
    url: URL
    headers: CIMultiDictProxy[str]
    body: bytes | None = None


def parse_headers(raw: Iterable[str]) -> CIMultiDict[str]:
    headers: CIMultiDict[str] = CIMultiDict()
    for header in raw:
        key, sep, value = header.partition(":")
        if not sep:
            raise ConfigurationError(f"Malformed header: {header!r}")
        key, value = key.strip(), value.strip()
        if not _TOKEN.match(key):
            raise ConfigurationError(f"Invalid header name: {key!r}")
        if any(c in value for c in "\r\n\0"):
            raise ConfigurationError(f"Invalid header value for {key}: {value!r}")
        # later entries replace earlier ones with the same name
        headers[key] = value
    return headers


def build_template(
    method: str,
    url: str,
    headers: Iterable[str] = (),
    data: bytes | None = None,
) -> RequestTemplate:
    method = method.upper()
    if not _TOKEN.match(method):
        raise ConfigurationError(f"Invalid method: {method!r}")

    try:
        target = URL(url)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Could not parse URL {url!r}: {e}") from e
    if target.scheme not in ("http", "https") or not target.host:
        raise ConfigurationError(f"URL must be absolute http(s): {url!r}")

    parsed = parse_headers(headers)
    logger.debug(f"Headers: {dict(parsed)}")

    return RequestTemplate(
        method=method,
        url=target,
        headers=CIMultiDictProxy(parsed),
        body=data,
    )
