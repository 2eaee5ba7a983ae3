"""HTTP probes used by the verification steps."""

from __future__ import annotations

import urllib.error
import urllib.request


def http_status(url: str, method: str = "GET", timeout_seconds: int = 5) -> int | None:
    """Return the HTTP status for `url`, or None when nothing answers.

    Error statuses (4xx/5xx) still count as an answer and are returned as-is.
    """
    try:
        req = urllib.request.Request(url, method=method)
        with urllib.request.urlopen(req, timeout=timeout_seconds) as resp:  # nosec - caller controls endpoint
            return int(resp.status)
    except urllib.error.HTTPError as exc:
        return int(exc.code)
    except (urllib.error.URLError, OSError, ValueError):
        return None
