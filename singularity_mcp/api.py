"""
HTTP request layer, auth header helper, and log sanitization for singularity-mcp.
"""

import json
import logging
import re
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid
from datetime import datetime, timezone

from singularity_mcp import config
from singularity_mcp.exceptions import ConfigError, TransportError

logger = logging.getLogger("singularity_mcp.http")

REDACTED_AUTH = "Bearer [REDACTED]"

LOG_LEVEL_NUMBERS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


# ---------------------------------------------------------------------------
# Auth and security helpers
# ---------------------------------------------------------------------------


def create_auth_header(token):
    """Build the Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


def sanitize_headers(headers):
    """Return a copy of *headers* with any Authorization value redacted.

    Only the copy is changed; callers keep sending the original.
    """
    sanitized = dict(headers or {})
    for key in sanitized:
        if key.lower() == "authorization":
            sanitized[key] = REDACTED_AUTH
    return sanitized


def clean_params(params):
    """Drop query params whose value is None or an empty string."""
    return {k: v for k, v in (params or {}).items() if v is not None and v != ""}


def normalize_log_level(level):
    """Map a user-supplied level name onto one of config.LOG_LEVELS."""
    name = str(level or "").strip().lower()
    if name == "warning":
        name = "warn"
    if name not in config.LOG_LEVELS:
        raise ConfigError(
            f"[ERROR] Invalid log level '{level}'. Valid: {', '.join(config.LOG_LEVELS)}"
        )
    return name


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _error_envelope(message, status=None, request_id=None, detail=None):
    """Build a consistent HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


def _query_value(value):
    # The API expects lowercase JSON booleans in query strings.
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _encode_query(params):
    pairs = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(v)) for v in value)
        else:
            pairs.append((key, _query_value(value)))
    return urllib.parse.urlencode(pairs)


def _decode_body(text):
    """Parse a response body: JSON when possible, raw text otherwise, None if empty."""
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


def _header_dict(headers):
    if not headers:
        return {}
    return dict(headers.items())


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


class ApiClient:
    """Thin JSON-over-HTTP client bound to one base URL.

    Holds the only mutable state in the process: the bearer token and the
    logging settings. Every call is independent; nothing is retried.
    """

    def __init__(
        self,
        base_url=None,
        access_token=None,
        enable_logging=False,
        log_level="info",
        timeout=None,
    ):
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.access_token = access_token or None
        self.enable_logging = bool(enable_logging)
        self.log_level = normalize_log_level(log_level)
        self.timeout = timeout

    # -- runtime settings ---------------------------------------------------

    def set_access_token(self, token):
        self.access_token = token or None
        self._log_event("auth", "Access token updated")

    def set_logging(self, enable):
        self.enable_logging = bool(enable)
        self._log_event("config", f"Logging {'enabled' if enable else 'disabled'}")

    def set_log_level(self, level):
        self.log_level = normalize_log_level(level)
        self._log_event("config", f"Log level set to {self.log_level}")

    # -- logging ------------------------------------------------------------

    def _log_event(self, category, message):
        if not self.enable_logging:
            return
        logger.log(LOG_LEVEL_NUMBERS[self.log_level], "[%s] %s", category, message)

    def _log_http_event(self, **fields):
        """Emit one structured HTTP log line when logging is enabled."""
        if not self.enable_logging:
            return
        fields.setdefault("ts", datetime.now(timezone.utc).isoformat())
        logger.log(
            LOG_LEVEL_NUMBERS[self.log_level],
            "[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True, default=str),
        )

    # -- request building ---------------------------------------------------

    def build_url(self, path, params=None):
        url = self.base_url + path
        query = _encode_query(clean_params(params))
        if query:
            url += "?" + query
        return url

    def build_headers(self, headers=None, has_body=False):
        """Merge default, auth, and caller headers. Caller headers win."""
        merged = {
            "Accept": "application/json",
            "X-Request-Id": str(uuid.uuid4()),
        }
        if has_body:
            merged["Content-Type"] = "application/json"
        if self.access_token:
            merged.update(create_auth_header(self.access_token))
        if headers:
            merged.update(headers)
        return merged

    def _open(self, req):
        if self.timeout is None:
            return urllib.request.urlopen(req)
        return urllib.request.urlopen(req, timeout=self.timeout)

    # -- verbs --------------------------------------------------------------

    def request(self, method, path, params=None, body=None, headers=None):
        """Send one HTTP request and return the decoded response body.

        Raises TransportError on non-2xx responses and network failures.
        """
        method = method.upper()
        url = self.build_url(path, params)
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req_headers = self.build_headers(headers, has_body=data is not None)
        request_id = req_headers.get("X-Request-Id")
        self._log_http_event(
            phase="request",
            method=method,
            url=url,
            params=clean_params(params),
            data=body,
            headers=sanitize_headers(req_headers),
            request_id=request_id,
        )

        start = time.perf_counter()
        req = urllib.request.Request(url, data=data, headers=req_headers, method=method)
        try:
            with self._open(req) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
                status = getattr(resp, "status", 200)
                reason = getattr(resp, "reason", "")
                resp_headers = _header_dict(resp.headers)
        except urllib.error.HTTPError as e:
            error_text = e.read().decode("utf-8", errors="replace") if e.fp else ""
            error_headers = _header_dict(e.headers)
            error_data = _decode_body(error_text)
            self._log_http_event(
                phase="response",
                method=method,
                url=url,
                status=e.code,
                status_text=e.reason,
                data=error_data,
                headers=sanitize_headers(error_headers),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
            raise TransportError(
                _error_envelope(
                    f"HTTP {e.code}: {e.reason}",
                    status=e.code,
                    request_id=error_headers.get("X-Request-Id") or request_id,
                    detail=_sanitize_error(error_text),
                ),
                status=e.code,
                status_text=e.reason,
                body=error_data,
                headers=error_headers,
            ) from e
        except TimeoutError as e:
            self._log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error="timeout",
                request_id=request_id,
            )
            raise TransportError(
                _error_envelope(
                    f"Request timed out after {self.timeout} seconds. "
                    "Is the Singularity API reachable?",
                    request_id=request_id,
                )
            ) from e
        except urllib.error.URLError as e:
            self._log_http_event(
                phase="network_error",
                method=method,
                url=url,
                error=f"url_error: {e.reason}",
                request_id=request_id,
            )
            raise TransportError(
                _error_envelope(f"Connection failed: {e.reason}", request_id=request_id)
            ) from e

        result = _decode_body(raw)
        self._log_http_event(
            phase="response",
            method=method,
            url=url,
            status=status,
            status_text=reason,
            data=result,
            headers=sanitize_headers(resp_headers),
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
        return result

    def get(self, path, params=None, headers=None):
        return self.request("GET", path, params=params, headers=headers)

    def post(self, path, body=None, headers=None):
        return self.request("POST", path, body=body, headers=headers)

    def patch(self, path, body=None, headers=None):
        return self.request("PATCH", path, body=body, headers=headers)

    def delete(self, path, params=None, headers=None):
        return self.request("DELETE", path, params=params, headers=headers)
