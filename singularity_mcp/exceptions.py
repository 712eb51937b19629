"""
singularity-mcp exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class AdapterError(Exception):
    """Base class for every error raised by singularity-mcp. CLI exit code 1."""

    exit_code = 1


class ConfigError(AdapterError):
    """Bad process configuration, e.g. an unknown log level. CLI exit code 2."""

    exit_code = 2


class ValidationError(AdapterError):
    """A tool payload failed its entity schema. No request was sent."""

    def __init__(self, entity, problems):
        self.entity = entity
        self.problems = list(problems)
        super().__init__(f"[ERROR] Invalid {entity}: " + "; ".join(self.problems))


class TransportError(AdapterError):
    """Raised by ApiClient for non-2xx responses and network failures.

    ``status`` is None when no HTTP response was received.
    """

    def __init__(self, message, status=None, status_text="", body=None, headers=None):
        super().__init__(message)
        self.status = status
        self.status_text = status_text
        self.body = body
        self.headers = headers or {}

    @property
    def not_found(self):
        return self.status == 404
