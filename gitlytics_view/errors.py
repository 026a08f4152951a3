"""
Error taxonomy shared by resolution, fetching, storage and rendering.

Every error is recoverable by the user: it carries a short title and a
human-readable message, and the web layer returns control to the search form.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AnalyticsError(RuntimeError):
    code = "analytics_error"
    title = "Something went wrong"
    http_status = 500

    def __init__(self, message: str, *, title: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "title": self.title, "message": self.message}


# -----------------------------
# Local (no I/O attempted)
# -----------------------------
class ValidationError(AnalyticsError):
    code = "validation_error"
    title = "Invalid Input"
    http_status = 400


class CrossModeMisuse(AnalyticsError):
    """Valid-looking input submitted to the wrong search mode."""

    code = "cross_mode_misuse"
    title = "Invalid Input"
    http_status = 400

    def __init__(self, expected: str) -> None:
        self.expected = expected
        if expected == "project":
            message = (
                "You're trying to search for a repository in User Analytics. "
                "Please switch to Repository Analytics or use a username only."
            )
        else:
            message = (
                "You're trying to search for a user in Repository Analytics. "
                "Please provide both owner and repository name, or switch to User Analytics."
            )
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "expected": self.expected}


class MalformedUrl(AnalyticsError):
    code = "malformed_url"
    title = "Invalid URL"
    http_status = 400

    def __init__(self, url: str, host: str = "github.com") -> None:
        self.url = url
        super().__init__(
            f"Please enter a valid GitHub URL (e.g., https://{host}/username "
            f"or https://{host}/owner/repository)"
        )


# -----------------------------
# Transport / backend
# -----------------------------
class NetworkUnavailable(AnalyticsError):
    code = "network_unavailable"
    title = "Connection Failed"
    http_status = 503

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Unable to connect to the server. Please check your internet connection.")


class NotFound(AnalyticsError):
    code = "not_found"
    title = "Not Found"
    http_status = 404

    def __init__(self, identifier: str, kind: str = "account") -> None:
        self.identifier = identifier
        if kind == "project":
            self.title = "Repository Not Found"
            message = f"Repository '{identifier}' not found on GitHub."
        else:
            self.title = "User Not Found"
            message = f"User '{identifier}' not found on GitHub."
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "identifier": self.identifier}


class RateLimited(AnalyticsError):
    code = "rate_limited"
    title = "Rate Limit Exceeded"
    http_status = 429

    def __init__(self) -> None:
        super().__init__("GitHub API rate limit exceeded. Please try again later.")


class ServerError(AnalyticsError):
    code = "server_error"
    title = "Server Error"
    http_status = 502

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"Server error ({status}). Please try again later.")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "status": self.status}


class UnexpectedStatus(AnalyticsError):
    code = "unexpected_status"
    title = "Request Failed"
    http_status = 502

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"Error fetching analytics data ({status}).")

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "status": self.status}


class InvalidEnvelope(AnalyticsError):
    code = "invalid_envelope"
    title = "Invalid Response"
    http_status = 502

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "Invalid response format")


# -----------------------------
# Cross-view record
# -----------------------------
class ExpiredData(AnalyticsError):
    code = "expired_data"
    title = "Data Expired"
    http_status = 410

    def __init__(self) -> None:
        super().__init__("Analytics data has expired. Please search again.")


class MalformedData(AnalyticsError):
    code = "malformed_data"
    title = "Invalid Data"
    http_status = 422

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Invalid analytics data format.")
