"""
Ошибки одного цикла проверки.

Каждая ошибка знает, как её показать пользователю (``user_message``) и какой
HTTP статус отдать. Перехватываются один раз, в ``services.scanner``.
"""
from __future__ import annotations


class ScanError(Exception):
    kind = "scan_error"
    status_code = 500
    prefix = ""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def user_message(self) -> str:
        return f"{self.prefix}{self.message}"


class InvalidInput(ScanError):
    kind = "invalid_input"
    status_code = 400

    def __init__(self, message: str = "Invalid SHA256 format"):
        super().__init__(message)


class PickerError(ScanError):
    kind = "picker_error"
    status_code = 400
    prefix = "Error picking file: "


class HashError(ScanError):
    kind = "hash_error"
    status_code = 500
    prefix = "Error generating hash: "


class StorageError(ScanError):
    kind = "storage_error"
    status_code = 500
    prefix = "Cache Error: "


class RemoteError(ScanError):
    """Ошибки обращения к VirusTotal."""

    kind = "remote_error"
    status_code = 502
    prefix = "VirusTotal Error: "


class NotFound(RemoteError):
    kind = "not_found"
    status_code = 404


class Unauthorized(RemoteError):
    kind = "unauthorized"


class NetworkError(RemoteError):
    kind = "network_error"


class MalformedResponse(RemoteError):
    kind = "malformed_response"


class UpstreamError(RemoteError):
    kind = "upstream_error"

    def __init__(self, message: str = "", upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status
