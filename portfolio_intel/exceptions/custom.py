from enum import StrEnum


class ErrorKind(StrEnum):
    not_found = "not_found"
    rate_limited = "rate_limited"
    transport = "transport"
    missing_credential = "missing_credential"


class SourceError(Exception):
    kind: ErrorKind = ErrorKind.transport

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GooglePlacesError(SourceError):
    pass


class TripAdvisorError(SourceError):
    pass


class NotFoundError(SourceError):
    kind = ErrorKind.not_found


class RateLimitError(SourceError):
    kind = ErrorKind.rate_limited

    def __init__(self, service: str):
        self.service = service
        super().__init__(f"Rate limit exceeded for {service}", status_code=429)


class MissingCredentialError(SourceError):
    kind = ErrorKind.missing_credential


class FolderNotFoundError(Exception):
    def __init__(self, folder_id: str):
        self.folder_id = folder_id
        super().__init__("Folder not found")


class HotelNotFoundError(Exception):
    def __init__(self, place_id: str):
        self.place_id = place_id
        super().__init__("Hotel not found")


class DuplicateHotelError(Exception):
    def __init__(self, place_id: str):
        self.place_id = place_id
        super().__init__("Hotel already in folder")
