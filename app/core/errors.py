from enum import Enum


class ErrorKind(str, Enum):
    validation = "validation"
    invalid_input = "invalid_input"
    not_found = "not_found"
    not_authenticated = "not_authenticated"
    not_authorized = "not_authorized"
    upstream_unavailable = "upstream_unavailable"
    no_match = "no_match"
    malformed_result = "malformed_result"
    adapter_error = "adapter_error"
    persistence = "persistence"


class PlacesError(Exception):
    """
    Base class for failures that are reported to the caller.

    Each subclass fixes a machine-checkable kind and the HTTP status it maps to; the message is meant for humans
    and must never contain raw store or upstream errors.
    """

    kind: ErrorKind = ErrorKind.persistence
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Client-fixable input
class ValidationError(PlacesError):
    kind = ErrorKind.validation
    status_code = 422


class InvalidImageError(ValidationError):
    pass


class EmailTakenError(ValidationError):
    pass


# Missing entities
class NotFoundError(PlacesError):
    kind = ErrorKind.not_found
    status_code = 404


class PlaceNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class CreatorNotFoundError(NotFoundError):
    pass


# Identity
class NotAuthenticatedError(PlacesError):
    kind = ErrorKind.not_authenticated
    status_code = 401


class InvalidCredentialsError(NotAuthenticatedError):
    pass


class NotAuthorizedError(PlacesError):
    kind = ErrorKind.not_authorized
    status_code = 403


# Geocoding
class GeocodingError(PlacesError):
    pass


class InvalidAddressError(GeocodingError):
    kind = ErrorKind.invalid_input
    status_code = 422


class UpstreamUnavailableError(GeocodingError):
    kind = ErrorKind.upstream_unavailable
    status_code = 503


class NoMatchError(GeocodingError):
    kind = ErrorKind.no_match
    status_code = 404


class MalformedResultError(GeocodingError):
    kind = ErrorKind.malformed_result
    status_code = 422


class GeocodingAdapterError(GeocodingError):
    kind = ErrorKind.adapter_error
    status_code = 500

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


# Storage
class PersistenceError(PlacesError):
    kind = ErrorKind.persistence
    status_code = 500
