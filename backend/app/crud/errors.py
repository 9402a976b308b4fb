"""
VideoAPI - CRUD Errors
Every error the API reports carries the HTTP status it maps to.
"""
from fastapi import status


class CrudError(Exception):
    """Base error, rendered by the application as {"error": message}."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal server error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


# ============================================================
# Request grammar
# ============================================================

class InvalidFilterError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "filter must have the format q:<field>:<operator>"


class InvalidColumnError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "column names must only contain letters and underscores"


class InvalidOperatorError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "operator must be one of eq, ne, gt, lt, ge, le, like"


class InvalidPaginationError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "offset and limit must be integers"


class EmptyBodyError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "request body is empty"


class InvalidJsonError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid json format"


class MissingResourceIdError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "resource id is missing from the path"


class UnsupportedMethodError(CrudError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "method not supported by this resource"


# ============================================================
# Multipart uploads
# ============================================================

class MultipartNameError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "multipart fields must have a name"


class MultipartNeedsContentTypeError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "multipart file must have a content type"


class MultipartTooManyFilesError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "only one file can be uploaded per request"


class MultipartNoFileError(CrudError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "no file found in multipart request"


class MimeTypeNotSupportedError(CrudError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    default_message = "mime type not supported"


class MediaRemovalError(CrudError):
    default_message = "failed to remove media files"


# ============================================================
# Authentication / authorization
# ============================================================

class UnauthorizedError(CrudError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "not authorized"


class MissingAuthError(UnauthorizedError):
    default_message = "missing authorization header or session cookie"


class InvalidAuthHeaderError(UnauthorizedError):
    default_message = "authorization header must have the format 'Bearer <token>'"


class InvalidTokenError(UnauthorizedError):
    default_message = "invalid or expired token"


class InvalidRoleError(UnauthorizedError):
    default_message = "token does not carry a valid role"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "incorrect user or password"


class ForbiddenError(CrudError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden"
