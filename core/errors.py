"""
core/errors.py -- Classified error vocabulary for the test server.

Every failure the core can produce is one of the codes in ErrorCode. Core
components raise a TestServerError subclass; the transport layer (api/main.py)
renders it as the wire envelope {"errors": [{"code": "<code>"}]} with the
status_code carried on the exception. Nothing in the core builds HTTP
responses directly.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or jobs/.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes understood by the client library. Values are wire strings."""

    APP_ID_INVALID = "authentication_app_id_invalid"
    AUTHENTICATION_FAILED = "authentication_failed"
    RESOURCE_NOT_FOUND = "resource_not_found"
    GENERAL = "general"
    SERVER_SIDE = "server_side"
    UNKNOWN_PROVIDER = "unknown_provider"
    NOT_IMPLEMENTED = "not_implemented_by_test_server"


class TestServerError(Exception):
    """Base class for every classified failure.

    Subclasses pin code and status_code; message is for logs only and is
    never sent to the client.
    """

    __test__ = False  # keep pytest from collecting this as a test class

    code: ErrorCode = ErrorCode.GENERAL
    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        self.message = message or self.code.value
        super().__init__(self.message)


class AppIdInvalid(TestServerError):
    code = ErrorCode.APP_ID_INVALID
    status_code = 401


class AuthenticationFailed(TestServerError):
    """Bad credentials, unknown/foreign session token, or job owned by someone else."""

    code = ErrorCode.AUTHENTICATION_FAILED
    status_code = 401


class ResourceNotFound(TestServerError):
    code = ErrorCode.RESOURCE_NOT_FOUND
    status_code = 404


class MalformedRequest(TestServerError):
    """Request body that is not valid JSON or does not match the expected shape."""

    code = ErrorCode.GENERAL
    status_code = 400


class DuplicateUsername(TestServerError):
    # The upstream API reports this as a generic server-side failure.
    code = ErrorCode.SERVER_SIDE
    status_code = 500


class UnknownProvider(TestServerError):
    code = ErrorCode.UNKNOWN_PROVIDER
    status_code = 400


class NotImplementedByTestServer(TestServerError):
    code = ErrorCode.NOT_IMPLEMENTED
    status_code = 500
