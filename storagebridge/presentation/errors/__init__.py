"""RFC 9457 error responses.

Exports:
    ErrorResponseBuilder: DomainError -> Problem Details response
    ProblemDetails: Response schema
    register_exception_handlers: Install handlers on the app
"""

from storagebridge.presentation.errors.error_response_builder import (
    ErrorResponseBuilder,
)
from storagebridge.presentation.errors.exception_handlers import (
    register_exception_handlers,
)
from storagebridge.presentation.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponseBuilder",
    "ProblemDetails",
    "register_exception_handlers",
]
