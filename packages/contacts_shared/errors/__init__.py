"""Error taxonomy shared by the contacts packages."""

from . import codes
from .builder import make_error
from .types import ErrorCategory, ErrorDetail

__all__ = ["ErrorCategory", "ErrorDetail", "codes", "make_error"]
