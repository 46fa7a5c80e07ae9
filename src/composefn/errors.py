"""
Error taxonomy for the deployment composition function.

Every error carries enough context to name the operation and the field
or type that failed, and wraps the underlying cause in its message.

Usage::

    from composefn.errors import FieldReadError

    try:
        desired = synthesize(observed, desired)
    except FieldReadError as e:
        print(e.field, e.fields)
"""

from __future__ import annotations

from typing import Optional, Sequence


class FunctionError(Exception):
    """Base class for all errors raised by composefn."""


class FieldPathError(FunctionError):
    """Raised when a field path is malformed or does not resolve."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FieldReadError(FunctionError):
    """Raised when a required field of the composite is absent or not a string.

    ``field`` is the first failing field; ``fields`` lists every failing
    field found while validating the composite's spec.
    """

    def __init__(
        self,
        field: str,
        kind: str = "",
        fields: Optional[Sequence[str]] = None,
        cause: Optional[str] = None,
    ) -> None:
        self.field = field
        self.kind = kind
        self.fields = list(fields) if fields else [field]
        self.cause = cause
        message = f"cannot read {field} field of {kind or 'composite resource'}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConversionError(FunctionError):
    """Raised when a typed resource cannot be converted to document form."""

    def __init__(self, source: str, target: str, cause: Optional[str] = None) -> None:
        self.source = source
        self.target = target
        self.cause = cause
        message = f"cannot convert {source} to {target}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class RequestError(FunctionError):
    """Raised when state cannot be extracted from a request envelope."""

    def __init__(self, what: str, cause: Optional[str] = None) -> None:
        self.what = what
        self.cause = cause
        message = f"cannot get {what} from RunFunctionRequest"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)
