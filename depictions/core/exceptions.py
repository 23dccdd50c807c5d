"""Depictions custom exceptions."""


class DepictionError(Exception):
    """Base exception for depictions errors."""


class UnrecognizedAddress(DepictionError):
    """Address matches neither the collection nor the item shape."""


class UnsupportedOperation(DepictionError):
    """Operation is not defined for the resolved target."""


class InvalidArgument(DepictionError):
    """Caller violated a precondition of the operation."""


class StoreError(DepictionError):
    """The underlying store rejected or failed an operation."""
