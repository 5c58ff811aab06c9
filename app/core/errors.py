"""Errors raised by the pricing resolver and its repository"""
from typing import Optional


class PricingError(Exception):
    """Base class for failures that abort a price calculation."""


class NotFoundError(PricingError):

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        if resource_id is not None:
            message = f"{resource} with id {resource_id} not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)


class RemoteFailureError(PricingError):
    """The backing store could not answer a lookup."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Store lookup '{operation}' failed: {cause}")
