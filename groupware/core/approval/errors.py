"""Errors raised by the approval workflow.

Every precondition failure is one of these, raised before anything is
written. Callers map them to transport-level responses.
"""

from typing import Optional


class ApprovalError(Exception):
    """Base class for approval workflow failures."""
    
    code = "approval_error"
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApprovalError):
    """The approval (or a referenced record) does not exist."""
    
    code = "not_found"


class InvalidStateError(ApprovalError):
    """The operation is illegal for the approval's current status."""
    
    code = "invalid_state"
    
    def __init__(self, message: str, current_state: Optional[str] = None):
        super().__init__(message)
        self.current_state = current_state


class ForbiddenError(ApprovalError):
    """The acting user has no authority for this operation."""
    
    code = "forbidden"


class ValidationError(ApprovalError):
    """The request payload is malformed."""
    
    code = "validation_error"
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
