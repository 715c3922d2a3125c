"""Custom exceptions for the salon POS application."""

class PosError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(PosError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class NotFoundError(PosError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class EmptySaleError(BusinessLogicError):
    """Raised when a sale with no line items is parked or checked out."""
    def __init__(self, message="Cart is empty"):
        super().__init__(message, status_code=400)

class PersistenceFailure(PosError):
    """Raised when the store rejects a checkout write. The cart is left as it was."""
    def __init__(self, message="Error processing transaction", payload=None):
        super().__init__(message, 502, payload)

class UnauthorizedError(PosError):
    """Raised when no user is logged in."""
    def __init__(self, message="Login required"):
        super().__init__(message, 401)

class LicenseRequiredError(PosError):
    """Raised when the account has no active license."""
    def __init__(self, message="An active license is required"):
        super().__init__(message, 402, {'redirect': '/activate'})
