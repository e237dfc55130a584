# users/exceptions.py
"""
Custom exceptions for authentication and user management
"""

class AuthenticationServiceError(Exception):
    """Base exception for authentication service errors"""
    pass


class EmailAlreadyExistsError(AuthenticationServiceError):
    """Raised when attempting to register with an existing email"""
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} is already registered")


class InvalidUserTypeError(AuthenticationServiceError):
    """Raised when registering with a role that cannot self-register"""
    pass


class RoleMismatchError(AuthenticationServiceError):
    """Raised when an account logs in through the wrong role's entry point"""
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Account is a {actual}, not a {expected}")
