class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced identity does not exist."""


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class AdminNotFoundError(NotFoundError):
    def __init__(self, message: str = "Admin not found"):
        super().__init__(message)


class ConflictError(DomainError):
    """Raised when a write would break a uniqueness rule."""


class DuplicateEmailError(ConflictError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid."""


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class NotVerifiedError(AuthenticationError):
    def __init__(self, message: str = "Please verify your email before logging in. Check your email for OTP."):
        super().__init__(message)


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class DomainRuleError(DomainError):
    """Raised when a request is well-formed but a workflow rule refuses it."""


class InvalidOrExpiredOtpError(DomainRuleError):
    def __init__(self, message: str = "Invalid or expired OTP"):
        super().__init__(message)


class NoOtpRequestedError(DomainRuleError):
    def __init__(self, message: str = "No OTP found. Please request an OTP first."):
        super().__init__(message)


class OtpExpiredError(DomainRuleError):
    def __init__(self, message: str = "OTP has expired. Please request a new OTP."):
        super().__init__(message)


class InvalidOtpError(DomainRuleError):
    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message)


class AlreadyVerifiedError(DomainRuleError):
    def __init__(self, message: str = "Email is already verified"):
        super().__init__(message)


class UserLinkedToAdminError(DomainRuleError):
    def __init__(self, message: str = "Cannot delete user that is linked to an admin account"):
        super().__init__(message)


class ExternalServiceError(DomainError):
    """Raised when a collaborator outside the process fails."""


class DeliveryFailedError(ExternalServiceError):
    def __init__(self, message: str = "Failed to send OTP email"):
        super().__init__(message)


class UploadFailedError(ExternalServiceError):
    def __init__(self, message: str = "Failed to upload image"):
        super().__init__(message)
