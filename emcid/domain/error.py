"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class RegistrationBlockedError(BusinessRuleViolationError):
    """Raised when account registration is restricted to administrators."""

    pass


class AccountValidationError(ValidationError):
    """Raised when a candidate account violates account validation rules."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PersistenceFailedError(DomainError):
    """Raised when an account could not be written to storage."""

    pass


class IdentityProviderError(DomainError):
    """Base error for EmercoinID interaction.

    Attributes:
        description: Provider-supplied error description, when there is one
    """

    def __init__(self, message: str, description: str | None = None):
        self.description = description
        super().__init__(message)


class TokenExchangeFailedError(IdentityProviderError):
    """Authorization code could not be exchanged for an access token."""

    pass


class TokenExchangeTimeoutError(TokenExchangeFailedError):
    """Token endpoint did not answer within the configured timeout."""

    pass


class IdentityFetchFailedError(IdentityProviderError):
    """Infocard could not be retrieved for an access token."""

    pass


class IdentityFetchTimeoutError(IdentityFetchFailedError):
    """Infocard endpoint did not answer within the configured timeout."""

    pass


class InvalidIdentityError(IdentityFetchFailedError):
    """Infocard carried no certificate serial."""

    pass
