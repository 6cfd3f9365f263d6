"""Domain layer errors.

Every error carries a stable ``kind`` that is returned to API clients.
"""


class DomainError(Exception):
    """Base domain error."""

    kind: str = "DomainError"


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    kind = "NotFound"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class AccountCreationError(DomainError):
    """Account or provider link could not be created.

    Raised for uniqueness violations other than a concurrent creation of the
    same provider link, e.g. an email already owned by another account.
    """

    kind = "AccountCreationFailed"


class DuplicateProviderLinkError(DomainError):
    """An active link for (provider, external_id) already exists.

    Signals that a concurrent request created the link first; the identity
    service recovers by re-reading it.
    """

    kind = "DuplicateProviderLink"

    def __init__(self, provider: str, external_id: str):
        self.provider = provider
        self.external_id = external_id
        super().__init__(f"Provider link already exists: {provider}:{external_id}")


class SessionIssuanceError(DomainError):
    """Magic link could not be issued."""

    kind = "SessionIssuanceFailed"


class InvalidSessionError(DomainError):
    """Magic link is invalid, expired, or already redeemed."""

    kind = "InvalidSession"


class PersistenceError(DomainError):
    """Underlying storage failed."""

    kind = "PersistenceError"


class IncorrectCodeError(DomainError):
    """Submitted OTP does not match the stored code."""

    kind = "IncorrectCode"

    def __init__(self, message: str = "Incorrect verification code"):
        super().__init__(message)


class NoPendingChallengeError(IncorrectCodeError):
    """No OTP challenge is outstanding for the account.

    Reported with the same kind as an incorrect code so a replayed code never
    reads as success.
    """

    def __init__(self, message: str = "No pending verification code"):
        super().__init__(message)


class ChallengeExpiredError(DomainError):
    """Stored OTP challenge has expired."""

    kind = "Expired"

    def __init__(self, message: str = "Verification code has expired"):
        super().__init__(message)


class TokenMismatchError(DomainError):
    """Invitation token does not exist or belongs to another account."""

    kind = "TokenMismatch"

    def __init__(self, message: str = "Invalid invitation token or user mismatch"):
        super().__init__(message)


class TokenExpiredError(DomainError):
    """Invitation token is past its expiry."""

    kind = "TokenExpired"

    def __init__(self, message: str = "Invitation token has expired"):
        super().__init__(message)


class InvitationConflictError(DomainError):
    """Invitation target already belongs to someone else.

    Only brand-new CRM users can be invited; an existing link may only be
    re-invited by the account whose invitation is still pending on it.
    """

    kind = "InvitationConflict"

    def __init__(self, provider: str, external_id: str):
        self.provider = provider
        self.external_id = external_id
        super().__init__(f"Cannot invite existing user: {provider}:{external_id}")
