"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error.

    Attributes:
        retryable: Whether the caller may retry the same operation unchanged
    """

    retryable: bool = False


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """Raised when a write collides with existing state."""

    pass


class ThemeNotFoundError(NotFoundError):
    """Raised when a vote references a theme that does not exist."""

    def __init__(self, theme_id: int):
        self.theme_id = theme_id
        super().__init__("Theme", str(theme_id))


class DuplicateVoteError(ConflictError):
    """Raised when the user already voted on the theme."""

    def __init__(self, user_id: str, theme_id: int):
        self.user_id = user_id
        self.theme_id = theme_id
        super().__init__(f"User {user_id} already voted on theme {theme_id}")


class InvalidVoteKindError(ValidationError):
    """Raised when the vote kind is not one of yes, no or skip."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid vote type: {value!r}")


class StorageUnavailableError(DomainError):
    """Raised when the persistence layer cannot be reached."""

    retryable = True


class InvalidCredentialError(DomainError):
    """Raised when a bearer credential cannot be resolved to a user."""

    pass


class IdentityProviderUnavailableError(DomainError):
    """Raised when the identity provider cannot answer a lookup."""

    retryable = True
