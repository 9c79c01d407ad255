"""Error taxonomy for the launch monitor."""


class LaunchwatchError(Exception):
    """Base exception for launch monitor errors."""


class TransientFetchError(LaunchwatchError):
    """Exception for a failed token poll (transport, status or payload)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ModerationRequestError(LaunchwatchError):
    """Exception for a rejected or unreachable mark-as-scam request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class LookupMiss(LaunchwatchError):
    """Exception for a token id that is not in the current snapshot."""

    def __init__(self, token_id: int):
        self.token_id = token_id
        super().__init__(f"Token {token_id} not found in current snapshot")
