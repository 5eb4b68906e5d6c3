class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the acting user cannot be identified."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a required record does not exist."""


class ConflictError(DomainError):
    """Raised when an action collides with the current state of a record."""


class StorageError(DomainError):
    """Raised when the database is unavailable or a query fails."""


class NotOpenedError(NotFoundError):
    def __init__(self, store_id: int, register_date):
        super().__init__(f"Cash register for store {store_id} is not opened on {register_date}")
        self.store_id = store_id
        self.register_date = register_date


class AlreadyClosedError(ConflictError):
    def __init__(self, store_id: int, register_date):
        super().__init__(f"Cash register for store {store_id} is already closed on {register_date}")
        self.store_id = store_id
        self.register_date = register_date


class AlreadyOpenedConflict(ConflictError):
    """A register for the (store, date) already exists.

    ``result`` describes the register after the call; ``updated`` tells whether
    the opening balance and notes were applied to the existing row.
    """

    def __init__(self, result, *, updated: bool):
        if updated:
            message = "Cash register already opened for this date; opening balance and notes updated"
        else:
            message = "Cash register already opened for this date"
        super().__init__(message)
        self.result = result
        self.updated = updated


class AlreadyClockedInError(ConflictError):
    def __init__(self, user_id: int, work_date):
        super().__init__(f"User {user_id} is already clocked in on {work_date}")
        self.user_id = user_id
        self.work_date = work_date


class NoOpenSessionError(NotFoundError):
    def __init__(self, user_id: int, work_date):
        super().__init__(f"No active attendance found for user {user_id} on {work_date}")
        self.user_id = user_id
        self.work_date = work_date
