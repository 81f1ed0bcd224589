# lending/exceptions.py


class LendingError(Exception):
    """Base class for every failure raised by the lending services.

    Each subclass carries a short ``code`` that adapters (HTTP, CLI) use to
    pick a status code or exit message without inspecting the class tree.
    """
    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LendingError):
    """A referenced title or loan does not exist"""
    code = "not_found"


class InvalidStateError(LendingError):
    """The operation is not allowed given the current inventory state"""
    code = "invalid_state"


class ConflictError(LendingError):
    """A uniqueness rule would be broken (duplicate ISBN, double borrow)"""
    code = "conflict"


class InvalidInputError(LendingError):
    """A caller supplied value fails a domain rule"""
    code = "invalid_input"


class InternalError(LendingError):
    """An invariant that should be impossible was found violated.

    This signals earlier data corruption. It is never repaired silently.
    """
    code = "internal"


class CoverStorageError(InternalError):
    """The cover image could not be written to the blob store"""
