# voter_api/errors.py
# Error kinds shared by the validation service, both storage backends and the
# HTTP adapter. Callers branch on the family (ValidationError, NotFoundError,
# ConflictError, StorageError), never on message text.


class VoterApiError(Exception):
    default_message = "Unhandled voter API error."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


# --- Validation (raised before any storage access) ---

class ValidationError(VoterApiError):
    default_message = "The request is invalid."


class InvalidIdError(ValidationError):
    default_message = "id must be a positive non-zero integer."


class InvalidNameError(ValidationError):
    default_message = "name must not be blank"


class InvalidEmailError(ValidationError):
    default_message = "email must be in the format of <address>@<domain>"


class InvalidDateError(ValidationError):
    default_message = "date must not be nil"


# --- Not found family ---

class NotFoundError(VoterApiError):
    default_message = "The requested record was not found."


class VoterNotFoundError(NotFoundError):
    default_message = "The Voter Id was not found."


class HistoryNotFoundError(NotFoundError):
    default_message = "The History Id for the Voter was not found"


class NoHistoryError(NotFoundError):
    default_message = "No history was found for the voter Id"


# --- Conflicts ---

class ConflictError(VoterApiError):
    default_message = "The record already exists."


class VoterAlreadyExistsError(ConflictError):
    default_message = "Attempted to create a voter but the id already exists."


class HistoryAlreadyExistsError(ConflictError):
    default_message = "Attempted to create new history for the voter but the poll Id already exists"


# --- Storage failures ---

class StorageError(VoterApiError):
    """Infrastructure failure talking to the backing store."""

    default_message = "The voter store is unavailable."


class LoadFailureError(StorageError):
    default_message = "Failed to load the database."


class SaveFailureError(StorageError):
    default_message = "Error saving to the database."
