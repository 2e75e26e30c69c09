"""PlantBaby error types.

Every error carries a short user-facing message and the HTTP status the API
answers with. Nothing raised from here is meant to stop the process.
"""


class PlantBabyError(Exception):
    """Base class for all PlantBaby errors."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": type(self).__name__}


class StorageError(PlantBabyError):
    """Durable storage could not be read or written."""

    default_message = "Storage is unavailable"


class InvalidPlantError(PlantBabyError):
    status_code = 400
    default_message = "Plant name must not be empty"


class PlantNotFoundError(PlantBabyError):
    status_code = 404
    default_message = "Plant not found"


class ImageConversionError(PlantBabyError):
    """Image bytes could not be decoded or re-encoded as JPEG."""

    status_code = 422
    default_message = "The image could not be processed"


class IdentificationError(PlantBabyError):
    """Base for failures talking to the identification service."""

    status_code = 502
    default_message = "Plant identification failed"


class IdentificationApiError(IdentificationError):
    """Non-success status or transport failure."""

    default_message = "Unknown error occurred"

    def __init__(self, message: str | None = None, status: int | None = None):
        super().__init__(message)
        self.status = status


class IdentificationDecodingError(IdentificationError):
    """The response did not have the expected shape."""

    default_message = "Could not read the identification response"
