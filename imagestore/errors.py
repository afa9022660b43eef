"""Error taxonomy for the image store and its JSON rendering."""
import logging
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ImageStoreError(Exception):
    status_code = 500
    kind = "internal_error"
    default_message = "Something went wrong."

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"error": self.kind, "message": self.message}


class Unauthenticated(ImageStoreError):
    status_code = 401
    kind = "unauthenticated"
    default_message = "Authentication required."


class ValidationFailed(ImageStoreError):
    status_code = 422
    kind = "validation_failed"
    default_message = "The given data was invalid."

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors  # field -> [messages]

    def to_dict(self):
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class NotFound(ImageStoreError):
    status_code = 404
    kind = "not_found"
    default_message = "Image not found."


class Forbidden(ImageStoreError):
    status_code = 403
    kind = "forbidden"
    default_message = "You do not have permission to perform this action."


class StorageInconsistency(ImageStoreError):
    """A record exists but its blob does not."""

    status_code = 500
    kind = "storage_inconsistency"
    default_message = "Stored image data is unavailable."


class TransactionAborted(ImageStoreError):
    status_code = 500
    kind = "transaction_aborted"
    default_message = "The operation failed and was rolled back."


def register_error_handlers(app):
    @app.errorhandler(ImageStoreError)
    def handle_image_store_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", error.kind, error.message)
        return error.to_dict(), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        kind = (error.name or "error").lower().replace(" ", "_")
        return {"error": kind, "message": error.description}, error.code
