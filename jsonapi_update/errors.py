# Exceptions raised by the host model layer (nested attribute assignment and persistence)
#
# The sanitizer itself never raises, these are raised by the JsonApiUpdateMixin when
# the sanitized attributes are assigned and saved.
#
# The application loglevel determines the level of detail kept in the message.
# If set to debug, sensitive info (ids, db errors) might be exposed !
#
from http import HTTPStatus
from sqlalchemy.exc import DontWrapMixin
import jsonapi_update
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class JsonapiUpdateError(Exception, DontWrapMixin):
    """
    Base class, DontWrapMixin prevents sqlalchemy from wrapping the errors raised in flush hooks
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""


class ValidationError(JsonapiUpdateError):
    """
    This exception is raised when invalid attributes have been supplied (client side input)
    Always keep the message, it's meant to be sent back to the client
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Validation Error: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value):
        Exception.__init__(self, message)
        self.status_code = status_code
        jsonapi_update.log.warning("ValidationError: %s", message)
        self.message += message


class UnknownAttributeError(ValidationError):
    """
    An attribute that isn't mapped on the model (and isn't a nested attributes key) was assigned
    """

    message = "Unknown Attribute: "


class TooManyRecords(ValidationError):
    """
    A nested attributes collection exceeds the configured `limit`
    """

    message = "Too Many Records: "


class RecordNotFound(JsonapiUpdateError):
    """
    A nested attributes entry references an id that isn't associated with the parent record
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "RecordNotFound "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        Exception.__init__(self, message)
        self.status_code = status_code
        jsonapi_update.log.error("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class RecordNotSaved(JsonapiUpdateError):
    """
    This exception is raised by `save_or_fail` when the record could not be persisted
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Record Not Saved: "

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        Exception.__init__(self, str(message))
        self.status_code = status_code
        jsonapi_update.log.error("Record Not Saved: %s", message)
        if is_debug():
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG
