# flake8: noqa: F401
#
# jsonapi_update: JSON:API relationship replacement for SQLAlchemy nested attribute updates
#
from .jsonapi_update_init import DB, log, JsonApiUpdate
from .errors import ValidationError, UnknownAttributeError, TooManyRecords, RecordNotFound, RecordNotSaved
from .sanitize import sanitize_jsonapi_attributes
from .inflection import derive_ids_lookup_name
from .extensions import jsonapi_update, jsonapi_update_or_fail, assign_jsonapi_attributes
from .nested_attributes import NestedAttributesConfig
from .base import JsonApiUpdateMixin
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "JsonApiUpdate",
    "DB",
    "log",
    # operations:
    "jsonapi_update",
    "jsonapi_update_or_fail",
    "assign_jsonapi_attributes",
    "sanitize_jsonapi_attributes",
    "derive_ids_lookup_name",
    # models:
    "JsonApiUpdateMixin",
    "NestedAttributesConfig",
    # Errors:
    "ValidationError",
    "UnknownAttributeError",
    "TooManyRecords",
    "RecordNotFound",
    "RecordNotSaved",
)
