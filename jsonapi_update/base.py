# base.py: implements the JsonApiUpdateMixin SQLAlchemy db Mixin
#
# pylint: disable=logging-format-interpolation,no-member,line-too-long,protected-access
#
"""
JsonApiUpdateMixin customizable attributes and methods, override these to customize the behavior of the mixin.

nested_attributes:
Type: Dict[str, NestedAttributesConfig]
Description: The relationships that accept nested attributes ("<relationship>_attributes" keys)


db_commit:
Type: bool
Description: Indicates whether `save` commits the session (otherwise the session is only flushed).


jsonapi_update:
Type: method
Description: Sanitizes and assigns the attributes, then saves the instance. Returns False if the save failed.


jsonapi_update_or_fail:
Type: method
Description: Sanitizes and assigns the attributes, then saves the instance. Raises if the save failed.


assign_jsonapi_attributes:
Type: method
Description: Sanitizes and assigns the attributes without saving.


assign_attributes:
Type: method
Description: Assigns column, relationship and nested attributes.


save / save_or_fail:
Type: method
Description: Validates and persists the instance and its nested records.


_s_validate:
Type: method
Description: Validation hook, raise a ValidationError to prevent the instance from being saved.


_s_lookup:
Type: method
Description: Returns the value for a lookup name (eg. "tag_ids"), None if the instance doesn't provide it.


_s_association_ids:
Type: method
Description: Returns the ids of the persisted records of a to-many relationship.
"""
from __future__ import annotations
import sqlalchemy
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.ext.hybrid import hybrid_property
from typing import Any, Mapping, Optional

# jsonapi_update dependencies:
import jsonapi_update
from . import extensions
from .config import get_config
from .errors import RecordNotSaved, UnknownAttributeError, ValidationError
from .inflection import association_name, is_nested_attributes_key, singularize
from .nested_attributes import apply_pending_destructions, assign_nested_attributes, nested_records, record_id


class JsonApiUpdateMixin:
    """This SQLAlchemy mixin implements JSON:API compliant updates for Flask-SQLAlchemy models

    Relationships listed in `nested_attributes` can be written with "<relationship>_attributes" keys,
    `jsonapi_update` replaces the members of every relationship mentioned in the attributes:
    associated records that aren't mentioned are destroyed.

    The mixin methods have the `_s_` prefix when they could collide with column names
    """

    db_commit = True  # commit when saved, flush only if False
    nested_attributes = {}  # relationship name => NestedAttributesConfig

    #
    # JSON:API operations
    #
    def jsonapi_update(self, attributes: Mapping) -> bool:
        """
        Update the instance and its relationships in a manner that is consistent with a JSON:API PATCH,
        cfr. https://jsonapi.org/format/#crud-updating-resource-relationships
        :param attributes: attributes to save on the instance and its associations
        :return: True if the instance was saved
        """
        return extensions.jsonapi_update(self, attributes)

    def jsonapi_update_or_fail(self, attributes: Mapping) -> None:
        """
        :param attributes: attributes to save on the instance and its associations
        :raises RecordNotSaved: if the instance couldn't be saved
        """
        extensions.jsonapi_update_or_fail(self, attributes)

    def assign_jsonapi_attributes(self, attributes: Mapping) -> None:
        """
        Assign the attributes (without saving), destroying the associated records that aren't mentioned
        """
        extensions.assign_jsonapi_attributes(self, attributes)

    #
    # Host model operations
    #
    def assign_attributes(self, attributes: Mapping) -> None:
        """
        :param attributes: column, relationship and nested attribute values
        """
        mapper = sqla_inspect(type(self))
        for attr_name, attr_val in attributes.items():
            if is_nested_attributes_key(attr_name):
                rel_name = association_name(attr_name)
                config = self.nested_attributes.get(rel_name)
                if config is None:
                    raise UnknownAttributeError(f'"{attr_name}" for {type(self).__name__} (nested attributes not enabled for "{rel_name}")')
                assign_nested_attributes(self, rel_name, attr_val, config)
            elif attr_name in mapper.attrs or isinstance(getattr(type(self), attr_name, None), (property, hybrid_property)):
                setattr(self, attr_name, attr_val)
            else:
                raise UnknownAttributeError(f'"{attr_name}" for {type(self).__name__}')

    def _s_validate(self) -> None:
        """
        Validation hook: raise a ValidationError if the instance shouldn't be saved
        """
        return None

    def _s_validate_nested(self) -> None:
        self._s_validate()
        for record in nested_records(self):
            validate = getattr(record, "_s_validate_nested", None)
            if callable(validate):
                validate()

    def _s_save(self) -> None:
        self._s_validate_nested()
        session = jsonapi_update.DB.session
        try:
            apply_pending_destructions(self, session)
            session.add(self)
            if self.db_commit:
                session.commit()
            else:
                session.flush()
        except sqlalchemy.exc.SQLAlchemyError:
            session.rollback()
            raise

    def save(self) -> bool:
        """
        :return: True if the instance was saved, False if validation or the db operation failed
        """
        try:
            self._s_save()
        except (ValidationError, sqlalchemy.exc.SQLAlchemyError) as exc:
            jsonapi_update.log.warning(f"Failed to save {self}: {exc}")
            return False
        return True

    def save_or_fail(self) -> None:
        """
        :raises ValidationError: if the instance is invalid
        :raises RecordNotSaved: if the db operation failed
        """
        try:
            self._s_save()
        except sqlalchemy.exc.SQLAlchemyError as exc:
            raise RecordNotSaved(exc) from exc

    #
    # Lookups
    #
    def _s_lookup(self, lookup_name: str) -> Optional[Any]:
        """
        :param lookup_name: eg. "tag_ids"
        :return: the value of the lookup, None if the instance doesn't provide it

        attributes and methods defined on the model take precedence, otherwise
        "<singular>_ids" resolves to the ids of the matching to-many relationship
        """
        if hasattr(type(self), lookup_name):
            result = getattr(self, lookup_name)
            return result() if callable(result) else result

        suffix = get_config("IDS_LOOKUP_SUFFIX")
        if not lookup_name.endswith(suffix):
            return None
        singular_name = lookup_name[: -len(suffix)]
        for rel in sqla_inspect(type(self)).relationships:
            if rel.uselist and singularize(rel.key) == singular_name:
                return self._s_association_ids(rel.key)
        return None

    def _s_association_ids(self, rel_name: str) -> list:
        """
        :param rel_name: to-many relationship name
        :return: ids of the persisted records in the relationship, in collection order
        """
        return [record_id(record) for record in getattr(self, rel_name) if sqla_inspect(record).has_identity]
