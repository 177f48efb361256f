"""
JSON:API update operations

The operations take the entity explicitly, any object that provides
`assign_attributes(attributes)`, `save()` and `save_or_fail()` can be updated
(cfr. JsonApiUpdateMixin for SQLAlchemy models).

> If a relationship is provided in the relationships member of a resource object in a PATCH
> request, its value MUST be a relationship object with a data member. The relationship's
> value will be replaced with the value specified in this member.

Nested attributes with the "_attributes" suffix are processed as follows:
- entries without an id create a new record
- entries with an id update the associated record
- associated records that aren't mentioned are destroyed (which is not how a plain
  `assign_attributes` behaves), provided the relationship allows it
"""
from typing import Any, Mapping
from .sanitize import sanitize_jsonapi_attributes


def assign_jsonapi_attributes(entity: Any, attributes: Mapping) -> None:
    """
    Assign the attributes to the entity (without saving), adding the destroy entries for
    the associated records that aren't mentioned
    :param entity: model instance
    :param attributes: attributes to assign to the entity and its associations
    """
    entity.assign_attributes(sanitize_jsonapi_attributes(attributes, None, entity))


def jsonapi_update(entity: Any, attributes: Mapping) -> bool:
    """
    :param entity: model instance
    :param attributes: attributes to save on the entity and its associations
    :return: True if the entity was saved
    """
    assign_jsonapi_attributes(entity, attributes)
    return entity.save()


def jsonapi_update_or_fail(entity: Any, attributes: Mapping) -> None:
    """
    Like `jsonapi_update`, errors raised by `entity.save_or_fail()` are propagated
    :param entity: model instance
    :param attributes: attributes to save on the entity and its associations
    """
    assign_jsonapi_attributes(entity, attributes)
    entity.save_or_fail()
