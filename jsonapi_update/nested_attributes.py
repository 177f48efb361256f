"""
Nested attribute assignment for SQLAlchemy relationships

Models declare which relationships accept nested attributes:

    class Article(JsonApiUpdateMixin, DB.Model):
        tags = DB.relationship("Tag", cascade="all, delete-orphan")
        nested_attributes = {"tags": NestedAttributesConfig(allow_destroy=True)}

    article.assign_attributes({"tags_attributes": [{"id": "2", "name": "x"}, {"name": "new"}, {"id": "3", "_destroy": 1}]})

- entries without an "id" build a new related record
- entries with an "id" update the associated record with that id
- entries with a truthy "_destroy" flag mark the associated record for destruction,
  if the relationship was configured with `allow_destroy`
Records marked for destruction are deleted when the owner is saved (cfr. `apply_pending_destructions`).
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union
from sqlalchemy import inspect as sqla_inspect
import jsonapi_update
from .config import get_config
from .errors import RecordNotFound, TooManyRecords, UnknownAttributeError, ValidationError

# string values of the destroy flag that are considered False
FALSE_STRINGS = {"", "0", "f", "false", "off", "n", "no"}


@dataclass(frozen=True)
class NestedAttributesConfig:
    """Nested attributes configuration for a single relationship

    :param allow_destroy: whether entries with a destroy flag destroy the associated record
    :param reject_if: "all_blank" or a callable, new entries for which it holds are ignored
    :param limit: max number of entries in a collection
    :param update_only: (to-one relationships) update the existing record when no id is given
    """

    allow_destroy: bool = False
    reject_if: Optional[Union[str, Callable[[Mapping], bool]]] = None
    limit: Optional[int] = None
    update_only: bool = False

    def rejects(self, attributes: Mapping) -> bool:
        """
        :param attributes: nested attributes entry
        :return: True if the entry should be ignored
        """
        if self.allow_destroy and has_destroy_flag(attributes):
            return False
        if self.reject_if == "all_blank":
            destroy_flag = get_config("DESTROY_FLAG")
            return all(_is_blank(value) for key, value in attributes.items() if key != destroy_flag)
        if callable(self.reject_if):
            return bool(self.reject_if(attributes))
        return False


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple, set)):
        return not value
    return False


def has_destroy_flag(attributes: Mapping) -> bool:
    """
    :param attributes: nested attributes entry
    :return: whether the entry's destroy flag casts to True
    """
    value = attributes.get(get_config("DESTROY_FLAG"))
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


def record_id(record: Any) -> Optional[str]:
    """
    :param record: SQLAlchemy instance
    :return: the primary key of the record as a string (composite keys are joined with "_"),
            None if the primary key hasn't been set yet
    """
    values = sqla_inspect(record).mapper.primary_key_from_instance(record)
    if any(value is None for value in values):
        return None
    return "_".join(str(value) for value in values)


def mark_for_destruction(owner: Any, rel_name: str, record: Any) -> None:
    """
    Destroy `record` when `owner` is saved
    """
    pending = owner.__dict__.setdefault("_s_pending_destructions", [])
    if not any(rec is record for _, rec in pending):
        pending.append((rel_name, record))


def is_marked_for_destruction(owner: Any, record: Any) -> bool:
    return any(rec is record for _, rec in owner.__dict__.get("_s_pending_destructions", []))


def _track_nested_record(owner: Any, record: Any) -> None:
    # records assigned through nested attributes may hold pending destructions of their own
    nested = owner.__dict__.setdefault("_s_nested_records", [])
    if not any(rec is record for rec in nested):
        nested.append(record)


def nested_records(owner: Any) -> list:
    """
    :return: the records that were assigned through the nested attributes of `owner`
    """
    return [rec for rec in owner.__dict__.get("_s_nested_records", []) if not is_marked_for_destruction(owner, rec)]


def apply_pending_destructions(owner: Any, session: Any) -> None:
    """
    Remove the records marked for destruction from their relationship and delete them,
    nested records are processed first
    :param owner: record owning the relationships
    :param session: SQLAlchemy session
    """
    for record in nested_records(owner):
        apply_pending_destructions(record, session)

    for rel_name, record in owner.__dict__.get("_s_pending_destructions", []):
        relationship = sqla_inspect(owner).mapper.relationships[rel_name]
        if relationship.uselist:
            collection = getattr(owner, rel_name)
            if record in list(collection):
                collection.remove(record)
        elif getattr(owner, rel_name) is record:
            setattr(owner, rel_name, None)
        if sqla_inspect(record).persistent:
            jsonapi_update.log.debug(f"Destroying {record} ({rel_name} of {owner})")
            session.delete(record)
        elif record in session:
            session.expunge(record)

    owner.__dict__["_s_pending_destructions"] = []
    owner.__dict__["_s_nested_records"] = []


def _assignable(attributes: Mapping) -> dict:
    unassignable = ("id", get_config("DESTROY_FLAG"))
    return {key: value for key, value in attributes.items() if key not in unassignable}


def assign_record_attributes(record: Any, attributes: Mapping) -> None:
    """
    Assign `attributes` to a related record, records that implement `assign_attributes`
    (cfr. JsonApiUpdateMixin) handle their own nested attributes
    """
    if callable(getattr(record, "assign_attributes", None)):
        record.assign_attributes(attributes)
        return
    for attr_name, attr_val in attributes.items():
        if not hasattr(type(record), attr_name):
            raise UnknownAttributeError(f'"{attr_name}" for {type(record).__name__}')
        setattr(record, attr_name, attr_val)


def _build_record(relationship: Any, attributes: Mapping) -> Any:
    target_cls = relationship.mapper.class_
    record = target_cls()
    assign_record_attributes(record, _assignable(attributes))
    return record


def _assign_to_or_mark_for_destruction(owner, rel_name, record, attributes, config):
    assign_record_attributes(record, _assignable(attributes))
    _track_nested_record(owner, record)
    if config.allow_destroy and has_destroy_flag(attributes):
        mark_for_destruction(owner, rel_name, record)


def _collection_entries(rel_name: str, attributes: Any) -> list:
    if isinstance(attributes, Mapping):
        if "id" in attributes:
            # a dict payload is keyed by position, a single record has to be wrapped in a list
            raise ValidationError(f'"{rel_name}" nested attributes dict should map keys to records, wrap a single record in a list')
        # {"0": {..}, "1": {..}}: the keys only determine the order
        return list(attributes.values())
    if isinstance(attributes, (list, tuple)):
        return list(attributes)
    raise ValidationError(f'"{rel_name}" nested attributes should be a list or a dict, got {type(attributes).__name__}')


def assign_nested_attributes_for_collection(owner: Any, relationship: Any, attributes: Any, config: NestedAttributesConfig) -> None:
    """
    :param owner: record owning the relationship
    :param relationship: to-many SQLAlchemy relationship property
    :param attributes: list (or dict) of nested attribute entries
    :param config: nested attributes configuration of the relationship
    """
    rel_name = relationship.key
    entries = _collection_entries(rel_name, attributes)

    if config.limit is not None and len(entries) > config.limit:
        raise TooManyRecords(f'"{rel_name}": maximum {config.limit} records are allowed, got {len(entries)}')

    collection = getattr(owner, rel_name)
    existing = {record_id(record): record for record in collection}

    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ValidationError(f'Invalid "{rel_name}" nested attributes entry: {entry}')
        if "id" not in entry or entry["id"] in (None, ""):
            if (config.allow_destroy and has_destroy_flag(entry)) or config.rejects(entry):
                continue
            record = _build_record(relationship, entry)
            collection.append(record)
            _track_nested_record(owner, record)
            continue

        record = existing.get(str(entry["id"]))
        if record is None:
            raise RecordNotFound(f'Couldn\'t find {relationship.mapper.class_.__name__} with id "{entry["id"]}" for {owner}')
        if config.rejects(entry):
            continue
        _assign_to_or_mark_for_destruction(owner, rel_name, record, entry, config)


def assign_nested_attributes_for_one(owner: Any, relationship: Any, attributes: Any, config: NestedAttributesConfig) -> None:
    """
    :param owner: record owning the relationship
    :param relationship: to-one SQLAlchemy relationship property
    :param attributes: nested attributes dict
    :param config: nested attributes configuration of the relationship
    """
    rel_name = relationship.key
    if not isinstance(attributes, Mapping):
        raise ValidationError(f'"{rel_name}" nested attributes should be a dict, got {type(attributes).__name__}')

    existing = getattr(owner, rel_name)
    entry_id = attributes.get("id")
    has_id = entry_id not in (None, "")

    if existing is not None and (config.update_only or (has_id and str(entry_id) == record_id(existing))):
        if not config.rejects(attributes):
            _assign_to_or_mark_for_destruction(owner, rel_name, existing, attributes, config)
    elif has_id:
        raise RecordNotFound(f'Couldn\'t find {relationship.mapper.class_.__name__} with id "{entry_id}" for {owner}')
    elif not ((config.allow_destroy and has_destroy_flag(attributes)) or config.rejects(attributes)):
        record = _build_record(relationship, attributes)
        setattr(owner, rel_name, record)
        _track_nested_record(owner, record)


def assign_nested_attributes(owner: Any, rel_name: str, attributes: Any, config: NestedAttributesConfig) -> None:
    """
    Assign the nested attributes of the `rel_name` relationship of `owner`
    """
    relationships = {rel.key: rel for rel in sqla_inspect(owner).mapper.relationships}
    relationship = relationships.get(rel_name)
    if relationship is None:
        raise UnknownAttributeError(f'"{rel_name}" is not a relationship of {type(owner).__name__}')

    if relationship.uselist:
        assign_nested_attributes_for_collection(owner, relationship, attributes, config)
    else:
        assign_nested_attributes_for_one(owner, relationship, attributes, config)
