"""
Attribute sanitization for JSON:API compliant updates

A JSON:API PATCH replaces the members of every relationship it mentions.
Nested attribute assignment only adds and updates associated records, so before the
attributes are assigned we append a destroy entry for every associated record that
isn't mentioned in the `*_attributes` list or dict:

    # article.tag_ids == ["2", "3"]
    sanitize_jsonapi_attributes({"tags_attributes": [{"id": "2"}, {"name": "New Tag"}]}, None, article)
    => {"tags_attributes": [{"id": "2"}, {"name": "New Tag"}, {"id": "3", "_destroy": 1}]}

Associations for which the owner has no ids lookup are passed through unchanged.
"""
from collections.abc import Mapping
from typing import Any, Iterable, Optional
import jsonapi_update
from .config import get_config
from .inflection import derive_ids_lookup_name, is_nested_attributes_key


def lookup_association_ids(entity: Any, lookup_name: str) -> Optional[Iterable]:
    """
    :param entity: owner of the associations
    :param lookup_name: name of the ids lookup, eg. "tag_ids"
    :return: the ids currently associated, or None if the entity doesn't provide the lookup

    Entities implementing `_s_lookup` (cfr. JsonApiUpdateMixin) are queried through it,
    otherwise a plain attribute or method with the lookup name is used.
    """
    lookup = getattr(entity, "_s_lookup", None)
    if callable(lookup):
        return lookup(lookup_name)
    result = getattr(entity, lookup_name, None)
    if callable(result):
        result = result()
    return result


def delete_object(jsonapi_id: str) -> dict:
    """
    :param jsonapi_id: id of the associated record
    :return: nested attributes entry that destroys the record
    """
    return {"id": jsonapi_id, get_config("DESTROY_FLAG"): 1}


def build_ids_set(entries: Iterable) -> set:
    """
    :param entries: nested attribute entries
    :return: the (stringified) ids mentioned by the entries

    Entries without an "id" are new records, they don't mention any existing record
    """
    return {str(entry["id"]) for entry in entries if isinstance(entry, Mapping) and "id" in entry}


def append_delete_objects_to_list(attributes: list, association_ids: Iterable, new_ids: set) -> list:
    """
    :param attributes: sanitized nested attributes list
    :param association_ids: ids of the currently associated records
    :param new_ids: ids mentioned in `attributes`
    :return: copy of `attributes` with a destroy entry for every id not in `new_ids`
    """
    result = list(attributes)
    for association_id in association_ids:
        id_s = str(association_id)
        if id_s not in new_ids:
            result.append(delete_object(id_s))
    return result


def append_delete_objects_to_dict(attributes: dict, association_ids: Iterable, new_ids: set) -> dict:
    """
    :param attributes: sanitized nested attributes dict, eg. {"0": {..}, "1": {..}}
    :param association_ids: ids of the currently associated records
    :param new_ids: ids mentioned in the `attributes` values
    :return: copy of `attributes` with a destroy entry for every id not in `new_ids`

    The destroy entries are keyed by the size of the dict at the time they're added,
    so they continue the "0", "1", .. numbering
    """
    result = dict(attributes)
    for association_id in association_ids:
        id_s = str(association_id)
        if id_s not in new_ids:
            result[str(len(result))] = delete_object(id_s)
    return result


def _resolve_association_ids(entity: Any, key_name: str) -> Optional[Iterable]:
    lookup_name = derive_ids_lookup_name(key_name)
    association_ids = lookup_association_ids(entity, lookup_name)
    if association_ids is None:
        jsonapi_update.log.debug(f'No "{lookup_name}" lookup for "{key_name}" on {entity}, attributes passed through')
    return association_ids


def sanitize_jsonapi_attributes(attributes: Any, key_name: Optional[str], entity: Any) -> Any:
    """
    Recursively rebuild `attributes`, adding destroy entries to the nested attributes of
    the associations of `entity`

    :param attributes: attributes (sub)tree: a dict, a list or a scalar value
    :param key_name: key under which `attributes` was found in its parent, None for the root
    :param entity: owner of the associations, only used to look up the associated ids
    :return: sanitized copy of `attributes`
    """
    if isinstance(attributes, (list, tuple)):
        # list items have no key of their own: an item is never itself a nested attributes collection
        _attributes = [sanitize_jsonapi_attributes(item, None, entity) for item in attributes]
        if not is_nested_attributes_key(key_name):
            return _attributes

        association_ids = _resolve_association_ids(entity, key_name)
        if association_ids is None:
            return _attributes

        new_ids = build_ids_set(_attributes)
        result = append_delete_objects_to_list(_attributes, association_ids, new_ids)
        jsonapi_update.log.debug(f'"{key_name}": {len(result) - len(_attributes)} destroy entries added')
        return result

    if isinstance(attributes, Mapping):
        _attributes = {key: sanitize_jsonapi_attributes(value, key, entity) for key, value in attributes.items()}
        if not is_nested_attributes_key(key_name):
            return _attributes

        association_ids = _resolve_association_ids(entity, key_name)
        if association_ids is None:
            return _attributes

        new_ids = build_ids_set(_attributes.values())
        result = append_delete_objects_to_dict(_attributes, association_ids, new_ids)
        jsonapi_update.log.debug(f'"{key_name}": {len(result) - len(_attributes)} destroy entries added')
        return result

    return attributes
