from typing import Optional

import pytest

import jsonapi_update
from jsonapi_update.extensions import assign_jsonapi_attributes, jsonapi_update as update, jsonapi_update_or_fail


class _SaveFailed(Exception):
    pass


class _FakeEntity:
    """Host entity that records the operations performed on it"""

    def __init__(self, tag_ids: Optional[list] = None, save_result: bool = True) -> None:
        self.tag_ids = tag_ids
        self.save_result = save_result
        self.assigned = []
        self.operations = []

    def assign_attributes(self, attributes: dict) -> None:
        self.operations.append("assign")
        self.assigned.append(attributes)

    def save(self) -> bool:
        self.operations.append("save")
        return self.save_result

    def save_or_fail(self) -> None:
        self.operations.append("save_or_fail")
        if not self.save_result:
            raise _SaveFailed("not saved")


def test_assign_jsonapi_attributes_assigns_sanitized_attributes() -> None:
    entity = _FakeEntity(tag_ids=["2", "3"])

    assign_jsonapi_attributes(entity, {"title": "x", "tags_attributes": [{"id": "2"}, {"name": "New Tag"}]})

    assert entity.operations == ["assign"]
    assert entity.assigned == [
        {"title": "x", "tags_attributes": [{"id": "2"}, {"name": "New Tag"}, {"id": "3", "_destroy": 1}]}
    ]


@pytest.mark.parametrize("save_result", [True, False])
def test_jsonapi_update_returns_save_result(save_result: bool) -> None:
    entity = _FakeEntity(tag_ids=["1"], save_result=save_result)

    assert update(entity, {"tags_attributes": []}) is save_result
    assert entity.operations == ["assign", "save"]
    assert entity.assigned == [{"tags_attributes": [{"id": "1", "_destroy": 1}]}]


def test_jsonapi_update_or_fail_propagates_save_error() -> None:
    entity = _FakeEntity(save_result=False)

    with pytest.raises(_SaveFailed):
        jsonapi_update_or_fail(entity, {"title": "x"})
    assert entity.operations == ["assign", "save_or_fail"]


def test_jsonapi_update_or_fail_saves() -> None:
    entity = _FakeEntity()

    jsonapi_update_or_fail(entity, {"title": "x"})

    assert entity.operations == ["assign", "save_or_fail"]


def test_package_exports() -> None:
    assert jsonapi_update.jsonapi_update is update
    assert jsonapi_update.assign_jsonapi_attributes is assign_jsonapi_attributes
    assert jsonapi_update.derive_ids_lookup_name("tags_attributes") == "tag_ids"
