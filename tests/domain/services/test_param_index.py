from __future__ import annotations

import logging

import pytest

from pgconfiguration.domain.models.param import Param
from pgconfiguration.domain.services.param_index import build_param_index


def _params(*rows: tuple) -> list[Param]:
    return [Param(name=n, category=c, value=v) for n, c, v in rows]


def test_build_param_index_keeps_category_encounter_order() -> None:
    params = _params(
        ("b", "Memory", "1"),
        ("z", "Connections", "2"),
        ("a", "Memory", "3"),
        ("m", "Connections", "4"),
    )
    index = build_param_index(params)

    assert list(index.by_category) == ["Memory", "Connections"]
    assert [params[s].name for s in index.by_category["Memory"]] == ["b", "a"]
    assert [params[s].name for s in index.by_category["Connections"]] == ["z", "m"]
    assert index.duplicates == []


def test_build_param_index_is_consistent_between_indexes() -> None:
    params = _params(
        ("a", "X", "1"),
        ("b", "Y", "2"),
        ("c", "X", "3"),
        ("b", "X", "4"),
        ("d", "Z", "5"),
    )
    index = build_param_index(params)

    assert len(index.by_name) == len({p.name for p in params})
    bucket_slots = [slot for slots in index.by_category.values() for slot in slots]
    assert sorted(bucket_slots) == sorted(index.by_name.values())


def test_build_param_index_last_duplicate_wins_and_is_reported(
    caplog: pytest.LogCaptureFixture,
) -> None:
    params = _params(
        ("shared_buffers", "Memory", "128MB"),
        ("port", "Connections", "5432"),
        ("shared_buffers", "Tuning", "256MB"),
    )
    with caplog.at_level(logging.WARNING):
        index = build_param_index(params)

    assert params[index.by_name["shared_buffers"]].value == "256MB"
    # 被覆盖的旧定义所在分类只剩它一个，分类随之消失
    assert "Memory" not in index.by_category
    assert index.by_category["Tuning"] == [2]
    assert index.duplicates == ["shared_buffers"]
    assert "shared_buffers" in caplog.text


def test_build_param_index_indexes_slots_not_copies() -> None:
    params = _params(("work_mem", "Memory", "1MB"))
    index = build_param_index(params)

    params[index.by_name["work_mem"]].value = "4MB"
    slot = index.by_category["Memory"][0]
    assert params[slot].value == "4MB"


def test_build_param_index_empty() -> None:
    index = build_param_index([])
    assert index.by_name == {}
    assert index.by_category == {}


def test_build_param_index_duplicate_keeps_first_encounter_category_order() -> None:
    params = _params(("a", "X", "1"), ("b", "Y", "2"), ("a", "X", "3"))
    index = build_param_index(params)

    assert list(index.by_category) == ["X", "Y"]
    assert index.by_category["X"] == [2]
    assert index.by_category["Y"] == [1]
    assert index.by_name == {"a": 2, "b": 1}
