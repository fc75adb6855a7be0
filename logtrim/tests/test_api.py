"""
Tests for trimmer/api.py and trimmer/policy.py - public entry points,
option composition and fault recovery.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

import pytest

from logtrim import (
    LimitPolicy,
    json_object_with_opts,
    trim_object,
    trim_object_with_opts,
    with_array_limit,
    with_depth_limit,
    with_ignores,
    with_string_limit,
    with_whole_limit,
)


class Mood(str, Enum):
    CALM = "calm"


class Exploding(Mapping):
    """A mapping that fails as soon as it is iterated."""

    def __getitem__(self, key):
        raise KeyError(key)

    def __iter__(self):
        raise RuntimeError("boom")

    def __len__(self):
        return 1


@dataclass
class Account:
    user: str
    password: str
    items: list = field(default_factory=list)


class TestLimitPolicy:
    def test_defaults(self):
        policy = LimitPolicy()
        assert policy.array_limit == 3
        assert policy.string_limit == 128
        assert policy.depth_limit == 10
        assert policy.whole_limit == 4096
        assert policy.ignores == frozenset()

    def test_options_applied_in_order(self):
        policy = LimitPolicy.from_options(with_array_limit(5), with_array_limit(7))
        assert policy.array_limit == 7

    def test_ignores_replace(self):
        policy = LimitPolicy.from_options(with_ignores("a"), with_ignores("b", "c"))
        assert policy.ignores == frozenset({"b", "c"})

    def test_all_options(self):
        policy = LimitPolicy.from_options(
            with_array_limit(1),
            with_string_limit(2),
            with_depth_limit(3),
            with_whole_limit(4),
        )
        assert (policy.array_limit, policy.string_limit, policy.depth_limit, policy.whole_limit) == (1, 2, 3, 4)

    def test_policy_is_immutable(self):
        policy = LimitPolicy()
        with pytest.raises(Exception):
            policy.array_limit = 9

    @pytest.mark.parametrize("bad", ["3", 3.0, True, None])
    def test_non_int_limit_rejected(self, bad):
        with pytest.raises(TypeError):
            with_array_limit(bad)


class TestScenarios:
    def test_flat_mapping_unchanged(self):
        assert trim_object({"a": 1, "b": "x"}) == {"a": 1, "b": "x"}

    def test_long_sequence_truncated(self):
        assert trim_object_with_opts(list(range(10)), with_array_limit(3)) == [0, 1, 2]

    def test_sequence_field_sized(self):
        out = trim_object(Account(user="u", password="p", items=list(range(10))))
        assert out["items"] == [0, 1, 2]
        assert out["_size__items"] == 10

    def test_long_string_truncated(self):
        out = trim_object("y" * 200)
        assert out == "y" * 128 + "..."

    def test_error_is_message(self):
        assert trim_object(ValueError("bad input")) == "bad input"

    def test_none(self):
        assert trim_object(None) is None

    def test_str_enum_serialized_as_value(self):
        out = trim_object({"mood": Mood.CALM})
        assert out == {"mood": "calm"}
        assert type(out["mood"]) is str

    def test_ignored_field_omitted(self):
        out = trim_object_with_opts(Account(user="u", password="p"), with_ignores("password"))
        assert out == {"user": "u"}


class TestLimits:
    def test_depth_zero_record_empty(self):
        assert trim_object_with_opts(Account(user="u", password="p"), with_depth_limit(0)) == {}

    def test_depth_one_record_empty(self):
        # the dispatcher spends one level before the record is entered
        assert trim_object_with_opts(Account(user="u", password="p"), with_depth_limit(1)) == {}

    def test_string_limit_option(self):
        assert trim_object_with_opts({"s": "abcdef"}, with_string_limit(2)) == {"s": "ab..."}

    def test_string_limit_disabled(self):
        assert trim_object_with_opts("z" * 500, with_string_limit(0)) == "z" * 500

    def test_whole_limit_not_enforced(self):
        payload = {"a": "x" * 100}
        assert trim_object_with_opts(payload, with_whole_limit(1)) == payload


class TestFaultRecovery:
    def test_fault_degrades_whole_result(self, caplog):
        caplog.set_level(logging.ERROR, logger="logtrim.trimmer.api")
        out = trim_object({"ok": 1, "bad": Exploding()})
        assert isinstance(out, str)
        assert out.startswith("trim fault recovered")
        assert "boom" in out
        assert any("Trim fault recovered" in r.getMessage() for r in caplog.records)

    def test_bad_option_recovered(self):
        out = trim_object_with_opts({"a": 1}, "not-an-option")
        assert isinstance(out, str)
        assert out.startswith("trim fault recovered")


class TestJsonObject:
    def test_compact_sorted_json(self):
        assert json_object_with_opts({"b": 1, "a": "x"}) == '{"a":"x","b":1}'

    def test_options_forwarded(self):
        text = json_object_with_opts({"items": list(range(10))}, with_array_limit(2))
        assert json.loads(text) == {"items": [0, 1]}

    def test_str_enum_value(self):
        assert json_object_with_opts({"mood": Mood.CALM}) == '{"mood":"calm"}'

    def test_unicode_kept(self):
        assert json_object_with_opts("héllo") == '"héllo"'

    def test_none(self):
        assert json_object_with_opts(None) == "null"

    def test_complex_fails_to_empty(self):
        assert json_object_with_opts({"z": 1 + 2j}) == ""

    def test_nan_fails_to_empty(self):
        assert json_object_with_opts(float("nan")) == ""

    def test_fault_serialized_as_string(self):
        text = json_object_with_opts(Exploding())
        assert json.loads(text).startswith("trim fault recovered")
