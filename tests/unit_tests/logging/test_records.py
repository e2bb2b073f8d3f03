from __future__ import annotations

import dataclasses

import pytest

from sample_app.logging import LogRecord, clean_text, coerce_fields, coerce_value


class _Unprintable:
    def __str__(self) -> str:
        raise RuntimeError("no text")


class TestCoercion:
    @pytest.mark.parametrize("value", ["text", 42, 1.5, True, False])
    def test_scalars_pass_through(self, value):
        assert coerce_value(value) == value
        assert type(coerce_value(value)) is type(value)

    def test_objects_become_text(self):
        assert coerce_value(None) == "None"
        assert coerce_value([1, 2]) == "[1, 2]"
        assert coerce_value({"a": 1}) == "{'a': 1}"

    def test_oversized_int_becomes_text(self):
        assert coerce_value(2**70) == str(2**70)

    def test_unprintable_value_never_raises(self):
        assert coerce_value(_Unprintable()) == "<unprintable _Unprintable>"

    def test_keys_become_strings(self):
        assert coerce_fields({1: "a", None: 2}) == {"1": "a", "None": 2}

    def test_empty_fields(self):
        assert coerce_fields(None) == {}


class TestLogRecord:
    def _record(self, **fields) -> LogRecord:
        return LogRecord(
            timestamp="2026-01-01T00:00:00.000000Z",
            level="info",
            message="hello",
            service="sample-app",
            fields=fields,
        )

    def test_record_is_immutable(self):
        record = self._record(action="login")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.message = "changed"  # type: ignore[misc]
        with pytest.raises(TypeError):
            record.fields["action"] = "logout"  # type: ignore[index]

    def test_fields_are_copied(self):
        fields = {"action": "login"}
        record = LogRecord("t", "info", "m", "s", fields)
        fields["action"] = "logout"
        assert record.fields["action"] == "login"

    def test_to_dict_reserved_keys_win(self):
        payload = self._record(level="bogus", message="bogus", userId=7).to_dict()
        assert payload == {
            "timestamp": "2026-01-01T00:00:00.000000Z",
            "level": "info",
            "message": "hello",
            "service": "sample-app",
            "userId": 7,
        }


class TestCleanText:
    def test_valid_text_is_untouched(self):
        assert clean_text("café ☕") == "café ☕"

    def test_lone_surrogate_is_escaped(self):
        assert clean_text("caf\udce9") == "caf\\udce9"
        assert coerce_value("caf\udce9") == "caf\\udce9"
        assert coerce_fields({"caf\udce9": "x"}) == {"caf\\udce9": "x"}
