"""Tests for parameter binding."""

from __future__ import annotations

import pytest

from cmdunit.domain.errors import BindingCode, BindingError
from cmdunit.domain.parameters import CommandSchema, declare
from cmdunit.domain.types import BindingSource
from cmdunit.engine.binding import bind

ECHO = CommandSchema.build("Get", "Echo", declare("InputObject", position=0, mandatory=True))

COPY = CommandSchema.build(
    "Copy",
    "Item",
    declare("Source", position=0, mandatory=True),
    declare("Destination", position=1),
    declare("Force"),
)


class TestPositionalBinding:
    def test_binds_slot_zero(self) -> None:
        bound = bind(ECHO, [42])
        assert bound["InputObject"] == 42
        assert bound.source("InputObject") is BindingSource.POSITION

    def test_binds_slots_in_order(self) -> None:
        bound = bind(COPY, ["a.txt", "b.txt"])
        assert bound["Source"] == "a.txt"
        assert bound["Destination"] == "b.txt"

    def test_extra_positional_rejected(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(ECHO, [1, 2])
        assert exc_info.value.code is BindingCode.EXTRA_POSITIONAL
        assert exc_info.value.parameter == "1"


class TestNamedBinding:
    def test_binds_by_name(self) -> None:
        bound = bind(ECHO, named={"InputObject": "hello"})
        assert bound["InputObject"] == "hello"
        assert bound.source("InputObject") is BindingSource.NAME

    def test_name_match_ignores_case(self) -> None:
        bound = bind(ECHO, named={"inputobject": "hello"})
        assert list(bound) == ["InputObject"]

    def test_unknown_name_rejected(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(ECHO, named={"Value": 1})
        assert exc_info.value.code is BindingCode.UNKNOWN_PARAMETER
        assert exc_info.value.parameter == "Value"

    def test_same_parameter_twice_by_name_rejected(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(ECHO, named={"InputObject": 1, "INPUTOBJECT": 2})
        assert exc_info.value.code is BindingCode.DUPLICATE_BINDING


class TestExclusiveMechanisms:
    def test_name_and_position_for_same_parameter_rejected(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(ECHO, [1], {"InputObject": 2})
        assert exc_info.value.code is BindingCode.DUPLICATE_BINDING
        assert exc_info.value.parameter == "InputObject"

    def test_mixed_mechanisms_for_different_parameters(self) -> None:
        bound = bind(COPY, ["a.txt"], {"Force": True, "Destination": "b.txt"})
        assert bound.source("Source") is BindingSource.POSITION
        assert bound.source("Destination") is BindingSource.NAME
        assert bound["Force"] is True


class TestMandatory:
    def test_missing_mandatory_names_parameter(self) -> None:
        with pytest.raises(BindingError, match="InputObject") as exc_info:
            bind(ECHO)
        assert exc_info.value.code is BindingCode.MISSING_MANDATORY
        assert exc_info.value.parameter == "InputObject"
        assert exc_info.value.command == "Get-Echo"

    def test_optional_parameters_stay_absent(self) -> None:
        bound = bind(COPY, ["a.txt"])
        assert "Destination" not in bound
        assert "Force" not in bound
        assert len(bound) == 1

    def test_none_is_a_value(self) -> None:
        bound = bind(ECHO, [None])
        assert "InputObject" in bound
        assert bound["InputObject"] is None


class TestDeferred:
    def test_deferred_parameter_skips_mandatory_check(self) -> None:
        bound = bind(ECHO, deferred=["InputObject"])
        assert len(bound) == 0

    def test_deferred_parameter_supplied_now_rejected(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(ECHO, [1], deferred=["inputobject"])
        assert exc_info.value.code is BindingCode.DUPLICATE_BINDING

    def test_other_mandatory_still_checked(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(COPY, deferred=["Destination"])
        assert exc_info.value.parameter == "Source"

    def test_with_value_returns_new_mapping(self) -> None:
        base = bind(ECHO, deferred=["InputObject"])
        record = base.with_value("InputObject", 7, BindingSource.PIPELINE)
        assert record["InputObject"] == 7
        assert record.source("InputObject") is BindingSource.PIPELINE
        assert "InputObject" not in base


class TestBoundParameters:
    def test_identity_preserved(self) -> None:
        payload = {"nested": [1, 2]}
        bound = bind(ECHO, [payload])
        assert bound["InputObject"] is payload

    def test_immutable(self) -> None:
        bound = bind(ECHO, [1])
        with pytest.raises(TypeError):
            bound["InputObject"] = 2  # type: ignore[index]
