# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from Wastedge.Api.core.errors import InvalidArgumentError
from Wastedge.Api.core._error_codes import VALIDATION_FILTER_VALUE, VALIDATION_MISSING_ARGUMENT
from Wastedge.Api.models.filter import Filter, FilterType
from Wastedge.Api.models.result_set import ResultSet
from Wastedge.Api.models.schema import EntityDataType, EntityField, EntitySchema


STATUS = EntityField("status", EntityDataType.STRING)


class TestFilter:
    def test_valueless_types(self):
        valueless = {t for t in FilterType if not t.takes_value}
        assert valueless == {
            FilterType.IS_NULL,
            FilterType.NOT_IS_NULL,
            FilterType.IS_TRUE,
            FilterType.NOT_IS_TRUE,
            FilterType.IS_FALSE,
            FilterType.NOT_IS_FALSE,
        }

    def test_value_not_allowed_for_null_check(self):
        with pytest.raises(InvalidArgumentError) as exc:
            Filter(STATUS, FilterType.IS_NULL, "x")
        assert exc.value.subcode == VALIDATION_FILTER_VALUE

    def test_value_required(self):
        with pytest.raises(InvalidArgumentError) as exc:
            Filter(STATUS, FilterType.EQUAL)
        assert exc.value.subcode == VALIDATION_FILTER_VALUE

    def test_in_value_stored_as_tuple(self):
        f = Filter(STATUS, FilterType.IN, ["open", "hold"])
        assert f.value == ("open", "hold")
        assert hash(f) == hash(Filter(STATUS, FilterType.IN, ("open", "hold")))

    @pytest.mark.parametrize("value", ["open", b"open", 3])
    def test_in_requires_sequence(self, value):
        with pytest.raises(InvalidArgumentError):
            Filter(STATUS, FilterType.NOT_IN, value)

    def test_field_must_be_member(self):
        with pytest.raises(InvalidArgumentError) as exc:
            Filter("status", FilterType.EQUAL, "open")
        assert exc.value.subcode == VALIDATION_MISSING_ARGUMENT

    def test_type_must_be_filter_type(self):
        with pytest.raises(InvalidArgumentError):
            Filter(STATUS, "eq", "open")


class TestResultSet:
    entity = EntitySchema("orders")

    def test_rows_and_cursor(self):
        rs = ResultSet(self.entity, {"result": [{"id": 1}, {"id": 2}], "next": "abc"}, None)
        assert rs.rows == [{"id": 1}, {"id": 2}]
        assert rs.next_cursor == "abc"

    @pytest.mark.parametrize("payload", [None, {}, {"result": "x", "next": ""}, {"next": 5}])
    def test_missing_rows_and_cursor(self, payload):
        rs = ResultSet(self.entity, payload, None)
        assert rs.rows == []
        assert rs.next_cursor is None
