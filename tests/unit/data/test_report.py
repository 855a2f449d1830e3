# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import datetime as dt
from decimal import Decimal

import pytest

from Wastedge.Api.core.errors import InvalidArgumentError
from Wastedge.Api.core._error_codes import VALIDATION_REPORT_LAYOUT
from Wastedge.Api.data._report import build_report_request
from Wastedge.Api.models.filter import Filter, FilterType
from Wastedge.Api.models.report import ReportField, ReportFieldTransform
from Wastedge.Api.models.schema import EntityField, EntityDataType


REGION = EntityField("region", EntityDataType.STRING)


def test_body_shape(orders_schema):
    customer = orders_schema.member("customer")
    body = build_report_request(
        [Filter(orders_schema.member("status"), FilterType.EQUAL, "open")],
        rows=[ReportField((customer, REGION))],
        columns=[ReportField((orders_schema.member("status"),))],
        values=[ReportField((orders_schema.member("amount"),), ReportFieldTransform.AVERAGE)],
    )
    assert body == {
        "query": {"fields": [{"name": "status", "op": "eq", "value": "open"}]},
        "rows": ["customer.region"],
        "columns": ["status"],
        "values": [{"name": "amount", "transform": "average"}],
    }


def test_filter_values_are_wire_text(orders_schema):
    tz = dt.timezone.utc
    body = build_report_request(
        [
            Filter(orders_schema.member("order_date"), FilterType.GREATER_EQUAL, dt.date(2024, 1, 1)),
            Filter(orders_schema.member("shipped"), FilterType.LESS_THAN, dt.datetime(2024, 2, 1, tzinfo=tz)),
            Filter(orders_schema.member("amount"), FilterType.IN, [Decimal("1.50"), 2]),
            Filter(orders_schema.member("paid"), FilterType.IS_FALSE),
        ],
        rows=[ReportField((orders_schema.member("status"),))],
        columns=[ReportField((orders_schema.member("lines"),))],
    )
    assert body["query"]["fields"] == [
        {"name": "order_date", "op": "gte", "value": "2024-01-01"},
        {"name": "shipped", "op": "lt", "value": "2024-02-01T00:00:00.000+00:00"},
        {"name": "amount", "op": "in", "value": ["1.50", 2]},
        {"name": "paid", "op": "is.false"},
    ]
    assert body["values"] == []


@pytest.mark.parametrize("rows, columns", [([], [ReportField((REGION,))]), ([ReportField((REGION,))], [])])
def test_layout_requires_rows_and_columns(rows, columns):
    with pytest.raises(InvalidArgumentError) as exc:
        build_report_request(None, rows, columns)
    assert exc.value.subcode == VALIDATION_REPORT_LAYOUT


def test_rejects_non_report_fields():
    with pytest.raises(InvalidArgumentError):
        build_report_request(None, ["region"], [ReportField((REGION,))])


def test_report_field_requires_members():
    with pytest.raises(InvalidArgumentError):
        ReportField(())
    with pytest.raises(InvalidArgumentError):
        ReportField(("region",))
