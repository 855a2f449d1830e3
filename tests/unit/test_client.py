# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest
from decimal import Decimal
from unittest.mock import MagicMock

from Wastedge.Api.client import ApiClient
from Wastedge.Api.core.errors import HttpError, InvalidArgumentError
from Wastedge.Api.models.filter import Filter, FilterType, OutputFormat
from Wastedge.Api.models.pager import ApiPager
from Wastedge.Api.models.report import ReportField, ReportFieldTransform

from tests.unit.test_helpers import (
    API_URL,
    CUSTOMER_META,
    ORDERS_META,
    SCHEMA_META,
    make_client,
    make_config,
    make_credentials,
    query_of,
    uri_of,
)


class TestApiClientSchema(unittest.TestCase):
    def test_entity_schema_fetched_once(self):
        client, http = make_client([(200, {}, ORDERS_META)])
        first = client.get_entity_schema("orders")
        second = client.get_entity_schema("orders")
        self.assertIs(first, second)
        self.assertEqual(len(http.calls), 1)

    def test_schema_fetched_once(self):
        client, http = make_client([(200, {}, SCHEMA_META)])
        self.assertIs(client.get_schema(), client.get_schema())
        self.assertEqual(len(http.calls), 1)
        self.assertEqual(uri_of(http.calls[0][1]), "")
        self.assertEqual(query_of(http.calls[0][1]), "$uri=&$meta")

    def test_link_schema_goes_through_cache(self):
        client, http = make_client([(200, {}, ORDERS_META), (200, {}, CUSTOMER_META)])
        orders = client.get_entity_schema("orders")
        customer = client.get_link_schema(orders.member("customer"))
        self.assertEqual(customer.name, "customer")
        self.assertIs(client.get_entity_schema("customer"), customer)
        self.assertEqual(len(http.calls), 2)

    def test_link_schema_requires_foreign_member(self):
        client, _ = make_client([(200, {}, ORDERS_META)])
        orders = client.get_entity_schema("orders")
        with self.assertRaises(InvalidArgumentError):
            client.get_link_schema(orders.member("status"))

    def test_cache_survives_close(self):
        client, http = make_client([(200, {}, ORDERS_META)])
        entity = client.get_entity_schema("orders")
        client.close()
        self.assertIs(client.get_entity_schema("orders"), entity)
        self.assertEqual(len(http.calls), 1)

    def test_clients_do_not_share_caches(self):
        a, http_a = make_client([(200, {}, ORDERS_META)])
        b, http_b = make_client([(200, {}, ORDERS_META)])
        self.assertIsNot(a.get_entity_schema("orders"), b.get_entity_schema("orders"))
        self.assertEqual(len(http_a.calls) + len(http_b.calls), 2)


class TestApiClientQuery(unittest.TestCase):
    def setUp(self):
        self.client, self.http = make_client([(200, {}, ORDERS_META)])
        self.orders = self.client.get_entity_schema("orders")

    def _respond(self, *responses):
        self.http._responses.extend(responses)

    def test_query_builds_url(self):
        self._respond((200, {}, {"result": [{"id": 1, "amount": 19.99}], "next": "c1"}))
        f = Filter(self.orders.member("status"), FilterType.EQUAL, "open")
        rs = self.client.query(self.orders, [f], 0, 2)
        self.assertEqual(
            self.http.calls[-1][1], API_URL + "?$uri=orders&status=eq.open&$output=verbose&$offset=0&$count=2"
        )
        self.assertEqual(rs.rows, [{"id": 1, "amount": Decimal("19.99")}])
        self.assertEqual(rs.next_cursor, "c1")
        self.assertIsInstance(rs.pager, ApiPager)
        self.assertEqual(rs.pager.parameters, "status=eq.open&$output=verbose")
        self.assertIs(rs.pager.entity, self.orders)

    def test_pager_reuses_base_parameters(self):
        self._respond(
            (200, {}, {"result": [{"id": 1}], "next": "c1"}),
            (200, {}, {"result": [{"id": 2}], "next": "c2"}),
            (200, {}, {"result": [{"id": 3}]}),
        )
        f = Filter(self.orders.member("status"), FilterType.IN, ["open", "hold"])
        rs = self.client.query(self.orders, [f], 5, 1)
        pager = rs.pager
        rs2 = pager.next(rs.next_cursor, 1)
        rs3 = pager.next(rs2.next_cursor)
        self.assertEqual(query_of(self.http.calls[-2][1]), "$uri=orders&status=in.open,hold&$output=verbose&$start=c1&$count=1")
        self.assertEqual(query_of(self.http.calls[-1][1]), "$uri=orders&status=in.open,hold&$output=verbose&$start=c2")
        self.assertIs(rs3.pager, pager)
        self.assertIsNone(rs3.next_cursor)
        self.assertEqual(pager.parameters, "status=in.open,hold&$output=verbose")

    def test_empty_body_gives_empty_page(self):
        self._respond((200, {}, ""))
        rs = self.client.query(self.orders)
        self.assertIsNone(rs.payload)
        self.assertEqual(rs.rows, [])
        self.assertIsNone(rs.next_cursor)

    def test_compact_output(self):
        self._respond((200, {}, {"result": []}))
        self.client.query(self.orders, output_format=OutputFormat.COMPACT)
        self.assertEqual(query_of(self.http.calls[-1][1]), "$uri=orders&$output=compact")

    def test_validation_happens_before_request(self):
        before = len(self.http.calls)
        with self.assertRaises(InvalidArgumentError):
            self.client.query(self.orders, offset=-1)
        with self.assertRaises(InvalidArgumentError):
            self.client.query("orders")
        self.assertEqual(len(self.http.calls), before)

    def test_http_error_propagates(self):
        self._respond((401, {}, "Unauthorized"))
        with self.assertRaises(HttpError) as ctx:
            self.client.query(self.orders)
        self.assertEqual(ctx.exception.status_code, 401)

    def test_empty_cursor_rejected(self):
        self._respond((200, {}, {"result": []}))
        rs = self.client.query(self.orders)
        with self.assertRaises(InvalidArgumentError):
            rs.pager.next("")


class TestApiClientRawAndReport(unittest.TestCase):
    def test_execute(self):
        client, http = make_client([(200, {}, {"value": 1.25})])
        self.assertEqual(client.execute("orders/summary", "$output=verbose"), {"value": Decimal("1.25")})
        self.assertEqual(query_of(http.calls[0][1]), "$uri=orders%2Fsummary&$output=verbose")

    def test_execute_raw(self):
        client, http = make_client([(200, {}, "plain text")])
        self.assertEqual(client.execute_raw("ping"), "plain text")

    def test_report(self):
        client, http = make_client([(200, {}, ORDERS_META), (200, {}, {"rows": []})])
        orders = client.get_entity_schema("orders")
        result = client.report(
            orders,
            [Filter(orders.member("status"), FilterType.EQUAL, "open")],
            rows=[ReportField((orders.member("status"),))],
            columns=[ReportField((orders.member("lines"),))],
            values=[ReportField((orders.member("amount"),), ReportFieldTransform.SUM)],
        )
        self.assertEqual(result, {"rows": []})
        method, url, kwargs = http.calls[-1]
        self.assertEqual(method, "POST")
        self.assertEqual(uri_of(url), "orders/$report")
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")

    def test_report_layout_validated_before_request(self):
        client, http = make_client([(200, {}, ORDERS_META)])
        orders = client.get_entity_schema("orders")
        with self.assertRaises(InvalidArgumentError):
            client.report(orders, None, rows=[], columns=[ReportField((orders.member("status"),))])
        self.assertEqual(len(http.calls), 1)


class TestApiClientLifecycle(unittest.TestCase):
    def test_requires_credentials(self):
        with self.assertRaises(InvalidArgumentError):
            ApiClient(None)

    def test_context_manager_creates_and_closes_session(self):
        client = ApiClient(make_credentials(), make_config())
        with client as c:
            self.assertIs(c, client)
            session = client._session
            self.assertIsNotNone(session)
            self.assertIs(client._get_api()._http._session, session)
        self.assertIsNone(client._session)
        self.assertIsNone(client._api)

    def test_close_is_idempotent(self):
        client = ApiClient(make_credentials(), make_config())
        client._get_api()._http = MagicMock()
        client.close()
        client.close()
        self.assertIsNone(client._api)

    def test_credentials_property(self):
        client = ApiClient(make_credentials(), make_config())
        self.assertEqual(client.credentials.company, "ACME")
