# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Report layout models.

A report groups the rows of an entity by one or more *row* and *column* fields
and aggregates *value* fields. Each field is a path of members that may follow
foreign links into related entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from ..core.errors import InvalidArgumentError
from ..core._error_codes import VALIDATION_MISSING_ARGUMENT
from .schema import EntityMember


class ReportFieldTransform(Enum):
    """Aggregation applied to a value field. Values are the wire codes."""

    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"
    MAX = "max"
    MIN = "min"
    PRODUCT = "product"
    COUNT_NUMBERS = "count-numbers"
    STDDEV = "stddev"
    STDDEVP = "stddevp"
    VAR = "var"
    VARP = "varp"


@dataclass(frozen=True)
class ReportField:
    """
    A member path used as a report row, column or value.

    :param fields: Members from the queried entity outwards; every member but the
        last is normally an :class:`~Wastedge.Api.models.schema.EntityForeign`.
    :type fields: tuple[EntityMember, ...]
    :param transform: Aggregation, only meaningful for value fields.
    :type transform: ReportFieldTransform

    Example::

        customer = entity.member("customer")
        region = (await client.get_link_schema(customer)).member("region")
        ReportField((customer, region))
        ReportField((entity.member("amount"),), ReportFieldTransform.SUM)
    """

    fields: Tuple[EntityMember, ...]
    transform: ReportFieldTransform = ReportFieldTransform.SUM

    def __post_init__(self) -> None:
        fields: Sequence[EntityMember] = self.fields
        if not fields or not all(isinstance(f, EntityMember) for f in fields):
            raise InvalidArgumentError(
                "ReportField requires at least one EntityMember.", subcode=VALIDATION_MISSING_ARGUMENT
            )
        object.__setattr__(self, "fields", tuple(fields))

    @property
    def name(self) -> str:
        """Dotted wire name, e.g. ``"customer.region"``."""
        return ".".join(f.name for f in self.fields)


__all__ = ["ReportFieldTransform", "ReportField"]
