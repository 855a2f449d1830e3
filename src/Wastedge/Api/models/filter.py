# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Filter model for entity queries.

A :class:`Filter` is one field/operator/value constraint. The operator set is
closed; see :class:`FilterType`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..core.errors import InvalidArgumentError
from ..core._error_codes import VALIDATION_FILTER_VALUE, VALIDATION_MISSING_ARGUMENT
from .schema import EntityMember


class FilterType(Enum):
    """Filter operators understood by the service."""

    IS_NULL = "is_null"
    NOT_IS_NULL = "not_is_null"
    IS_TRUE = "is_true"
    NOT_IS_TRUE = "not_is_true"
    IS_FALSE = "is_false"
    NOT_IS_FALSE = "not_is_false"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    NOT_LIKE = "not_like"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    GREATER_THAN = "greater_than"
    GREATER_EQUAL = "greater_equal"
    LESS_THAN = "less_than"
    LESS_EQUAL = "less_equal"

    @property
    def takes_value(self) -> bool:
        """False for the six null/true/false checks, which carry no value."""
        return self not in _VALUELESS

    @property
    def takes_list(self) -> bool:
        return self in (FilterType.IN, FilterType.NOT_IN)


_VALUELESS = frozenset(
    {
        FilterType.IS_NULL,
        FilterType.NOT_IS_NULL,
        FilterType.IS_TRUE,
        FilterType.NOT_IS_TRUE,
        FilterType.IS_FALSE,
        FilterType.NOT_IS_FALSE,
    }
)


class OutputFormat(Enum):
    """Field naming used by the service in query output."""

    VERBOSE = "verbose"
    COMPACT = "compact"


@dataclass(frozen=True)
class Filter:
    """
    One filter term.

    :param field: Member the filter applies to; its ``name`` and ``data_type`` drive encoding.
    :type field: ~Wastedge.Api.models.schema.EntityMember
    :param type: Operator.
    :type type: FilterType
    :param value: Comparison value. Must be omitted for the null/true/false
        checks and given otherwise; ``IN``/``NOT_IN`` take a sequence (stored as a tuple).
    :type value: Any

    :raises InvalidArgumentError: If ``field`` or ``type`` is missing or the value
        does not fit the operator.

    Example::

        status = entity.member("status")
        Filter(status, FilterType.EQUAL, "open")
        Filter(status, FilterType.IN, ["open", "hold"])
        Filter(entity.member("closed_on"), FilterType.IS_NULL)
    """

    field: EntityMember
    type: FilterType
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.field, EntityMember):
            raise InvalidArgumentError("field must be an EntityMember.", subcode=VALIDATION_MISSING_ARGUMENT)
        if not isinstance(self.type, FilterType):
            raise InvalidArgumentError("type must be a FilterType.", subcode=VALIDATION_MISSING_ARGUMENT)

        if not self.type.takes_value:
            if self.value is not None:
                raise InvalidArgumentError(
                    f"{self.type.name} filter on '{self.field.name}' does not take a value.",
                    subcode=VALIDATION_FILTER_VALUE,
                )
            return

        if self.value is None:
            raise InvalidArgumentError(
                f"{self.type.name} filter on '{self.field.name}' requires a value.",
                subcode=VALIDATION_FILTER_VALUE,
            )
        if self.type.takes_list:
            if isinstance(self.value, (str, bytes)) or not isinstance(self.value, (Sequence, set, frozenset)):
                raise InvalidArgumentError(
                    f"{self.type.name} filter on '{self.field.name}' requires a sequence of values.",
                    subcode=VALIDATION_FILTER_VALUE,
                )
            object.__setattr__(self, "value", tuple(self.value))


__all__ = ["FilterType", "OutputFormat", "Filter"]
