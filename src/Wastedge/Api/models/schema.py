# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Schema metadata models for the Wastedge API.

Provides strongly-typed representations of the service-wide schema and of the
per-entity member lists returned by the ``$meta`` endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from ..core.errors import ProtocolError
from ..core._error_codes import PROTOCOL_UNEXPECTED_SHAPE, PROTOCOL_UNKNOWN_DATA_TYPE


class EntityDataType(Enum):
    """Declared data type of a field-like member. Values are the wire codes."""

    STRING = "string"
    DATE = "date"
    DATE_TIME = "datetime"
    DATE_TIME_TZ = "datetime-tz"
    DECIMAL = "decimal"
    LONG = "long"
    INT = "int"
    BOOLEAN = "bool"

    @property
    def is_date(self) -> bool:
        return self in (EntityDataType.DATE, EntityDataType.DATE_TIME, EntityDataType.DATE_TIME_TZ)

    @property
    def is_numeric(self) -> bool:
        return self in (EntityDataType.DECIMAL, EntityDataType.LONG, EntityDataType.INT)


class EntityMemberType(Enum):
    """Kind of an entity member. Values are the wire codes."""

    ID = "id"
    FIELD = "field"
    CALCULATED = "calculated"
    FOREIGN = "foreign"


@dataclass(frozen=True)
class EntityMember:
    """
    A named attribute of an entity.

    Use the concrete variants :class:`EntityId`, :class:`EntityField`,
    :class:`EntityCalculated` and :class:`EntityForeign`; ``type`` identifies the
    variant without an ``isinstance`` check.

    :param name: Member name as used in filters and query output.
    :type name: str
    :param data_type: Declared data type, ``None`` when the service omits it.
    :type data_type: EntityDataType | None
    :param comments: Free-text description from the service, if any.
    :type comments: str | None
    """

    name: str
    data_type: Optional[EntityDataType] = None
    comments: Optional[str] = None

    type: EntityMemberType = field(init=False, default=EntityMemberType.FIELD)


@dataclass(frozen=True)
class EntityId(EntityMember):
    """The identifier member of an entity."""

    type: EntityMemberType = field(init=False, default=EntityMemberType.ID)


@dataclass(frozen=True)
class EntityField(EntityMember):
    """A plain stored field."""

    type: EntityMemberType = field(init=False, default=EntityMemberType.FIELD)


@dataclass(frozen=True)
class EntityCalculated(EntityMember):
    """A value computed by the service."""

    type: EntityMemberType = field(init=False, default=EntityMemberType.CALCULATED)


@dataclass(frozen=True)
class EntityForeign(EntityMember):
    """
    A reference to another entity.

    :param link_table: Name of the related entity; resolve its schema with
        ``client.get_link_schema(member)``.
    :type link_table: str
    """

    link_table: str = ""

    type: EntityMemberType = field(init=False, default=EntityMemberType.FOREIGN)


_MEMBER_CLASSES: Dict[EntityMemberType, Type[EntityMember]] = {
    EntityMemberType.ID: EntityId,
    EntityMemberType.FIELD: EntityField,
    EntityMemberType.CALCULATED: EntityCalculated,
    EntityMemberType.FOREIGN: EntityForeign,
}


def _parse_data_type(entity: str, name: str, raw: Any) -> Optional[EntityDataType]:
    if raw is None:
        return None
    try:
        return EntityDataType(raw)
    except ValueError:
        raise ProtocolError(
            f"Member '{entity}.{name}' has unknown data type {raw!r}.",
            subcode=PROTOCOL_UNKNOWN_DATA_TYPE,
            details={"entity": entity, "member": name, "data_type": raw},
        ) from None


def _parse_member(entity: str, raw: Any) -> Optional[EntityMember]:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise ProtocolError(
            f"Entity '{entity}' metadata contains a member without a name.",
            subcode=PROTOCOL_UNEXPECTED_SHAPE,
            details={"entity": entity},
        )
    try:
        member_type = EntityMemberType(raw.get("type"))
    except ValueError:
        # Member kinds this client does not know about are not queryable
        return None

    name = raw["name"]
    data_type = _parse_data_type(entity, name, raw.get("data_type"))
    comments = raw.get("comments") or None

    if member_type is EntityMemberType.FOREIGN:
        link_table = raw.get("link_table")
        if not isinstance(link_table, str) or not link_table:
            raise ProtocolError(
                f"Foreign member '{entity}.{name}' has no link_table.",
                subcode=PROTOCOL_UNEXPECTED_SHAPE,
                details={"entity": entity, "member": name},
            )
        return EntityForeign(name=name, data_type=data_type, comments=comments, link_table=link_table)

    if data_type is None:
        raise ProtocolError(
            f"Member '{entity}.{name}' has no data type.",
            subcode=PROTOCOL_UNEXPECTED_SHAPE,
            details={"entity": entity, "member": name},
        )
    return _MEMBER_CLASSES[member_type](name=name, data_type=data_type, comments=comments)


@dataclass(frozen=True)
class EntitySchema:
    """
    Metadata of a single entity.

    Instances are cached per client and shared by every caller; treat them as
    read-only.

    :param name: Entity name, e.g. ``"customer"``.
    :type name: str
    :param members: Members in the order the service declares them.
    :type members: tuple[EntityMember, ...]

    Example:
        Inspect an entity::

            entity = client.get_entity_schema("customer")
            for member in entity:
                print(member.name, member.type, member.data_type)
            status = entity.member("status")
    """

    name: str
    members: Tuple[EntityMember, ...] = ()
    _by_name: Dict[str, EntityMember] = field(init=False, repr=False, compare=False, default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))
        object.__setattr__(self, "_by_name", {m.name: m for m in self.members})

    def __iter__(self) -> Iterator[EntityMember]:
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def member(self, name: str) -> EntityMember:
        """
        Return the member called ``name``.

        :raises KeyError: If the entity has no such member.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Entity '{self.name}' has no member '{name}'") from None

    @classmethod
    def from_api_response(cls, name: str, response_data: Dict[str, Any]) -> "EntitySchema":
        """
        Create an EntitySchema from an entity ``$meta`` response.

        :param name: Entity name the metadata was requested for.
        :type name: str
        :param response_data: Decoded JSON object.
        :type response_data: dict[str, Any]
        :return: EntitySchema instance.
        :rtype: EntitySchema
        :raises ProtocolError: If ``members`` is not a list or a member is malformed.
        """
        raw_members = response_data.get("members", [])
        if not isinstance(raw_members, list):
            raise ProtocolError(
                f"Entity '{name}' metadata 'members' is not a list.",
                subcode=PROTOCOL_UNEXPECTED_SHAPE,
                details={"entity": name},
            )
        members: List[EntityMember] = []
        for raw in raw_members:
            member = _parse_member(name, raw)
            if member is not None:
                members.append(member)
        return cls(name=name, members=tuple(members))


@dataclass(frozen=True)
class Schema:
    """
    Service-wide metadata.

    :param entities: Entity names advertised by the service.
    :type entities: tuple[str, ...]
    :param raw: The decoded ``$meta`` payload, for properties this model does not cover.
    :type raw: dict[str, Any]
    """

    entities: Tuple[str, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def __contains__(self, name: object) -> bool:
        return name in self.entities

    @classmethod
    def from_api_response(cls, response_data: Dict[str, Any]) -> "Schema":
        """
        Create a Schema from the root ``$meta`` response.

        :raises ProtocolError: If ``entities`` is present but not a list of strings.
        """
        entities = response_data.get("entities", [])
        if not isinstance(entities, list) or not all(isinstance(e, str) for e in entities):
            raise ProtocolError(
                "Schema metadata 'entities' is not a list of names.",
                subcode=PROTOCOL_UNEXPECTED_SHAPE,
            )
        return cls(entities=tuple(entities), raw=response_data)


__all__ = [
    "EntityDataType",
    "EntityMemberType",
    "EntityMember",
    "EntityId",
    "EntityField",
    "EntityCalculated",
    "EntityForeign",
    "EntitySchema",
    "Schema",
]
