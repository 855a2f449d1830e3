# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Credentials and HTTP Basic authentication for the Wastedge API.

The service authenticates every request with HTTP Basic using the credential
string ``company\\username:password``.
"""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass

from .errors import InvalidArgumentError
from ._error_codes import VALIDATION_MISSING_ARGUMENT


@dataclass(frozen=True)
class ApiCredentials:
    """
    Immutable connection credentials.

    :param url: Base URL of the Wastedge installation, e.g. ``"https://erp.example.com"``.
    :type url: str
    :param company: Company the user signs in to.
    :type company: str
    :param user_name: User name.
    :type user_name: str
    :param password: Password.
    :type password: str

    :raises InvalidArgumentError: If any field is missing or empty.
    """

    url: str
    company: str
    user_name: str
    password: str

    def __post_init__(self) -> None:
        for name in ("url", "company", "user_name", "password"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InvalidArgumentError(f"{name} is required.", subcode=VALIDATION_MISSING_ARGUMENT)

    def __repr__(self) -> str:
        return f"ApiCredentials(url={self.url!r}, company={self.company!r}, user_name={self.user_name!r})"

    @classmethod
    def from_env(cls) -> "ApiCredentials":
        """
        Read credentials from ``WASTEDGE_URL``, ``WASTEDGE_COMPANY``, ``WASTEDGE_USER``
        and ``WASTEDGE_PASSWORD``.

        :raises InvalidArgumentError: If any of the variables is unset or empty.
        """
        return cls(
            url=os.environ.get("WASTEDGE_URL", ""),
            company=os.environ.get("WASTEDGE_COMPANY", ""),
            user_name=os.environ.get("WASTEDGE_USER", ""),
            password=os.environ.get("WASTEDGE_PASSWORD", ""),
        )


class _AuthManager:
    """Builds the ``Authorization`` header for a set of credentials."""

    def __init__(self, credentials: ApiCredentials) -> None:
        if not isinstance(credentials, ApiCredentials):
            raise InvalidArgumentError(
                "credentials must be an ApiCredentials instance.", subcode=VALIDATION_MISSING_ARGUMENT
            )
        self.credentials = credentials

    def _authorization_header(self) -> str:
        c = self.credentials
        raw = f"{c.company}\\{c.user_name}:{c.password}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")
