# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Miscellaneous utility functions used throughout the modules."""

from __future__ import annotations

__all__ = [
    "RE_VALID_IDENTIFIER",
    "InvalidArgumentError",
    "InvalidIdentifierError",
    "check_identifier",
    "is_identifier",
    "localname",
]

import re
import typing as t

import typing_extensions as te
from lxml import etree

RE_VALID_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")
"""Identifiers follow the XML ``NCName`` production (ASCII subset)."""


class InvalidIdentifierError(ValueError):
    """Raised when a string is not a valid identifier."""

    identifier = property(lambda self: self.args[0])

    def __str__(self) -> str:
        if len(self.args) != 1:
            return super().__str__()
        return f"Invalid identifier: {self.identifier!r}"


class InvalidArgumentError(ValueError):
    """Raised when a value is outside the domain of an attribute."""


def is_identifier(string: t.Any) -> te.TypeGuard[str]:
    """Validate that ``string`` is usable as identifier."""
    return isinstance(string, str) and bool(RE_VALID_IDENTIFIER.match(string))


def check_identifier(string: str) -> str:
    """Check the identifier syntax of ``string``.

    Returns
    -------
    str
        The unchanged *string*, for use in assignments.

    Raises
    ------
    InvalidIdentifierError
        If *string* does not match :data:`RE_VALID_IDENTIFIER`.
    """
    if not is_identifier(string):
        raise InvalidIdentifierError(string)
    return string


def localname(tag: str) -> str:
    """Strip the namespace from a (possibly qualified) tag name."""
    return etree.QName(tag).localname
