# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Structural and semantic validation of element trees."""

from __future__ import annotations

__all__ = ["Report", "report", "validate"]

import collections.abc as cabc
import dataclasses
import logging

from nclmodel import model

LOGGER = logging.getLogger(__name__)


def validate(element: model.Element) -> bool:
    """Validate *element* and its whole subtree.

    The element's diagnostics are reset first. Then its own checks run,
    followed by every child's validation. Children are always visited,
    even if an earlier check failed, and their diagnostics are merged
    into the element's lists.

    Returns
    -------
    bool
        True if neither the element nor any of its descendants recorded
        an error. Warnings never make the result False, not even
        warnings about attributes that a player ignores.
    """
    element.clear_diagnostics()
    element._check()
    valid = not element._errors

    for child in element.iter_children():
        valid &= validate(child)
        element._merge_diagnostics(child)

    if not valid:
        LOGGER.debug(
            "%s is invalid: %d errors",
            element._short_repr_(),
            len(element._errors),
        )
    return valid


@dataclasses.dataclass(frozen=True)
class Report:
    """The result of validating a tree, suitable for display."""

    valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]

    def __bool__(self) -> bool:
        return self.valid

    def iter_lines(self) -> cabc.Iterator[str]:
        for msg in self.errors:
            yield f"error: {msg}"
        for msg in self.warnings:
            yield f"warning: {msg}"


def report(element: model.Element) -> Report:
    """Validate *element* and collect the outcome into a :class:`Report`."""
    valid = validate(element)
    return Report(valid, tuple(element.errors), tuple(element.warnings))
