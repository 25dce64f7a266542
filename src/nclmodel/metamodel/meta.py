# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Descriptive metadata attached to composite nodes.

A :class:`Meta` element is a simple name/value pair. A
:class:`Metadata` element wraps a foreign markup tree, usually RDF,
which is kept verbatim as :mod:`lxml` elements.
"""

from __future__ import annotations

import typing as t

from lxml import etree

import nclmodel.model as m


class Meta(m.Element):
    _xmltag = "meta"

    name = m.StringPOD("name")
    content = m.StringPOD("content")

    @property
    def refkey(self) -> str | None:
        return self.name

    def _check(self) -> None:
        self._require("name", "content")


class Metadata(m.Element):
    """Holds a tree of foreign markup, such as an RDF graph.

    The markup is available as a list of :class:`lxml.etree._Element`
    objects in :attr:`markup`, which may be modified in place. It is
    written out after the element's own children.
    """

    _xmltag = "metadata"

    def __init__(self, **kw: t.Any) -> None:
        super().__init__(**kw)
        self._markup: list[etree._Element] = []

    @property
    def markup(self) -> list[etree._Element]:
        return self._markup

    def _check(self) -> None:
        if not self._markup:
            self.add_warning(
                "Element 'metadata' does not contain any markup."
            )
