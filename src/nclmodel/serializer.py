# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""The canonical text serializer.

Every element is written on its own line, indented by one
:data:`INDENT` per nesting level. Attributes are emitted in the order
in which the element class declares them, using single quotes, and
absent attributes are left out. Elements without any children are
written in the self-closing form. Foreign markup kept by metadata
elements is written by :mod:`lxml`, re-indented to fit the
surrounding text.

The output does not depend on whether the tree is valid or resolved:
placeholders are written with the identifier they carry.
"""

from __future__ import annotations

__all__ = [
    "INDENT",
    "LINESEP",
    "iter_attributes",
    "to_string",
]

import collections.abc as cabc
import copy
import html.entities
import io
import re

from lxml import etree

from nclmodel import model

INDENT = "\t"
LINESEP = "\n"

ESCAPE_CHARS = r"[\x00-\x08\x0A-\x1F\x7F{}]"
P_ESCAPE_ATTR = re.compile(ESCAPE_CHARS.format("'&<\x09"))


def to_string(element: model.Element, depth: int = 0, /) -> str:
    """Serialize an element and its subtree.

    Parameters
    ----------
    element
        The element to serialize.
    depth
        The indentation depth of the element itself. Negative values
        are treated as 0.

    Returns
    -------
    str
        The serialized text, terminated by :data:`LINESEP`.
    """
    buffer = io.StringIO()
    _serialize_element(buffer, element, max(depth, 0))
    return buffer.getvalue()


def iter_attributes(
    element: model.Element,
) -> cabc.Iterator[tuple[str, str]]:
    """Iterate over the XML attributes of *element* in canonical order.

    Attribute values are returned unescaped.
    """
    cls = type(element)
    for attribute, pods in cls._xmlattributes.items():
        for pod in pods:
            value = pod.dump(element)
            if value is not None:
                yield (attribute, value)
                break


def _serialize_element(
    buffer: io.StringIO, element: model.Element, depth: int
) -> None:
    buffer.write(INDENT * depth)
    buffer.write("<")
    buffer.write(element.xmltag)
    for name, value in iter_attributes(element):
        buffer.write(f" {name}='{_escape(value)}'")

    children = io.StringIO()
    _serialize_children(children, element, depth + 1)
    _serialize_markup(children, element, depth + 1)
    content = children.getvalue()
    if not content:
        buffer.write("/>")
        buffer.write(LINESEP)
        return

    buffer.write(">")
    buffer.write(LINESEP)
    buffer.write(content)
    buffer.write(INDENT * depth)
    buffer.write(f"</{element.xmltag}>")
    buffer.write(LINESEP)


def _serialize_children(
    buffer: io.StringIO, element: model.Element, depth: int
) -> None:
    cls = type(element)
    for name in cls._xmlchildren:
        acc = getattr(cls, name)
        if isinstance(acc, model.ChildAccessor):
            for child in acc.iter_owned(element):
                _serialize_element(buffer, child, depth)
            continue

        assert isinstance(acc, model.Reference) and acc.element is not None
        value = acc.dump(element)
        if value is not None:
            buffer.write(INDENT * depth)
            buffer.write(
                f"<{acc.element} {acc.attribute}='{_escape(value)}'/>"
            )
            buffer.write(LINESEP)


def _serialize_markup(
    buffer: io.StringIO, element: model.Element, depth: int
) -> None:
    for tree in getattr(element, "markup", ()):
        tree = copy.deepcopy(tree)
        tree.tail = None
        etree.indent(tree, space=INDENT, level=depth)
        buffer.write(INDENT * depth)
        buffer.write(etree.tostring(tree, encoding="unicode"))
        buffer.write(LINESEP)


def _escape(string: str) -> str:
    return P_ESCAPE_ATTR.sub(_escape_char, string)


def _escape_char(
    match: re.Match[str], *, ord_low: int = ord(" "), ord_high: int = ord("~")
) -> str:
    char = match.group(0)
    assert len(char) == 1
    if char == "'":
        return "&apos;"
    if ord_low <= ord(char) <= ord_high:
        return f"&{html.entities.codepoint2name[ord(char)]};"
    return f"&#x{ord(char):X};"
