# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Build element trees from serialized documents.

The :class:`Builder` receives one call per start and end tag and
creates the matching elements through the ``create_*`` methods of their
parents. It implements the parser target interface of :mod:`lxml`, so
that :func:`loads` can drive it directly from
:class:`lxml.etree.XMLParser`.
"""

from __future__ import annotations

__all__ = ["Builder", "loads"]

import collections.abc as cabc
import dataclasses
import logging
import typing as t

from lxml import etree

from nclmodel import helpers, model, resolver
from nclmodel.metamodel import document, meta

LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass
class _Frame:
    element: model.Element | None
    """The element being built, or None for skipped input."""
    parent: model.Element | None = None
    slot: str | None = None
    markup: etree.TreeBuilder | None = None
    """Collects foreign markup kept by a :class:`~meta.Metadata`."""


class Builder:
    """Incrementally builds an element tree.

    Parameters
    ----------
    root
        The root element to fill in, or the element class to create
        for the root tag. Defaults to :class:`~nclmodel.metamodel.
        document.Ncl`.
    strict
        If True, an attribute value that the element rejects raises the
        original exception. Otherwise the problem is recorded as error
        on the element and construction continues.
    """

    def __init__(
        self,
        root: model.Element | type[model.Element] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        if root is None:
            root = document.Ncl
        self.root = root
        self.strict = strict
        self._stack: list[_Frame] = []
        self._result: model.Element | None = None

    def start(
        self,
        tag: str,
        attrib: cabc.Mapping[str, str],
        nsmap: cabc.Mapping[str | None, str] | None = None,
    ) -> None:
        """Handle the start of an element."""
        name = helpers.localname(tag)
        top = self._stack[-1] if self._stack else None
        if top is not None and top.markup is not None:
            top.markup.start(tag, dict(attrib), dict(nsmap or {}))
            self._stack.append(_Frame(None, markup=top.markup))
            return
        if top is not None and top.element is None:
            self._stack.append(_Frame(None))
            return
        if top is not None and isinstance(top.element, meta.Metadata):
            builder = etree.TreeBuilder()
            builder.start(tag, dict(attrib), dict(nsmap or {}))
            self._stack.append(_Frame(None, top.element, markup=builder))
            return

        if not self._stack:
            element = self._create_root(name)
            namespace = etree.QName(tag).namespace
            if namespace and "xmlns" in type(element)._xmlattributes:
                self._load_attribute(element, "xmlns", namespace)
            self._load_attributes(element, attrib)
            self._stack.append(_Frame(element))
            return

        parent = self._stack[-1].element
        assert parent is not None
        try:
            slot, factory = type(parent)._xmlfactories[name]
        except KeyError:
            self._skip(parent, name)
            return

        if not factory:
            acc = getattr(type(parent), slot)
            text = attrib.get(acc.attribute)
            if text is not None:
                self._load_pod(parent, acc, text)
            self._stack.append(_Frame(None))
            return

        element = getattr(parent, factory)()
        self._load_attributes(element, attrib)
        self._stack.append(_Frame(element, parent, slot))

    def end(self, tag: str) -> None:
        """Handle the end of an element."""
        frame = self._stack.pop()
        if frame.markup is not None:
            tree = frame.markup.end(tag)
            if isinstance(frame.parent, meta.Metadata):
                frame.parent.markup.append(tree)
            return
        if frame.element is None:
            return
        if frame.parent is None:
            self._result = frame.element
            return

        assert frame.slot is not None
        acc = getattr(type(frame.parent), frame.slot)
        if isinstance(acc, model.Containment):
            if not acc.__get__(frame.parent).add(frame.element):
                message = (
                    f"Duplicate element {frame.element.xmltag!r} in"
                    f" {frame.parent.xmltag!r} was dropped"
                )
                LOGGER.warning("%s", message)
                frame.parent.add_warning(message)
        else:
            acc.__set__(frame.parent, frame.element)

    def data(self, data: str) -> None:
        if self._stack and self._stack[-1].markup is not None:
            self._stack[-1].markup.data(data)
        elif data.strip():
            LOGGER.debug("Ignoring text content: %r", data)

    def close(self) -> model.Element | None:
        """Finish construction and resolve all references.

        Returns
        -------
        Element | None
            The root of the tree, or None if no root element was
            completed. The parser also calls this method after it
            failed, and then re-raises the original exception.
        """
        if self._result is None:
            return None
        resolver.resolve(self._result)
        return self._result

    def _create_root(self, name: str) -> model.Element:
        if isinstance(self.root, model.Element):
            element = self.root
        else:
            element = self.root()
        if element.xmltag != name:
            raise ValueError(
                f"Expected root element {element.xmltag!r}, got {name!r}"
            )
        return element

    def _skip(self, parent: model.Element, name: str) -> None:
        message = (
            f"Unknown element {name!r} in {parent.xmltag!r} was skipped"
        )
        LOGGER.debug("%s", message)
        parent.add_warning(message)
        self._stack.append(_Frame(None))

    def _load_attributes(
        self, element: model.Element, attrib: cabc.Mapping[str, str]
    ) -> None:
        for key, text in attrib.items():
            self._load_attribute(element, helpers.localname(key), text)

    def _load_attribute(
        self, element: model.Element, name: str, text: str
    ) -> None:
        pods = type(element)._xmlattributes.get(name)
        if not pods:
            message = (
                f"Unknown attribute {name!r} on {element.xmltag!r}"
                " was ignored"
            )
            LOGGER.debug("%s", message)
            element.add_warning(message)
            return

        for pod in sorted(pods, key=lambda i: -len(i.prefix)):
            if pod.matches_xml(text):
                self._load_pod(element, pod, text)
                return
        raise AssertionError(f"No descriptor for {name!r} accepts {text!r}")

    def _load_pod(
        self, element: model.Element, pod: model.BasePOD[t.Any], text: str
    ) -> None:
        try:
            pod.load(element, text)
        except (TypeError, ValueError) as err:
            if self.strict:
                raise
            message = f"Invalid value for attribute {pod.attribute!r}: {err}"
            LOGGER.warning("%s: %s", element._short_repr_(), message)
            element.add_error(message)


def loads(
    text: str | bytes,
    root: model.Element | type[model.Element] | None = None,
    *,
    strict: bool = False,
) -> model.Element:
    """Build an element tree from serialized text.

    Parameters
    ----------
    text
        The document to load.
    root
        Passed on to the :class:`Builder`.
    strict
        Passed on to the :class:`Builder`.

    Returns
    -------
    Element
        The root of the tree, with all references resolved.

    Raises
    ------
    lxml.etree.XMLSyntaxError
        If the text is not well-formed XML.
    ValueError
        If the root tag does not match *root*, or if no root element
        was built.
    """
    if isinstance(text, str):
        text = text.encode("utf-8")
    builder = Builder(root, strict=strict)
    parser = etree.XMLParser(
        target=builder, resolve_entities=False, no_network=True
    )
    result = etree.fromstring(text, parser)
    if result is None:
        raise ValueError("No complete root element was built")
    return result
