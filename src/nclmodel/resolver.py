# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Deferred resolution of references between elements.

While a document is being built, references to other elements are
stored as :class:`~nclmodel.model.Placeholder` objects, because their
targets may not exist yet. Once the whole tree is available,
:func:`resolve` walks it depth-first and replaces every placeholder with
the element it names.

Where a reference looks for its target is decided by the reference
itself, through one of the scope factories in this module:

- :func:`base` searches one of the document's shared bases,
- :func:`enclosing` searches the children of an enclosing element,
- :func:`document` searches all nodes reachable from the body,
- :func:`connector` searches the connector a link or condition uses,
- :func:`interfaces` searches the interfaces of a resolved component.
"""

from __future__ import annotations

__all__ = [
    "ResolutionContext",
    "ScopeError",
    "base",
    "connector",
    "document",
    "enclosing",
    "interfaces",
    "iter_nodes",
    "resolve",
]

import collections.abc as cabc
import dataclasses
import logging
import typing as t

from nclmodel import model

LOGGER = logging.getLogger(__name__)

_BASE_TAGS = {
    "connector_base": "connectorBase",
    "rule_base": "ruleBase",
    "descriptor_base": "descriptorBase",
    "transition_base": "transitionBase",
}


class ScopeError(LookupError):
    """Raised by a scope that cannot determine its candidates."""

    what = property(lambda self: self.args[0])

    def __str__(self) -> str:
        if len(self.args) != 1:
            return super().__str__()
        return f"Could not find {self.what}"


@dataclasses.dataclass
class ResolutionContext:
    """Direct links to the parts of a document that references target.

    Use :meth:`from_element` to derive the context from any element of
    a document.
    """

    root: model.Element
    head: model.Element | None = None
    body: model.Element | None = None
    connector_base: model.Element | None = None
    rule_base: model.Element | None = None
    descriptor_base: model.Element | None = None
    transition_base: model.Element | None = None

    @classmethod
    def from_element(cls, element: model.Element) -> ResolutionContext:
        root = element.root
        ctx = cls(root)
        if root.xmltag == "ncl":
            ctx.head = getattr(root, "head", None)
            ctx.body = getattr(root, "body", None)
        elif root.xmltag == "head":
            ctx.head = root
        elif root.xmltag == "body":
            ctx.body = root

        if ctx.head is not None:
            for attr in _BASE_TAGS:
                setattr(ctx, attr, getattr(ctx.head, attr, None))
        elif root.xmltag in _BASE_TAGS.values():
            for attr, tag in _BASE_TAGS.items():
                if root.xmltag == tag:
                    setattr(ctx, attr, root)
        return ctx


def resolve(
    element: model.Element, context: ResolutionContext | None = None
) -> list[str]:
    """Resolve all placeholders in the subtree below *element*.

    References that cannot be resolved are set to None, and a warning
    is added to the referencing element as well as to all of its
    ancestors up to *element*. Elements whose references are already
    resolved are left alone, so running this function again is safe.

    Parameters
    ----------
    element
        The root of the subtree to resolve, usually the document.
    context
        The context to resolve in. If not given, it is derived from the
        topmost ancestor of *element*.

    Returns
    -------
    list[str]
        The warnings that were produced during this run.
    """
    if context is None:
        context = ResolutionContext.from_element(element)
    LOGGER.debug("Resolving references below %s", element._short_repr_())
    return _resolve(element, context)


def _resolve(element: model.Element, ctx: ResolutionContext) -> list[str]:
    produced: list[str] = []
    for ref in type(element)._references:
        if not ref.is_pending(element):
            continue
        message = _resolve_one(element, ref, ctx)
        if message is not None:
            LOGGER.warning("%s: %s", element._short_repr_(), message)
            element.add_warning(message)
            produced.append(message)

    for child in element.iter_children():
        from_child = _resolve(child, ctx)
        element._warnings.extend(from_child)
        produced.extend(from_child)
    return produced


def _resolve_one(
    element: model.Element, ref: model.Reference, ctx: ResolutionContext
) -> str | None:
    placeholder = ref.__get__(element)
    assert isinstance(placeholder, model.Placeholder)
    try:
        candidates = ref.scope(element, ctx)
        for candidate in candidates:
            if candidate.refkey == placeholder.id:
                break
        else:
            candidate = None
    except ScopeError as err:
        ref.__set__(element, None)
        return str(err)

    ref.__set__(element, candidate)
    if candidate is None:
        return f"Could not find {ref.description} with id: {placeholder.id}"
    LOGGER.debug(
        "Resolved %s of %s", ref._qualname, element._short_repr_()
    )
    return None


def base(
    attr: str, collection: str, *, nested: str | None = None
) -> model.Scope:
    """Search the elements of one of the document's bases.

    Parameters
    ----------
    attr
        The attribute of the :class:`ResolutionContext` holding the
        base, e.g. ``connector_base``.
    collection
        The attribute of the base that holds the candidates.
    nested
        Attribute of a candidate that holds more candidates, which are
        searched after the candidate itself.
    """
    if attr not in _BASE_TAGS:
        raise ValueError(f"Unknown base: {attr!r}")

    def scope(
        obj: model.Element, ctx: ResolutionContext
    ) -> cabc.Iterable[model.Element]:
        del obj
        found = getattr(ctx, attr)
        if found is None:
            raise ScopeError(f"a {_BASE_TAGS[attr]}")
        return _walk(getattr(found, collection), nested)

    return scope


def _walk(
    elements: cabc.Iterable[model.Element], nested: str | None
) -> cabc.Iterator[model.Element]:
    for elem in elements:
        yield elem
        if nested is not None:
            yield from _walk(getattr(elem, nested, ()), nested)


def enclosing(
    collection: str, *, levels: int = 1, include_container: bool = False
) -> model.Scope:
    """Search the children of an enclosing element.

    Parameters
    ----------
    collection
        The attribute of the enclosing element that holds the
        candidates.
    levels
        How many levels to go up from the referencing element. 0 means
        the referencing element itself.
    include_container
        Also consider the enclosing element itself as candidate, after
        its children.
    """

    def scope(
        obj: model.Element, ctx: ResolutionContext
    ) -> cabc.Iterable[model.Element]:
        del ctx
        container: model.Element | None = obj
        for _ in range(levels):
            assert container is not None
            container = container.parent
            if container is None:
                raise ScopeError("a parent element")
        assert container is not None
        candidates = list(getattr(container, collection, ()))
        if include_container:
            candidates.append(container)
        return candidates

    return scope


def iter_nodes(
    nodes: cabc.Iterable[model.Element],
) -> cabc.Iterator[model.Element]:
    """Iterate over *nodes* and everything nested in them, preorder."""
    for node in nodes:
        yield node
        yield from iter_nodes(_NESTED_NODES[node.node_kind](node))


_NESTED_NODES: dict[
    model.NodeKind, cabc.Callable[[t.Any], cabc.Iterable[model.Element]]
] = {
    model.NodeKind.MEDIA: lambda node: (),
    model.NodeKind.CONTEXT: lambda node: node.nodes,
    model.NodeKind.SWITCH: lambda node: node.nodes,
}


def document(kind: model.NodeKind | str) -> model.Scope:
    """Search the nodes reachable from the document's body.

    Parameters
    ----------
    kind
        Either the kind of node to search for, or ``"property"`` to
        search the properties of all media nodes.
    """
    if isinstance(kind, str) and kind != "property":
        kind = model.NodeKind(kind)

    def scope(
        obj: model.Element, ctx: ResolutionContext
    ) -> cabc.Iterator[model.Element]:
        del obj
        if ctx.body is None:
            raise ScopeError("a body")
        for node in iter_nodes(ctx.body.nodes):
            if kind == "property":
                if node.node_kind is model.NodeKind.MEDIA:
                    yield from node.properties
            elif node.node_kind is kind:
                yield node

    return scope


def connector(collection: str) -> model.Scope:
    """Search the connector used by the referencing element.

    The connector is the one the nearest enclosing link refers to, or
    the nearest enclosing causal connector.
    """

    def scope(
        obj: model.Element, ctx: ResolutionContext
    ) -> cabc.Iterable[model.Element]:
        del ctx
        for ancestor in obj.iter_ancestors():
            if ancestor.xmltag == "causalConnector":
                found = ancestor
                break
            if ancestor.xmltag == "link":
                found = ancestor.xconnector
                if not isinstance(found, model.Element):
                    raise ScopeError("a connector")
                break
        else:
            raise ScopeError("a parent connector")
        return getattr(found, collection)

    return scope


def interfaces() -> model.Scope:
    """Search the interfaces of the referencing element's component."""

    def scope(
        obj: model.Element, ctx: ResolutionContext
    ) -> cabc.Iterable[model.Element]:
        del ctx
        component = obj.component
        if not isinstance(component, model.Element):
            raise ScopeError("a component")
        return component.interfaces

    return scope
