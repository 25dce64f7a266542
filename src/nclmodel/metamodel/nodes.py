# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Nodes and the structures that nest them.

A document's body holds media nodes and two kinds of composite nodes,
contexts and switches, which in turn hold further nodes. The kind of a
node is available as its :attr:`~Media.node_kind`.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as t

import nclmodel.model as m
from nclmodel import resolver, values

from . import links, meta, rules

_NODE_FACTORIES = {
    "media": "create_media",
    "context": "create_context",
    "switch": "create_switch",
}
_DESCRIPTORS = resolver.base("descriptor_base", "descriptors")


class Area(m.IdentifiableElement):
    """An anchor on a part of a media node's content."""

    _xmltag = "area"

    coords = m.StringPOD("coords")
    begin = m.TimePOD("begin")
    end = m.TimePOD("end")
    text = m.StringPOD("text")
    position = m.IntPOD("position", minimum=0)
    first = m.StringPOD("first")
    last = m.StringPOD("last")
    label = m.StringPOD("label")

    def _check(self) -> None:
        self._require("id")
        if (
            self.begin is not None
            and self.end is not None
            and self.end < self.begin
        ):
            self.add_warning(f"Area {self.id!r} ends before it begins.")


class Property(m.Element):
    _xmltag = "property"

    name = m.StringPOD("name")
    value = m.StringPOD("value")

    @property
    def refkey(self) -> str | None:
        return self.name

    def _check(self) -> None:
        self._require("name")


class Port(m.IdentifiableElement):
    """Exposes a node, or one of its interfaces, outside a composite."""

    _xmltag = "port"

    component = m.Reference(
        "component", resolver.enclosing("nodes"), description="node"
    )
    interface = m.Reference(
        "interface", resolver.interfaces(), description="interface"
    )

    def _check(self) -> None:
        self._require("id", "component")

        component = self.component
        composite = self.parent
        if (
            isinstance(component, m.Element)
            and composite is not None
            and component not in composite.nodes
        ):
            self.add_error(
                "Attribute 'component' must refer to a node of the"
                " enclosing composite node."
            )


class Media(m.IdentifiableElement):
    """A node presenting some content, such as a video or an image."""

    _xmltag = "media"
    node_kind: t.ClassVar[m.NodeKind] = m.NodeKind.MEDIA

    src = m.StringPOD("src")
    refer = m.Reference(
        "refer", resolver.document(m.NodeKind.MEDIA), description="media"
    )
    instance = m.EnumPOD("instance", values.InstanceType)
    type = m.EnumPOD("type", values.MimeType)
    descriptor = m.Reference(
        "descriptor", _DESCRIPTORS, description="descriptor in descriptorBase"
    )
    areas = m.Containment["Area"]({"area": "create_area"})
    properties = m.Containment["Property"]({"property": "create_property"})

    def create_area(self) -> Area:
        return Area()

    def create_property(self) -> Property:
        return Property()

    @property
    def interfaces(self) -> list[m.Element]:
        """The areas and properties that binds and ports may use."""
        return [*self.areas, *self.properties]

    def _check(self) -> None:
        self._require("id")
        if self.refer is self:
            self.add_error("Element 'media' must not refer to itself.")
        if self.instance is not None and self.refer is None:
            self.add_warning(
                "Attribute 'instance' is only used together with 'refer'."
            )


class _NodeFactories(m.IdentifiableElement, abstract=True):
    def create_media(self) -> Media:
        return Media()

    def create_context(self) -> Context:
        return Context()

    def create_switch(self) -> Switch:
        return Switch()

    def _check_refer(self) -> None:
        refer = getattr(self, "refer", None)
        if not isinstance(refer, m.Element):
            return
        if (
            refer is self
            or any(i is refer for i in self.iter_ancestors())
            or any(i is refer for i in resolver.iter_nodes(self.nodes))
        ):
            self.add_error(
                f"Element {self.xmltag!r} must not refer to itself or to"
                " a node that contains or is contained in it."
            )


class _Composition(_NodeFactories, abstract=True):
    metas = m.Containment["meta.Meta"]({"meta": "create_meta"})
    metadatas = m.Containment["meta.Metadata"](
        {"metadata": "create_metadata"}, ordered=True
    )
    ports = m.Containment["Port"]({"port": "create_port"})
    properties = m.Containment["Property"]({"property": "create_property"})
    nodes = m.Containment["Media | Context | Switch"](_NODE_FACTORIES)
    links = m.Containment["links.Link"]({"link": "create_link"})

    def create_meta(self) -> meta.Meta:
        return meta.Meta()

    def create_metadata(self) -> meta.Metadata:
        return meta.Metadata()

    def create_port(self) -> Port:
        return Port()

    def create_property(self) -> Property:
        return Property()

    def create_link(self) -> links.Link:
        return links.Link()

    @property
    def interfaces(self) -> list[m.Element]:
        """The ports and properties that binds and ports may use."""
        return [*self.ports, *self.properties]


class Body(_Composition):
    """The top-level composite node of a document."""

    _xmltag = "body"

    def _check(self) -> None:
        if not self.nodes:
            self.add_warning("Element 'body' does not contain any nodes.")


class Context(_Composition):
    """A composite node grouping nodes and the links between them."""

    _xmltag = "context"
    node_kind: t.ClassVar[m.NodeKind] = m.NodeKind.CONTEXT

    refer = m.Reference(
        "refer", resolver.document(m.NodeKind.CONTEXT), description="context"
    )

    def _check(self) -> None:
        self._require("id")
        self._check_refer()


class Switch(_NodeFactories):
    """A composite node presenting one of its nodes, chosen by rules."""

    _xmltag = "switch"
    node_kind: t.ClassVar[m.NodeKind] = m.NodeKind.SWITCH

    refer = m.Reference(
        "refer", resolver.document(m.NodeKind.SWITCH), description="switch"
    )
    bind_rules = m.Containment["rules.BindRule"](
        {"bindRule": "create_bind_rule"}, ordered=True
    )
    default_component = m.Reference(
        "component",
        resolver.enclosing("nodes", levels=0),
        description="node in switch",
        element="defaultComponent",
    )
    nodes = m.Containment["Media | Context | Switch"](_NODE_FACTORIES)

    def create_bind_rule(self) -> rules.BindRule:
        return rules.BindRule()

    @property
    def constituents(self) -> m.ElementList[Media | Context | Switch]:
        return self.nodes

    @property
    def interfaces(self) -> cabc.Sequence[m.Element]:
        return ()

    def _check(self) -> None:
        self._require("id")
        self._check_refer()

        if not self.nodes:
            self.add_error("Element 'switch' must contain at least one node.")

        default = self.default_component
        if isinstance(default, m.Element) and default not in self.nodes:
            self.add_error(
                "Element 'defaultComponent' must refer to a node of the"
                " enclosing switch."
            )
