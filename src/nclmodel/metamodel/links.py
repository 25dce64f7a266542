# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Links, which attach nodes to the roles of a connector."""

from __future__ import annotations

import typing as t

import nclmodel.model as m
from nclmodel import resolver, values


class Param(m.Element):
    """A value for one of the connector's parameters.

    Depending on its :attr:`kind`, a parameter applies to the whole link
    (``linkParam``) or to a single bind (``bindParam``).
    """

    _xmltag = "linkParam"

    name = m.Reference(
        "name",
        resolver.connector("params"),
        description="connectorParam in connector",
    )
    value = m.StringPOD("value")

    def __init__(
        self,
        kind: values.ParamKind | str = values.ParamKind.LINK_PARAM,
        **kw: t.Any,
    ) -> None:
        super().__init__(**kw)
        self._kind = values.ParamKind(kind)

    @property
    def kind(self) -> values.ParamKind:
        return self._kind

    @property
    def xmltag(self) -> str:
        return self._kind.value

    @property
    def refkey(self) -> str | None:
        name = self.name
        if name is None:
            return None
        return name.refkey

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key("name")

    def _check(self) -> None:
        self._require("name", "value")


class Bind(m.Element):
    """Attaches a node, or one of its interfaces, to a connector role."""

    _xmltag = "bind"

    role = m.Reference(
        "role", resolver.connector("roles"), description="role in connector"
    )
    component = m.Reference(
        "component",
        resolver.enclosing("nodes", levels=2, include_container=True),
        description="node",
    )
    interface = m.Reference(
        "interface", resolver.interfaces(), description="interface"
    )
    descriptor = m.Reference(
        "descriptor",
        resolver.base("descriptor_base", "descriptors"),
        description="descriptor in descriptorBase",
    )
    params = m.Containment["Param"]({"bindParam": "create_param"})

    def create_param(self) -> Param:
        return Param(values.ParamKind.BIND_PARAM)

    @property
    def link(self) -> Link | None:
        return self.parent

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key(
            "role", "component", "interface", "descriptor"
        )

    def _check(self) -> None:
        self._require("role", "component")

        link = self.link
        composite = link.parent if link is not None else None
        component = self.component
        if (
            isinstance(component, m.Element)
            and composite is not None
            and component is not composite
            and component not in composite.nodes
        ):
            self.add_error(
                "Attribute 'component' must refer to the enclosing"
                " composite node or one of its nodes."
            )

        connector = link.xconnector if link is not None else None
        role = self.role
        if (
            isinstance(role, m.Element)
            and isinstance(connector, m.Element)
            and not any(i is role for i in connector.roles)
        ):
            self.add_error(
                f"Role {role.refkey!r} is not declared by connector"
                f" {connector.refkey!r}."
            )

        for param in self.params:
            if param.kind is not values.ParamKind.BIND_PARAM:
                self.add_error("Element 'bind' may only contain bindParams.")


class Link(m.IdentifiableElement):
    """Applies a connector to a set of nodes."""

    _xmltag = "link"

    xconnector = m.Reference(
        "xconnector",
        resolver.base("connector_base", "connectors"),
        description="connector in connectorBase",
    )
    params = m.Containment["Param"]({"linkParam": "create_param"})
    binds = m.Containment["Bind"]({"bind": "create_bind"}, ordered=True)

    def create_param(self) -> Param:
        return Param(values.ParamKind.LINK_PARAM)

    def create_bind(self) -> Bind:
        return Bind()

    def _sort_key(self) -> tuple[t.Any, ...]:
        return (
            *self._attribute_key("id", "xconnector"),
            self.params._sort_key(),
            tuple(i._sort_key() for i in self.binds),
        )

    def _check(self) -> None:
        self._require("xconnector")
        if len(self.binds) < 2:
            self.add_error("Element 'link' must contain at least two binds.")

        for param in self.params:
            if param.kind is not values.ParamKind.LINK_PARAM:
                self.add_error("Element 'link' may only contain linkParams.")

        connector = self.xconnector
        if not isinstance(connector, m.Element):
            return
        all_params = [*self.params]
        for bind in self.binds:
            all_params.extend(bind.params)
        for param in all_params:
            name = param.name
            if isinstance(name, m.Element) and name not in connector.params:
                self.add_error(
                    f"Parameter {name.refkey!r} is not declared by"
                    f" connector {connector.refkey!r}."
                )
