# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import nclmodel.model as m

from . import connectors, descriptors, nodes, rules, transitions

NAMESPACE = "http://www.ncl.org.br/NCL3.0/EDTVProfile"
"""The namespace of documents following the enhanced DTV profile."""


class Head(m.Element):
    """Holds the shared bases of a document."""

    _xmltag = "head"

    rule_base = m.Single["rules.RuleBase"]({"ruleBase": "create_rule_base"})
    transition_base = m.Single["transitions.TransitionBase"](
        {"transitionBase": "create_transition_base"}
    )
    descriptor_base = m.Single["descriptors.DescriptorBase"](
        {"descriptorBase": "create_descriptor_base"}
    )
    connector_base = m.Single["connectors.ConnectorBase"](
        {"connectorBase": "create_connector_base"}
    )

    def create_rule_base(self) -> rules.RuleBase:
        return rules.RuleBase()

    def create_transition_base(self) -> transitions.TransitionBase:
        return transitions.TransitionBase()

    def create_descriptor_base(self) -> descriptors.DescriptorBase:
        return descriptors.DescriptorBase()

    def create_connector_base(self) -> connectors.ConnectorBase:
        return connectors.ConnectorBase()


class Ncl(m.IdentifiableElement):
    """The root element of a document."""

    _xmltag = "ncl"

    title = m.StringPOD("title")
    xmlns = m.StringPOD("xmlns")
    head = m.Single["Head"]({"head": "create_head"})
    body = m.Single["nodes.Body"]({"body": "create_body"})

    def create_head(self) -> Head:
        return Head()

    def create_body(self) -> nodes.Body:
        return nodes.Body()

    def _check(self) -> None:
        self._require("id")
