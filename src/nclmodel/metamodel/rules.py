# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Rules, which select among the alternatives of switches."""

from __future__ import annotations

import typing as t

import nclmodel.model as m
from nclmodel import resolver, values

_RULE_FACTORIES = {
    "rule": "create_rule",
    "compositeRule": "create_composite_rule",
}


class Rule(m.IdentifiableElement):
    """Compares a settings property against a value."""

    _xmltag = "rule"

    var = m.Reference(
        "var", resolver.document("property"), description="property"
    )
    comparator = m.EnumPOD("comparator", values.Comparator)
    value = m.StringPOD("value")

    def _check(self) -> None:
        self._require("id", "var", "comparator", "value")

        var = self.var
        settings = values.MimeType.APPLICATION_X_GINGA_SETTINGS
        if isinstance(var, m.Element):
            owner = var.parent
            if (
                owner is None
                or getattr(owner, "node_kind", None) is not m.NodeKind.MEDIA
                or owner.type is not settings
            ):
                self.add_warning(
                    "Attribute 'var' should refer to a property of a"
                    " settings media node."
                )


class CompositeRule(m.IdentifiableElement):
    """Combines several rules with a logical operator."""

    _xmltag = "compositeRule"

    operator = m.EnumPOD("operator", values.ConditionOperator)
    rules = m.Containment["Rule | CompositeRule"](_RULE_FACTORIES)

    def create_rule(self) -> Rule:
        return Rule()

    def create_composite_rule(self) -> CompositeRule:
        return CompositeRule()

    def _check(self) -> None:
        self._require("id", "operator")
        if not self.rules:
            self.add_error(
                "Element 'compositeRule' must contain at least one rule."
            )


class RuleBase(m.IdentifiableElement):
    _xmltag = "ruleBase"

    rules = m.Containment["Rule | CompositeRule"](_RULE_FACTORIES)

    def create_rule(self) -> Rule:
        return Rule()

    def create_composite_rule(self) -> CompositeRule:
        return CompositeRule()

    def _check(self) -> None:
        if not self.rules:
            self.add_warning("Element 'ruleBase' is empty.")


class BindRule(m.Element):
    """Selects one constituent of a switch when a rule holds.

    Bind rules are used by both node switches and descriptor switches;
    the constituent is looked up among the ``constituents`` of the
    enclosing switch.
    """

    _xmltag = "bindRule"

    constituent = m.Reference(
        "constituent",
        resolver.enclosing("constituents"),
        description="constituent in switch",
    )
    rule = m.Reference(
        "rule",
        resolver.base("rule_base", "rules", nested="rules"),
        description="rule in ruleBase",
    )

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key("constituent", "rule")

    def _check(self) -> None:
        self._require("constituent", "rule")

        constituent = self.constituent
        switch = self.parent
        if (
            isinstance(constituent, m.Element)
            and switch is not None
            and constituent not in switch.constituents
        ):
            self.add_error(
                "Attribute 'constituent' must refer to an element of the"
                " enclosing switch."
            )
