# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Causal connectors and the conditions and actions they are made of."""

from __future__ import annotations

import collections.abc as cabc
import typing as t

import nclmodel.model as m
from nclmodel import resolver, values

_PARAMS = resolver.connector("params")


def _param(attribute: str) -> m.Reference:
    return m.Reference(
        attribute,
        _PARAMS,
        description="connectorParam in connector",
        prefix="$",
    )


class ConnectorParam(m.Element):
    _xmltag = "connectorParam"

    name = m.IdentifierPOD("name")
    type = m.StringPOD("type")

    @property
    def refkey(self) -> str | None:
        return self.name

    def _check(self) -> None:
        self._require("name")


class Role(m.Element):
    """The name of a condition or action inside a connector.

    Binds of a link refer to roles to attach nodes to the conditions and
    actions of the link's connector.
    """

    _xmltag = "role"

    name = m.IdentifierPOD("name")

    @property
    def refkey(self) -> str | None:
        return self.name

    @property
    def condition_role(self) -> values.DefaultConditionRole | None:
        """The predefined condition role with this name, if any."""
        try:
            return values.DefaultConditionRole(self.name)
        except ValueError:
            return None

    @property
    def action_role(self) -> values.DefaultActionRole | None:
        """The predefined action role with this name, if any."""
        try:
            return values.DefaultActionRole(self.name)
        except ValueError:
            return None


class _RoleHolder(m.Element, abstract=True):
    role = m.OwnedPOD("role", "create_role")

    def create_role(self) -> Role:
        return Role()

    def iter_roles(self) -> cabc.Iterator[Role]:
        if self.role is not None:
            yield self.role


def _check_qualifier(
    element: SimpleCondition | SimpleAction,
) -> None:
    maximum = element.max if element.max is not None else 1
    if maximum == 1 and element.qualifier is not None:
        element.add_warning(
            f"Attribute 'qualifier' of {element.xmltag!r} should not be"
            " specified when 'max' is 1."
        )
    elif maximum != 1 and element.qualifier is None:
        element.add_warning(
            f"Attribute 'qualifier' of {element.xmltag!r} must be"
            " specified when 'max' is not 1."
        )


class SimpleCondition(_RoleHolder):
    """A condition on a single event of a bound node.

    The ``key`` and ``delay`` attributes can either carry a literal
    value or refer to one of the connector's parameters. Assigning one
    form clears the other.
    """

    _xmltag = "simpleCondition"

    key = m.EnumPOD("key", values.Key)
    param_key = _param("key")
    delay = m.TimePOD("delay")
    param_delay = _param("delay")
    min = m.IntPOD("min", minimum=0)
    max = m.IntPOD("max", unbounded=True)
    qualifier = m.EnumPOD("qualifier", values.ConditionOperator)
    event_type = m.EnumPOD("eventType", values.EventType)
    transition = m.EnumPOD("transition", values.EventTransition)

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key(
            "role",
            "min",
            "max",
            "delay",
            "qualifier",
            "key",
            "eventType",
            "transition",
        )

    def _check(self) -> None:
        self._require("role")
        has_key = self.key is not None or self.param_key is not None

        selection: bool | None = None
        if self.role is not None:
            default = self.role.condition_role
            if default is not None:
                selection = default.event_type is values.EventType.SELECTION
            elif self.event_type is None or self.transition is None:
                self.add_error(
                    "Attributes 'eventType' and 'transition' must be"
                    f" specified for role {self.role.name!r}."
                )
            else:
                selection = self.event_type is values.EventType.SELECTION

        if selection and not has_key:
            self.add_error(
                "Attribute 'key' must be specified for selection role"
                f" {self.role.name!r}."
            )
        elif selection is False and has_key:
            self.add_warning(
                "Attribute 'key' should not be specified for role"
                f" {self.role.name!r}."
            )

        _check_qualifier(self)


class CompoundCondition(m.Element):
    _xmltag = "compoundCondition"
    _sort_rank = 1

    operator = m.EnumPOD("operator", values.ConditionOperator)
    delay = m.TimePOD("delay")
    param_delay = _param("delay")
    conditions = m.Containment["SimpleCondition | CompoundCondition"](
        {
            "simpleCondition": "create_simple_condition",
            "compoundCondition": "create_compound_condition",
        }
    )
    statements = m.Containment["AssessmentStatement | CompoundStatement"](
        {
            "assessmentStatement": "create_assessment_statement",
            "compoundStatement": "create_compound_statement",
        }
    )

    def create_simple_condition(self) -> SimpleCondition:
        return SimpleCondition()

    def create_compound_condition(self) -> CompoundCondition:
        return CompoundCondition()

    def create_assessment_statement(self) -> AssessmentStatement:
        return AssessmentStatement()

    def create_compound_statement(self) -> CompoundStatement:
        return CompoundStatement()

    def iter_roles(self) -> cabc.Iterator[Role]:
        for i in self.conditions:
            yield from i.iter_roles()
        for i in self.statements:
            yield from i.iter_roles()

    def _sort_key(self) -> tuple[t.Any, ...]:
        return (
            *self._attribute_key("operator", "delay"),
            self.conditions._sort_key(),
            self.statements._sort_key(),
        )

    def _check(self) -> None:
        self._require("operator")
        if not self.conditions:
            self.add_error(
                "Element 'compoundCondition' must contain at least one"
                " condition."
            )


class AttributeAssessment(_RoleHolder):
    _xmltag = "attributeAssessment"

    event_type = m.EnumPOD("eventType", values.EventType)
    key = m.EnumPOD("key", values.Key)
    param_key = _param("key")
    attribute_type = m.EnumPOD("attributeType", values.AttributeType)
    offset = m.StringPOD("offset")
    param_offset = _param("offset")

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key(
            "role", "eventType", "key", "attributeType", "offset"
        )

    def _check(self) -> None:
        self._require("role", "event_type")
        if (
            self.event_type is values.EventType.SELECTION
            and self.key is None
            and self.param_key is None
        ):
            self.add_error(
                "Attribute 'key' must be specified when assessing"
                " selection events."
            )


class ValueAssessment(m.Element):
    _xmltag = "valueAssessment"

    value = m.StringPOD("value")

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key("value")

    def _check(self) -> None:
        self._require("value")


class AssessmentStatement(m.Element):
    """Compares an event attribute with a value or another attribute."""

    _xmltag = "assessmentStatement"

    comparator = m.EnumPOD("comparator", values.Comparator)
    attribute_assessments = m.Containment["AttributeAssessment"](
        {"attributeAssessment": "create_attribute_assessment"}, ordered=True
    )
    value_assessment = m.Single["ValueAssessment"](
        {"valueAssessment": "create_value_assessment"}
    )

    def create_attribute_assessment(self) -> AttributeAssessment:
        return AttributeAssessment()

    def create_value_assessment(self) -> ValueAssessment:
        return ValueAssessment()

    def iter_roles(self) -> cabc.Iterator[Role]:
        for i in self.attribute_assessments:
            yield from i.iter_roles()

    def _sort_key(self) -> tuple[t.Any, ...]:
        value = self.value_assessment
        return (
            *self._attribute_key("comparator"),
            tuple(i._sort_key() for i in self.attribute_assessments),
            value._sort_key() if value is not None else (),
        )

    def _check(self) -> None:
        self._require("comparator")
        count = len(self.attribute_assessments)
        if count == 0:
            self.add_error(
                "Element 'assessmentStatement' must contain at least one"
                " attributeAssessment."
            )
        elif count == 1 and self.value_assessment is None:
            self.add_error(
                "Element 'assessmentStatement' with one attributeAssessment"
                " must contain a valueAssessment."
            )
        elif count == 2 and self.value_assessment is not None:
            self.add_error(
                "Element 'assessmentStatement' with two attributeAssessments"
                " must not contain a valueAssessment."
            )
        elif count > 2:
            self.add_error(
                "Element 'assessmentStatement' must not contain more than"
                " two attributeAssessments."
            )


class CompoundStatement(m.Element):
    _xmltag = "compoundStatement"
    _sort_rank = 1

    operator = m.EnumPOD("operator", values.ConditionOperator)
    is_negated = m.BoolPOD("isNegated")
    statements = m.Containment["AssessmentStatement | CompoundStatement"](
        {
            "assessmentStatement": "create_assessment_statement",
            "compoundStatement": "create_compound_statement",
        }
    )

    def create_assessment_statement(self) -> AssessmentStatement:
        return AssessmentStatement()

    def create_compound_statement(self) -> CompoundStatement:
        return CompoundStatement()

    def iter_roles(self) -> cabc.Iterator[Role]:
        for i in self.statements:
            yield from i.iter_roles()

    def _sort_key(self) -> tuple[t.Any, ...]:
        return (
            *self._attribute_key("operator", "isNegated"),
            self.statements._sort_key(),
        )

    def _check(self) -> None:
        self._require("operator")
        if not self.statements:
            self.add_error(
                "Element 'compoundStatement' must contain at least one"
                " statement."
            )


class SimpleAction(_RoleHolder):
    """An action performed on a single event of a bound node.

    Most attributes can either carry a literal value or refer to one of
    the connector's parameters with the corresponding ``param_*``
    attribute.
    """

    _xmltag = "simpleAction"

    delay = m.TimePOD("delay")
    param_delay = _param("delay")
    value = m.StringPOD("value")
    param_value = _param("value")
    min = m.IntPOD("min", minimum=0)
    max = m.IntPOD("max", unbounded=True)
    qualifier = m.EnumPOD("qualifier", values.ActionOperator)
    event_type = m.EnumPOD("eventType", values.EventType)
    action_type = m.EnumPOD("actionType", values.EventAction)
    repeat = m.IntPOD("repeat", minimum=0)
    param_repeat = _param("repeat")
    repeat_delay = m.TimePOD("repeatDelay")
    param_repeat_delay = _param("repeatDelay")
    duration = m.TimePOD("duration")
    param_duration = _param("duration")
    by = m.StringPOD("by")
    param_by = _param("by")

    def _sort_key(self) -> tuple[t.Any, ...]:
        return self._attribute_key(
            "role",
            "delay",
            "value",
            "min",
            "max",
            "qualifier",
            "eventType",
            "actionType",
            "repeat",
            "repeatDelay",
            "duration",
            "by",
        )

    def _check(self) -> None:
        self._require("role")

        event_type = self.event_type
        if self.role is not None:
            default = self.role.action_role
            if default is not None:
                event_type = default.event_type
            elif self.event_type is None or self.action_type is None:
                self.add_error(
                    "Attributes 'eventType' and 'actionType' must be"
                    f" specified for role {self.role.name!r}."
                )

        has_value = self.value is not None or self.param_value is not None
        if has_value and event_type is not values.EventType.ATTRIBUTION:
            self.add_warning(
                "Attribute 'value' should only be specified for"
                " attribution actions."
            )

        _check_qualifier(self)


class CompoundAction(m.Element):
    _xmltag = "compoundAction"
    _sort_rank = 1

    operator = m.EnumPOD("operator", values.ActionOperator)
    delay = m.TimePOD("delay")
    param_delay = _param("delay")
    actions = m.Containment["SimpleAction | CompoundAction"](
        {
            "simpleAction": "create_simple_action",
            "compoundAction": "create_compound_action",
        }
    )

    def create_simple_action(self) -> SimpleAction:
        return SimpleAction()

    def create_compound_action(self) -> CompoundAction:
        return CompoundAction()

    def iter_roles(self) -> cabc.Iterator[Role]:
        for i in self.actions:
            yield from i.iter_roles()

    def _sort_key(self) -> tuple[t.Any, ...]:
        return (
            *self._attribute_key("operator", "delay"),
            self.actions._sort_key(),
        )

    def _check(self) -> None:
        self._require("operator")
        if not self.actions:
            self.add_error(
                "Element 'compoundAction' must contain at least one action."
            )


class CausalConnector(m.IdentifiableElement):
    """A reusable template relating conditions to actions."""

    _xmltag = "causalConnector"

    params = m.Containment["ConnectorParam"](
        {"connectorParam": "create_param"}
    )
    condition = m.Single["SimpleCondition | CompoundCondition"](
        {
            "simpleCondition": "create_simple_condition",
            "compoundCondition": "create_compound_condition",
        }
    )
    action = m.Single["SimpleAction | CompoundAction"](
        {
            "simpleAction": "create_simple_action",
            "compoundAction": "create_compound_action",
        }
    )

    def create_param(self) -> ConnectorParam:
        return ConnectorParam()

    def create_simple_condition(self) -> SimpleCondition:
        return SimpleCondition()

    def create_compound_condition(self) -> CompoundCondition:
        return CompoundCondition()

    def create_simple_action(self) -> SimpleAction:
        return SimpleAction()

    def create_compound_action(self) -> CompoundAction:
        return CompoundAction()

    @property
    def roles(self) -> list[Role]:
        """All roles declared by the conditions and actions."""
        roles: list[Role] = []
        for part in (self.condition, self.action):
            if part is not None:
                roles.extend(part.iter_roles())
        return roles

    def _check(self) -> None:
        self._require("id")
        if self.condition is None:
            self.add_error(
                "Element 'causalConnector' does not have a condition."
            )
        if self.action is None:
            self.add_error(
                "Element 'causalConnector' does not have an action."
            )


class ConnectorBase(m.IdentifiableElement):
    _xmltag = "connectorBase"

    connectors = m.Containment["CausalConnector"](
        {"causalConnector": "create_causal_connector"}
    )

    def create_causal_connector(self) -> CausalConnector:
        return CausalConnector()

    def _check(self) -> None:
        if not self.connectors:
            self.add_warning("Element 'connectorBase' is empty.")
