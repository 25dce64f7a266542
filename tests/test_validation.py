# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

import pytest

from nclmodel import validation, values
from nclmodel.metamodel import (
    connectors,
    descriptors,
    links,
    meta,
    nodes,
    rules,
    transitions,
)

from .conftest import make_connector


class TestSimpleConditions:
    @staticmethod
    def test_a_role_is_required():
        condition = connectors.SimpleCondition()

        assert condition.validate() is False
        assert condition.errors == [
            "Element 'simpleCondition' does not have required"
            " attribute 'role'."
        ]

    @staticmethod
    def test_selection_roles_require_a_key():
        condition = connectors.SimpleCondition(role="onSelection")

        assert condition.validate() is False
        assert "Attribute 'key' must be specified" in condition.errors[0]

    @staticmethod
    @pytest.mark.parametrize(
        "kw", [{"key": "ENTER"}, {"param_key": "keyCode"}]
    )
    def test_a_key_or_a_key_parameter_satisfies_selection_roles(kw):
        condition = connectors.SimpleCondition(role="onSelection", **kw)

        assert condition.validate() is True
        assert condition.warnings == []

    @staticmethod
    def test_keys_on_other_roles_are_warned_about():
        condition = connectors.SimpleCondition(role="onBegin", key="RED")

        assert condition.validate() is True
        assert condition.warnings == [
            "Attribute 'key' should not be specified for role 'onBegin'."
        ]

    @staticmethod
    def test_custom_roles_need_event_type_and_transition():
        condition = connectors.SimpleCondition(role="whenReady")

        assert condition.validate() is False
        assert condition.errors == [
            "Attributes 'eventType' and 'transition' must be specified"
            " for role 'whenReady'."
        ]

    @staticmethod
    def test_custom_selection_roles_need_a_key():
        condition = connectors.SimpleCondition(
            role="whenPressed", event_type="selection", transition="starts"
        )

        assert condition.validate() is False

        condition.key = values.Key.ENTER

        assert condition.validate() is True

    @staticmethod
    def test_multiple_occurrences_need_a_qualifier():
        condition = connectors.SimpleCondition(
            role="onBegin", max=values.UNBOUNDED
        )

        assert condition.validate() is True
        assert condition.warnings == [
            "Attribute 'qualifier' of 'simpleCondition' must be specified"
            " when 'max' is not 1."
        ]

    @staticmethod
    def test_single_occurrences_do_not_need_a_qualifier():
        condition = connectors.SimpleCondition(
            role="onBegin", max=1, qualifier="or"
        )

        assert condition.validate() is True
        assert condition.warnings == [
            "Attribute 'qualifier' of 'simpleCondition' should not be"
            " specified when 'max' is 1."
        ]


class TestSimpleActions:
    @staticmethod
    def test_custom_roles_need_event_and_action_type():
        action = connectors.SimpleAction(role="show")

        assert action.validate() is False

        action.event_type = "presentation"
        action.action_type = "start"

        assert action.validate() is True

    @staticmethod
    def test_values_are_only_meant_for_attribution():
        action = connectors.SimpleAction(role="start", value="1")

        assert action.validate() is True
        assert action.warnings == [
            "Attribute 'value' should only be specified for attribution"
            " actions."
        ]

    @staticmethod
    def test_the_set_role_takes_a_value():
        action = connectors.SimpleAction(role="set", param_value="var")

        assert action.validate() is True
        assert action.warnings == []


def test_connectors_need_a_condition_and_an_action():
    connector = connectors.CausalConnector(id="empty")

    assert connector.validate() is False
    assert connector.errors == [
        "Element 'causalConnector' does not have a condition.",
        "Element 'causalConnector' does not have an action.",
    ]


def test_children_are_validated_even_after_an_error():
    connector = connectors.CausalConnector()
    connector.condition = connectors.SimpleCondition()
    connector.action = connectors.SimpleAction()

    assert connector.validate() is False

    assert len(connector.errors) == 3
    assert len(connector.condition.errors) == 1
    assert len(connector.action.errors) == 1


def test_diagnostics_are_reset_for_every_run():
    condition = connectors.SimpleCondition()
    condition.validate()
    condition.validate()

    assert len(condition.errors) == 1

    condition.role = "onBegin"

    assert condition.validate() is True
    assert condition.errors == []


def test_warnings_alone_do_not_make_an_element_invalid():
    base = connectors.ConnectorBase()

    assert base.validate() is True
    assert base.warnings == ["Element 'connectorBase' is empty."]


class TestMetaElements:
    @staticmethod
    def test_metas_need_a_name_and_content():
        element = meta.Meta(name="author")

        assert element.validate() is False
        assert element.errors == [
            "Element 'meta' does not have required attribute 'content'."
        ]

    @staticmethod
    def test_empty_metadata_is_warned_about():
        element = meta.Metadata()

        assert element.validate() is True
        assert element.warnings == [
            "Element 'metadata' does not contain any markup."
        ]

    @staticmethod
    def test_composites_merge_the_results_of_their_metas():
        context = nodes.Context(id="ctx")
        context.metas.add(meta.Meta(content="x"))
        context.metadatas.add(meta.Metadata())

        assert context.validate() is False
        assert context.errors == [
            "Element 'meta' does not have required attribute 'name'."
        ]
        assert context.warnings == [
            "Element 'metadata' does not contain any markup."
        ]


def test_compound_conditions_need_a_condition():
    condition = connectors.CompoundCondition(operator="and")

    assert condition.validate() is False

    condition.conditions.add(connectors.SimpleCondition(role="onBegin"))

    assert condition.validate() is True


@pytest.mark.parametrize(
    ["attributes", "with_value", "valid"],
    [
        pytest.param(0, False, False, id="empty"),
        pytest.param(1, False, False, id="one-without-value"),
        pytest.param(1, True, True, id="one-with-value"),
        pytest.param(2, False, True, id="two-without-value"),
        pytest.param(2, True, False, id="two-with-value"),
        pytest.param(3, False, False, id="three"),
    ],
)
def test_assessment_statements_compare_with_exactly_one_thing(
    attributes, with_value, valid
):
    statement = connectors.AssessmentStatement(comparator="eq")
    for i in range(attributes):
        statement.attribute_assessments.add(
            connectors.AttributeAssessment(
                role=f"r{i}", event_type="presentation"
            )
        )
    if with_value:
        statement.value_assessment = connectors.ValueAssessment(value="1")

    assert statement.validate() is valid


class TestNodes:
    @staticmethod
    def test_media_must_not_refer_to_itself():
        media = nodes.Media(id="video")
        media.refer = media

        assert media.validate() is False

    @staticmethod
    @pytest.mark.parametrize("target", ["self", "ancestor", "descendant"])
    def test_contexts_must_not_refer_to_related_contexts(target):
        outer = nodes.Context(id="outer")
        context = nodes.Context(id="ctx")
        inner = nodes.Context(id="inner")
        outer.nodes.add(context)
        context.nodes.add(inner)
        context.refer = {
            "self": context,
            "ancestor": outer,
            "descendant": inner,
        }[target]

        assert context.validate() is False
        assert "must not refer to itself" in context.errors[0]

    @staticmethod
    def test_contexts_may_refer_to_unrelated_contexts():
        body = nodes.Body()
        context = nodes.Context(id="ctx")
        other = nodes.Context(id="other")
        body.nodes.add(context)
        body.nodes.add(other)
        context.refer = other

        assert context.validate() is True

    @staticmethod
    def test_switches_need_a_node():
        switch = nodes.Switch(id="sw")

        assert switch.validate() is False
        assert switch.errors == [
            "Element 'switch' must contain at least one node."
        ]

    @staticmethod
    def test_the_default_component_must_be_part_of_the_switch():
        switch = nodes.Switch(id="sw")
        switch.nodes.add(nodes.Media(id="a"))
        switch.default_component = nodes.Media(id="elsewhere")

        assert switch.validate() is False

        switch.default_component = switch.nodes["a"]

        assert switch.validate() is True

    @staticmethod
    def test_ports_must_expose_nodes_of_their_composite():
        body = nodes.Body()
        body.nodes.add(nodes.Media(id="a"))
        port = nodes.Port(id="entry", component=nodes.Media(id="b"))
        body.ports.add(port)

        assert body.validate() is False
        assert port.errors == [
            "Attribute 'component' must refer to a node of the enclosing"
            " composite node."
        ]

    @staticmethod
    def test_bind_rules_must_name_a_constituent_of_their_switch():
        switch = nodes.Switch(id="sw")
        switch.nodes.add(nodes.Media(id="a"))
        bind_rule = rules.BindRule(
            constituent=nodes.Media(id="b"), rule=rules.Rule(id="r")
        )
        switch.bind_rules.add(bind_rule)

        assert switch.validate() is False
        assert len(bind_rule.errors) == 1


class TestLinks:
    @staticmethod
    def test_links_need_two_binds():
        link = links.Link(id="l", xconnector="c")
        link.binds.add(links.Bind(role="onBegin", component="a"))

        assert link.validate() is False
        assert link.errors == [
            "Element 'link' must contain at least two binds."
        ]

    @staticmethod
    def test_link_parameters_must_be_declared_by_the_connector():
        connector = make_connector("c")
        link = links.Link(id="l", xconnector=connector)
        link.binds.add(links.Bind(role="onBegin", component="a"))
        link.binds.add(links.Bind(role="start", component="b"))
        undeclared = connectors.ConnectorParam(name="p")
        link.params.add(links.Param(name=undeclared, value="1"))

        assert link.validate() is False
        assert link.errors == [
            "Parameter 'p' is not declared by connector 'c'."
        ]

    @staticmethod
    def test_links_only_hold_link_params():
        link = links.Link(id="l", xconnector="c")
        link.binds.add(links.Bind(role="onBegin", component="a"))
        link.binds.add(links.Bind(role="start", component="b"))
        link.params.add(
            links.Param(values.ParamKind.BIND_PARAM, name="p", value="1")
        )

        assert link.validate() is False
        assert link.errors == ["Element 'link' may only contain linkParams."]

    @staticmethod
    def test_bind_roles_must_belong_to_the_link_connector():
        connector = make_connector("c")
        link = links.Link(id="l", xconnector=connector)
        bind = links.Bind(role=connectors.Role(name="x"), component="a")
        link.binds.add(bind)
        link.binds.add(links.Bind(role="start", component="b"))

        assert link.validate() is False
        assert bind.errors == ["Role 'x' is not declared by connector 'c'."]

    @staticmethod
    def test_bind_components_must_be_in_the_enclosing_composite():
        body = nodes.Body()
        context = nodes.Context(id="ctx")
        nested = nodes.Media(id="nested")
        context.nodes.add(nested)
        body.nodes.add(context)
        link = links.Link(id="l", xconnector="c")
        bind = links.Bind(role="onBegin", component=nested)
        link.binds.add(bind)
        link.binds.add(links.Bind(role="start", component=context))
        body.links.add(link)

        assert body.validate() is False
        assert bind.errors == [
            "Attribute 'component' must refer to the enclosing composite"
            " node or one of its nodes."
        ]


class TestHeadElements:
    @staticmethod
    def test_subtypes_must_belong_to_the_transition_type():
        transition = transitions.Transition(
            id="t", type="fade", subtype="diamond"
        )

        assert transition.validate() is False
        assert transition.errors == [
            "Subtype 'diamond' does not belong to transition type 'fade'."
        ]

    @staticmethod
    def test_subtypes_need_a_transition_type():
        transition = transitions.Transition(id="t", subtype="crossfade")

        assert transition.validate() is False
        assert len(transition.errors) == 2

    @staticmethod
    def test_color_fades_should_name_their_color():
        transition = transitions.Transition(
            id="t", type="fade", subtype="fadeToColor"
        )

        assert transition.validate() is True
        assert len(transition.warnings) == 1

        transition.fade_color = "white"

        assert transition.validate() is True
        assert transition.warnings == []

    @staticmethod
    def test_rule_variables_should_be_settings_properties():
        rule = rules.Rule(
            id="r",
            var=nodes.Property(name="system.language"),
            comparator="eq",
            value="pt",
        )

        assert rule.validate() is True
        assert rule.warnings == [
            "Attribute 'var' should refer to a property of a settings"
            " media node."
        ]

    @staticmethod
    def test_composite_rules_need_a_rule():
        rule = rules.CompositeRule(id="r", operator="or")

        assert rule.validate() is False

    @staticmethod
    def test_descriptor_switches_need_descriptors_and_bind_rules():
        switch = descriptors.DescriptorSwitch(id="ds")

        assert switch.validate() is False

        switch.descriptors.add(descriptors.Descriptor(id="d"))
        switch.bind_rules.add(
            rules.BindRule(constituent="d", rule=rules.Rule(id="r"))
        )

        assert switch.validate() is True


def test_reports_collect_all_diagnostics():
    base = connectors.ConnectorBase()
    base.connectors.add(connectors.CausalConnector(id="c"))

    report = validation.report(base)

    assert not report
    assert report.valid is False
    assert len(report.errors) == 2
    assert report.warnings == ()
    assert list(report.iter_lines()) == [
        "error: Element 'causalConnector' does not have a condition.",
        "error: Element 'causalConnector' does not have an action.",
    ]
