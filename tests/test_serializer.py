# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

import textwrap

import pytest
from lxml import etree

from nclmodel import serializer, values
from nclmodel.metamodel import (
    connectors,
    descriptors,
    document,
    links,
    meta,
    nodes,
    rules,
    transitions,
)

from .conftest import make_link

TRANSITION = (
    "<transition id='tr1' type='fade' subtype='crossfade' dur='5s'"
    " startProgress='0.1' endProgress='0.9' direction='forward'"
    " fadeColor='black' horRepeat='4' vertRepeat='6' borderWidth='20'"
    " borderColor='blue'/>\n"
)


def test_attributes_are_written_in_canonical_order():
    transition = transitions.Transition(
        border_color="blue",
        border_width=20,
        vert_repeat=6,
        hor_repeat=4,
        fade_color="black",
        direction="forward",
        end_progress=0.9,
        start_progress=0.1,
        dur=5,
        subtype="crossfade",
        type="fade",
        id="tr1",
    )

    assert transition.serialize() == TRANSITION


def test_absent_attributes_are_left_out():
    transition = transitions.Transition(id="tr1", type="barWipe")

    actual = serializer.to_string(transition)

    assert actual == "<transition id='tr1' type='barWipe'/>\n"


@pytest.mark.parametrize(
    ["depth", "indent"],
    [(0, ""), (2, "\t\t"), (-3, "")],
)
def test_depth_determines_the_indentation(depth, indent):
    media = nodes.Media(id="video")

    assert media.serialize(depth) == f"{indent}<media id='video'/>\n"


def test_children_are_nested_one_level_deeper():
    media = nodes.Media(id="video", src="video.mp4")
    media.areas.add(nodes.Area(id="b", begin=5))
    media.areas.add(nodes.Area(id="a", end="2.5s"))
    expected = (
        "\t<media id='video' src='video.mp4'>\n"
        "\t\t<area id='a' end='2.5s'/>\n"
        "\t\t<area id='b' begin='5s'/>\n"
        "\t</media>\n"
    )

    assert media.serialize(1) == expected


def test_an_empty_collection_gives_a_self_closing_tag():
    body = nodes.Body()

    assert body.serialize() == "<body/>\n"


@pytest.mark.parametrize(
    ["value", "escaped"],
    [
        ("a&b", "a&amp;b"),
        ("a<b", "a&lt;b"),
        ("it's", "it&apos;s"),
        ('say "hi"', 'say "hi"'),
        ("a\tb", "a&#x9;b"),
        ("a\nb", "a&#xA;b"),
    ],
)
def test_attribute_values_are_escaped(value, escaped):
    prop = nodes.Property(name="p", value=value)

    assert prop.serialize() == f"<property name='p' value='{escaped}'/>\n"


def test_unresolved_references_are_written_with_their_identifier():
    port = nodes.Port(id="entry", component="video")

    assert port.serialize() == "<port id='entry' component='video'/>\n"


def test_resolved_references_are_written_with_the_target_key():
    media = nodes.Media(id="video")
    port = nodes.Port(id="entry", component=media)

    assert port.serialize() == "<port id='entry' component='video'/>\n"


def test_parameter_references_carry_the_dollar_prefix():
    condition = connectors.SimpleCondition(
        role="onSelection", param_key="keyCode"
    )

    actual = condition.serialize()

    assert actual == "<simpleCondition role='onSelection' key='$keyCode'/>\n"


def test_plain_values_are_written_without_prefix():
    condition = connectors.SimpleCondition(role="onSelection", key="RED")

    actual = condition.serialize()

    assert actual == "<simpleCondition role='onSelection' key='RED'/>\n"


def test_unbounded_maximum_is_written_as_token():
    action = connectors.SimpleAction(
        role="start", max=values.UNBOUNDED, qualifier="seq"
    )

    actual = action.serialize()

    assert actual == (
        "<simpleAction role='start' max='unbounded' qualifier='seq'/>\n"
    )


def test_default_component_is_written_as_child_element():
    switch = nodes.Switch(id="sw", default_component="a")
    switch.nodes.add(nodes.Media(id="a"))
    expected = textwrap.dedent(
        """\
        <switch id='sw'>
        \t<defaultComponent component='a'/>
        \t<media id='a'/>
        </switch>
        """
    )

    assert switch.serialize() == expected


def test_bind_params_use_their_own_tag():
    link = make_link("conn", ("onBegin", "a"), ("start", "b"), id="l1")
    link.params.add(links.Param(name="p", value="1"))
    link.binds[1].params.add(
        links.Param(values.ParamKind.BIND_PARAM, name="q", value="2")
    )
    expected = textwrap.dedent(
        """\
        <link id='l1' xconnector='conn'>
        \t<linkParam name='p' value='1'/>
        \t<bind role='onBegin' component='a'/>
        \t<bind role='start' component='b'>
        \t\t<bindParam name='q' value='2'/>
        \t</bind>
        </link>
        """
    )

    assert link.serialize() == expected


def test_serialization_does_not_depend_on_validity():
    link = links.Link(id="broken")

    assert not link.validate()
    assert link.serialize() == "<link id='broken'/>\n"


@pytest.mark.parametrize(
    ["element", "expected"],
    [
        pytest.param(
            descriptors.Descriptor(
                id="d1",
                player="ginga",
                explicit_dur=10,
                freeze=True,
                focus_index=2,
                focus_border_color="red",
                trans_in="fadeIn",
                params=[
                    descriptors.DescriptorParam(name="width", value="50%")
                ],
            ),
            "<descriptor id='d1' player='ginga' explicitDur='10s'"
            " freeze='true' focusIndex='2' focusBorderColor='red'"
            " transIn='fadeIn'>\n"
            "\t<descriptorParam name='width' value='50%'/>\n"
            "</descriptor>\n",
            id="descriptor",
        ),
        pytest.param(
            descriptors.DescriptorParam(name="top", value="10"),
            "<descriptorParam name='top' value='10'/>\n",
            id="descriptorParam",
        ),
        pytest.param(
            descriptors.DescriptorSwitch(
                id="ds",
                bind_rules=[rules.BindRule(constituent="d1", rule="rEn")],
                default_descriptor="d2",
                descriptors=[
                    descriptors.Descriptor(id="d2"),
                    descriptors.Descriptor(id="d1"),
                ],
            ),
            "<descriptorSwitch id='ds'>\n"
            "\t<bindRule constituent='d1' rule='rEn'/>\n"
            "\t<defaultDescriptor descriptor='d2'/>\n"
            "\t<descriptor id='d1'/>\n"
            "\t<descriptor id='d2'/>\n"
            "</descriptorSwitch>\n",
            id="descriptorSwitch",
        ),
        pytest.param(
            rules.Rule(
                id="rEn", var="system.language", comparator="eq", value="en"
            ),
            "<rule id='rEn' var='system.language' comparator='eq'"
            " value='en'/>\n",
            id="rule",
        ),
        pytest.param(
            rules.CompositeRule(
                id="rc",
                operator="or",
                rules=[rules.Rule(id="b"), rules.Rule(id="a")],
            ),
            "<compositeRule id='rc' operator='or'>\n"
            "\t<rule id='a'/>\n"
            "\t<rule id='b'/>\n"
            "</compositeRule>\n",
            id="compositeRule",
        ),
        pytest.param(
            nodes.Media(
                id="m",
                src="a.png",
                refer="other",
                instance="new",
                type="image/png",
                descriptor="d1",
            ),
            "<media id='m' src='a.png' refer='other' instance='new'"
            " type='image/png' descriptor='d1'/>\n",
            id="media",
        ),
        pytest.param(
            nodes.Area(
                id="a1",
                coords="0,0,10,10",
                begin=1,
                end=2,
                text="hi",
                position=3,
                first="f",
                last="l",
                label="lb",
            ),
            "<area id='a1' coords='0,0,10,10' begin='1s' end='2s' text='hi'"
            " position='3' first='f' last='l' label='lb'/>\n",
            id="area",
        ),
        pytest.param(
            nodes.Property(name="top", value="10%"),
            "<property name='top' value='10%'/>\n",
            id="property",
        ),
        pytest.param(
            nodes.Port(id="p", component="m", interface="a1"),
            "<port id='p' component='m' interface='a1'/>\n",
            id="port",
        ),
        pytest.param(
            nodes.Context(
                id="ctx",
                refer="other",
                metas=[meta.Meta(name="author", content="me")],
                ports=[nodes.Port(id="p", component="m")],
                properties=[nodes.Property(name="x")],
                nodes=[nodes.Media(id="m")],
                links=[links.Link(id="l", xconnector="c")],
            ),
            "<context id='ctx' refer='other'>\n"
            "\t<meta name='author' content='me'/>\n"
            "\t<port id='p' component='m'/>\n"
            "\t<property name='x'/>\n"
            "\t<media id='m'/>\n"
            "\t<link id='l' xconnector='c'/>\n"
            "</context>\n",
            id="context",
        ),
        pytest.param(
            links.Link(
                id="l1",
                xconnector="c",
                params=[links.Param(name="p", value="1")],
                binds=[
                    links.Bind(
                        role="onBegin",
                        component="m",
                        interface="a1",
                        descriptor="d1",
                    )
                ],
            ),
            "<link id='l1' xconnector='c'>\n"
            "\t<linkParam name='p' value='1'/>\n"
            "\t<bind role='onBegin' component='m' interface='a1'"
            " descriptor='d1'/>\n"
            "</link>\n",
            id="link",
        ),
        pytest.param(
            links.Bind(
                role="set",
                component="s",
                params=[links.Param("bindParam", name="var", value="pt")],
            ),
            "<bind role='set' component='s'>\n"
            "\t<bindParam name='var' value='pt'/>\n"
            "</bind>\n",
            id="bind",
        ),
        pytest.param(
            links.Param(name="delay", value="5s"),
            "<linkParam name='delay' value='5s'/>\n",
            id="linkParam",
        ),
        pytest.param(
            connectors.ConnectorParam(name="keyCode", type="key"),
            "<connectorParam name='keyCode' type='key'/>\n",
            id="connectorParam",
        ),
        pytest.param(
            connectors.CausalConnector(
                id="c",
                params=[connectors.ConnectorParam(name="p")],
                condition=connectors.SimpleCondition(role="onBegin"),
                action=connectors.SimpleAction(role="start"),
            ),
            "<causalConnector id='c'>\n"
            "\t<connectorParam name='p'/>\n"
            "\t<simpleCondition role='onBegin'/>\n"
            "\t<simpleAction role='start'/>\n"
            "</causalConnector>\n",
            id="causalConnector",
        ),
        pytest.param(
            connectors.CompoundCondition(
                operator="or",
                param_delay="d",
                conditions=[
                    connectors.SimpleCondition(role="onEnd"),
                    connectors.SimpleCondition(role="onBegin"),
                ],
                statements=[
                    connectors.AssessmentStatement(comparator="eq"),
                ],
            ),
            "<compoundCondition operator='or' delay='$d'>\n"
            "\t<simpleCondition role='onBegin'/>\n"
            "\t<simpleCondition role='onEnd'/>\n"
            "\t<assessmentStatement comparator='eq'/>\n"
            "</compoundCondition>\n",
            id="compoundCondition",
        ),
        pytest.param(
            connectors.AssessmentStatement(
                comparator="ne",
                attribute_assessments=[
                    connectors.AttributeAssessment(
                        role="onSelection",
                        event_type="selection",
                        param_key="k",
                    ),
                ],
                value_assessment=connectors.ValueAssessment(value="sleeping"),
            ),
            "<assessmentStatement comparator='ne'>\n"
            "\t<attributeAssessment role='onSelection' eventType='selection'"
            " key='$k'/>\n"
            "\t<valueAssessment value='sleeping'/>\n"
            "</assessmentStatement>\n",
            id="assessmentStatement",
        ),
        pytest.param(
            connectors.AttributeAssessment(
                role="r",
                event_type="attribution",
                attribute_type="nodeProperty",
                offset="1",
            ),
            "<attributeAssessment role='r' eventType='attribution'"
            " attributeType='nodeProperty' offset='1'/>\n",
            id="attributeAssessment",
        ),
        pytest.param(
            connectors.ValueAssessment(value="occurring"),
            "<valueAssessment value='occurring'/>\n",
            id="valueAssessment",
        ),
        pytest.param(
            connectors.CompoundStatement(
                operator="and",
                is_negated=True,
                statements=[connectors.AssessmentStatement(comparator="eq")],
            ),
            "<compoundStatement operator='and' isNegated='true'>\n"
            "\t<assessmentStatement comparator='eq'/>\n"
            "</compoundStatement>\n",
            id="compoundStatement",
        ),
        pytest.param(
            connectors.CompoundAction(
                operator="seq",
                delay=1,
                actions=[
                    connectors.SimpleAction(role="stop"),
                    connectors.SimpleAction(role="start"),
                ],
            ),
            "<compoundAction operator='seq' delay='1s'>\n"
            "\t<simpleAction role='start'/>\n"
            "\t<simpleAction role='stop'/>\n"
            "</compoundAction>\n",
            id="compoundAction",
        ),
        pytest.param(
            rules.RuleBase(id="rb", rules=[rules.Rule(id="r")]),
            "<ruleBase id='rb'>\n\t<rule id='r'/>\n</ruleBase>\n",
            id="ruleBase",
        ),
        pytest.param(
            transitions.TransitionBase(
                transitions=[transitions.Transition(id="t", type="fade")]
            ),
            "<transitionBase>\n"
            "\t<transition id='t' type='fade'/>\n"
            "</transitionBase>\n",
            id="transitionBase",
        ),
        pytest.param(
            descriptors.DescriptorBase(
                descriptors=[
                    descriptors.DescriptorSwitch(id="b"),
                    descriptors.Descriptor(id="a"),
                ]
            ),
            "<descriptorBase>\n"
            "\t<descriptor id='a'/>\n"
            "\t<descriptorSwitch id='b'/>\n"
            "</descriptorBase>\n",
            id="descriptorBase",
        ),
        pytest.param(
            connectors.ConnectorBase(
                connectors=[connectors.CausalConnector(id="c")]
            ),
            "<connectorBase>\n"
            "\t<causalConnector id='c'/>\n"
            "</connectorBase>\n",
            id="connectorBase",
        ),
        pytest.param(
            document.Head(rule_base=rules.RuleBase()),
            "<head>\n\t<ruleBase/>\n</head>\n",
            id="head",
        ),
        pytest.param(
            meta.Meta(name="keywords", content="news, sports"),
            "<meta name='keywords' content='news, sports'/>\n",
            id="meta",
        ),
    ],
)
def test_elements_are_written_in_canonical_form(element, expected):
    assert element.serialize() == expected


def test_metadata_markup_is_indented_below_its_element():
    rdf = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
    tree = etree.fromstring(
        f"<rdf:RDF xmlns:rdf='{rdf}'>"
        "<rdf:Description rdf:about='video'/>"
        "</rdf:RDF>"
    )
    metadata = meta.Metadata()
    metadata.markup.append(tree)
    expected = (
        "\t<metadata>\n"
        f'\t\t<rdf:RDF xmlns:rdf="{rdf}">\n'
        '\t\t\t<rdf:Description rdf:about="video"/>\n'
        "\t\t</rdf:RDF>\n"
        "\t</metadata>\n"
    )

    assert metadata.serialize(1) == expected
    assert tree.text is None
