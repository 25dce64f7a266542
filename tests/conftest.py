# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Global fixtures for pytest."""

import pathlib

import pytest

import nclmodel
from nclmodel.metamodel import connectors, document, links, nodes

TEST_DATA = pathlib.Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def sample_text() -> str:
    """The text of the sample document."""
    return TEST_DATA.joinpath("sample.ncl").read_text(encoding="utf-8")


@pytest.fixture
def sample(sample_text: str) -> document.Ncl:
    """Load the sample document."""
    doc = nclmodel.loads(sample_text)
    assert isinstance(doc, document.Ncl)
    return doc


@pytest.fixture
def skeleton() -> document.Ncl:
    """Create an empty document with a head, a body and all bases."""
    doc = document.Ncl(id="doc")
    doc.head = document.Head()
    doc.head.rule_base = doc.head.create_rule_base()
    doc.head.transition_base = doc.head.create_transition_base()
    doc.head.descriptor_base = doc.head.create_descriptor_base()
    doc.head.connector_base = doc.head.create_connector_base()
    doc.body = nodes.Body()
    return doc


def make_connector(id: str = "onBeginStart") -> connectors.CausalConnector:
    """Create a connector with an ``onBegin`` and a ``start`` role."""
    conn = connectors.CausalConnector(id=id)
    conn.condition = connectors.SimpleCondition(role="onBegin")
    conn.action = connectors.SimpleAction(role="start")
    return conn


def make_link(
    xconnector: str, *components: tuple[str, str], id: str | None = None
) -> links.Link:
    """Create a link with one bind per ``(role, component)`` pair."""
    link = links.Link(xconnector=xconnector)
    if id is not None:
        link.id = id
    for role, component in components:
        link.binds.add(links.Bind(role=role, component=component))
    return link
