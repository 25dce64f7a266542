# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Descriptors, which define how and where nodes are presented."""

from __future__ import annotations

import nclmodel.model as m
from nclmodel import resolver, values

from . import rules

_TRANSITIONS = resolver.base("transition_base", "transitions")


class DescriptorParam(m.Element):
    _xmltag = "descriptorParam"

    name = m.EnumPOD("name", values.DescriptorAttribute)
    value = m.StringPOD("value")

    @property
    def refkey(self) -> str | None:
        if self.name is None:
            return None
        return self.name.value

    def _check(self) -> None:
        self._require("name", "value")


class Descriptor(m.IdentifiableElement):
    """Presentation parameters for a node.

    The ``move_*`` attributes refer to the ``focus_index`` of the
    descriptor that receives the focus when the respective arrow key is
    pressed.
    """

    _xmltag = "descriptor"

    player = m.StringPOD("player")
    explicit_dur = m.TimePOD("explicitDur")
    freeze = m.BoolPOD("freeze")
    move_left = m.IntPOD("moveLeft", minimum=0)
    move_right = m.IntPOD("moveRight", minimum=0)
    move_up = m.IntPOD("moveUp", minimum=0)
    move_down = m.IntPOD("moveDown", minimum=0)
    focus_index = m.IntPOD("focusIndex", minimum=0)
    focus_border_color = m.EnumPOD("focusBorderColor", values.Color)
    focus_border_width = m.IntPOD("focusBorderWidth")
    focus_border_transparency = m.FloatPOD(
        "focusBorderTransparency", minimum=0, maximum=1
    )
    focus_src = m.StringPOD("focusSrc")
    focus_sel_src = m.StringPOD("focusSelSrc")
    sel_border_color = m.EnumPOD("selBorderColor", values.Color)
    trans_in = m.Reference(
        "transIn", _TRANSITIONS, description="transition in transitionBase"
    )
    trans_out = m.Reference(
        "transOut", _TRANSITIONS, description="transition in transitionBase"
    )
    params = m.Containment["DescriptorParam"](
        {"descriptorParam": "create_param"}
    )

    def create_param(self) -> DescriptorParam:
        return DescriptorParam()

    def _check(self) -> None:
        self._require("id")


class DescriptorSwitch(m.IdentifiableElement):
    """Chooses one of several descriptors, depending on rules."""

    _xmltag = "descriptorSwitch"

    bind_rules = m.Containment["rules.BindRule"](
        {"bindRule": "create_bind_rule"}, ordered=True
    )
    default_descriptor = m.Reference(
        "descriptor",
        resolver.enclosing("descriptors", levels=0),
        description="descriptor in descriptorSwitch",
        element="defaultDescriptor",
    )
    descriptors = m.Containment["Descriptor"](
        {"descriptor": "create_descriptor"}
    )

    def create_bind_rule(self) -> rules.BindRule:
        return rules.BindRule()

    def create_descriptor(self) -> Descriptor:
        return Descriptor()

    @property
    def constituents(self) -> m.ElementList[Descriptor]:
        return self.descriptors

    def _check(self) -> None:
        self._require("id")
        if not self.descriptors or not self.bind_rules:
            self.add_error(
                "Element 'descriptorSwitch' must contain at least one"
                " descriptor and one bindRule."
            )

        default = self.default_descriptor
        if isinstance(default, m.Element) and default not in self.descriptors:
            self.add_error(
                "Element 'defaultDescriptor' must refer to a descriptor of"
                " the enclosing descriptorSwitch."
            )


class DescriptorBase(m.IdentifiableElement):
    _xmltag = "descriptorBase"

    descriptors = m.Containment["Descriptor | DescriptorSwitch"](
        {
            "descriptor": "create_descriptor",
            "descriptorSwitch": "create_descriptor_switch",
        }
    )

    def create_descriptor(self) -> Descriptor:
        return Descriptor()

    def create_descriptor_switch(self) -> DescriptorSwitch:
        return DescriptorSwitch()

    def _check(self) -> None:
        if not self.descriptors:
            self.add_warning("Element 'descriptorBase' is empty.")
