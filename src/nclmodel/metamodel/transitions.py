# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import nclmodel.model as m
from nclmodel import values

_FADE_COLOR_SUBTYPES = frozenset(
    {
        values.TransitionSubtype.FADE_TO_COLOR,
        values.TransitionSubtype.FADE_FROM_COLOR,
    }
)


class Transition(m.IdentifiableElement):
    """A visual effect played when a node starts or stops."""

    _xmltag = "transition"

    type = m.EnumPOD("type", values.TransitionType)
    subtype = m.EnumPOD("subtype", values.TransitionSubtype)
    dur = m.TimePOD("dur")
    start_progress = m.FloatPOD("startProgress", minimum=0, maximum=1)
    end_progress = m.FloatPOD("endProgress", minimum=0, maximum=1)
    direction = m.EnumPOD("direction", values.TransitionDirection)
    fade_color = m.EnumPOD("fadeColor", values.Color)
    hor_repeat = m.IntPOD("horRepeat", minimum=0)
    vert_repeat = m.IntPOD("vertRepeat", minimum=0)
    border_width = m.IntPOD("borderWidth", minimum=0)
    border_color = m.EnumPOD("borderColor", values.Color)

    def _check(self) -> None:
        self._require("id", "type")

        if self.subtype is not None:
            if self.type is None:
                self.add_error(
                    "Attribute 'subtype' must not be specified without"
                    " attribute 'type'."
                )
            elif self.subtype.type is not self.type:
                self.add_error(
                    f"Subtype {self.subtype.value!r} does not belong to"
                    f" transition type {self.type.value!r}."
                )

        if (
            self.type is values.TransitionType.FADE
            and self.subtype in _FADE_COLOR_SUBTYPES
        ):
            if self.fade_color is None:
                self.add_warning(
                    "Attribute 'fadeColor' should be specified for"
                    f" subtype {self.subtype.value!r}."
                )
        elif self.fade_color is not None:
            self.add_warning(
                "Attribute 'fadeColor' is only used by the 'fadeToColor'"
                " and 'fadeFromColor' subtypes."
            )


class TransitionBase(m.IdentifiableElement):
    _xmltag = "transitionBase"

    transitions = m.Containment["Transition"](
        {"transition": "create_transition"}
    )

    def create_transition(self) -> Transition:
        return Transition()

    def _check(self) -> None:
        if not self.transitions:
            self.add_warning("Element 'transitionBase' is empty.")
