# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Literal value types and enumeration catalogs.

Every enumeration in this module uses the literal token as it appears
in a document as the member's value, so that ``Color("black")`` looks a
member up by its token and ``Color.BLACK.value`` gives it back.
"""

from __future__ import annotations

__all__ = [
    "UNBOUNDED",
    "ActionOperator",
    "AttributeType",
    "Color",
    "Comparator",
    "ConditionOperator",
    "DefaultActionRole",
    "DefaultConditionRole",
    "DescriptorAttribute",
    "EventAction",
    "EventTransition",
    "EventType",
    "InstanceType",
    "Key",
    "MimeType",
    "ParamKind",
    "Time",
    "TransitionDirection",
    "TransitionSubtype",
    "TransitionType",
    "lookup",
]

import dataclasses
import enum
import re
import typing as t

E = t.TypeVar("E", bound=enum.Enum)

_RE_SECONDS = re.compile(r"^(\d+(?:\.\d+)?)s?$")
_RE_CLOCK = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)$")

UNBOUNDED = -1
"""Sentinel for a maximum count without upper limit.

Serialized as the literal token ``unbounded``.
"""


def lookup(enumcls: type[E], token: str) -> E:
    """Find the member of *enumcls* whose literal token is *token*.

    Raises
    ------
    ValueError
        If no member of *enumcls* uses the given token.
    """
    return enumcls(token)


@dataclasses.dataclass(frozen=True, order=True)
class Time:
    """A duration or instant, measured in seconds.

    The canonical text form is the number of seconds followed by the
    ``s`` unit, e.g. ``5s`` or ``2.5s``. Clock values (``hh:mm:ss`` with
    optional fractional seconds) are accepted on input and converted to
    seconds.
    """

    seconds: float

    def __post_init__(self) -> None:
        if isinstance(self.seconds, bool) or not isinstance(
            self.seconds, int | float
        ):
            raise TypeError(
                f"Time needs a number of seconds, not {self.seconds!r}"
            )
        if self.seconds < 0:
            raise ValueError(f"Time cannot be negative: {self.seconds!r}")

    @classmethod
    def parse(cls, text: str) -> Time:
        """Parse the text form of a time value."""
        text = text.strip()
        if match := _RE_SECONDS.match(text):
            value = match.group(1)
            if "." in value:
                return cls(float(value))
            return cls(int(value))

        if match := _RE_CLOCK.match(text):
            hours, minutes, seconds = match.groups()
            total = int(hours or 0) * 3600 + int(minutes) * 60
            if "." in seconds:
                return cls(total + float(seconds))
            return cls(total + int(seconds))

        raise ValueError(f"Invalid time value: {text!r}")

    def __str__(self) -> str:
        seconds = self.seconds
        if isinstance(seconds, float) and seconds.is_integer():
            seconds = int(seconds)
        return f"{seconds}s"


@enum.unique
class Color(enum.Enum):
    """The named colors of the language."""

    WHITE = "white"
    BLACK = "black"
    SILVER = "silver"
    GRAY = "gray"
    RED = "red"
    MAROON = "maroon"
    FUCHSIA = "fuchsia"
    PURPLE = "purple"
    LIME = "lime"
    GREEN = "green"
    YELLOW = "yellow"
    OLIVE = "olive"
    BLUE = "blue"
    NAVY = "navy"
    AQUA = "aqua"
    TEAL = "teal"


@enum.unique
class TransitionType(enum.Enum):
    """Families of visual transition effects."""

    BAR_WIPE = "barWipe"
    IRIS_WIPE = "irisWipe"
    CLOCK_WIPE = "clockWipe"
    SNAKE_WIPE = "snakeWipe"
    FADE = "fade"


@enum.unique
class TransitionSubtype(enum.Enum):
    """Variants of a transition effect.

    Each subtype belongs to exactly one :class:`TransitionType`, which
    is available as :attr:`type`.
    """

    LEFT_TO_RIGHT = "leftToRight"
    TOP_TO_BOTTOM = "topToBottom"
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"
    CLOCKWISE_TWELVE = "clockwiseTwelve"
    CLOCKWISE_THREE = "clockwiseThree"
    CLOCKWISE_SIX = "clockwiseSix"
    CLOCKWISE_NINE = "clockwiseNine"
    TOP_LEFT_HORIZONTAL = "topLeftHorizontal"
    TOP_LEFT_VERTICAL = "topLeftVertical"
    TOP_LEFT_DIAGONAL = "topLeftDiagonal"
    TOP_RIGHT_DIAGONAL = "topRightDiagonal"
    BOTTOM_RIGHT_DIAGONAL = "bottomRightDiagonal"
    BOTTOM_LEFT_DIAGONAL = "bottomLeftDiagonal"
    CROSSFADE = "crossfade"
    FADE_TO_COLOR = "fadeToColor"
    FADE_FROM_COLOR = "fadeFromColor"

    @property
    def type(self) -> TransitionType:
        """The transition type this subtype belongs to."""
        return _SUBTYPE_FAMILIES[self]


_SUBTYPE_FAMILIES = {
    TransitionSubtype.LEFT_TO_RIGHT: TransitionType.BAR_WIPE,
    TransitionSubtype.TOP_TO_BOTTOM: TransitionType.BAR_WIPE,
    TransitionSubtype.RECTANGLE: TransitionType.IRIS_WIPE,
    TransitionSubtype.DIAMOND: TransitionType.IRIS_WIPE,
    TransitionSubtype.CLOCKWISE_TWELVE: TransitionType.CLOCK_WIPE,
    TransitionSubtype.CLOCKWISE_THREE: TransitionType.CLOCK_WIPE,
    TransitionSubtype.CLOCKWISE_SIX: TransitionType.CLOCK_WIPE,
    TransitionSubtype.CLOCKWISE_NINE: TransitionType.CLOCK_WIPE,
    TransitionSubtype.TOP_LEFT_HORIZONTAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.TOP_LEFT_VERTICAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.TOP_LEFT_DIAGONAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.TOP_RIGHT_DIAGONAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.BOTTOM_RIGHT_DIAGONAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.BOTTOM_LEFT_DIAGONAL: TransitionType.SNAKE_WIPE,
    TransitionSubtype.CROSSFADE: TransitionType.FADE,
    TransitionSubtype.FADE_TO_COLOR: TransitionType.FADE,
    TransitionSubtype.FADE_FROM_COLOR: TransitionType.FADE,
}


@enum.unique
class TransitionDirection(enum.Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


@enum.unique
class Comparator(enum.Enum):
    """Comparison operators used by rules and assessment statements."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"


@enum.unique
class ConditionOperator(enum.Enum):
    """Logical operator joining conditions, statements or rules."""

    AND = "and"
    OR = "or"


@enum.unique
class ActionOperator(enum.Enum):
    """How the actions of a compound action are sequenced."""

    PAR = "par"
    SEQ = "seq"


@enum.unique
class EventType(enum.Enum):
    PRESENTATION = "presentation"
    SELECTION = "selection"
    ATTRIBUTION = "attribution"
    COMPOSITION = "composition"


@enum.unique
class EventTransition(enum.Enum):
    STARTS = "starts"
    STOPS = "stops"
    ABORTS = "aborts"
    PAUSES = "pauses"
    RESUMES = "resumes"


@enum.unique
class EventAction(enum.Enum):
    START = "start"
    STOP = "stop"
    ABORT = "abort"
    PAUSE = "pause"
    RESUME = "resume"


@enum.unique
class AttributeType(enum.Enum):
    """The event attribute tested by an attribute assessment."""

    OCCURRENCES = "occurrences"
    REPETITIONS = "repetitions"
    STATE = "state"
    NODE_PROPERTY = "nodeProperty"


@enum.unique
class DefaultConditionRole(enum.Enum):
    """Predefined condition role names.

    A role with one of these names implies its event type and
    transition, so the condition does not need to spell them out.
    """

    ON_BEGIN = "onBegin"
    ON_END = "onEnd"
    ON_ABORT = "onAbort"
    ON_PAUSE = "onPause"
    ON_RESUME = "onResume"
    ON_SELECTION = "onSelection"
    ON_BEGIN_SELECTION = "onBeginSelection"
    ON_END_SELECTION = "onEndSelection"
    ON_BEGIN_ATTRIBUTION = "onBeginAttribution"
    ON_END_ATTRIBUTION = "onEndAttribution"
    ON_ABORT_ATTRIBUTION = "onAbortAttribution"
    ON_PAUSE_ATTRIBUTION = "onPauseAttribution"
    ON_RESUME_ATTRIBUTION = "onResumeAttribution"

    @property
    def event_type(self) -> EventType:
        if "Selection" in self.value:
            return EventType.SELECTION
        if "Attribution" in self.value:
            return EventType.ATTRIBUTION
        return EventType.PRESENTATION

    @property
    def transition(self) -> EventTransition:
        if self is DefaultConditionRole.ON_SELECTION:
            return EventTransition.STOPS
        for prefix, transition in _ROLE_TRANSITIONS:
            if self.value.startswith(prefix):
                return transition
        raise AssertionError(f"No transition for {self!r}")


_ROLE_TRANSITIONS = (
    ("onBegin", EventTransition.STARTS),
    ("onEnd", EventTransition.STOPS),
    ("onAbort", EventTransition.ABORTS),
    ("onPause", EventTransition.PAUSES),
    ("onResume", EventTransition.RESUMES),
)


@enum.unique
class DefaultActionRole(enum.Enum):
    """Predefined action role names."""

    START = "start"
    STOP = "stop"
    ABORT = "abort"
    PAUSE = "pause"
    RESUME = "resume"
    SET = "set"

    @property
    def event_type(self) -> EventType:
        if self is DefaultActionRole.SET:
            return EventType.ATTRIBUTION
        return EventType.PRESENTATION

    @property
    def action_type(self) -> EventAction:
        if self is DefaultActionRole.SET:
            return EventAction.START
        return EventAction(self.value)


@enum.unique
class Key(enum.Enum):
    """Remote control keys that can trigger a selection."""

    KEY_0 = "0"
    KEY_1 = "1"
    KEY_2 = "2"
    KEY_3 = "3"
    KEY_4 = "4"
    KEY_5 = "5"
    KEY_6 = "6"
    KEY_7 = "7"
    KEY_8 = "8"
    KEY_9 = "9"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    P = "P"
    Q = "Q"
    R = "R"
    S = "S"
    T = "T"
    U = "U"
    V = "V"
    W = "W"
    X = "X"
    Y = "Y"
    Z = "Z"
    ASTERISK = "*"
    HASH = "#"
    MENU = "MENU"
    INFO = "INFO"
    GUIDE = "GUIDE"
    CURSOR_DOWN = "CURSOR_DOWN"
    CURSOR_LEFT = "CURSOR_LEFT"
    CURSOR_RIGHT = "CURSOR_RIGHT"
    CURSOR_UP = "CURSOR_UP"
    CHANNEL_DOWN = "CHANNEL_DOWN"
    CHANNEL_UP = "CHANNEL_UP"
    VOLUME_DOWN = "VOLUME_DOWN"
    VOLUME_UP = "VOLUME_UP"
    ENTER = "ENTER"
    RED = "RED"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    BLUE = "BLUE"
    BACK = "BACK"
    EXIT = "EXIT"
    POWER = "POWER"
    REWIND = "REWIND"
    STOP = "STOP"
    EJECT = "EJECT"
    PLAY = "PLAY"
    RECORD = "RECORD"
    PAUSE = "PAUSE"


@enum.unique
class InstanceType(enum.Enum):
    """How a media node that refers to another one is instantiated."""

    NEW = "new"
    INST_SAME = "instSame"
    INST_GROUP = "instGroup"


@enum.unique
class MimeType(enum.Enum):
    TEXT_HTML = "text/html"
    TEXT_PLAIN = "text/plain"
    TEXT_CSS = "text/css"
    TEXT_XML = "text/xml"
    IMAGE_BMP = "image/bmp"
    IMAGE_PNG = "image/png"
    IMAGE_GIF = "image/gif"
    IMAGE_JPEG = "image/jpeg"
    AUDIO_BASIC = "audio/basic"
    AUDIO_MP3 = "audio/mp3"
    AUDIO_MP2 = "audio/mp2"
    AUDIO_MPEG = "audio/mpeg"
    AUDIO_MPEG4 = "audio/mpeg4"
    VIDEO_MPEG = "video/mpeg"
    APPLICATION_X_GINGA_NCL = "application/x-ginga-NCL"
    APPLICATION_X_GINGA_NCLUA = "application/x-ginga-NCLua"
    APPLICATION_X_GINGA_NCLET = "application/x-ginga-NCLet"
    APPLICATION_X_GINGA_SETTINGS = "application/x-ginga-settings"
    APPLICATION_X_GINGA_TIME = "application/x-ginga-time"


@enum.unique
class ParamKind(enum.Enum):
    """Whether a parameter belongs to a link or to a single bind."""

    LINK_PARAM = "linkParam"
    BIND_PARAM = "bindParam"


@enum.unique
class DescriptorAttribute(enum.Enum):
    """Presentation properties that a descriptor parameter may set."""

    TOP = "top"
    LEFT = "left"
    BOTTOM = "bottom"
    RIGHT = "right"
    WIDTH = "width"
    HEIGHT = "height"
    LOCATION = "location"
    SIZE = "size"
    BOUNDS = "bounds"
    BACKGROUND = "background"
    VISIBLE = "visible"
    TRANSPARENCY = "transparency"
    FIT = "fit"
    SCROLL = "scroll"
    STYLE = "style"
    SOUND_LEVEL = "soundLevel"
    BALANCE_LEVEL = "balanceLevel"
    TREBLE_LEVEL = "trebleLevel"
    BASS_LEVEL = "bassLevel"
    ZINDEX = "zIndex"
    FONT_FAMILY = "fontFamily"
    FONT_STYLE = "fontStyle"
    FONT_SIZE = "fontSize"
    FONT_VARIANT = "fontVariant"
    FONT_WEIGHT = "fontWeight"
    FONT_COLOR = "fontColor"
    REUSE_PLAYER = "reusePlayer"
    PLAYER_LIFE = "playerLife"
