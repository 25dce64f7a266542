# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

__all__ = [
    "BasePOD",
    "BoolPOD",
    "EnumPOD",
    "FloatPOD",
    "IdentifierPOD",
    "IntPOD",
    "StringPOD",
    "TimePOD",
]

import abc
import enum
import math
import typing as t

import typing_extensions as te

from nclmodel import helpers, values

from . import E, U

if t.TYPE_CHECKING:
    from . import _obj


class BasePOD(t.Generic[U]):
    """A plain-old-data descriptor.

    The value is kept in the owning element's ``_attributes`` dict,
    under the name of the XML attribute. Several descriptors may share
    one XML attribute, as long as they accept disjoint kinds of values;
    assigning through one of them then replaces the value of the others.
    This is how an attribute that holds either a plain value or a
    ``$``-prefixed connector parameter is modelled.
    """

    __slots__ = (
        "__name__",
        "__objclass__",
        "attribute",
        "element",
        "prefix",
    )

    def __init__(
        self,
        attribute: str,
        *,
        prefix: str = "",
        element: str | None = None,
    ) -> None:
        self.attribute = attribute
        self.prefix = prefix
        self.element = element

        self.__name__ = "(unknown)"
        self.__objclass__: type[t.Any] | None = None

    @property
    def _qualname(self) -> str:
        """Generate the qualified name of this descriptor."""
        if self.__objclass__ is None:
            return f"(unknown {type(self).__name__} - call __set_name__)"
        return f"{self.__objclass__.__name__}.{self.__name__}"

    @property
    def _key(self) -> str:
        if self.element is None:
            return self.attribute
        return f"{self.element}/{self.attribute}"

    @t.overload
    def __get__(self, obj: None, objtype: type) -> te.Self: ...
    @t.overload
    def __get__(self, obj: t.Any, objtype: type | None = None) -> U | None: ...
    def __get__(self, obj, objtype=None):
        del objtype
        if obj is None:
            return self

        value = obj._attributes.get(self._key)
        if value is None or not self.accepts(value):
            return None
        return value

    def __set__(self, obj: t.Any, value: U | str | None) -> None:
        if value is None:
            current = obj._attributes.get(self._key)
            if current is not None and self.accepts(current):
                del obj._attributes[self._key]
            return

        obj._attributes[self._key] = self._validate(obj, value)

    def __delete__(self, obj: t.Any) -> None:
        self.__set__(obj, None)

    def __set_name__(self, owner: type[t.Any], name: str) -> None:
        if self.__objclass__ is not None:
            raise RuntimeError(
                f"__set_name__ called twice on {self._qualname}"
            )
        self.__name__ = name
        self.__objclass__ = owner

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._qualname} ({self.attribute!r})>"

    def matches_xml(self, text: str) -> bool:
        """Check whether *text* is meant for this descriptor."""
        return text.startswith(self.prefix)

    def load(self, obj: _obj.Element, text: str) -> None:
        """Set the value from its serialized text form."""
        self.__set__(obj, self._from_xml(obj, text[len(self.prefix) :]))

    def dump(self, obj: _obj.Element) -> str | None:
        """Return the serialized text form of the current value."""
        value = self.__get__(obj)
        if value is None:
            return None
        return self.prefix + self._to_xml(obj, value)

    @abc.abstractmethod
    def accepts(self, value: t.Any) -> bool:
        """Check whether a stored value belongs to this descriptor."""

    @abc.abstractmethod
    def _validate(self, obj: _obj.Element, value: t.Any, /) -> U: ...
    @abc.abstractmethod
    def _from_xml(self, obj: _obj.Element, value: str, /) -> U: ...
    @abc.abstractmethod
    def _to_xml(self, obj: _obj.Element, value: U, /) -> str: ...


class StringPOD(BasePOD[str]):
    """A POD containing arbitrary, non-empty string data."""

    __slots__ = ()

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, str)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> str:
        del obj
        if not isinstance(value, str):
            raise TypeError(
                f"{self._qualname} only accepts str,"
                f" not {type(value).__name__}"
            )
        if not value:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} cannot be empty"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> str:
        del obj
        return value

    def _to_xml(self, obj: _obj.Element, value: str, /) -> str:
        del obj
        return value


class IdentifierPOD(StringPOD):
    """A POD containing an identifier.

    Assigning a string that is not a valid identifier raises
    :class:`~nclmodel.helpers.InvalidIdentifierError` and leaves the
    previous value in place.
    """

    __slots__ = ()

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> str:
        value = super()._validate(obj, value)
        return helpers.check_identifier(value)


class BoolPOD(BasePOD[bool]):
    """A POD containing a boolean."""

    __slots__ = ()

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, bool)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> bool:
        del obj
        if not isinstance(value, bool):
            raise TypeError(
                f"{self._qualname} only accepts bool,"
                f" not {type(value).__name__}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> bool:
        del obj
        if value not in ("true", "false"):
            raise helpers.InvalidArgumentError(
                f"{self._qualname} must be 'true' or 'false', not {value!r}"
            )
        return value == "true"

    def _to_xml(self, obj: _obj.Element, value: bool, /) -> str:
        del obj
        assert isinstance(value, bool)
        return ("false", "true")[value]


class IntPOD(BasePOD[int]):
    """A POD containing an integer number.

    With *unbounded*, negative numbers are normalized to the
    :data:`~nclmodel.values.UNBOUNDED` sentinel, which is serialized as
    the literal ``unbounded``. Otherwise values below *minimum* are
    rejected.
    """

    __slots__ = ("minimum", "unbounded")

    def __init__(
        self,
        attribute: str,
        /,
        *,
        minimum: int | None = None,
        unbounded: bool = False,
        prefix: str = "",
    ) -> None:
        """Create an IntPOD.

        Parameters
        ----------
        attribute
            The name of the attribute on the XML element.
        minimum
            The smallest value that may be assigned.
        unbounded
            Whether a negative value means "no upper limit".
        prefix
            Prefix of the attribute text that selects this descriptor.
        """
        super().__init__(attribute, prefix=prefix)
        self.minimum = minimum
        self.unbounded = unbounded

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> int:
        del obj
        if not self.accepts(value):
            raise TypeError(
                f"{self._qualname} only accepts int,"
                f" not {type(value).__name__}"
            )
        if self.unbounded and value < 0:
            return values.UNBOUNDED
        if self.minimum is not None and value < self.minimum:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} must be at least {self.minimum},"
                f" not {value}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> int:
        del obj
        if self.unbounded and value == "unbounded":
            return values.UNBOUNDED
        try:
            return int(value)
        except ValueError:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} expects an integer, not {value!r}"
            ) from None

    def _to_xml(self, obj: _obj.Element, value: int, /) -> str:
        del obj
        if self.unbounded and value == values.UNBOUNDED:
            return "unbounded"
        return str(value)


class FloatPOD(BasePOD[float]):
    """A POD containing a floating-point number."""

    __slots__ = ("maximum", "minimum")

    def __init__(
        self,
        attribute: str,
        /,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
        prefix: str = "",
    ) -> None:
        super().__init__(attribute, prefix=prefix)
        self.minimum = minimum
        self.maximum = maximum

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, float)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> float:
        del obj
        if isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        elif not isinstance(value, float):
            raise TypeError(
                f"{self._qualname} only accepts float or int,"
                f" not {type(value).__name__}"
            )

        if math.isnan(value) or math.isinf(value):
            raise helpers.InvalidArgumentError(
                f"{self._qualname} cannot represent {value!r}"
            )
        if self.minimum is not None and value < self.minimum:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} must be at least {self.minimum}"
            )
        if self.maximum is not None and value > self.maximum:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} must be at most {self.maximum}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> float:
        del obj
        try:
            return float(value)
        except ValueError:
            raise helpers.InvalidArgumentError(
                f"{self._qualname} expects a number, not {value!r}"
            ) from None

    def _to_xml(self, obj: _obj.Element, value: float, /) -> str:
        del obj
        return str(value)


class EnumPOD(BasePOD[E]):
    """A POD that can have one of a pretermined set of values.

    The returned and consumed values are members of the Enum that was
    passed into the constructor. When assigning, this property also
    accepts the literal token of one of the members, i.e. the member's
    value.
    """

    __slots__ = ("enumcls",)

    def __init__(
        self,
        attribute: str,
        enumcls: type[E],
        /,
    ) -> None:
        """Create an EnumPOD.

        Parameters
        ----------
        attribute
            The name of the attribute on the XML element.
        enumcls
            The :class:`enum.Enum` subclass to use. The class' members'
            values are used as the possible values for the XML
            attribute.
        """
        if not (isinstance(enumcls, type) and issubclass(enumcls, enum.Enum)):
            raise TypeError(
                f"enumcls must be an Enum subclass, not {enumcls!r}"
            )

        super().__init__(attribute)
        self.enumcls = enumcls

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, self.enumcls)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> E:
        if isinstance(value, str):
            return self._from_xml(obj, value)
        if not isinstance(value, self.enumcls):
            raise TypeError(
                f"{self._qualname} only accepts {self.enumcls.__name__},"
                f" not {type(value).__name__}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> E:
        del obj
        try:
            return values.lookup(self.enumcls, value)
        except ValueError:
            raise helpers.InvalidArgumentError(
                f"{value!r} is not a valid {self.enumcls.__name__}"
            ) from None

    def _to_xml(self, obj: _obj.Element, value: E, /) -> str:
        del obj
        return value.value


class TimePOD(BasePOD[values.Time]):
    """A POD containing a duration.

    Accepts :class:`~nclmodel.values.Time` instances, plain numbers of
    seconds and the text forms understood by
    :meth:`~nclmodel.values.Time.parse`.
    """

    __slots__ = ()

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, values.Time)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> values.Time:
        if isinstance(value, values.Time):
            return value
        if isinstance(value, str):
            return self._from_xml(obj, value)
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise TypeError(
                f"{self._qualname} only accepts Time, int, float or str,"
                f" not {type(value).__name__}"
            )
        try:
            return values.Time(value)
        except ValueError as err:
            raise helpers.InvalidArgumentError(
                f"{self._qualname}: {err}"
            ) from None

    def _from_xml(self, obj: _obj.Element, value: str, /) -> values.Time:
        del obj
        try:
            return values.Time.parse(value)
        except ValueError as err:
            raise helpers.InvalidArgumentError(
                f"{self._qualname}: {err}"
            ) from None

    def _to_xml(self, obj: _obj.Element, value: values.Time, /) -> str:
        del obj
        return str(value)
