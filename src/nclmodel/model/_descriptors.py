# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

__all__ = [
    "Accessor",
    "ChildAccessor",
    "Containment",
    "OwnedPOD",
    "ParentAccessor",
    "Reference",
    "Scope",
    "Single",
]

import abc
import collections.abc as cabc
import logging
import typing as t

import typing_extensions as te

from nclmodel import helpers

from . import T, _pods

if t.TYPE_CHECKING:
    from nclmodel import resolver

LOGGER = logging.getLogger(__name__)

Scope: te.TypeAlias = cabc.Callable[
    ["_obj.Element", "resolver.ResolutionContext"],
    cabc.Iterable["_obj.Element"],
]
"""Computes the candidates that a reference may resolve to."""


def _orphan(child: _obj.Element) -> None:
    child._parent_ref = None
    child._slot = None


class Accessor(metaclass=abc.ABCMeta):
    """Super class for all Accessor types."""

    __name__: str
    __objclass__: type[t.Any]

    def __init__(self) -> None:
        super().__init__()
        self.__doc__ = (
            f"A {type(self).__name__} that was not properly configured."
            " Ensure that ``__set_name__`` gets called after construction."
        )

    @abc.abstractmethod
    def __get__(self, obj, objtype=None):
        pass

    def __set__(self, obj: t.Any, value: t.Any) -> None:
        raise TypeError(f"Cannot set {self} on {type(obj).__name__}")

    def __delete__(self, obj: t.Any) -> None:
        raise TypeError(f"Cannot delete from {self!r} on {type(obj).__name__}")

    def __set_name__(self, owner: type[t.Any], name: str) -> None:
        self.__objclass__ = owner
        self.__name__ = name
        friendly_name = name.replace("_", " ")
        self.__doc__ = f"The {friendly_name} of this {owner.__name__}."

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._qualname!r}>"

    @property
    def _qualname(self) -> str:
        """Generate the qualified name of this descriptor."""
        if not hasattr(self, "__objclass__"):
            return f"(unknown {type(self).__name__} - call __set_name__)"
        return f"{self.__objclass__.__name__}.{self.__name__}"


class ChildAccessor(Accessor):
    """Base class for accessors to owned child elements.

    Parameters
    ----------
    factories
        Maps the tag of each kind of child to the name of the owner's
        method that creates it. Documents are built only through these
        methods, so overriding one of them in a subclass substitutes a
        specialized element type everywhere.
    """

    def __init__(self, factories: cabc.Mapping[str, str]) -> None:
        super().__init__()
        self.factories: t.Final = dict(factories)

    @abc.abstractmethod
    def iter_owned(self, obj: _obj.Element) -> cabc.Iterator[_obj.Element]:
        """Iterate over the children held by *obj* in this slot."""

    @abc.abstractmethod
    def discard(self, obj: _obj.Element, child: _obj.Element) -> None:
        """Forget *child*, leaving its parent link alone."""


class Containment(ChildAccessor, t.Generic[T]):
    """Provides access to a collection of owned children.

    Unless *ordered* is passed, the children are kept in an
    :class:`~nclmodel.model.ElementSet`, which rejects duplicates and
    iterates in key order. With *ordered*, an
    :class:`~nclmodel.model.ElementList` preserves insertion order.
    """

    def __init__(
        self,
        factories: cabc.Mapping[str, str],
        *,
        ordered: bool = False,
    ) -> None:
        super().__init__(factories)
        self.ordered: t.Final = ordered

    @t.overload
    def __get__(self, obj: None, objtype: type[t.Any]) -> te.Self: ...
    @t.overload
    def __get__(
        self, obj: _obj.Element, objtype: type[t.Any] | None = None
    ) -> _obj.ElementList[T]: ...
    def __get__(self, obj, objtype=None):
        del objtype
        if obj is None:
            return self

        try:
            return obj._children[self.__name__]
        except KeyError:
            pass

        if self.ordered:
            coll = _obj.ElementList(obj, self.__name__)
        else:
            coll = _obj.ElementSet(obj, self.__name__)
        obj._children[self.__name__] = coll
        return coll

    def __set__(self, obj: _obj.Element, value: cabc.Iterable[T]) -> None:
        if isinstance(value, _obj.Element | str):
            raise TypeError(
                f"{self._qualname} expects an iterable of elements"
            )
        value = list(value)
        coll = self.__get__(obj)
        coll.clear()
        for i in value:
            coll.add(i)

    def __delete__(self, obj: _obj.Element) -> None:
        self.__get__(obj).clear()

    def iter_owned(self, obj: _obj.Element) -> cabc.Iterator[_obj.Element]:
        coll = obj._children.get(self.__name__)
        if coll is not None:
            yield from coll

    def discard(self, obj: _obj.Element, child: _obj.Element) -> None:
        coll = obj._children.get(self.__name__)
        if coll is not None:
            coll.discard(child)

    def __repr__(self) -> str:
        kind = "list" if self.ordered else "set"
        tags = ", ".join(self.factories)
        return f"<Containment {self._qualname!r} ({kind} of {tags})>"


class Single(ChildAccessor, t.Generic[T]):
    """Provides access to exactly one optional owned child.

    Assigning a new child detaches the previous one, which keeps
    existing but loses its parent link.
    """

    @t.overload
    def __get__(self, obj: None, objtype: type[t.Any]) -> te.Self: ...
    @t.overload
    def __get__(
        self, obj: _obj.Element, objtype: type[t.Any] | None = None
    ) -> T | None: ...
    def __get__(self, obj, objtype=None):
        del objtype
        if obj is None:
            return self
        return obj._children.get(self.__name__)

    def __set__(self, obj: _obj.Element, value: T | None) -> None:
        old = obj._children.get(self.__name__)
        if value is None:
            if old is not None:
                del obj._children[self.__name__]
                _orphan(old)
            return

        if not isinstance(value, _obj.Element):
            raise TypeError(
                f"{self._qualname} only accepts elements,"
                f" not {type(value).__name__}"
            )
        if value is old:
            return

        obj._adopt(value, self.__name__)
        obj._children[self.__name__] = value
        if old is not None:
            _orphan(old)

    def __delete__(self, obj: _obj.Element) -> None:
        self.__set__(obj, None)

    def iter_owned(self, obj: _obj.Element) -> cabc.Iterator[_obj.Element]:
        value = obj._children.get(self.__name__)
        if value is not None:
            yield value

    def discard(self, obj: _obj.Element, child: _obj.Element) -> None:
        if obj._children.get(self.__name__) is child:
            del obj._children[self.__name__]


class ParentAccessor(Accessor):
    """Accesses the element that owns this one.

    The back-reference does not keep the parent alive. It is maintained
    by the containers and owned-value descriptors and cannot be
    assigned directly.
    """

    __slots__ = ()

    def __get__(self, obj, objtype=None):
        del objtype
        if obj is None:
            return self

        ref = obj._parent_ref
        if ref is None:
            return None
        return ref()

    def __set__(self, obj: t.Any, value: t.Any) -> None:
        raise TypeError(
            "Cannot set the parent directly,"
            " add the element to a container instead"
        )


class OwnedPOD(_pods.BasePOD["_obj.Element"]):
    """An attribute whose value is an element owned by its holder.

    The element is serialized by its name. Assigning a plain string
    creates a new element through the holder's *factory* method and
    names it accordingly.
    """

    __slots__ = ("factory",)

    def __init__(self, attribute: str, factory: str, /) -> None:
        super().__init__(attribute)
        self.factory = factory

    def __set__(self, obj: t.Any, value: _obj.Element | str | None) -> None:
        old = self.__get__(obj)
        if value is None:
            super().__set__(obj, None)
            if old is not None:
                _orphan(old)
            return

        new = self._validate(obj, value)
        if new is old:
            return
        obj._adopt(new, self.__name__)
        obj._attributes[self._key] = new
        if old is not None:
            _orphan(old)

    def discard(self, obj: _obj.Element, child: _obj.Element) -> None:
        if obj._attributes.get(self._key) is child:
            del obj._attributes[self._key]

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, _obj.Element)

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> _obj.Element:
        if isinstance(value, str):
            return self._from_xml(obj, value)
        if not isinstance(value, _obj.Element):
            raise TypeError(
                f"{self._qualname} only accepts elements or str,"
                f" not {type(value).__name__}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> _obj.Element:
        child = getattr(obj, self.factory)()
        child.name = value
        return child

    def _to_xml(self, obj: _obj.Element, value: _obj.Element, /) -> str:
        del obj
        return value.refkey or ""


class Reference(_pods.BasePOD["_obj.Element"]):
    """A non-owning link to another element.

    Until the resolver has run, the value may be a
    :class:`~nclmodel.model.Placeholder` that only carries the target's
    identifier. Assigning a string stores such a placeholder; assigning
    an element links it directly. References never change the parent
    of their target.

    Parameters
    ----------
    attribute
        The name of the XML attribute.
    scope
        Callable returning the candidate targets, in search order.
    description
        Human readable name of the target kind, used in diagnostics.
    prefix
        Prefix that marks the attribute text as meant for this
        descriptor, e.g. ``$`` for connector parameters.
    element
        If given, the reference is serialized as a child element with
        this tag, which carries *attribute*.
    """

    __slots__ = ("description", "scope")

    def __init__(
        self,
        attribute: str,
        scope: Scope,
        /,
        *,
        description: str,
        prefix: str = "",
        element: str | None = None,
    ) -> None:
        super().__init__(attribute, prefix=prefix, element=element)
        self.scope = scope
        self.description = description

    def accepts(self, value: t.Any) -> bool:
        return isinstance(value, _obj.Element | _obj.Placeholder)

    def is_pending(self, obj: _obj.Element) -> bool:
        """Check whether *obj* holds an unresolved placeholder here."""
        return isinstance(self.__get__(obj), _obj.Placeholder)

    def dump(self, obj: _obj.Element) -> str | None:
        value = self.__get__(obj)
        if value is None or not value.refkey:
            return None
        return self.prefix + value.refkey

    def _validate(self, obj: _obj.Element, value: t.Any, /) -> t.Any:
        if isinstance(value, str):
            return self._from_xml(obj, value)
        if not isinstance(value, _obj.Element | _obj.Placeholder):
            raise TypeError(
                f"{self._qualname} only accepts elements or identifiers,"
                f" not {type(value).__name__}"
            )
        return value

    def _from_xml(self, obj: _obj.Element, value: str, /) -> t.Any:
        del obj
        return _obj.Placeholder(helpers.check_identifier(value))

    def _to_xml(self, obj: _obj.Element, value: t.Any, /) -> str:
        del obj
        return value.refkey


from . import _obj
