# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

__all__ = [
    "Element",
    "ElementList",
    "ElementSet",
    "IdentifiableElement",
    "NodeKind",
    "Placeholder",
    "sort_value",
]

import collections.abc as cabc
import enum
import logging
import typing as t
import weakref

from nclmodel import values

from . import T, _descriptors, _pods

LOGGER = logging.getLogger(__name__)


@enum.unique
class NodeKind(enum.Enum):
    """The closed set of node variants that a composite node can hold."""

    MEDIA = "media"
    CONTEXT = "context"
    SWITCH = "switch"


class Placeholder:
    """Stands in for a referenced element until references are resolved.

    A placeholder only knows the identifier (or name) of the element it
    refers to. The resolver replaces it with the real element once the
    whole document has been constructed.
    """

    __slots__ = ("id",)

    def __init__(self, id: str, /) -> None:
        if not isinstance(id, str):
            raise TypeError(f"Placeholder id must be a str, not {id!r}")
        self.id = id

    @property
    def refkey(self) -> str:
        return self.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placeholder):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self), self.id))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id!r}>"

    def _short_repr_(self) -> str:
        return repr(self)


def sort_value(value: t.Any) -> tuple[int, t.Any]:
    """Convert an attribute value into a totally ordered sort key part.

    Absent values sort first, then numbers, then everything else by its
    text form.
    """
    if value is None:
        return (0, "")
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, int | float):
        return (1, value)
    if isinstance(value, values.Time):
        return (1, value.seconds)
    if isinstance(value, enum.Enum):
        return (2, str(value.value))
    if isinstance(value, Element | Placeholder):
        return (2, value.refkey or "")
    if isinstance(value, tuple):
        return (3, tuple(sort_value(i) for i in value))
    return (2, str(value))


class Element:
    """A document element.

    This is the common base class for every construct of a document.
    Subclasses declare their XML attributes and children as class-level
    descriptors; the declaration order defines the canonical order in
    which they are serialized.

    Parameters
    ----------
    kw
        Initial values for the element's attributes and child
        collections. Only names declared as descriptors on the class
        are accepted.
    """

    _xmltag: t.ClassVar[str | None] = None
    _abstract: t.ClassVar[bool] = True
    _sort_rank: t.ClassVar[int] = 0
    """Orders different element types within the same collection."""

    _xmlattributes: t.ClassVar[dict[str, tuple[_pods.BasePOD, ...]]] = {}
    """Attribute descriptors grouped by XML attribute name, in order."""
    _xmlchildren: t.ClassVar[tuple[str, ...]] = ()
    """Names of the descriptors that hold children, in emission order."""
    _xmlfactories: t.ClassVar[dict[str, tuple[str, str]]] = {}
    """Map from child tag to accessor name and creation method name."""
    _references: t.ClassVar[tuple[_descriptors.Reference, ...]] = ()

    parent = _descriptors.ParentAccessor()

    def __init_subclass__(cls, abstract: bool = False, **kw: t.Any) -> None:
        super().__init_subclass__(**kw)
        cls._abstract = abstract

        attrs: dict[str, t.Any] = {}
        for klass in reversed(cls.__mro__):
            for name, acc in vars(klass).items():
                if isinstance(acc, _pods.BasePOD | _descriptors.Accessor):
                    attrs[name] = acc

        xmlattributes: dict[str, list[_pods.BasePOD]] = {}
        children: list[str] = []
        factories: dict[str, tuple[str, str]] = {}
        references: list[_descriptors.Reference] = []
        for name, acc in attrs.items():
            if isinstance(acc, _descriptors.Reference):
                references.append(acc)
            if isinstance(acc, _pods.BasePOD) and acc.element is None:
                xmlattributes.setdefault(acc.attribute, []).append(acc)
                continue

            if isinstance(acc, _pods.BasePOD):
                assert acc.element is not None
                factories[acc.element] = (name, "")
            elif isinstance(acc, _descriptors.ChildAccessor):
                for tag, factory in acc.factories.items():
                    factories[tag] = (name, factory)
            else:
                continue
            children.append(name)

        cls._xmlattributes = {k: tuple(v) for k, v in xmlattributes.items()}
        cls._xmlchildren = tuple(children)
        cls._xmlfactories = factories
        cls._references = tuple(references)

    def __init__(self, **kw: t.Any) -> None:
        if type(self)._abstract or type(self)._xmltag is None:
            raise TypeError(
                f"{type(self).__name__} is an abstract class"
                " and cannot be instantiated directly"
            )

        super().__init__()
        self._attributes: dict[str, t.Any] = {}
        self._children: dict[str, t.Any] = {}
        self._parent_ref: weakref.ref[Element] | None = None
        self._slot: str | None = None
        self._errors: list[str] = []
        self._warnings: list[str] = []

        for key, val in kw.items():
            acc = getattr(type(self), key, None)
            if not isinstance(acc, _pods.BasePOD | _descriptors.Accessor):
                raise TypeError(f"Cannot set {key!r} on {type(self).__name__}")
            setattr(self, key, val)

    def __setattr__(self, attr: str, value: t.Any) -> None:
        if attr.startswith("_") or hasattr(type(self), attr):
            super().__setattr__(attr, value)
        else:
            raise AttributeError(
                f"{attr!r} isn't defined on {type(self).__name__}"
            )

    def __repr__(self) -> str:
        return self._short_repr_()

    def _short_repr_(self) -> str:
        key = self.refkey
        name = f" {key!r}" if key else ""
        return f"<{type(self).__name__}{name}>"

    @property
    def xmltag(self) -> str:
        """The tag name used for this element in documents."""
        tag = type(self)._xmltag
        assert tag is not None
        return tag

    @property
    def refkey(self) -> str | None:
        """The string that references to this element use."""
        return None

    @property
    def errors(self) -> list[str]:
        """Errors found during the last validation run."""
        return list(self._errors)

    @property
    def warnings(self) -> list[str]:
        """Warnings found during the last validation or resolver run."""
        return list(self._warnings)

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    def add_warning(self, message: str) -> None:
        self._warnings.append(message)

    def clear_diagnostics(self) -> None:
        self._errors.clear()
        self._warnings.clear()

    def _merge_diagnostics(self, child: Element) -> None:
        self._warnings.extend(child._warnings)
        self._errors.extend(child._errors)

    def iter_children(self) -> cabc.Iterator[Element]:
        """Iterate over the owned children in canonical order."""
        cls = type(self)
        for name in self._xmlchildren:
            acc = getattr(cls, name)
            if isinstance(acc, _descriptors.ChildAccessor):
                yield from acc.iter_owned(self)

    def iter_ancestors(self) -> cabc.Iterator[Element]:
        """Iterate over the parent chain, nearest parent first."""
        obj = self.parent
        while obj is not None:
            yield obj
            obj = obj.parent

    @property
    def root(self) -> Element:
        """The topmost ancestor of this element (or itself)."""
        obj = self
        for obj in self.iter_ancestors():  # noqa: B007
            pass
        return obj

    def _sort_key(self) -> tuple[t.Any, ...]:
        return (sort_value(self.refkey),)

    def _attribute_key(self, *attributes: str) -> tuple[t.Any, ...]:
        return tuple(sort_value(self._attributes.get(a)) for a in attributes)

    def _check(self) -> None:
        """Run the element's own validation checks.

        Subclasses record problems with :meth:`add_error` and
        :meth:`add_warning`. Children are validated separately.
        """

    def _require(self, *attrs: str) -> None:
        for attr in attrs:
            if getattr(self, attr) is None:
                acc = getattr(type(self), attr)
                name = getattr(acc, "attribute", attr)
                self.add_error(
                    f"Element {self.xmltag!r} does not have required"
                    f" attribute {name!r}."
                )

    def _adopt(self, child: Element, slot: str) -> None:
        """Take ownership of *child*, detaching it from its old owner."""
        if child is self or child in self.iter_ancestors():
            raise ValueError(
                f"Cannot add {child._short_repr_()} below itself"
            )
        previous = child.parent
        if previous is not None:
            previous._release(child)
        child._parent_ref = weakref.ref(self)
        child._slot = slot

    def _release(self, child: Element) -> None:
        """Forget about *child* without touching any other owner."""
        if child.parent is not self or child._slot is None:
            return
        acc = getattr(type(self), child._slot)
        acc.discard(self, child)
        child._parent_ref = None
        child._slot = None

    def validate(self) -> bool:
        """Validate this element and all of its children.

        Returns
        -------
        bool
            Whether no errors were found. Diagnostics are available via
            :attr:`errors` and :attr:`warnings` afterwards.
        """
        from nclmodel import validation  # noqa: PLC0415

        return validation.validate(self)

    def serialize(self, depth: int = 0) -> str:
        """Serialize this element into its canonical text form."""
        from nclmodel import serializer  # noqa: PLC0415

        return serializer.to_string(self, depth)


class IdentifiableElement(Element, abstract=True):
    """An element that may carry an identifier."""

    id = _pods.IdentifierPOD("id")
    """The identifier of this element."""

    @property
    def refkey(self) -> str | None:
        return self.id


class ElementList(cabc.Sequence[T], t.Generic[T]):
    """An insertion-ordered collection of owned children.

    Instances are created by the :class:`~._descriptors.Containment`
    accessor and should not be instantiated directly.
    """

    def __init__(self, parent: Element, slot: str, /) -> None:
        self._parent = weakref.ref(parent)
        self._slot = slot
        self._items: list[T] = []

    @property
    def owner(self) -> Element:
        parent = self._parent()
        if parent is None:
            raise RuntimeError("Owner of the collection no longer exists")
        return parent

    def _ordered(self) -> list[T]:
        return self._items

    def _accepts(self, child: T) -> bool:
        return not any(i is child for i in self._items)

    def add(self, child: T) -> bool:
        """Insert *child*, taking ownership of it.

        Returns
        -------
        bool
            Whether the child was added. False is returned if the child
            is None or already part of this collection; the collection
            is left unchanged in that case.
        """
        if child is None:
            return False
        if not isinstance(child, Element):
            raise TypeError(
                f"Expected an Element, not {type(child).__name__}"
            )
        if not self._accepts(child):
            LOGGER.debug(
                "Rejected duplicate %s in %r of %s",
                child._short_repr_(),
                self._slot,
                self.owner._short_repr_(),
            )
            return False
        self.owner._adopt(child, self._slot)
        self._items.append(child)
        return True

    def remove(self, child: T | str) -> bool:  # type: ignore[override]
        """Remove a child, given as object or by its reference key.

        The removed child's parent link is cleared.
        """
        target = self._find(child)
        if target is None:
            return False
        self.owner._release(target)
        return True

    def discard(self, child: T) -> None:
        """Drop *child* from the collection without touching its parent."""
        self._items = [i for i in self._items if i is not child]

    def clear(self) -> None:
        for child in list(self._items):
            self.owner._release(child)

    def has(self, child: T | str) -> bool:
        return self._find(child) is not None

    def get(self, key: str, default: t.Any = None) -> t.Any:
        found = self._find(key)
        if found is None:
            return default
        return found

    def _find(self, child: T | str) -> T | None:
        if isinstance(child, str):
            for i in self._ordered():
                if i.refkey == child:
                    return i
            return None
        for i in self._items:
            if i is child:
                return i
        return None

    def __contains__(self, obj: t.Any) -> bool:
        if not isinstance(obj, Element | str):
            return False
        return self.has(obj)

    def __iter__(self) -> cabc.Iterator[T]:
        return iter(self._ordered())

    def __len__(self) -> int:
        return len(self._items)

    @t.overload
    def __getitem__(self, idx: int) -> T: ...
    @t.overload
    def __getitem__(self, idx: slice) -> list[T]: ...
    @t.overload
    def __getitem__(self, idx: str) -> T: ...
    def __getitem__(self, idx: int | slice | str) -> T | list[T]:
        if isinstance(idx, str):
            found = self._find(idx)
            if found is None:
                raise KeyError(idx)
            return found
        return self._ordered()[idx]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        items = ", ".join(i._short_repr_() for i in self)
        return f"<{type(self).__name__} [{items}]>"


class ElementSet(ElementList[T], t.Generic[T]):
    """A collection of owned children that keeps them unique and sorted.

    Two children are considered duplicates if their sort keys compare
    equal. Iteration follows the sort key order, not insertion order.
    Keys are derived on demand, so a child whose key changes after
    insertion moves to its new position.
    """

    def _ordered(self) -> list[T]:
        return sorted(
            self._items, key=lambda i: (type(i)._sort_rank, i._sort_key())
        )

    def _accepts(self, child: T) -> bool:
        key = child._sort_key()
        return not any(i is child or i._sort_key() == key for i in self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementSet):
            return NotImplemented
        return [i._sort_key() for i in self] == [i._sort_key() for i in other]

    __hash__ = None  # type: ignore[assignment]

    def _sort_key(self) -> tuple[t.Any, ...]:
        return tuple((type(i)._sort_rank, i._sort_key()) for i in self)
