# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""The element model that every document construct is built on.

Elements are plain Python objects. Their XML attributes are declared as
class-level descriptors (see :mod:`._pods` and :mod:`._descriptors`),
which know how to convert between the document's text form and Python
values. Owned children live in containers that maintain the parent
links of their members.
"""

from __future__ import annotations

import enum
import typing as t

E = t.TypeVar("E", bound=enum.Enum)
"""TypeVar for ":py:class:`~enum.Enum`"."""
T = t.TypeVar("T", bound="Element")
"""TypeVar for ":py:class:`nclmodel.model.Element`"."""
U = t.TypeVar("U")
"""TypeVar (unbound)."""


from ._descriptors import *
from ._obj import *
from ._pods import *

if not t.TYPE_CHECKING:
    from ._descriptors import __all__ as _all1
    from ._obj import __all__ as _all2
    from ._pods import __all__ as _all3

    __all__ = ["E", "T", "U", *_all1, *_all2, *_all3]
