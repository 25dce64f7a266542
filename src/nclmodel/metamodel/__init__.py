# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Element type definitions for documents."""

from . import connectors as connectors
from . import descriptors as descriptors
from . import document as document
from . import links as links
from . import meta as meta
from . import nodes as nodes
from . import rules as rules
from . import transitions as transitions
