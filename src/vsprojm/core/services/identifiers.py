from __future__ import annotations

"""
Unique Identifier Service.

Generates the brace-wrapped, uppercase GUID tokens Visual Studio stores in
each filter declaration.
"""

import uuid
from typing import Callable

IdentifierFactory = Callable[[], str]


def new_unique_identifier() -> str:
    """Return a fresh token such as '{3F2504E0-4F89-41D3-9A0C-0305E82C3301}'."""
    return "{" + str(uuid.uuid4()).upper() + "}"
