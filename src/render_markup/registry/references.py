"""Boxed references for values that cannot travel as attribute text.

A renderer that emits markup for a nested component can only pass strings
through attributes. ``box`` stores a value in the compilation's reference
table and returns a ``Ref/<id>/`` token; when the nested component's props
are built, the token is swapped back for a BoxedReference to the value.
"""

import itertools
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

REFERENCE_PATTERN = re.compile(r"^Ref/(\d+)/$")


@dataclass(frozen=True)
class BoxedReference:
    """A boxed value passed as a component prop."""

    id: int
    value: Any

    @property
    def token(self) -> str:
        return f"Ref/{self.id}/"


class ReferenceTable:
    """Reference storage owned by one compilation context."""

    def __init__(self) -> None:
        self._values: Dict[int, Any] = {}
        self._ids = itertools.count(1)

    def box(self, value: Any) -> str:
        """Store a value and return its token."""
        ref_id = next(self._ids)
        self._values[ref_id] = value
        return f"Ref/{ref_id}/"

    @staticmethod
    def is_reference(token: object) -> bool:
        """Check whether a value has the shape of a reference token."""
        return isinstance(token, str) and REFERENCE_PATTERN.match(token) is not None

    def resolve(self, token: str) -> Optional[BoxedReference]:
        """Return the BoxedReference for a token, or None when it is unknown."""
        match = REFERENCE_PATTERN.match(token)
        if match is None:
            return None
        ref_id = int(match.group(1))
        if ref_id not in self._values:
            return None
        return BoxedReference(ref_id, self._values[ref_id])

    def unbox(self, token: str) -> Any:
        """Return the value stored for a token.

        Raises:
            KeyError: If the token is malformed or unknown to this table
        """
        reference = self.resolve(token)
        if reference is None:
            raise KeyError(token)
        return reference.value

    def __len__(self) -> int:
        return len(self._values)
