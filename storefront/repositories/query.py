"""Store-independent query description.

A :class:`Query` is an immutable value built from composable stages. Every stage returns a new
query, so partially built queries can be shared and compared::

    Query({"category": cid}).select("-photo").limit(3).populate("category")

Repositories translate a query into the calls of their backing store.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Populate:
    """Replace the reference stored in ``path`` by the referenced document(s)."""

    path: str
    select: Optional[str] = None


def parse_projection(select: Optional[str]) -> Optional[Dict[str, int]]:
    """Translate a Mongoose-style field selection into a MongoDB projection.

    ``"-photo"`` excludes the photo, ``"name email"`` keeps only those fields (and ``_id``).
    Inclusion and exclusion cannot be mixed, except for ``-_id``.
    """
    if not select:
        return None
    projection: Dict[str, int] = {}
    for token in select.split():
        if token.startswith("-"):
            projection[token[1:]] = 0
        else:
            projection[token.lstrip("+")] = 1
    modes = {value for name, value in projection.items() if name != "_id"}
    if len(modes) > 1:
        raise ValueError(f"Cannot mix inclusion and exclusion in selection '{select}'")
    return projection


@dataclass(frozen=True)
class Query:
    filters: Mapping[str, Any] = field(default_factory=dict)
    fields: Optional[str] = None
    populates: Tuple[Populate, ...] = ()
    ordering: Tuple[Tuple[str, int], ...] = ()
    offset: int = 0
    max_results: int = 0

    def select(self, fields: str) -> "Query":
        return replace(self, fields=fields)

    def populate(self, path: str, select: Optional[str] = None) -> "Query":
        return replace(self, populates=self.populates + (Populate(path, select),))

    def sort(self, spec: Mapping[str, int]) -> "Query":
        return replace(self, ordering=tuple((key, int(direction)) for key, direction in spec.items()))

    def skip(self, count: int) -> "Query":
        return replace(self, offset=count)

    def limit(self, count: int) -> "Query":
        return replace(self, max_results=count)

    @property
    def projection(self) -> Optional[Dict[str, int]]:
        return parse_projection(self.fields)
