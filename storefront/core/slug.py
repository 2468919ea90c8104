import re
import unicodedata
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: Optional[str]) -> str:
    """Derive a URL-safe slug from a human-readable name.

    ``"Café Crème 2"`` becomes ``"cafe-creme-2"``. The result is deterministic but not unique.
    """
    if not value:
        return ""
    ascii_name = (
        unicodedata.normalize("NFKD", value.strip().lower())
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_name).strip("-")
