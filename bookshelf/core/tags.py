"""Tags used to classify entries."""

import msgspec


class Tag(msgspec.Struct, frozen=True, order=True):
    """Immutable keyword attached to entries.

    Tags compare and sort by keyword, so a set of tags always displays
    in the same order.
    """

    keyword: str

    def __str__(self) -> str:
        return self.keyword

    @classmethod
    def coerce(cls, value: "Tag | str") -> "Tag":
        """Return ``value`` as a Tag, wrapping plain strings."""
        if isinstance(value, Tag):
            return value
        return cls(str(value))
