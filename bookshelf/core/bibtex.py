"""BibTeX decoding for bibliography references.

An entry may point at a ``.bib`` file holding its bibliographic metadata.
This module turns the text of such a file into ``BibRecord`` values.
The decoder handles nested braces, quoted and bare field values,
``@string`` definitions and ``%`` comments. Anything that starts like an
entry but cannot be decoded is reported as a ``BibtexSyntaxError``
rather than skipped.
"""

import re

import msgspec

BIB_EXTENSION = ".bib"

# Entry kinds that are not records
_NON_RECORDS = {"string", "comment", "preamble"}


class BibtexSyntaxError(ValueError):
    """Raised when BibTeX text cannot be decoded."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class BibRecord(msgspec.Struct, frozen=True, kw_only=True):
    """One decoded BibTeX record."""

    key: str
    type: str
    fields: dict[str, str] = msgspec.field(default_factory=dict)

    @property
    def title(self) -> str | None:
        return self.fields.get("title")

    @property
    def year(self) -> str | None:
        return self.fields.get("year")

    @property
    def authors(self) -> tuple[str, ...]:
        """Parse the author field into individual names.

        BibTeX uses ' and ' as the delimiter between author names.
        Escaped ampersands (\\&) are not treated as delimiters.
        """
        author = self.fields.get("author")
        if not author:
            return ()

        temp = author.replace(r"\&", "\x00")
        names = re.split(r"\s+and\s+", temp)
        return tuple(
            name.replace("\x00", "&").strip() for name in names if name.strip()
        )


class BibtexDecoder:
    """Parse BibTeX text into ``BibRecord`` values.

    Supports up to 3 levels of brace nesting inside field values.
    """

    ENTRY_PATTERN = re.compile(
        r"@(\w+)\s*\{([^,\s]+)\s*,\s*((?:[^{}]|{(?:[^{}]|{(?:[^{}]|{(?:[^{}]|{[^{}]*})*})*})*})*)\s*\}",
        re.DOTALL | re.MULTILINE,
    )

    HEADER_PATTERN = re.compile(r"@(\w+)\s*[{(]", re.MULTILINE)

    STRING_PATTERN = re.compile(
        r'@string\s*\{\s*(\w+)\s*=\s*"([^"]*?)"\s*\}',
        re.IGNORECASE | re.MULTILINE,
    )

    FIELD_PATTERN = re.compile(
        r'(\w+)\s*=\s*(?:"([^"]*?)"|{((?:[^{}]|{(?:[^{}]|{(?:[^{}]|{[^{}]*})*})*})*)}|([^,}]+?))\s*(?:,|$)',
        re.MULTILINE,
    )

    UNESCAPE_MAP = {
        "\\\\": "\\",
        "\\$": "$",
        "\\&": "&",
        "\\#": "#",
        "\\_": "_",
        "\\%": "%",
        "\\~{}": "~",
        "\\^{}": "^",
    }

    @classmethod
    def unescape(cls, text: str) -> str:
        """Unescape LaTeX special characters."""
        if not text:
            return text

        result = text
        for escaped, char in sorted(
            cls.UNESCAPE_MAP.items(), key=lambda item: len(item[0]), reverse=True
        ):
            result = result.replace(escaped, char)
        return result

    @classmethod
    def _strip_comments(cls, text: str) -> str:
        text = text.replace(r"\%", "\x00PERCENT\x00")
        text = re.sub(r"%.*$", "", text, flags=re.MULTILINE)
        return text.replace("\x00PERCENT\x00", r"\%")

    @classmethod
    def _check_braces(cls, text: str) -> None:
        depth = 0
        line = 1
        unescaped = re.sub(r"\\[{}]", "", text)
        for char in unescaped:
            if char == "\n":
                line += 1
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    raise BibtexSyntaxError("unexpected '}'", line)
        if depth:
            raise BibtexSyntaxError("unbalanced braces", line)

    @classmethod
    def decode(cls, text: str) -> list[BibRecord]:
        """Decode BibTeX text into records.

        Args:
            text: BibTeX source.

        Returns:
            Records in the order they appear.

        Raises:
            BibtexSyntaxError: If the text is malformed.
        """
        text = cls._strip_comments(text)
        cls._check_braces(text)
        text = cls.STRING_PATTERN.sub("", text)

        records = []
        matched: set[int] = set()

        for match in cls.ENTRY_PATTERN.finditer(text):
            entry_type = match.group(1).lower()
            if entry_type in _NON_RECORDS:
                continue

            matched.add(match.start())
            fields: dict[str, str] = {}

            for field_match in cls.FIELD_PATTERN.finditer(match.group(3)):
                field_name = field_match.group(1).lower()
                value = (
                    field_match.group(2)
                    or field_match.group(3)
                    or field_match.group(4)
                    or ""
                ).strip()
                fields[field_name] = cls.unescape(value)

            records.append(
                BibRecord(key=match.group(2).strip(), type=entry_type, fields=fields)
            )

        for header in cls.HEADER_PATTERN.finditer(text):
            if header.group(1).lower() in _NON_RECORDS:
                continue
            if header.start() not in matched:
                line = text.count("\n", 0, header.start()) + 1
                raise BibtexSyntaxError(
                    f"cannot decode @{header.group(1)} entry", line
                )

        return records

    @classmethod
    def find(cls, text: str, key: str) -> BibRecord | None:
        """Return the record with cite key ``key``, if any."""
        for record in cls.decode(text):
            if record.key == key:
                return record
        return None
