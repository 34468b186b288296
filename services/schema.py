"""Header field vocabulary, required-field schema presets, and validation."""

from dataclasses import dataclass, field
from enum import Enum


class Field(str, Enum):
    TITLE = "title"
    DATE = "date"
    CATEGORIES = "categories"
    TAGS = "tags"
    LAYOUT = "layout"
    DESCRIPTION = "description"
    AUTHOR = "author"
    OPTIONS = "options"
    EXCERPT = "excerpt"
    PERMALINK = "permalink"


# Keys that may appear in rendered front matter.
TARGET_VOCABULARY = frozenset(
    {
        Field.LAYOUT.value,
        Field.TITLE.value,
        Field.DATE.value,
        Field.CATEGORIES.value,
        Field.TAGS.value,
        Field.EXCERPT.value,
        Field.AUTHOR.value,
        Field.PERMALINK.value,
    }
)


@dataclass(frozen=True)
class RequiredFieldSchema:
    """Ordered (field, required) pairs. Error reporting follows this order."""

    name: str
    entries: tuple[tuple[Field, bool], ...]

    @property
    def fields(self) -> list[str]:
        return [f.value for f, _ in self.entries]

    @property
    def required(self) -> list[str]:
        return [f.value for f, req in self.entries if req]

    def with_overrides(self, overrides: dict[str, bool]) -> "RequiredFieldSchema":
        """Return a copy with per-field requiredness replaced. Unknown names are ignored."""
        if not overrides:
            return self
        entries = tuple(
            (f, bool(overrides[f.value]) if f.value in overrides else req)
            for f, req in self.entries
        )
        return RequiredFieldSchema(name=self.name, entries=entries)


CLASSIC_SCHEMA = RequiredFieldSchema(
    name="classic",
    entries=(
        (Field.TITLE, True),
        (Field.DATE, True),
        (Field.CATEGORIES, True),
        (Field.TAGS, False),
        (Field.LAYOUT, True),
    ),
)

EXTENDED_SCHEMA = RequiredFieldSchema(
    name="extended",
    entries=(
        (Field.TITLE, True),
        (Field.DATE, False),
        (Field.CATEGORIES, True),
        (Field.TAGS, False),
        (Field.DESCRIPTION, True),
        (Field.AUTHOR, False),
        (Field.LAYOUT, True),
    ),
)

SCHEMAS = {s.name: s for s in (CLASSIC_SCHEMA, EXTENDED_SCHEMA)}


@dataclass
class ValidationResult:
    headers: dict[str, str] | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.message

    @property
    def message(self) -> str:
        return "\n".join(self.errors).strip()


def missing_field_error(name: str) -> str:
    return f"- The {name} is required, please add '#+{name.upper()}' at the top of your document."


def validate(
    headers: dict[str, str],
    schema: RequiredFieldSchema,
    empty_is_present: bool = True,
) -> ValidationResult:
    """Check *headers* against the required fields of *schema*.

    Presence is the check: a header that is present but empty passes unless
    empty_is_present is False.
    """
    errors = []
    for name in schema.required:
        value = headers.get(name)
        if value is None or (not empty_is_present and not value.strip()):
            errors.append(missing_field_error(name))

    result = ValidationResult(errors=errors)
    if result.valid:
        result.headers = dict(headers)
    return result
