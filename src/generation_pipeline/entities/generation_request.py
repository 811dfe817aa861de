"""Generation request domain entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class ContentType(str, Enum):
    """Kinds of structured content the pipeline can generate."""

    PLAN = "plan"
    TRAINING_PLAN = "training-plan"
    RESUME_REWRITE = "resume-rewrite"


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(item) for item in value)
    return value


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable description of what to generate.

    Attributes:
        content_type: Which content family to produce
        fields: Named request fields (job title, description, skills, ...)
        premium: Whether the caller is on the premium tier
    """

    content_type: ContentType
    fields: Mapping[str, Any] = field(default_factory=dict)
    premium: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "content_type", ContentType(self.content_type))
        frozen = {name: _freeze(value) for name, value in dict(self.fields).items()}
        object.__setattr__(self, "fields", MappingProxyType(frozen))

    @classmethod
    def create(
        cls, content_type: ContentType | str, premium: bool = False, **fields: Any
    ) -> "GenerationRequest":
        """Build a request from keyword fields, dropping ``None`` values."""
        return cls(
            content_type=ContentType(content_type),
            fields={name: value for name, value in fields.items() if value is not None},
            premium=premium,
        )

    def get(self, name: str, default: Any = None) -> Any:
        """Return a field value, or ``default`` when missing or empty."""
        value = self.fields.get(name)
        if value is None or value == "" or value == ():
            return default
        return value

    def get_list(self, name: str) -> list[str]:
        """Return a field as a list of non-empty strings."""
        value = self.fields.get(name)
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        elif not isinstance(value, tuple):
            value = (value,)
        return [str(item).strip() for item in value if str(item).strip()]
