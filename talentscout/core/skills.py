"""Static skill lookup tables used by query building and skill derivation.

The tables are plain data. ``SkillTables`` is frozen and can be overridden
from the ``skills`` section of settings.yaml.
"""

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Advanced framework -> foundational skills it presupposes.
IMPLIED_SKILLS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    # ML / AI
    "tensorflow": ("python", "numpy", "pandas"),
    "pytorch": ("python", "numpy", "pandas"),
    "scikit-learn": ("python", "numpy", "pandas"),
    "keras": ("python", "tensorflow"),
    # Web
    "react": ("javascript", "html", "css"),
    "vue": ("javascript", "html", "css"),
    "angular": ("typescript", "javascript", "html", "css"),
    "django": ("python", "sql"),
    "flask": ("python", "sql"),
    "fastapi": ("python", "sql"),
    "express": ("javascript", "node.js"),
    "spring": ("java", "sql"),
    # Cloud
    "aws": ("python", "javascript", "sql"),
    "azure": ("python", "javascript", "sql"),
    "gcp": ("python", "javascript", "sql"),
    # Databases
    "postgresql": ("sql", "python"),
    "mongodb": ("javascript", "python"),
    "redis": ("python", "javascript"),
    # DevOps
    "docker": ("python", "javascript", "bash"),
    "kubernetes": ("yaml", "bash", "python"),
    "jenkins": ("bash", "python", "javascript"),
})

# Skill -> source-language ecosystems worth restricting the search to.
LANGUAGE_FILTERS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "tensorflow": ("Python",),
    "pytorch": ("Python",),
    "scikit-learn": ("Python",),
    "django": ("Python",),
    "flask": ("Python",),
    "fastapi": ("Python",),
    "react": ("JavaScript", "TypeScript"),
    "vue": ("JavaScript", "TypeScript"),
    "angular": ("TypeScript", "JavaScript"),
    "express": ("JavaScript",),
    "node.js": ("JavaScript",),
    "spring": ("Java",),
    "aws": ("Python", "JavaScript", "Java"),
    "azure": ("Python", "JavaScript", "Java"),
    "gcp": ("Python", "JavaScript", "Java"),
})

DEFAULT_LANGUAGE_FILTERS: tuple[str, ...] = ("JavaScript", "Python", "Java", "TypeScript")

# Keywords searched for (as substrings) in repository text.
SKILL_VOCABULARY: tuple[str, ...] = (
    "python", "javascript", "java", "typescript", "react", "vue", "angular",
    "node.js", "express", "django", "flask", "fastapi", "tensorflow", "pytorch",
    "pandas", "numpy", "scikit-learn", "sql", "postgresql", "mysql", "mongodb",
    "redis", "docker", "kubernetes", "aws", "azure", "gcp", "machine learning",
    "ml", "data science", "deep learning", "neural networks", "mlops", "ci/cd",
    "git", "github", "gitlab", "jenkins", "travis", "circleci", "spring",
    "laravel", "php", "ruby", "go", "rust", "c++", "c#", "swift", "kotlin",
    "flutter", "html", "css",
)


def _lower_keys(table: Mapping[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
    return {k.lower().strip(): tuple(v) for k, v in table.items()}


class SkillTables(BaseModel):
    """Immutable bundle of the lookup tables."""

    model_config = ConfigDict(frozen=True)

    implied: Mapping[str, tuple[str, ...]] = Field(
        default_factory=lambda: dict(IMPLIED_SKILLS), validate_default=True,
    )
    language_filters: Mapping[str, tuple[str, ...]] = Field(
        default_factory=lambda: dict(LANGUAGE_FILTERS), validate_default=True,
    )
    default_language_filters: tuple[str, ...] = DEFAULT_LANGUAGE_FILTERS
    vocabulary: tuple[str, ...] = SKILL_VOCABULARY

    @field_validator("implied", "language_filters")
    @classmethod
    def freeze_table(cls, v: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(_lower_keys(v))

    @field_validator("vocabulary")
    @classmethod
    def lower_vocabulary(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(s.lower() for s in v if s.strip())

    def implied_by(self, skill: str) -> tuple[str, ...]:
        """Foundational skills implied by ``skill`` (empty if unknown)."""
        return self.implied.get(skill.lower().strip(), ())

    def languages_for(self, skill: str) -> tuple[str, ...]:
        """Language filters for ``skill``, falling back to the default set."""
        return self.language_filters.get(skill.lower().strip(), self.default_language_filters)
