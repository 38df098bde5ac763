"""
Data models for Dwarven name translation.
"""

from pydantic import BaseModel, ConfigDict, Field


class SearchAliases(BaseModel):
    """Search aliases and translated display name computed for one entity name.

    The value is a snapshot: it is built once when the owning entity's name is
    established and never recomputed afterwards.

    Attributes:
        aliases: Search-normalized variants of the name (original and translated)
        dwarven_display: Translated name with dictionary casing and accents,
                         or None when no token of the name could be translated
    """
    model_config = ConfigDict(frozen=True)

    aliases: frozenset[str] = Field(default_factory=frozenset, description="Normalized search aliases")
    dwarven_display: str | None = Field(default=None, description="Translated display name")
