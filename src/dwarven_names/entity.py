"""
Named world entities carrying their search aliases.
"""

from pydantic import BaseModel, ConfigDict, Field

from .normalization import normalize_for_search
from .translation import TranslationDictionary, build_aliases


class NamedEntity(BaseModel):
    """A world entity name together with its search aliases.

    Aliases and the Dwarven display name are computed once, when the entity
    is created from its name, and stay fixed for the lifetime of the entity.

    Attributes:
        id: Entity identifier in the world data
        name: Name as it appears in the world data
        type: Optional entity type (e.g., "site", "artifact", "beast")
        search_aliases: Normalized aliases of the name
        dwarven_display_name: Translated name, if any word translated
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Entity identifier")
    name: str = Field(..., description="Original entity name")
    type: str | None = Field(default=None, description="Entity type")
    search_aliases: frozenset[str] = Field(default_factory=frozenset, description="Normalized search aliases")
    dwarven_display_name: str | None = Field(default=None, description="Dwarven translation for display")

    @classmethod
    def from_name(
        cls,
        id: int,
        name: str,
        dictionary: TranslationDictionary | None,
        type: str | None = None,
    ) -> "NamedEntity":
        result = build_aliases(name, dictionary)
        return cls(
            id=id,
            name=name,
            type=type,
            search_aliases=result.aliases,
            dwarven_display_name=result.dwarven_display,
        )

    @property
    def dwarven_alias(self) -> str | None:
        """Dwarven name for display.

        Falls back to the first alias (alphabetically) that differs from the
        normalized English name when no display name was recorded.
        """
        if self.dwarven_display_name is not None:
            return self.dwarven_display_name

        english = normalize_for_search(self.name)
        for alias in sorted(self.search_aliases):
            if alias != english:
                return alias
        return None

    def matches(self, query: str | None) -> bool:
        """Check whether a search query matches any alias of this entity.

        The query is normalized the same way as the aliases, so
        "ngathsesh" matches "Ngáthsesh" and "OGGON" matches "The ôggon".
        """
        normalized = normalize_for_search(query)
        if not normalized:
            return False
        return any(normalized in alias for alias in self.search_aliases)
