from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

# Display projections keep only the first few moves of an entry
MOVE_LIMIT = 10

_LOCATOR_ID = re.compile(r"/pokemon/(\d+)/")


def id_from_locator(url: str) -> int | None:
    """Parse the numeric id out of a ``.../pokemon/<id>/`` locator."""
    match = _LOCATOR_ID.search(url)
    return int(match.group(1)) if match else None


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class NamedResource(_Frozen):
    name: str
    url: str | None = None


class SpriteSet(_Frozen):
    front_default: str | None = None


class Sprites(_Frozen):
    front_default: str | None = None
    other: dict[str, SpriteSet] = Field(default_factory=dict)


class TypeSlot(_Frozen):
    type: NamedResource


class AbilitySlot(_Frozen):
    ability: NamedResource


class StatSlot(_Frozen):
    stat: NamedResource
    base_stat: int


class MoveSlot(_Frozen):
    move: NamedResource


class IndexReference(_Frozen):
    """One (name, locator) pair from the full catalog index."""

    name: str
    url: str


class CatalogEntry(_Frozen):
    """Full detail record for one entity, as returned by the catalog.

    Fields the catalog sends that are not declared here are ignored.
    """

    id: int
    name: str
    height: int = 0
    weight: int = 0
    sprites: Sprites = Sprites()
    types: tuple[TypeSlot, ...] = ()
    abilities: tuple[AbilitySlot, ...] = ()
    stats: tuple[StatSlot, ...] = ()
    moves: tuple[MoveSlot, ...] = ()

    @property
    def type_names(self) -> tuple[str, ...]:
        return tuple(slot.type.name for slot in self.types)

    @property
    def image(self) -> str | None:
        """Official artwork when available, else the default front sprite."""
        artwork = self.sprites.other.get("official-artwork")
        if artwork is not None and artwork.front_default:
            return artwork.front_default
        return self.sprites.front_default


class CatalogSummary(_Frozen):
    """Cheap projection of an entry used for list and search rendering."""

    id: int
    name: str
    url: str
    sprite: str | None = None
    types: tuple[str, ...] = ()

    @classmethod
    def from_entry(cls, entry: CatalogEntry, url: str) -> CatalogSummary:
        return cls(
            id=entry.id,
            name=entry.name,
            url=url,
            sprite=entry.sprites.front_default,
            types=entry.type_names,
        )

    @classmethod
    def placeholder(cls, ref: IndexReference) -> CatalogSummary:
        """Minimal summary for a reference whose details could not be fetched."""
        return cls(id=id_from_locator(ref.url) or 0, name=ref.name, url=ref.url)


class FormattedStat(_Frozen):
    name: str
    value: int


class FormattedEntry(_Frozen):
    """Flattened view of an entry, ready for a detail page."""

    id: int
    name: str
    image: str | None
    types: tuple[str, ...]
    height: int
    weight: int
    abilities: tuple[str, ...]
    stats: tuple[FormattedStat, ...]
    moves: tuple[str, ...]  # First MOVE_LIMIT moves only


def format_entry(entry: CatalogEntry) -> FormattedEntry:
    return FormattedEntry(
        id=entry.id,
        name=entry.name,
        image=entry.image,
        types=entry.type_names,
        height=entry.height,
        weight=entry.weight,
        abilities=tuple(slot.ability.name for slot in entry.abilities),
        stats=tuple(FormattedStat(name=s.stat.name, value=s.base_stat) for s in entry.stats),
        moves=tuple(slot.move.name for slot in entry.moves[:MOVE_LIMIT]),
    )
