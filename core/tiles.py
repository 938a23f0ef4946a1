"""Industry tile catalog for the Brass Birmingham engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import Era, IndustryType, ResourceType


@dataclass(frozen=True)
class IndustryTileSpec:
    """Catalog entry for one (industry type, level).

    Attributes:
        industry_type: The industry type.
        level: Tile level (1 is lowest).
        cost: Money paid to build.
        coal_required: Coal consumed when building.
        iron_required: Iron consumed when building.
        beer_required: Beer consumed when selling.
        produces: Resource units placed on the tile when built
            (breweries: canal-era amount; the rail amount comes from RulesConfig).
        victory_points: VP scored at era end once flipped.
        income: Income gained when the tile flips.
        canal: Whether the tile may be built in the canal era.
        rail: Whether the tile may be built in the rail era.
        lightbulb: Tiles with a lightbulb cannot be developed.
        count: Copies of this tile on each player mat.
    """

    industry_type: IndustryType
    level: int
    cost: int
    coal_required: int = 0
    iron_required: int = 0
    beer_required: int = 0
    produces: int = 0
    victory_points: int = 0
    income: int = 0
    canal: bool = True
    rail: bool = True
    lightbulb: bool = False
    count: int = 1

    @property
    def key(self) -> tuple[IndustryType, int]:
        return (self.industry_type, self.level)

    @property
    def produced_resource(self) -> ResourceType | None:
        """The resource this tile holds on the board, if any."""
        if self.industry_type == IndustryType.COAL:
            return ResourceType.COAL
        if self.industry_type == IndustryType.IRON:
            return ResourceType.IRON
        if self.industry_type == IndustryType.BREWERY:
            return ResourceType.BEER
        return None

    def buildable_in(self, era: Era) -> bool:
        """Check era eligibility."""
        return self.canal if era == Era.CANAL else self.rail


@dataclass
class TileCatalog:
    """Immutable lookup of tile specs by (type, level)."""

    specs: dict[tuple[IndustryType, int], IndustryTileSpec] = field(default_factory=dict)

    def __deepcopy__(self, memo: dict) -> TileCatalog:
        # Shared between state clones
        return self

    def get(self, industry_type: IndustryType, level: int) -> IndustryTileSpec:
        """Get the spec for a tile.

        Raises:
            KeyError: If the tile is not in the catalog.
        """
        key = (industry_type, level)
        if key not in self.specs:
            raise KeyError(f"No tile {industry_type.value} level {level} in catalog")
        return self.specs[key]

    def levels(self, industry_type: IndustryType) -> list[int]:
        """Return the levels defined for an industry type, ascending."""
        return sorted(level for (t, level) in self.specs if t == industry_type)

    def initial_mat(self) -> dict[IndustryType, list[int]]:
        """Build a fresh player mat: type -> tile levels, lowest first."""
        mat: dict[IndustryType, list[int]] = {}
        for industry_type in IndustryType:
            tiles: list[int] = []
            for level in self.levels(industry_type):
                tiles.extend([level] * self.specs[(industry_type, level)].count)
            mat[industry_type] = tiles
        return mat
