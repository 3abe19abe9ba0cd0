"""
Converter catalog.

Aggregates every converter group into one ordered, immutable catalog and
provides lookup, category filtering and fuzzy search over it.
"""

from typing import Iterable, Optional, Sequence

from .fuzzy import fuzzy_filter
from .logging_config import UnitNotFoundError, get_logger
from .providers import ConverterContext
from .units import ALL_CATEGORY_ID, CATEGORIES, Category, ConverterUnit

logger = get_logger("registry")


def _check_unique(units: Iterable[ConverterUnit]) -> None:
    seen: set[str] = set()
    for unit in units:
        if unit.id in seen:
            raise ValueError(f"Duplicate converter id: {unit.id}")
        seen.add(unit.id)


def build_registry(context: Optional[ConverterContext] = None) -> tuple[ConverterUnit, ...]:
    """Build the full catalog in its fixed group order.

    Raises:
        ValueError: If two units share an id
    """
    from .converters import color, data, document, hashes, image, media, number, qr, text, utility, web

    ctx = context or ConverterContext.default()
    units = tuple(
        [
            *text.build(ctx),
            *qr.build(ctx),
            *hashes.build(ctx),
            *data.build(ctx),
            *web.build(ctx),
            *number.build(ctx),
            *color.build(ctx),
            *utility.build(ctx),
            *image.build(ctx),
            *media.build(ctx),
            *document.build(ctx),
        ]
    )
    _check_unique(units)
    logger.debug(f"Built converter catalog with {len(units)} units")
    return units


class Registry:
    """Ordered catalog of converter units."""

    def __init__(
        self,
        units: Optional[Sequence[ConverterUnit]] = None,
        categories: Sequence[Category] = CATEGORIES,
        context: Optional[ConverterContext] = None,
    ):
        self._context = context
        self._categories = tuple(categories)
        self._units: Optional[tuple[ConverterUnit, ...]] = None
        self._by_id: Optional[dict[str, ConverterUnit]] = None
        if units is not None:
            self._set_units(tuple(units))

    def _set_units(self, units: tuple[ConverterUnit, ...]) -> None:
        _check_unique(units)
        self._units = units
        self._by_id = {unit.id: unit for unit in units}

    @property
    def context(self) -> ConverterContext:
        if self._context is None:
            self._context = ConverterContext.default()
        return self._context

    @property
    def units(self) -> tuple[ConverterUnit, ...]:
        if self._units is None:
            self._set_units(build_registry(self.context))
        return self._units

    def list_all(self) -> tuple[ConverterUnit, ...]:
        """Every unit in catalog order."""
        return self.units

    def list_categories(self) -> tuple[Category, ...]:
        """The fixed category list, starting with the synthetic 'all'."""
        return self._categories

    def find_by_id(self, unit_id: str) -> Optional[ConverterUnit]:
        """Exact id lookup. Returns None when no unit has that id."""
        _ = self.units
        return self._by_id.get(unit_id)

    def require(self, unit_id: str) -> ConverterUnit:
        """Exact id lookup that raises for a stale id.

        Raises:
            UnitNotFoundError: If no unit has that id
        """
        unit = self.find_by_id(unit_id)
        if unit is None:
            raise UnitNotFoundError(
                f"unknown converter: {unit_id}",
                suggestion="List converters to find a valid id",
            )
        return unit

    def filter_by_category(self, category_id: str) -> tuple[ConverterUnit, ...]:
        """Units in ``category_id``, or all units for the synthetic 'all' category."""
        if category_id == ALL_CATEGORY_ID:
            return self.units
        return tuple(unit for unit in self.units if unit.category == category_id)

    def search(self, query: str, category_id: str = ALL_CATEGORY_ID) -> list[ConverterUnit]:
        """Fuzzy search by name, id and description within a category."""
        return fuzzy_filter(
            query,
            self.filter_by_category(category_id),
            lambda unit: (unit.name, unit.id, unit.description),
        )

    def __len__(self) -> int:
        return len(self.units)

    def __contains__(self, unit_id: object) -> bool:
        return isinstance(unit_id, str) and self.find_by_id(unit_id) is not None


registry = Registry()
