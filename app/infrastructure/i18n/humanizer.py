"""Duration humanization.

A Humanizer splits a duration in milliseconds into calendar units and
renders each piece through a per-language unit function, e.g. 90000 ms
becomes "1 minute, 30 seconds" with English unit strings.
"""

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from infrastructure.i18n.models import DurationUnit

# Renders the magnitude of one unit ("1 minute", "30 seconds")
UnitFormatter = Callable[[float], str]

DurationLanguage = Mapping[DurationUnit, UnitFormatter]

DEFAULT_UNITS: Tuple[DurationUnit, ...] = (
    DurationUnit.YEARS,
    DurationUnit.MONTHS,
    DurationUnit.WEEKS,
    DurationUnit.DAYS,
    DurationUnit.HOURS,
    DurationUnit.MINUTES,
    DurationUnit.SECONDS,
)


@dataclass(frozen=True)
class HumanizerOptions:
    """Options of a Humanizer.

    Attributes:
        units: Units the duration is split into, largest first.
        largest: Maximum number of pieces rendered (None for all).
        round: Round the last rendered piece to an integer.
        max_decimal_points: Decimals kept on the last piece when not rounding.
        delimiter: Separator between pieces.
        conjunction: Word placed before the last piece (e.g. " and ").
        serial_comma: Keep the delimiter before the conjunction when there
            are more than two pieces.
    """

    units: Tuple[DurationUnit, ...] = DEFAULT_UNITS
    largest: Optional[int] = None
    round: bool = False
    max_decimal_points: int = 2
    delimiter: str = ", "
    conjunction: str = ""
    serial_comma: bool = True

    def merge(self, overrides: Optional[Mapping[str, Any]]) -> "HumanizerOptions":
        """Copy of these options with overrides applied.

        Raises:
            ValueError: If an override names an unknown option.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown humanizer options: {sorted(unknown)}")
        changes = dict(overrides)
        if "units" in changes:
            changes["units"] = tuple(
                DurationUnit.from_string(unit) for unit in changes["units"]
            )
        return replace(self, **changes)


class Humanizer:
    """Turns durations into phrases using one language's unit functions.

    Attributes:
        language: Unit formatter per DurationUnit.
        options: Default options, overridable per call.
    """

    def __init__(
        self,
        language: DurationLanguage,
        options: Optional[Union[HumanizerOptions, Mapping[str, Any]]] = None,
    ):
        self.language: Dict[DurationUnit, UnitFormatter] = dict(language)
        if isinstance(options, HumanizerOptions):
            self.options = options
        else:
            self.options = HumanizerOptions().merge(options)

    @staticmethod
    def convert_duration(amount: float, unit: Union[str, DurationUnit]) -> float:
        """Convert an amount of some unit to milliseconds."""
        return amount * DurationUnit.from_string(unit).milliseconds

    def decompose(
        self, milliseconds: float, overrides: Optional[Mapping[str, Any]] = None
    ) -> List[Tuple[DurationUnit, float]]:
        """Split a duration into (unit, amount) pieces, largest unit first.

        Zero pieces are dropped; a zero duration yields the smallest unit
        with amount 0.
        """
        options = self.options.merge(overrides)
        units = sorted(options.units, key=lambda u: u.milliseconds, reverse=True)
        if not units:
            raise ValueError("Humanizer needs at least one unit")

        remaining = abs(float(milliseconds))
        pieces: List[Tuple[DurationUnit, float]] = []

        for index, unit in enumerate(units):
            if index == len(units) - 1:
                amount = remaining / unit.milliseconds
            else:
                amount = float(math.floor(remaining / unit.milliseconds))
                remaining -= amount * unit.milliseconds
            if amount:
                pieces.append((unit, amount))

        if options.largest is not None and len(pieces) > options.largest > 0:
            # Fold the dropped pieces into the last kept one
            dropped_ms = sum(a * u.milliseconds for u, a in pieces[options.largest :])
            pieces = pieces[: options.largest]
            last_unit, last_amount = pieces[-1]
            pieces[-1] = (last_unit, last_amount + dropped_ms / last_unit.milliseconds)

        if pieces:
            last_unit, last_amount = pieces[-1]
            last_amount = (
                float(round(last_amount))
                if options.round
                else _truncate(last_amount, options.max_decimal_points)
            )
            pieces[-1] = (last_unit, last_amount)
            pieces = [(u, a) for u, a in pieces if a]

        if not pieces:
            pieces.append((units[-1], 0.0))
        return pieces

    def humanize(
        self, milliseconds: float, overrides: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Render a duration given in milliseconds.

        Args:
            milliseconds: Duration; the sign is ignored.
            overrides: Option overrides for this call.

        Returns:
            Humanized duration.
        """
        options = self.options.merge(overrides)
        rendered = [
            self._render_piece(unit, amount)
            for unit, amount in self.decompose(milliseconds, overrides)
        ]
        return _join(rendered, options)

    def _render_piece(self, unit: DurationUnit, amount: float) -> str:
        formatter = self.language.get(unit)
        if formatter is None:
            raise ValueError(f"No formatter for duration unit {unit.value!r}")
        value: Union[int, float] = int(amount) if amount.is_integer() else amount
        return formatter(value)


def _truncate(amount: float, decimals: int) -> float:
    factor = 10**decimals
    return math.floor(amount * factor + 1e-9) / factor


def _join(pieces: Sequence[str], options: HumanizerOptions) -> str:
    if len(pieces) == 1 or not options.conjunction:
        return options.delimiter.join(pieces)
    if len(pieces) == 2:
        return options.conjunction.join(pieces)
    head = options.delimiter.join(pieces[:-1])
    separator = options.delimiter.rstrip() if options.serial_comma else ""
    return f"{head}{separator}{options.conjunction}{pieces[-1]}"
