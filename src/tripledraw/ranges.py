"""Opening range tables for 2-7 triple draw.

Each position declares five ranges (pat, draw 1 .. draw 4) as lists of
notation strings (see ``notation``). A position may inherit from the
seat before it; its own entries are appended after the parent's.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self

from .notation import expand
from .position import Position


class DrawCategory(Enum):
    """Range categories. The value is the persisted field name."""

    PAT = "patHands"
    DRAW1 = "draw1Hands"
    DRAW2 = "draw2Hands"
    DRAW3 = "draw3Hands"
    DRAW4 = "draw4Hands"

    @property
    def label(self) -> str:
        """Display name, e.g. 'Draw 1'."""
        if self is DrawCategory.PAT:
            return "Pat"
        return f"Draw {self.name[-1]}"

    @property
    def short(self) -> str:
        """Compact name used in feedback, e.g. 'Draw1'."""
        return self.label.replace(" ", "")


@dataclass(frozen=True)
class HandRange:
    """Notation strings that qualify (includes) and exceptions (excludes)."""

    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()

    @classmethod
    def of(cls, includes: list[str] | None = None, excludes: list[str] | None = None) -> Self:
        return cls(tuple(includes or ()), tuple(excludes or ()))

    @classmethod
    def from_data(cls, data: Any) -> Self:
        """Build a range from persisted data.

        Accepts ``{"includes": [...], "excludes": [...]}``, an older bare
        list of include strings, or nothing at all.
        """
        if isinstance(data, dict):
            includes = data.get("includes") or []
            excludes = data.get("excludes") or []
        elif isinstance(data, list):
            includes, excludes = data, []
        elif data is None:
            includes, excludes = [], []
        else:
            raise ValueError(f"Invalid hand range: {data!r}")

        for item in [*includes, *excludes]:
            if not isinstance(item, str):
                raise ValueError(f"Range entries must be strings, got {item!r}")
        return cls(tuple(includes), tuple(excludes))

    def to_data(self) -> dict[str, list[str]]:
        return {"includes": list(self.includes), "excludes": list(self.excludes)}

    def __bool__(self) -> bool:
        return bool(self.includes or self.excludes)


@dataclass(frozen=True)
class PositionStrategy:
    """One position's declared ranges plus an optional parent position."""

    position: Position
    ranges: dict[DrawCategory, HandRange] = field(default_factory=dict)
    inherits_from: Position | None = None

    def range_for(self, category: DrawCategory) -> HandRange:
        return self.ranges.get(category, HandRange())

    @classmethod
    def from_data(cls, data: Any) -> Self:
        """Build a strategy from one persisted record.

        Raises:
            ValueError: on a malformed record or unknown position name
        """
        if not isinstance(data, dict):
            raise ValueError(f"Strategy record must be an object, got {type(data).__name__}")
        if "position" not in data:
            raise ValueError("Strategy record is missing 'position'")

        position = Position.from_str(str(data["position"]))
        parent = data.get("inheritsFrom")
        return cls(
            position=position,
            ranges={cat: HandRange.from_data(data.get(cat.value)) for cat in DrawCategory},
            inherits_from=Position.from_str(str(parent)) if parent else None,
        )

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {"position": self.position.short}
        for cat in DrawCategory:
            data[cat.value] = self.range_for(cat).to_data()
        if self.inherits_from is not None:
            data["inheritsFrom"] = self.inherits_from.short
        return data


def _strategy(
    position: Position,
    inherits_from: Position | None = None,
    **ranges: tuple[list[str], list[str]],
) -> PositionStrategy:
    names = {"pat": DrawCategory.PAT, "draw1": DrawCategory.DRAW1, "draw2": DrawCategory.DRAW2,
             "draw3": DrawCategory.DRAW3, "draw4": DrawCategory.DRAW4}
    return PositionStrategy(
        position=position,
        ranges={names[k]: HandRange.of(inc, exc) for k, (inc, exc) in ranges.items()},
        inherits_from=inherits_from,
    )


# ── Six-handed table: each seat widens the one before it ────

MULTI_POSITION_STRATEGIES: tuple[PositionStrategy, ...] = (
    _strategy(
        Position.UTG,
        pat=(["8s+"], []),
        draw1=(["8654+"], ["7654"]),
        draw2=(["542+", "752+", "842+", "6322+", "7622+"], []),
        draw3=(["3222", "3322", "3332", "4222", "7222"], []),
    ),
    _strategy(
        Position.HJ,
        inherits_from=Position.UTG,
        draw1=(["8753", "8754"], []),
        draw2=(["762", "852", "753", "6322", "8722"], []),
        draw3=(["3222", "3322", "4422", "5222", "7722"], []),
    ),
    _strategy(
        Position.CO,
        inherits_from=Position.HJ,
        pat=(["96543", "97654"], []),
        draw2=(["632", "754", "854", "872"], []),
        draw3=(["32", "42", "72", "522"], []),
    ),
    _strategy(
        Position.BTN,
        inherits_from=Position.CO,
        pat=(["T9875", "T8765", "T7654", "T6543"], []),
        draw1=(["all"], []),
        draw2=(["all"], ["654", "765", "876"]),
        draw3=(["52", "622", "822"], []),
        draw4=(["22"], []),
    ),
    # Blind play is limp-based; these notes are kept for display and
    # never match a dealt hand.
    _strategy(
        Position.SB,
        inherits_from=Position.BTN,
        draw2=(["limp/raise strategy"], []),
        draw3=(["limp/raise strategy"], []),
        draw4=(["limp 2", "33-55"], []),
    ),
    _strategy(
        Position.BB,
        inherits_from=Position.SB,
        draw2=(["vs SB limp: any d2"], []),
        draw3=(["vs SB limp: 63+"], []),
    ),
)

# ── UTG-only drill table with blocker carve-outs ────────────

SINGLE_POSITION_STRATEGIES: tuple[PositionStrategy, ...] = (
    _strategy(
        Position.UTG,
        pat=(["8s+"], []),
        draw1=(["8654+"], ["7654"]),
        draw2=(["542+", "752+", "842+", "6322+", "7622+"], []),
        draw3=(["3322", "3222", "4222", "7222"], []),
    ),
)


def format_range(hand_range: HandRange, breakdown: bool = False) -> str:
    """Render a range like '8s+, 8654+ | except: 7654'.

    With ``breakdown`` each benchmark is followed by the first few hands
    it covers, e.g. '542+(432, 542)'.
    """
    parts = []

    if hand_range.includes:
        items = []
        for item in hand_range.includes:
            if breakdown and item.endswith("+"):
                examples = expand(item)
                if len(examples) > 1:
                    more = "..." if len(examples) > 8 else ""
                    item = f"{item}({', '.join(examples[:8])}{more})"
            items.append(item)
        parts.append(", ".join(items))

    if hand_range.excludes:
        parts.append(f"except: {', '.join(hand_range.excludes)}")

    return " | ".join(parts) or "None"
