from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Palette:
    """価格倍率つきで販売する色の組み合わせ。"""

    name: str
    colors: tuple[str, ...]
    multiplier: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "colors": list(self.colors), "multiplier": self.multiplier}


# タイルサイズごとの基本価格
SIZE_PRICES: dict[str, int] = {
    "30x30": 70,
    "60x60": 120,
    "60x120": 220,
    "80x80": 180,
}

PALETTES: tuple[Palette, ...] = (
    Palette("Mono Series", ("#fff", "#d9d9d9", "#bfbfbf"), 1.0),
    Palette("Luxury Marble", ("#fff", "#f2f2f2", "#d4af37", "#444"), 1.25),
    Palette("Terracotta", ("#c4623a", "#e8d5b0", "#8b7355"), 1.1),
    Palette("Nordic Stone", ("#c4bdb5", "#8c7f74", "#2c2825"), 1.0),
)


def factory_config_payload() -> dict[str, Any]:
    return {
        "sizes": dict(SIZE_PRICES),
        "palettes": [palette.to_dict() for palette in PALETTES],
    }
