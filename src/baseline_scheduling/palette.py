"""Display colours for work packages."""

from __future__ import annotations

PACKAGE_COLORS = (
    "#dc2626", "#1d4ed8", "#059669", "#7c2d12", "#6366f1", "#ea580c",
    "#0891b2", "#7c3aed", "#ca8a04", "#166534", "#ec4899", "#0f172a",
    "#b91c1c", "#1e40af", "#047857", "#92400e", "#4338ca", "#c2410c",
    "#0e7490", "#6d28d9", "#a16207", "#15803d", "#be185d",
)

# Adjacent indices fall in different hue groups
_SEQUENCE = (
    0, 8, 4, 12, 2, 10, 6, 14, 1, 9, 5, 13, 3, 11, 7, 15,
    16, 17, 18, 19, 20, 21, 22,
)


def package_color(index: int) -> str:
    """Colour for the package at a 0-based declaration index."""
    return PACKAGE_COLORS[_SEQUENCE[index % len(_SEQUENCE)]]
