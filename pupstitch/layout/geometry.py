"""
Fixed page geometry and brand styling for the paginated pattern document.

All lengths are millimeters with the origin at the top-left corner of the
page and y growing downward.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageGeometry:
    """
    Page size, margins and the header / footer bands.

    Content flows between ``content_top`` (top margin plus header band) and
    ``content_bottom`` (page height minus bottom margin). The footer baseline
    sits ``footer_offset`` above the bottom edge.
    """

    width: float = 210.0
    height: float = 297.0
    margin_left: float = 25.0
    margin_right: float = 25.0
    margin_top: float = 18.0
    margin_bottom: float = 20.0
    header_height: float = 14.0
    footer_offset: float = 10.0

    def __post_init__(self) -> None:
        if self.content_width <= 0:
            raise ValueError("margins leave no content width")
        if self.content_top >= self.content_bottom:
            raise ValueError(
                f"content_top ({self.content_top}) must be above "
                f"content_bottom ({self.content_bottom})"
            )

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_top(self) -> float:
        return self.margin_top + self.header_height

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom

    @property
    def content_height(self) -> float:
        return self.content_bottom - self.content_top

    @property
    def right_edge(self) -> float:
        return self.width - self.margin_right

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def footer_y(self) -> float:
        return self.height - self.footer_offset


A4 = PageGeometry()

BRAND = "PupStitch"
BRAND_SITE = "PupStitch.com"
BRAND_TAGLINE = "Custom Amigurumi Patterns"

AMBER = "#D97706"
AMBER_DARK = "#92400E"
AMBER_DEEP = "#78350F"
AMBER_LIGHT_BG = "#FFFBEB"
TEXT_DARK = "#1C1917"
TEXT_MED = "#44403C"
TEXT_LIGHT = "#78716C"
TEXT_FAINT = "#A8A29E"
BORDER_LIGHT = "#D6D3D1"
WHITE = "#FFFFFF"
