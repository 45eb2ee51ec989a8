from .layout import build_layout, DocumentLayout, Section, Block
from .formatting import format_date_range, format_month_year

__all__ = [
    "build_layout",
    "DocumentLayout",
    "Section",
    "Block",
    "format_date_range",
    "format_month_year",
]
