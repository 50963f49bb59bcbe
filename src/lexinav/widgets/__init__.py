"""lexinav widgets."""

from .breadcrumb_bar import BreadcrumbBar
from .suggestion_list import SuggestionList, format_suggestion

__all__ = [
    "BreadcrumbBar",
    "SuggestionList",
    "format_suggestion",
]
