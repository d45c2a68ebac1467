"""Widgets for rcf."""

from .query_line import QueryLine
from .result_list import ResultList, flatten, format_candidate

__all__ = ["QueryLine", "ResultList", "flatten", "format_candidate"]
