from .runner import NO_CONTENT_REASON, BatchJobRunner
from .summary import format_report, summarise

__all__ = ["NO_CONTENT_REASON", "BatchJobRunner", "format_report", "summarise"]
