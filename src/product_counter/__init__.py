"""Product Counter - estimate how many products an ecommerce site sells, powered by AI."""

__version__ = "0.1.0"

from product_counter.combined import analyze_combined
from product_counter.counter import ProductCounter, RunOutcome
from product_counter.crawler import crawl
from product_counter.models import AnalysisRecord, AnalysisResult, PageResult

__all__ = [
    "AnalysisRecord",
    "AnalysisResult",
    "PageResult",
    "ProductCounter",
    "RunOutcome",
    "analyze_combined",
    "crawl",
]
