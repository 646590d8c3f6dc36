"""feedtext: readable article text from syndicated feed items."""

from .crawler import ArticleTextExtractor, ExtractionError, FetchError
from .models import ArticleSource, ExtractedArticle, ExtractionMethod, SectionLabel

__version__ = "0.1.0"

__all__ = [
    "ArticleSource",
    "ArticleTextExtractor",
    "ExtractedArticle",
    "ExtractionError",
    "ExtractionMethod",
    "FetchError",
    "SectionLabel",
]
