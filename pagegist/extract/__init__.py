__all__ = ["ExtractedContent", "extract", "text_to_document", "fetch_html", "FetchError"]

from .extractor import ExtractedContent, extract, text_to_document
from .fetch import FetchError, fetch_html
