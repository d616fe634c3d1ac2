# src/site_analyzer/analyzers/base.py
import logging
from typing import Callable, Iterable, Iterator, Tuple, TypeVar

from ..dom.models import ParsedDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")


def per_document(
        documents: Iterable[ParsedDocument],
        func: Callable[[ParsedDocument], T],
        analyzer: str
) -> Iterator[Tuple[ParsedDocument, T]]:
    """
    Applies `func` to every document, yielding (document, result).
    A failure on one document is logged and that document is skipped.
    """
    for doc in documents:
        try:
            result = func(doc)
        except Exception as e:
            logger.error(f"[{analyzer}] Failed on {doc.label}: {e}", exc_info=True)
            continue
        yield doc, result


def excerpt(text: str, limit: int = 50) -> str:
    return (text or "").strip()[:limit]


def percentage(part: int, total: int) -> int:
    return round(part / (total or 1) * 100)
