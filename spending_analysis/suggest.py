"""Category Suggester: keyword overlap against categorized history."""

from __future__ import annotations

from datetime import date

from .logging_setup import get_logger
from .models import CategoryRecord, DateRange, TransactionRecord
from .sources import CategoryDirectory, TransactionSource, fetch_categories, fetch_transactions

_MIN_TOKEN_LENGTH: int = 3

# Entire history; the source contract has no separate "get all".
_ALL_TIME = DateRange(date.min, date.max)

_logger = get_logger("spending_analysis.suggest")


def tokenize(text: str) -> list[str]:
    """Lower-case whitespace split (duplicates kept)."""

    return text.lower().split()


def overlap_score(candidate_tokens: list[str], history_tokens: list[str]) -> int:
    """Count candidate tokens (len ≥ 3) that contain, or are contained in, a history token."""

    return sum(
        1
        for word in candidate_tokens
        if len(word) >= _MIN_TOKEN_LENGTH
        and any(word in other or other in word for other in history_tokens)
    )


def _history_order(tx: TransactionRecord) -> tuple[date, bool, int | str]:
    # Integer ids compare numerically and sort ahead of string ids on the same date.
    return tx.date, isinstance(tx.id, str), tx.id


class CategorySuggester:
    def __init__(self, transactions: TransactionSource, categories: CategoryDirectory) -> None:
        self._transactions = transactions
        self._categories = categories

    def suggest_category(self, description: str, amount: float) -> CategoryRecord | None:
        """Suggest a category for a new transaction description.

        Every categorized historical transaction adds its overlap score to its
        category; the highest total wins. Ties go to the category whose first
        scoring transaction is oldest.
        Returns ``None`` for an empty description or when nothing overlaps.

        ``amount`` is accepted for interface stability and does not affect
        scoring.
        """

        candidate = tokenize(description or "")
        if not candidate:
            return None

        scores: dict[int, int] = {}
        history = sorted(fetch_transactions(self._transactions, _ALL_TIME), key=_history_order)
        for tx in history:
            if tx.category_id is None or not tx.description:
                continue
            score = overlap_score(candidate, tokenize(tx.description))
            if score:
                scores[tx.category_id] = scores.get(tx.category_id, 0) + score

        best_id: int | None = None
        best_score = 0
        for category_id, score in scores.items():
            if score > best_score:
                best_id, best_score = category_id, score

        if best_id is None:
            return None
        match = next((c for c in fetch_categories(self._categories) if c.id == best_id), None)
        _logger.debug(
            "suggest_category:done category_id=%s score=%d resolved=%s",
            best_id,
            best_score,
            match is not None,
        )
        return match


__all__ = ["CategorySuggester", "overlap_score", "tokenize"]
