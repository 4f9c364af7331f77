"""Public interface for the ``spending_analysis`` package.

This module exposes the service facade, the individual analytics components,
collaborator contracts and the public models/types as the stable import
surface. There is no runtime logic here, only symbol re-exports.
"""

from .compare import PeriodComparator
from .errors import AnalyticsError, DataUnavailableError, InvalidRangeError
from .forecast import Forecaster
from .models import (
    EXPENSE_TYPES,
    UNCATEGORIZED,
    AnnualReport,
    CategoryDelta,
    CategoryPrediction,
    CategoryRecord,
    CategoryShare,
    DateRange,
    Direction,
    ExecutiveSummary,
    LabeledPeriod,
    MetricComparison,
    MonthBreakdown,
    MonthlyCashFlow,
    MonthlyReport,
    Overview,
    PatternTrend,
    PeriodComparison,
    Periodicity,
    SpendingPattern,
    SpendingPrediction,
    TransactionRecord,
    TransactionType,
    TrendPoint,
    TypePrediction,
)
from .patterns import PatternAnalyzer
from .reports import ReportBuilder
from .service import SpendingAnalysisService
from .sources import (
    CategoryDirectory,
    InMemoryCategoryDirectory,
    InMemoryTransactionSource,
    TransactionSource,
)
from .suggest import CategorySuggester
from .trends import TrendEngine

__all__ = [
    # Service and components
    "SpendingAnalysisService",
    "PatternAnalyzer",
    "TrendEngine",
    "Forecaster",
    "PeriodComparator",
    "ReportBuilder",
    "CategorySuggester",
    # Collaborators
    "TransactionSource",
    "CategoryDirectory",
    "InMemoryTransactionSource",
    "InMemoryCategoryDirectory",
    # Errors
    "AnalyticsError",
    "DataUnavailableError",
    "InvalidRangeError",
    # Models / types
    "TransactionRecord",
    "CategoryRecord",
    "TransactionType",
    "EXPENSE_TYPES",
    "UNCATEGORIZED",
    "Periodicity",
    "PatternTrend",
    "Direction",
    "DateRange",
    "LabeledPeriod",
    "SpendingPattern",
    "TrendPoint",
    "CategoryPrediction",
    "TypePrediction",
    "SpendingPrediction",
    "MetricComparison",
    "CategoryDelta",
    "PeriodComparison",
    "CategoryShare",
    "MonthBreakdown",
    "MonthlyCashFlow",
    "Overview",
    "MonthlyReport",
    "AnnualReport",
    "ExecutiveSummary",
]
