from .chronicle import (
    BackfillResponse,
    ChronicleResponse,
    PartDetailResponse,
    PartPayload,
    RecentSummaryResponse,
)
from .entries import EntryCreateRequest, EntryListResponse, EntryPayload
from .meta import HealthResponse, RootResponse
from .summaries import (
    BatchOutcomePayload,
    HealthReportResponse,
    ProcessRequest,
    ProcessResponse,
    RebalancePayload,
    StatsResponse,
    SummaryListResponse,
    SummaryPayload,
)

__all__ = [
    "BackfillResponse",
    "BatchOutcomePayload",
    "ChronicleResponse",
    "EntryCreateRequest",
    "EntryListResponse",
    "EntryPayload",
    "HealthReportResponse",
    "HealthResponse",
    "PartDetailResponse",
    "PartPayload",
    "ProcessRequest",
    "ProcessResponse",
    "RebalancePayload",
    "RecentSummaryResponse",
    "RootResponse",
    "StatsResponse",
    "SummaryListResponse",
    "SummaryPayload",
]
