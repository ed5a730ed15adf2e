from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..models import EntryCreateRequest, EntryListResponse, EntryPayload
from ..services.journal import JournalLog
from ..services.runtime import get_journal_log

router = APIRouter(prefix="/entries", tags=["entries"])


@router.post("", response_model=EntryPayload, status_code=status.HTTP_201_CREATED)
# Append an entry; the chronicle refresh is scheduled by the log's append listener
async def create_entry(
    payload: EntryCreateRequest, log: JournalLog = Depends(get_journal_log)
) -> EntryPayload:
    entry = log.append_entry(payload.content, entry_id=payload.id)
    return EntryPayload.model_validate(entry)


@router.get("", response_model=EntryListResponse)
def list_entries(log: JournalLog = Depends(get_journal_log)) -> EntryListResponse:
    entries = log.list_entries()
    return EntryListResponse(
        entries=[EntryPayload.model_validate(entry) for entry in entries],
        total=len(entries),
    )


__all__ = ["router"]
