"""
Draft schedule for one course while it is being added or edited.

The store keeps the ordered list of blocks and the index of the block the
time picker currently targets. It never persists itself: the caller either
discards it or hands to_payload() to the persistence layer.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Union

from classplan.model import (
    FIELDS,
    MAX_BLOCKS,
    ScheduleBlock,
    ValidationError,
    default_block,
    schedule_payload,
    to_blocks,
    validate_field,
)

logger = logging.getLogger(__name__)


class ScheduleBlockStore:
    def __init__(self, blocks: Optional[Iterable[ScheduleBlock]] = None, max_blocks: int = MAX_BLOCKS) -> None:
        self.max_blocks = max_blocks
        self._blocks: list[ScheduleBlock] = list(blocks) if blocks else [default_block()]
        self._active_index = 0

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"ScheduleBlockStore(blocks={self._blocks!r}, active_index={self._active_index})"

    @property
    def blocks(self) -> tuple[ScheduleBlock, ...]:
        return tuple(self._blocks)

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def active_block(self) -> ScheduleBlock:
        return self._blocks[self._active_index]

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]] = None) -> "ScheduleBlockStore":
        store = cls()
        store.load_from(record)
        return store

    def _check_index(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not (0 <= index < len(self._blocks)):
            raise ValidationError(f"Block index out of range: {index!r}")
        return index

    def load_from(self, record: Optional[Union[Mapping[str, Any], Iterable[ScheduleBlock]]] = None) -> None:
        """
        Seed the draft from committed data.

        Accepts a course record (its "schedules" array, else its legacy flat
        day/hour/duration/room fields) or a sequence of blocks. Falls back to
        the default block when nothing is usable. Raises ValidationError if
        the record holds malformed blocks; the store is then unchanged.
        """
        if record is None:
            blocks: list[ScheduleBlock] = []
        elif isinstance(record, Mapping):
            blocks = to_blocks(record)
        else:
            blocks = list(record)

        self._blocks = blocks or [default_block()]
        self._active_index = 0
        logger.debug("Draft loaded with %d block(s)", len(self._blocks))

    def add_block(self) -> bool:
        """
        Append a default block and make it active. No-op at the block limit.
        """
        if len(self._blocks) >= self.max_blocks:
            logger.debug("add_block ignored: already %d blocks", len(self._blocks))
            return False
        self._blocks.append(default_block())
        self._active_index = len(self._blocks) - 1
        return True

    def remove_block(self, index: int) -> bool:
        """
        Remove one block. A course keeps at least one block, so removing the
        last remaining one is a no-op.
        """
        if len(self._blocks) <= 1:
            logger.debug("remove_block ignored: only one block left")
            return False
        self._check_index(index)
        del self._blocks[index]
        self._active_index = min(self._active_index, len(self._blocks) - 1)
        return True

    def update_field(self, index: int, field: str, value: Any) -> ScheduleBlock:
        """
        Replace a single field of the block at index and return the new block.

        Raises ValidationError (and changes nothing) on an unknown field,
        an out-of-range index or a value outside the field's domain.
        """
        self._check_index(index)
        if field not in FIELDS:
            raise ValidationError(f"Unknown field: {field!r}")
        try:
            normalized = validate_field(field, value, editable=True)
        except ValidationError:
            logger.debug("Rejected %s=%r for block %d", field, value, index + 1)
            raise
        block = replace(self._blocks[index], **{field: normalized})
        self._blocks[index] = block
        return block

    def set_active_index(self, index: int) -> None:
        self._active_index = self._check_index(index)

    def pick_time(self, start_hour: Any, end_hour: Any) -> ScheduleBlock:
        """
        Apply a start/end pair from the time picker to the active block.
        """
        start = validate_field("start_hour", start_hour)
        try:
            end = int(end_hour)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid end hour: {end_hour!r}") from None
        if not (start < end <= 24):
            raise ValidationError(f"End hour {end} must be after start hour {start}")
        block = replace(self.active_block, start_hour=start, duration_hours=end - start)
        self._blocks[self._active_index] = block
        return block

    def to_payload(self, status: str):
        return schedule_payload(self._blocks, status)
