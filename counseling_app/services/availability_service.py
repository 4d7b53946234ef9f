import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import EmptySchedule, ScheduleValidationError, StorageError
from ..models.availability import ConsultationSlot
from ..repositories.availability_repository import AvailabilityRepository
from .schedule_validator import validate_schedule

logger = logging.getLogger(__name__)


class AvailabilityService:
    def __init__(self, db: Session, allow_empty_replace: Optional[bool] = None):
        self.repository = AvailabilityRepository(db)
        if allow_empty_replace is None:
            allow_empty_replace = settings.ALLOW_EMPTY_SCHEDULE_REPLACE
        self.allow_empty_replace = allow_empty_replace

    def set_availability(
        self,
        psikolog_id: int,
        slots: Sequence,
        expected_version: Optional[int] = None,
    ) -> int:
        """Validate a proposed weekly schedule and replace the stored one with it."""
        if not slots and not self.allow_empty_replace:
            logger.warning(f"Rejected empty schedule replace for psikolog_id={psikolog_id}")
            raise EmptySchedule()

        try:
            parsed = validate_schedule(slots)
        except ScheduleValidationError as exc:
            logger.warning(
                f"Schedule validation failed for psikolog_id={psikolog_id}: {exc.message}"
            )
            raise

        return self._replace(psikolog_id, parsed, expected_version)

    def clear_availability(self, psikolog_id: int, expected_version: Optional[int] = None) -> int:
        """Remove every slot of a psychologist."""
        return self._replace(psikolog_id, [], expected_version)

    def _replace(self, psikolog_id: int, parsed, expected_version: Optional[int]) -> int:
        try:
            return self.repository.replace_all(psikolog_id, parsed, expected_version)
        except StorageError as exc:
            logger.error(
                f"Failed to update availability for psikolog_id={psikolog_id}: {exc.message}",
                exc_info=exc.cause
            )
            raise StorageError("Failed to update availability schedule", cause=exc.cause or exc) from exc

    def get_availability(self, psikolog_id: int) -> List[ConsultationSlot]:
        try:
            slots = self.repository.get_by_owner(psikolog_id)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to get availability for psikolog_id={psikolog_id}: {exc}")
            raise StorageError("Failed to retrieve availability schedule", cause=exc) from exc

        if not slots:
            logger.info(f"No availability found for psikolog_id={psikolog_id}")
        return slots

    def get_availability_by_day(self, psikolog_id: int, day: str) -> List[ConsultationSlot]:
        try:
            return self.repository.get_by_owner_and_day(psikolog_id, day)
        except SQLAlchemyError as exc:
            logger.error(
                f"Failed to get availability for psikolog_id={psikolog_id}, day={day}: {exc}"
            )
            raise StorageError("Failed to retrieve availability schedule", cause=exc) from exc

    def get_version(self, psikolog_id: int) -> int:
        return self.repository.get_version(psikolog_id)
