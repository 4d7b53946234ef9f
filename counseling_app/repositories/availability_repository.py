"""Availability repository - weekly schedule persistence for psychologists"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy import case, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import InvalidDay, ScheduleConflictError, StorageError
from ..models.availability import ConsultationSlot
from ..models.user import User
from ..services.schedule_validator import WEEKDAY_ORDER, ParsedSlot, is_valid_day

logger = logging.getLogger(__name__)

# Sort key for canonical weekday order (Senin first), not alphabetical
_day_order = case(WEEKDAY_ORDER, value=ConsultationSlot.day, else_=len(WEEKDAY_ORDER))


class AvailabilityRepository:
    """Repository for a psychologist's weekly schedule.

    The schedule is treated as one aggregate: it is only ever replaced as a
    whole by ``replace_all``.
    """

    def __init__(self, db: Session):
        self.db = db

    def replace_all(
        self,
        psikolog_id: int,
        slots: Sequence[ParsedSlot],
        expected_version: Optional[int] = None,
    ) -> int:
        """Delete every slot of a psychologist and insert ``slots`` in one transaction.

        Returns the new schedule version. On any failure the transaction is
        rolled back and the previous schedule is left untouched.
        """
        try:
            self._bump_version(psikolog_id, expected_version)

            self.db.query(ConsultationSlot).filter(
                ConsultationSlot.psikolog_id == psikolog_id
            ).delete(synchronize_session=False)

            if slots:
                self.db.execute(
                    insert(ConsultationSlot),
                    [
                        {
                            "psikolog_id": psikolog_id,
                            "day": slot.day,
                            "start_time": slot.start_time,
                            "end_time": slot.end_time,
                        }
                        for slot in slots
                    ],
                )

            version = self.get_version(psikolog_id)
            self.db.commit()
        except (ScheduleConflictError, StorageError):
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(
                f"Failed to replace availability slots for psikolog_id={psikolog_id}: {exc}"
            )
            raise StorageError("Failed to replace availability slots", cause=exc) from exc

        logger.info(
            f"Replaced availability slots for psikolog_id={psikolog_id} "
            f"(slots_count={len(slots)}, version={version})"
        )
        return version

    def _bump_version(self, psikolog_id: int, expected_version: Optional[int]) -> None:
        query = self.db.query(User).filter(User.id == psikolog_id)
        if expected_version is not None:
            query = query.filter(User.schedule_version == expected_version)

        updated = query.update(
            {User.schedule_version: User.schedule_version + 1},
            synchronize_session=False
        )
        if updated:
            return

        if expected_version is not None and self._owner_exists(psikolog_id):
            raise ScheduleConflictError(psikolog_id, expected_version)
        raise StorageError(f"Psychologist {psikolog_id} does not exist")

    def _owner_exists(self, psikolog_id: int) -> bool:
        return self.db.query(User.id).filter(User.id == psikolog_id).first() is not None

    def get_version(self, psikolog_id: int) -> int:
        version = self.db.query(User.schedule_version).filter(
            User.id == psikolog_id
        ).scalar()
        return version or 0

    def get_by_owner(self, psikolog_id: int) -> List[ConsultationSlot]:
        """All slots of a psychologist, ordered by weekday then start time."""
        return (
            self.db.query(ConsultationSlot)
            .filter(ConsultationSlot.psikolog_id == psikolog_id)
            .order_by(_day_order, ConsultationSlot.start_time)
            .all()
        )

    def get_by_owner_and_day(self, psikolog_id: int, day: str) -> List[ConsultationSlot]:
        if not is_valid_day(day):
            raise InvalidDay(day)

        return (
            self.db.query(ConsultationSlot)
            .filter(
                ConsultationSlot.psikolog_id == psikolog_id,
                ConsultationSlot.day == day
            )
            .order_by(ConsultationSlot.start_time)
            .all()
        )
