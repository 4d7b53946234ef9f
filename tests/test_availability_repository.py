import pytest
from datetime import time

from counseling_app.core.exceptions import InvalidDay, ScheduleConflictError, StorageError
from counseling_app.models.availability import ConsultationSlot
from counseling_app.models.user import User
from counseling_app.repositories.availability_repository import AvailabilityRepository
from counseling_app.services.schedule_validator import ParsedSlot, validate_slot


def parsed(day, start, end):
    return validate_slot(day, start, end)


def as_tuples(slots):
    return [(s.day, s.start_time, s.end_time) for s in slots]


SCENARIO_ONE = [
    parsed("Senin", "09:00:00", "12:00:00"),
    parsed("Rabu", "10:00:00", "15:00:00"),
]


class TestReplaceAll:

    def test_replace_then_read_back(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)

        assert as_tuples(repo.get_by_owner(psychologist.id)) == [
            ("Senin", time(9, 0), time(12, 0)),
            ("Rabu", time(10, 0), time(15, 0)),
        ]

    def test_read_is_ordered_by_canonical_day_then_start(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, [
            parsed("Minggu", "08:00:00", "09:00:00"),
            parsed("Kamis", "13:00:00", "14:00:00"),
            parsed("Senin", "15:00:00", "16:00:00"),
            parsed("Jumat", "08:00:00", "09:00:00"),
            parsed("Senin", "08:00:00", "09:00:00"),
            parsed("Selasa", "08:00:00", "09:00:00"),
        ])

        assert [(s.day, s.start_time) for s in repo.get_by_owner(psychologist.id)] == [
            ("Senin", time(8, 0)),
            ("Senin", time(15, 0)),
            ("Selasa", time(8, 0)),
            ("Kamis", time(13, 0)),
            ("Jumat", time(8, 0)),
            ("Minggu", time(8, 0)),
        ]

    def test_replace_discards_previous_schedule(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        repo.replace_all(psychologist.id, [parsed("Sabtu", "10:00:00", "11:00:00")])

        assert as_tuples(repo.get_by_owner(psychologist.id)) == [
            ("Sabtu", time(10, 0), time(11, 0)),
        ]

    def test_replace_with_empty_clears_schedule(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        repo.replace_all(psychologist.id, [])

        assert repo.get_by_owner(psychologist.id) == []

    def test_replace_is_idempotent(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        first = as_tuples(repo.get_by_owner(psychologist.id))

        repo.replace_all(psychologist.id, SCENARIO_ONE)
        second = as_tuples(repo.get_by_owner(psychologist.id))

        assert first == second
        assert db_session.query(ConsultationSlot).count() == 2

    def test_owners_are_independent(self, db_session, psychologist, other_psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        repo.replace_all(other_psychologist.id, [parsed("Senin", "09:00:00", "12:00:00")])
        repo.replace_all(other_psychologist.id, [])

        assert len(repo.get_by_owner(psychologist.id)) == 2
        assert repo.get_by_owner(other_psychologist.id) == []

    def test_failed_insert_rolls_back_delete(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        version_before = repo.get_version(psychologist.id)

        # end_time is NOT NULL, so the batch insert fails after the delete ran
        broken = [
            parsed("Kamis", "09:00:00", "10:00:00"),
            ParsedSlot("Jumat", "09:00:00", "", time(9, 0), None),
        ]
        with pytest.raises(StorageError) as exc_info:
            repo.replace_all(psychologist.id, broken)
        assert exc_info.value.cause is not None

        assert as_tuples(repo.get_by_owner(psychologist.id)) == [
            ("Senin", time(9, 0), time(12, 0)),
            ("Rabu", time(10, 0), time(15, 0)),
        ]
        assert repo.get_version(psychologist.id) == version_before

    def test_unknown_owner(self, db_session):
        repo = AvailabilityRepository(db_session)
        with pytest.raises(StorageError):
            repo.replace_all(9999, SCENARIO_ONE)
        assert db_session.query(ConsultationSlot).count() == 0

    def test_deleting_owner_cascades_to_slots(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)

        db_session.query(User).filter(User.id == psychologist.id).delete(synchronize_session=False)
        db_session.commit()

        assert db_session.query(ConsultationSlot).count() == 0


class TestScheduleVersion:

    def test_version_starts_at_zero_and_increments(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        assert repo.get_version(psychologist.id) == 0

        assert repo.replace_all(psychologist.id, SCENARIO_ONE) == 1
        assert repo.replace_all(psychologist.id, []) == 2
        assert repo.get_version(psychologist.id) == 2

    def test_matching_expected_version(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)

        assert repo.replace_all(psychologist.id, [], expected_version=1) == 2

    def test_stale_expected_version_is_rejected(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)
        repo.replace_all(psychologist.id, SCENARIO_ONE)

        with pytest.raises(ScheduleConflictError):
            repo.replace_all(psychologist.id, [], expected_version=1)

        assert len(repo.get_by_owner(psychologist.id)) == 2
        assert repo.get_version(psychologist.id) == 2


class TestReadByDay:

    def test_slots_for_one_day_ordered_by_start(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, [
            parsed("Senin", "13:00:00", "15:00:00"),
            parsed("Rabu", "09:00:00", "10:00:00"),
            parsed("Senin", "08:00:00", "09:00:00"),
        ])

        assert [s.start_time for s in repo.get_by_owner_and_day(psychologist.id, "Senin")] == [
            time(8, 0), time(13, 0)
        ]

    def test_day_without_slots(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        repo.replace_all(psychologist.id, SCENARIO_ONE)

        assert repo.get_by_owner_and_day(psychologist.id, "Minggu") == []

    def test_invalid_day_is_rejected(self, db_session, psychologist):
        repo = AvailabilityRepository(db_session)
        with pytest.raises(InvalidDay):
            repo.get_by_owner_and_day(psychologist.id, "monday")

    def test_owner_without_slots(self, db_session, psychologist):
        assert AvailabilityRepository(db_session).get_by_owner(psychologist.id) == []
