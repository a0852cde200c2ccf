"""
Unit tests for admissions repository layer.
"""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import pytest

from app.modules.admissions import repository
from app.modules.admissions.models import Application, ApplicationStatus
from app.modules.admissions.schemas import ApplicationSubmission


@pytest.fixture
def submission(submission_payload):
    submission_payload["placeOfBirth"] = "  Cape Town  "
    submission_payload["lastGradePassed"] = "   "
    return ApplicationSubmission.model_validate(submission_payload)


class TestColumnValues:
    def test_strings_trimmed(self, submission):
        values = repository._column_values(submission)
        assert values["place_of_birth"] == "Cape Town"

    def test_blank_strings_stored_as_null(self, submission):
        values = repository._column_values(submission)
        assert values["last_grade_passed"] is None
        assert values["father_full_name"] is None

    def test_date_of_birth_parsed(self, submission):
        values = repository._column_values(submission)
        assert values["date_of_birth"] == date(2019, 3, 14)

    def test_booleans_kept(self, submission):
        values = repository._column_values(submission)
        assert values["agree_to_terms"] is True
        assert values["has_repeated"] is False

    def test_every_value_has_a_column(self, submission):
        columns = set(Application.__table__.columns.keys())
        assert set(repository._column_values(submission)) <= columns


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_adds_pending_application(self, mock_db, submission):
        result = await repository.create(mock_db, submission)

        assert isinstance(result, Application)
        assert result.status == ApplicationStatus.PENDING
        assert result.surname == "Doe"
        assert result.agree_to_terms is True
        assert result.agree_to_privacy is True
        mock_db.add.assert_called_once_with(result)
        mock_db.commit.assert_awaited_once()
        mock_db.refresh.assert_awaited_once_with(result)


def _application(status: ApplicationStatus) -> Application:
    return Application(id=3, surname="Doe", learner_name="Jane", status=status)


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_allowed_transition(self, mock_db):
        application = _application(ApplicationStatus.PENDING)

        result = await repository.update_status(
            mock_db, application, ApplicationStatus.UNDER_REVIEW, notes="  Interview booked  "
        )

        assert result.status == ApplicationStatus.UNDER_REVIEW
        assert result.notes == "Interview booked"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_same_status_only_updates_notes(self, mock_db):
        application = _application(ApplicationStatus.APPROVED)
        application.notes = "old"

        result = await repository.update_status(mock_db, application, ApplicationStatus.APPROVED)

        assert result.status == ApplicationStatus.APPROVED
        assert result.notes is None

    @pytest.mark.asyncio
    async def test_invalid_transition_rejected(self, mock_db):
        application = _application(ApplicationStatus.PENDING)

        with pytest.raises(repository.InvalidStatusTransitionError) as exc_info:
            await repository.update_status(mock_db, application, ApplicationStatus.ENROLLED)

        assert exc_info.value.current_status == ApplicationStatus.PENDING
        assert application.status == ApplicationStatus.PENDING
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_terminal_states_have_no_exits(self, mock_db):
        for terminal in (ApplicationStatus.REJECTED, ApplicationStatus.ENROLLED):
            with pytest.raises(repository.InvalidStatusTransitionError):
                await repository.update_status(
                    mock_db, _application(terminal), ApplicationStatus.PENDING
                )

    def test_every_status_has_transitions_defined(self):
        assert set(repository.VALID_STATUS_TRANSITIONS) == set(ApplicationStatus)


class TestListApplications:
    @pytest.mark.asyncio
    async def test_returns_page_and_total(self, mock_db):
        rows = [_application(ApplicationStatus.PENDING)]
        count_result = MagicMock()
        count_result.scalar.return_value = 7
        page_result = MagicMock()
        page_result.scalars.return_value.all.return_value = rows
        mock_db.execute.side_effect = [count_result, page_result]

        applications, total = await repository.list_applications(
            mock_db, status=ApplicationStatus.PENDING, search="doe", skip=0, limit=1
        )

        assert applications == rows
        assert total == 7
        assert mock_db.execute.await_count == 2


class TestGetStatistics:
    @pytest.mark.asyncio
    async def test_aggregates(self, mock_db):
        march = datetime(2026, 3, 1, tzinfo=UTC)
        status_result = MagicMock()
        status_result.all.return_value = [
            (ApplicationStatus.PENDING, 3),
            (ApplicationStatus.APPROVED, 1),
        ]
        grade_result = MagicMock()
        grade_result.all.return_value = [("Grade R", 3), ("Grade 1", 1)]
        monthly_result = MagicMock()
        monthly_result.all.return_value = [(march, 4)]
        mock_db.execute.side_effect = [status_result, grade_result, monthly_result]

        statistics = await repository.get_statistics(mock_db)

        assert statistics["total"] == 4
        assert statistics["by_status"] == {
            "pending": 3,
            "under_review": 0,
            "approved": 1,
            "rejected": 0,
            "enrolled": 0,
        }
        assert statistics["grade_distribution"][0] == {"grade": "Grade R", "count": 3}
        assert statistics["monthly"] == [{"month": march, "count": 4}]
