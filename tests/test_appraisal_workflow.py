import pytest

from conftest import answers
from appraisal_manager.core.config import settings
from appraisal_manager.core.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    InvalidTransitionError,
    NotFoundError,
)
from appraisal_manager.models.appraisal import Appraisal, AppraisalStatus
from appraisal_manager.models.appraisal_submission import AppraisalSubmission
from appraisal_manager.models.notification import Notification
from appraisal_manager.schemas.review import ReviewSubmission
from appraisal_manager.services import appraisal_workflow as workflow
from appraisal_manager.services.notification import NotificationService


def _submission(*values):
    return ReviewSubmission.model_validate(answers(*values))


def test_both_flow_moves_through_every_stage(db_session, make_appraisal):
    appraisal = make_appraisal(employee_id="emp-1", manager_id="mgr-1", review_type="both")

    appraisal = workflow.submit_review(db_session, appraisal.id, "self", _submission(4, 5), submitted_by="emp-1")
    assert appraisal.status == AppraisalStatus.MANAGER_REVIEW.value
    assert appraisal.overall_rating is None

    appraisal = workflow.submit_review(db_session, appraisal.id, "manager", _submission(3, 4), submitted_by="mgr-1")
    assert appraisal.status == AppraisalStatus.HR_REVIEW.value
    assert appraisal.overall_rating == pytest.approx(4.0)
    assert appraisal.completed_at is None

    appraisal = workflow.submit_review(db_session, appraisal.id, "hr", _submission(5), submitted_by="hr-1")
    assert appraisal.status == AppraisalStatus.COMPLETED.value
    assert appraisal.overall_rating == pytest.approx(4.2)
    assert appraisal.completed_at is not None
    assert appraisal.hr_review["submitted_by"] == "hr-1"

    stages = [s.stage for s in db_session.query(AppraisalSubmission).order_by(AppraisalSubmission.submitted_at)]
    assert stages == ["self", "manager", "hr"]


def test_self_only_template_completes_on_self_review(db_session, make_appraisal):
    appraisal = make_appraisal(review_type="self")
    appraisal = workflow.submit_review(db_session, appraisal.id, "self", _submission(5, 3))
    assert appraisal.status == AppraisalStatus.COMPLETED.value
    assert appraisal.completed_at is not None
    assert appraisal.overall_rating is None


def test_self_only_rating_can_be_switched_on(db_session, make_appraisal, monkeypatch):
    monkeypatch.setattr(settings.workflow, "rate_self_only_reviews", True)
    appraisal = make_appraisal(review_type="self")
    appraisal = workflow.submit_review(db_session, appraisal.id, "self", _submission(5, 3))
    assert appraisal.overall_rating == pytest.approx(4.0)


def test_manager_only_template_completes_on_manager_review(db_session, make_appraisal):
    appraisal = make_appraisal(review_type="manager")
    appraisal = workflow.submit_review(db_session, appraisal.id, "manager", _submission(2, 3))
    assert appraisal.status == AppraisalStatus.COMPLETED.value
    assert appraisal.overall_rating == pytest.approx(2.5)


@pytest.mark.parametrize("review_type, status, stage", [
    ("self", "draft", "manager"),
    ("manager", "draft", "self"),
    ("both", "draft", "manager"),
    ("both", "draft", "hr"),
    ("both", "manager-review", "self"),
    ("both", "completed", "hr"),
    ("both", "cancelled", "self"),
])
def test_invalid_transitions_mutate_nothing(db_session, make_appraisal, review_type, status, stage):
    appraisal = make_appraisal(review_type=review_type, status=status)

    with pytest.raises(InvalidTransitionError):
        workflow.submit_review(db_session, appraisal.id, stage, _submission(4))

    db_session.expire_all()
    stored = db_session.get(Appraisal, appraisal.id)
    assert stored.status == status
    assert stored.self_review is None and stored.manager_review is None
    assert db_session.query(AppraisalSubmission).count() == 0


def test_missing_required_answer_is_rejected(db_session, make_appraisal):
    appraisal = make_appraisal(review_type="both")
    submission = ReviewSubmission.model_validate({"responses": [{"question_id": "q2", "answer": 4}]})

    with pytest.raises(DomainValidationError) as exc_info:
        workflow.submit_review(db_session, appraisal.id, "self", submission)
    assert exc_info.value.details == {"missing_question_ids": ["q1"]}

    db_session.expire_all()
    assert db_session.get(Appraisal, appraisal.id).status == AppraisalStatus.DRAFT.value


def test_unknown_appraisal_raises_not_found(db_session):
    with pytest.raises(NotFoundError):
        workflow.submit_review(db_session, "missing", "self", _submission(4))


def test_submission_notifications(db_session, make_appraisal):
    appraisal = make_appraisal(employee_id="emp-1", manager_id="mgr-1", review_type="both")
    workflow.submit_review(db_session, appraisal.id, "self", _submission(4))
    workflow.submit_review(db_session, appraisal.id, "manager", _submission(4))

    titles = {(n.user_id, n.title) for n in db_session.query(Notification).all()}
    assert ("mgr-1", "Self-Review Completed") in titles
    assert ("emp-1", "Manager Review Completed") in titles


def test_self_managed_employee_gets_no_manager_notification(db_session, make_appraisal):
    appraisal = make_appraisal(employee_id="emp-1", manager_id="emp-1", review_type="both")
    workflow.submit_review(db_session, appraisal.id, "self", _submission(4))
    assert db_session.query(Notification).count() == 0


def test_eligibility_predicates(db_session, make_appraisal):
    appraisal = make_appraisal(employee_id="emp-1", manager_id="mgr-1", review_type="both")

    eligibility = workflow.review_eligibility(db_session, appraisal.id, "emp-1")
    assert eligibility.can_start_self_review
    assert not eligibility.can_start_manager_review

    assert not workflow.review_eligibility(db_session, appraisal.id, "mgr-1").can_start_manager_review

    workflow.submit_review(db_session, appraisal.id, "self", _submission(4))
    eligibility = workflow.review_eligibility(db_session, appraisal.id, "mgr-1")
    assert eligibility.can_start_manager_review
    assert not eligibility.can_start_self_review

    with pytest.raises(AccessDeniedError):
        workflow.ensure_can_submit(db_session, appraisal.id, "manager", "someone-else")


def test_manager_only_eligibility_from_draft(db_session, make_appraisal):
    appraisal = make_appraisal(employee_id="emp-1", manager_id="mgr-1", review_type="manager")
    assert workflow.review_eligibility(db_session, appraisal.id, "mgr-1").can_start_manager_review
    assert not workflow.review_eligibility(db_session, appraisal.id, "emp-1").can_start_self_review


def test_hr_review_disabled_by_default(db_session, make_appraisal, monkeypatch):
    appraisal = make_appraisal(review_type="both", status="hr-review")
    assert not workflow.review_eligibility(db_session, appraisal.id, "hr-1").can_start_hr_review

    monkeypatch.setattr(settings.workflow, "enable_hr_review", True)
    assert workflow.review_eligibility(db_session, appraisal.id, "hr-1").can_start_hr_review


def test_cancel_appraisal(db_session, make_appraisal):
    appraisal = make_appraisal(status="manager-review")
    appraisal = workflow.cancel_appraisal(db_session, appraisal.id)
    assert appraisal.status == AppraisalStatus.CANCELLED.value

    with pytest.raises(InvalidTransitionError):
        workflow.cancel_appraisal(db_session, appraisal.id)


def test_recalculation_is_idempotent(db_session, make_appraisal):
    appraisal = make_appraisal(review_type="both")
    workflow.submit_review(db_session, appraisal.id, "self", _submission(4, 5))
    workflow.submit_review(db_session, appraisal.id, "manager", _submission(3, 4))

    first = workflow.recalculate_overall_rating(db_session, appraisal.id)
    second = workflow.recalculate_overall_rating(db_session, appraisal.id)
    assert first == second == pytest.approx(4.0)


def test_recalculate_all_only_touches_reviewed_appraisals(db_session, make_appraisal):
    reviewed = make_appraisal(review_type="both")
    untouched = make_appraisal(review_type="both")
    workflow.submit_review(db_session, reviewed.id, "self", _submission(2, 4))

    result = workflow.recalculate_all_ratings(db_session)
    assert result.succeeded == 1
    assert result.failed == 0

    db_session.expire_all()
    assert db_session.get(Appraisal, reviewed.id).overall_rating == pytest.approx(3.0)
    assert db_session.get(Appraisal, untouched.id).overall_rating is None


def _failing_notifications(monkeypatch):
    def refuse(*args, **kwargs):
        raise RuntimeError("notification store unavailable")
    monkeypatch.setattr(NotificationService, "create_notification", staticmethod(refuse))


def test_notification_failure_does_not_fail_submission(db_session, make_appraisal, monkeypatch):
    _failing_notifications(monkeypatch)
    appraisal = make_appraisal(employee_id="emp-1", manager_id="mgr-1", review_type="both")

    appraisal = workflow.submit_review(db_session, appraisal.id, "self", _submission(4, 5))
    assert appraisal.status == AppraisalStatus.MANAGER_REVIEW.value

    db_session.expire_all()
    stored = db_session.get(Appraisal, appraisal.id)
    assert stored.status == AppraisalStatus.MANAGER_REVIEW.value
    assert stored.self_review is not None
    assert db_session.query(AppraisalSubmission).count() == 1
    assert db_session.query(Notification).count() == 0


def test_recalculate_all_counts_failures_and_continues(db_session, make_appraisal, monkeypatch):
    broken = make_appraisal(review_type="both")
    healthy = make_appraisal(review_type="both")
    workflow.submit_review(db_session, broken.id, "self", _submission(2, 4))
    workflow.submit_review(db_session, healthy.id, "self", _submission(4, 5))
    broken_id, healthy_id = broken.id, healthy.id

    real_present_reviews = workflow.present_reviews

    def flaky_present_reviews(appraisal, *args, **kwargs):
        if appraisal.id == broken_id:
            raise RuntimeError("corrupt review payload")
        return real_present_reviews(appraisal, *args, **kwargs)
    monkeypatch.setattr(workflow, "present_reviews", flaky_present_reviews)

    result = workflow.recalculate_all_ratings(db_session)

    assert result.succeeded == 1
    assert result.failed == 1
    db_session.expire_all()
    assert db_session.get(Appraisal, healthy_id).overall_rating == pytest.approx(4.5)
    assert db_session.get(Appraisal, broken_id).overall_rating is None
