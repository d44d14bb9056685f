import pytest

from appraisal_manager.schemas.review import AppraisalResponse, NumericAnswer, QuestionResponse, TextAnswer
from appraisal_manager.services.rating import aggregate, load_review


def _review(*values):
    return AppraisalResponse.model_validate({
        "responses": [{"question_id": f"q{i}", "answer": v} for i, v in enumerate(values)]
    })


def test_aggregate_means_numeric_answers_across_reviews():
    assert aggregate([_review(4, 5), _review(3, 4)]) == pytest.approx(4.0)
    assert aggregate([_review(4, 5), _review(3, 4), _review(5)]) == pytest.approx(4.2)


def test_aggregate_ignores_text_answers():
    assert aggregate([_review(2, "great teamwork", 4)]) == pytest.approx(3.0)


def test_aggregate_without_numeric_answers_is_zero():
    assert aggregate([]) == 0.0
    assert aggregate([_review("only words")]) == 0.0
    assert aggregate([None]) == 0.0


def test_aggregate_is_idempotent():
    reviews = [_review(1, 2, 5), _review(4)]
    assert aggregate(reviews) == aggregate(reviews)


def test_raw_answers_are_tagged():
    response = QuestionResponse.model_validate({"question_id": "q1", "answer": 3})
    assert isinstance(response.answer, NumericAnswer)
    assert response.numeric_value == 3

    response = QuestionResponse.model_validate({"question_id": "q2", "answer": True})
    assert isinstance(response.answer, TextAnswer)
    assert response.answer.value == "yes"
    assert response.numeric_value is None


def test_numeric_answer_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        QuestionResponse.model_validate({"question_id": "q1", "answer": 7})


def test_load_review_reads_stored_payload():
    stored = _review(4).model_dump(mode="json")
    assert stored["responses"][0]["answer"] == {"kind": "numeric", "value": 4}
    assert aggregate([load_review(stored)]) == 4.0
    assert load_review(None) is None
