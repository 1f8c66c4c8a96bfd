"""
Tests for the maintenance script that re-runs the completion check.
"""
from scripts import recompute_completion as script
from prepcoach.db.models.interview import Interview, InterviewStatus
from prepcoach.schemas.evaluation import EvaluationResult
from prepcoach.services.repository import InterviewRepository, QuestionRepository


def stuck_interview(db, user, scores):
    """An in-progress interview whose questions are already answered."""
    interview = InterviewRepository(db).create(user.id, "Practice", "Dev")
    interview.status = InterviewStatus.IN_PROGRESS.value
    db.commit()
    questions = QuestionRepository(db).create_many(interview.id, [f"Q{i}?" for i in range(len(scores))])
    for question, score in zip(questions, scores):
        QuestionRepository(db).save_answer(question, "answer", EvaluationResult(score=score, feedback="ok"))
    return interview.id


def test_recompute_completes_stuck_interviews(db, session_factory, test_user, monkeypatch):
    done_id = stuck_interview(db, test_user, [8, 6, 10, 7, 9])
    interview = InterviewRepository(db).create(test_user.id, "Unfinished", "Dev")
    interview.status = InterviewStatus.IN_PROGRESS.value
    db.commit()
    QuestionRepository(db).create_many(interview.id, ["Open question?"])

    monkeypatch.setattr(script, "SessionLocal", session_factory)

    assert script.recompute_completion() == 1
    # Idempotent on a second run
    assert script.recompute_completion() == 0

    db.expire_all()
    done = db.query(Interview).filter(Interview.id == done_id).first()
    assert done.status == InterviewStatus.COMPLETED.value
    assert done.score == 80
    assert db.query(Interview).filter(Interview.id == interview.id).first().status == InterviewStatus.IN_PROGRESS.value
