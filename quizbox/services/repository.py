"""Keyed reads and writes over the quiz store. No business rules live here."""
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from quizbox.models.orm import Answer, Question, Quiz, Response, User


class QuizRepository:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit everything written inside the block, or nothing."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ---- users ----
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.scalar(select(User).where(User.email == email))

    def add_user(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    # ---- quizzes ----
    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return self.db.scalar(
            select(Quiz).where(Quiz.id == quiz_id).options(selectinload(Quiz.questions), selectinload(Quiz.creator))
        )

    def add_quiz(self, quiz: Quiz, questions: Iterable[Question]) -> Quiz:
        quiz.questions = list(questions)
        self.db.add(quiz)
        self.db.flush()
        return quiz

    def list_quizzes(self, creator_id: Optional[str] = None) -> List[Quiz]:
        stmt = select(Quiz).options(selectinload(Quiz.questions), selectinload(Quiz.creator)).order_by(Quiz.created_at.desc())
        if creator_id is not None:
            stmt = stmt.where(Quiz.creator_id == creator_id)
        return list(self.db.scalars(stmt).all())

    def response_counts(self, quiz_ids: List[str]) -> Dict[str, int]:
        if not quiz_ids:
            return {}
        rows = self.db.execute(
            select(Response.quiz_id, func.count(Response.id)).where(Response.quiz_id.in_(quiz_ids)).group_by(Response.quiz_id)
        ).all()
        return {r[0]: r[1] for r in rows}

    def count_responses(self, quiz_id: str) -> int:
        return self.db.scalar(select(func.count(Response.id)).where(Response.quiz_id == quiz_id)) or 0

    # ---- responses ----
    def add_response(self, response: Response, answers: Iterable[Answer]) -> int:
        response.answers = list(answers)
        self.db.add(response)
        self.db.flush()
        return len(response.answers)

    def list_responses(self, quiz_id: str) -> List[Response]:
        stmt = (
            select(Response)
            .where(Response.quiz_id == quiz_id)
            .options(selectinload(Response.answers).selectinload(Answer.question))
            .order_by(Response.submitted_at.desc())
        )
        return list(self.db.scalars(stmt).all())
