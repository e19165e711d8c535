from fastapi import Depends
from sqlalchemy.orm import Session

from quizbox.core.database import get_db
from quizbox.services.repository import QuizRepository


def get_repo(db: Session = Depends(get_db)) -> QuizRepository:
    return QuizRepository(db)
