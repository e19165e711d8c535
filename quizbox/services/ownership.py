from quizbox.core.auth import Identity
from quizbox.core.errors import Forbidden, NotFound
from quizbox.models.orm import Quiz
from quizbox.services.repository import QuizRepository


def authorize_quiz_access(repo: QuizRepository, identity: Identity, quiz_id: str) -> Quiz:
    """Return the quiz if ``identity`` created it.

    Existence is checked before ownership, so every caller sees the same
    NotFound for an unknown id. Callers must read private quiz data
    (responses, owner view) through the returned object only.
    """
    quiz = repo.get_quiz(quiz_id)
    if quiz is None:
        raise NotFound("Quiz not found")
    if quiz.creator_id != identity.user_id:
        raise Forbidden("You can only access your own quizzes")
    return quiz
