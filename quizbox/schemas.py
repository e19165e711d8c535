"""
Wire schemas. Field names are camelCase on the wire and snake_case in Python.
"""
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, StrictFloat, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from quizbox.models.orm import QuestionType


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------- accounts ----------

class SignupIn(Schema):
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = None


class SigninIn(Schema):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(Schema):
    id: str
    email: str
    name: Optional[str] = None


class AuthOut(Schema):
    token: str
    user: UserOut


# ---------- authoring ----------

class QuestionIn(Schema):
    text: str
    type: QuestionType
    options: List[str] = Field(default_factory=list)
    required: bool = True


class QuizCreate(Schema):
    title: str
    description: Optional[str] = None
    questions: List[QuestionIn]


class QuestionOut(Schema):
    id: str
    text: str
    type: QuestionType
    options: List[str]
    required: bool
    order: int


class QuizOut(Schema):
    id: str
    title: str
    description: Optional[str] = None
    creator_id: str
    created_at: datetime
    questions: List[QuestionOut]


class QuizSummary(Schema):
    id: str
    title: str
    description: Optional[str] = None
    created_at: datetime
    creator_name: Optional[str] = None
    question_count: int
    response_count: int


class PublicQuizOut(Schema):
    id: str
    title: str
    description: Optional[str] = None
    creator_name: str
    questions: List[QuestionOut]
    response_count: int


# ---------- responses ----------

AnswerValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat]


class AnswerIn(Schema):
    question_id: Optional[StrictStr] = None
    value: Optional[AnswerValue] = None

    @field_validator("value", mode="after")
    @classmethod
    def coerce_value(cls, v):
        # Answer values are stored as text; this is the only place they get converted.
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v)


class SubmissionIn(Schema):
    answers: List[AnswerIn]
    submitter_name: Optional[StrictStr] = None
    submitter_email: Optional[StrictStr] = None


class SubmissionOut(Schema):
    response_id: str
    answers_count: int
    message: str = "Response submitted successfully"


class QuestionRef(Schema):
    id: str
    text: str
    type: QuestionType
    options: List[str]


class AnswerOut(Schema):
    id: str
    question_id: str
    value: str
    question: QuestionRef


class ResponseOut(Schema):
    id: str
    submitter_name: Optional[str] = None
    submitter_email: Optional[str] = None
    submitted_at: datetime
    answers: List[AnswerOut]


class QuizRef(Schema):
    id: str
    title: str


class ResponsesOut(Schema):
    quiz: QuizRef
    questions: List[QuestionOut]
    responses: List[ResponseOut]
    total_responses: int
