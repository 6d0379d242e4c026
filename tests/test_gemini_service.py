import json

import pytest

from quizgen.services.gemini_service import GeminiService, MalformedQuizError, QuizGenerationError


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return FakeResponse(self.text)


def service_returning(text=None, error=None):
    service = GeminiService(model_name="test-model")
    service._model = FakeModel(text, error)
    return service


def payload(questions):
    return json.dumps({"questions": questions})


GOOD_QUESTION = {
    "question": "What is 2 + 2?",
    "options": ["3", "4", "5", "22"],
    "correctAnswer": "4",
    "explanation": "Basic addition.",
}


def test_generate_parses_questions_and_builds_prompt():
    service = service_returning(payload([GOOD_QUESTION]))

    questions = service.generate_quiz("arithmetic", "easy", 1)

    assert questions == [GOOD_QUESTION]
    prompt = service.model.prompts[0]
    assert "easy difficulty quiz about arithmetic with 1 questions" in prompt
    assert "distinct" in prompt


def test_markdown_fences_are_stripped():
    service = service_returning("```json\n" + payload([GOOD_QUESTION]) + "\n```")
    assert service.generate_quiz("arithmetic", "easy", 1)[0]["correctAnswer"] == "4"


def test_missing_explanation_defaults_to_empty():
    question = dict(GOOD_QUESTION)
    del question["explanation"]
    service = service_returning(payload([question]))
    assert service.generate_quiz("arithmetic", "easy", 1)[0]["explanation"] == ""


def test_count_mismatch_is_tolerated():
    service = service_returning(payload([GOOD_QUESTION, GOOD_QUESTION]))
    assert len(service.generate_quiz("arithmetic", "easy", 5)) == 2


@pytest.mark.parametrize("text", [
    "not json at all",
    json.dumps({"quiz": []}),
    json.dumps({"questions": "nope"}),
    json.dumps({"questions": []}),
    json.dumps([GOOD_QUESTION]),
    payload([{"question": "Missing options", "correctAnswer": "x"}]),
    payload([dict(GOOD_QUESTION, options="4")]),
    payload([dict(GOOD_QUESTION, correctAnswer="Four")]),
])
def test_malformed_responses_raise(text):
    service = service_returning(text)
    with pytest.raises(MalformedQuizError, match="Invalid quiz format"):
        service.generate_quiz("arithmetic", "easy", 1)


def test_provider_error_is_wrapped():
    service = service_returning(error=RuntimeError("quota exceeded"))
    with pytest.raises(QuizGenerationError) as excinfo:
        service.generate_quiz("arithmetic", "easy", 1)
    assert not isinstance(excinfo.value, MalformedQuizError)
    assert len(service.model.prompts) == 1
