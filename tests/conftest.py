"""测试配置和共享 Fixtures。"""

import json

import pytest

from persona_quiz.controller import QuizController
from persona_quiz.models import Profile, Question
from persona_quiz.services.assessment_service import AssessmentService
from persona_quiz.services.session_store import SessionStore


# ============================================================================
# Mock Services
# ============================================================================

class MockLLMService:
    """测试用 Mock LLM 服务。

    可以通过设置 response 属性来控制返回值。
    可以通过设置 responses 列表按顺序返回多个值。
    可以通过设置 should_fail 来模拟失败。
    可以通过设置 on_call 在调用过程中执行回调（模拟请求期间的用户操作）。
    """

    def __init__(self):
        self.response = "{}"
        self.responses: list[str] = []
        self.should_fail = False
        self.on_call = None
        self.call_count = 0
        self.calls: list[dict] = []

    def call(self, prompt: str, *, json_mode: bool = False, schema=None, model=None) -> str:
        self.call_count += 1
        self.calls.append({"prompt": prompt, "json_mode": json_mode, "schema": schema, "model": model})

        if self.on_call is not None:
            self.on_call()

        if self.should_fail:
            raise Exception("Mock LLM failure")

        if self.responses:
            return self.responses.pop(0)
        return self.response

    def reset(self):
        """重置状态。"""
        self.call_count = 0
        self.calls = []


# ============================================================================
# Payload Fixtures
# ============================================================================

QUESTIONS_PAYLOAD = {
    "questions": [
        {"id": 1, "text": "I enjoy trying new things."},
        {"id": 2, "text": "I keep my workspace organized."},
        {"id": 3, "text": "I feel energized after social events."},
    ]
}

PERSONALITY_PAYLOAD = {
    "archetype": "The Curious Architect",
    "summary": "A builder who loves novelty but keeps things tidy.",
    "traits": [
        {"label": "Openness", "score": 88, "description": "Very open to experience."},
        {"label": "Conscientiousness", "score": 62, "description": "Fairly organized."},
        {"label": "Extraversion", "score": 20, "description": "Recharges alone."},
    ],
    "detailedAnalysis": "Paragraph one.\n\nParagraph two.",
}

COMPATIBILITY_PAYLOAD = {
    "compatibilityScore": 74,
    "relationshipArchetype": "The Explorer and the Anchor",
    "synergyAnalysis": "They balance each other.",
    "challenges": "Different social batteries.",
    "dimensions": [
        {"label": "Openness", "scoreUser1": 90, "scoreUser2": 55, "insight": "One leads, one grounds."},
        {"label": "Extraversion", "scoreUser1": 20, "scoreUser2": 80, "insight": "Plan quiet nights too."},
    ],
}


@pytest.fixture
def questions_payload() -> dict:
    return json.loads(json.dumps(QUESTIONS_PAYLOAD))


@pytest.fixture
def personality_payload() -> dict:
    return json.loads(json.dumps(PERSONALITY_PAYLOAD))


@pytest.fixture
def compatibility_payload() -> dict:
    return json.loads(json.dumps(COMPATIBILITY_PAYLOAD))


# ============================================================================
# Model Fixtures
# ============================================================================

@pytest.fixture
def sample_profile() -> Profile:
    """创建示例 Profile。"""
    return Profile(name="Alex", age="30", category="Male")


@pytest.fixture
def partner_profile() -> Profile:
    """创建第二位参与者的 Profile。"""
    return Profile(name="Sam", age="28", category="Female")


@pytest.fixture
def sample_questions() -> list[Question]:
    """创建 3 道题的题目集。"""
    return [Question(id=q["id"], text=q["text"]) for q in QUESTIONS_PAYLOAD["questions"]]


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def mock_llm() -> MockLLMService:
    """创建 Mock LLM 服务。"""
    return MockLLMService()


@pytest.fixture
def mock_llm_individual(mock_llm: MockLLMService) -> MockLLMService:
    """依次返回题目和个人分析的 Mock LLM。"""
    mock_llm.responses = [json.dumps(QUESTIONS_PAYLOAD), json.dumps(PERSONALITY_PAYLOAD)]
    return mock_llm


@pytest.fixture
def mock_llm_comparison(mock_llm: MockLLMService) -> MockLLMService:
    """依次返回题目和配对分析的 Mock LLM。"""
    mock_llm.responses = [json.dumps(QUESTIONS_PAYLOAD), json.dumps(COMPATIBILITY_PAYLOAD)]
    return mock_llm


@pytest.fixture
def store():
    """清空的全局 SessionStore。"""
    session_store = SessionStore()
    session_store.clear()
    yield session_store
    session_store.clear()


@pytest.fixture
def controller(mock_llm: MockLLMService, store: SessionStore) -> QuizController:
    """使用 Mock LLM 的 QuizController。"""
    return QuizController(assessment=AssessmentService(llm_service=mock_llm), store=store)
