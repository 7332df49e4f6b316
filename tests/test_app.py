"""Flask 接口测试。"""

import pytest

from app import app


@pytest.fixture
def client(controller, monkeypatch):
    monkeypatch.setattr("app.controller", controller)
    app.config.update(TESTING=True)
    with app.test_client() as client:
        yield client


def _post(client, path, payload=None):
    response = client.post(path, json=payload or {})
    return response, response.get_json()


def _fill(client, participant, name="Alex", age="30", category="Male"):
    for field_name, value in (("name", name), ("age", age), ("category", category)):
        response, _ = _post(client, "/api/profile", {"participant": participant, "field": field_name, "value": value})
        assert response.status_code == 200


def test_index_page(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert "Personality Checker" in body
    assert "Strongly Disagree" in body
    assert "Not a medical diagnosis" in body


def test_initial_session(client):
    response = client.get("/api/session")
    data = response.get_json()

    assert response.status_code == 200
    assert data["success"] is True
    assert data["state"]["phase"] == "form"
    assert data["state"]["mode"] == "individual"
    assert data["state"]["can_submit"] is False


def test_read_only_requests_store_nothing(client, store):
    """测试新客户端的只读请求不会在服务端留下会话。"""
    for _ in range(20):
        with app.test_client() as fresh:
            assert fresh.get("/api/session").status_code == 200
            assert fresh.get("/").status_code == 200
            fresh.post("/api/advance")

    assert len(store) == 0

    _fill(client, "a")
    assert len(store) == 1


def test_individual_flow(client, mock_llm_individual, personality_payload):
    _fill(client, "a")
    _, data = _post(client, "/api/submit")
    assert data["state"]["phase"] == "answering"
    assert data["state"]["current_question"]["id"] == 1

    for qid, value in ((1, 5), (2, 3), (3, 1)):
        response, data = _post(client, "/api/answer", {"question_id": qid, "value": value})
        assert response.status_code == 200
        _post(client, "/api/advance")

    _, data = _post(client, "/api/back")
    assert data["state"]["current_index"] == 1
    assert data["state"]["current_answer"] == 3

    _, data = _post(client, "/api/complete")
    assert data["state"]["phase"] == "results"
    assert data["state"]["individual_result"] == personality_payload

    _, data = _post(client, "/api/reset")
    assert data["state"]["phase"] == "form"
    assert data["state"]["profiles"]["a"]["name"] == ""
    assert data["state"]["individual_result"] is None


def test_comparison_flow(client, mock_llm_comparison, compatibility_payload):
    _post(client, "/api/mode", {"mode": "comparison"})
    _fill(client, "a")
    _fill(client, "b", name="Sam", age="28", category="Female")

    _, data = _post(client, "/api/submit")
    for qid in (1, 2, 3):
        _post(client, "/api/answer", {"question_id": qid, "value": 4})
        _post(client, "/api/advance")
    _, data = _post(client, "/api/complete")
    assert data["state"]["active_participant"] == "b"
    assert data["state"]["active_name"] == "Sam"
    assert data["state"]["answers"] == {}

    for qid in (1, 2, 3):
        _post(client, "/api/answer", {"question_id": qid, "value": 2})
        _post(client, "/api/advance")
    _, data = _post(client, "/api/complete")

    assert data["state"]["phase"] == "results"
    assert data["state"]["compatibility_result"] == compatibility_payload


def test_failure_shows_notice(client, mock_llm):
    mock_llm.should_fail = True
    _fill(client, "a")

    _, data = _post(client, "/api/submit")

    assert data["state"]["phase"] == "form"
    assert data["state"]["notice"] == "Failed to generate questions. Please try again."
    assert data["state"]["questions"] == []


def test_submit_with_incomplete_profile_is_inert(client, mock_llm):
    _fill(client, "a", category="")

    _, data = _post(client, "/api/submit")

    assert data["state"]["phase"] == "form"
    assert mock_llm.call_count == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"participant": "c", "field": "name", "value": "X"},
        {"participant": "a", "field": "email", "value": "x@y.z"},
        {"participant": "a", "field": "age", "value": "thirty"},
        {"participant": "a", "field": "category", "value": "Robot"},
    ],
)
def test_invalid_profile_edit(client, payload):
    response, data = _post(client, "/api/profile", payload)

    assert response.status_code == 400
    assert "error" in data


def test_invalid_mode(client):
    response, _ = _post(client, "/api/mode", {"mode": "trio"})

    assert response.status_code == 400


def test_invalid_answer(client, mock_llm_individual):
    _fill(client, "a")
    _post(client, "/api/submit")

    response, _ = _post(client, "/api/answer", {"question_id": 1, "value": 7})
    assert response.status_code == 400

    response, _ = _post(client, "/api/answer", {"question_id": 42, "value": 3})
    assert response.status_code == 400

    response, _ = _post(client, "/api/answer", {"question_id": "1", "value": 3})
    assert response.status_code == 400

    response, _ = _post(client, "/api/answer", {"question_id": True, "value": 4})
    assert response.status_code == 400

    response, _ = _post(client, "/api/answer", {"question_id": 1, "value": True})
    assert response.status_code == 400

    _, data = _post(client, "/api/advance")
    assert data["state"]["answers"] == {}
