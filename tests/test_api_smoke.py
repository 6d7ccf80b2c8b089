import pytest
from fastapi.testclient import TestClient
from careercoach.main import app
from careercoach.core.database import get_db, get_session_factory
from careercoach.core.errors import GenerationFailure
from careercoach.api.deps import get_client
from careercoach.core.auth import issue_token
from fakes import FakeClient, fenced, insight_payload, quiz_payload

V1 = "/v1"


def respond(prompt):
    if "Analyze the current state" in prompt:
        return fenced(insight_payload())
    if "technical interview questions for" in prompt:
        return fenced(quiz_payload())
    if "got the following" in prompt:
        return "Brush up on distributed systems basics."
    if "cover letter" in prompt:
        return "```markdown\nDear Hiring Manager,\n\nI am excited to apply.\n```"
    return "Built and shipped 3 services handling 1M requests/day."


@pytest.fixture
def fake():
    return FakeClient(respond)


@pytest.fixture
def client(session_factory, fake):
    def _db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()
    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_client] = lambda: fake
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client, user_id="tester", roles=("user",)):
    r = client.post(f"{V1}/auth/mock-login", json={"user_id": user_id, "roles": list(roles), "email": f"{user_id}@example.com"})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def onboard(client, hdr, industry="tech-software"):
    r = client.put(f"{V1}/users/me/profile", headers=hdr, json={"industry": industry, "experience": 4, "skills": ["Python", "SQL"], "bio": "Backend dev"})
    assert r.status_code == 200
    return r.json()


def test_health(client):
    r = client.get("/health"); assert r.status_code == 200


def test_onboarding_creates_insight(client):
    hdr = login(client)
    assert client.get(f"{V1}/users/me/onboarding", headers=hdr).json() == {"is_onboarded": False}
    assert onboard(client, hdr)["industry"] == "tech-software"
    assert client.get(f"{V1}/users/me/onboarding", headers=hdr).json() == {"is_onboarded": True}
    r = client.get(f"{V1}/insights/me", headers=hdr)
    assert r.status_code == 200
    body = r.json()
    assert body["demandLevel"] == "High"
    assert body["salaryRanges"][0]["role"] == "Software Engineer"


def test_quiz_grade_and_list(client, fake):
    hdr = login(client); onboard(client, hdr)
    r = client.post(f"{V1}/assessments/quiz", headers=hdr, json={})
    assert r.status_code == 200
    qs = r.json()["questions"]
    assert len(qs) == 10
    answers = [q["correctAnswer"] for q in qs]
    for i in (0, 1, 2):
        answers[i] = qs[i]["options"][1]
    r = client.post(f"{V1}/assessments", headers=hdr, json={"questions": qs, "answers": answers})
    assert r.status_code == 201
    assert r.json()["quizScore"] == 70
    assert r.json()["improvementTip"] == "Brush up on distributed systems basics."
    assert [q["isCorrect"] for q in r.json()["questions"]].count(False) == 3
    listed = client.get(f"{V1}/assessments", headers=hdr).json()
    assert len(listed) == 1 and listed[0]["category"] == "Technical"

    hdr = login(client, "ops", roles=("admin",))
def test_generation_failure_is_generic_502(client, fake):
    hdr = login(client)
    fake.responder = lambda p: GenerationFailure("HTTP 500", reason="status", status_code=500)
    r = client.get(f"{V1}/insights/brand-new-industry", headers=hdr)
    assert r.status_code == 502
    assert r.json()["error"]["message"] == "Could not generate content, please try again."
    assert r.json()["error"]["type"] == "generation_failure"


def test_unknown_user_is_404(client):
    hdr = login(client, "ghost")
    r = client.get(f"{V1}/assessments", headers=hdr)
    assert r.status_code == 404
    assert r.json()["error"]["type"] == "not_found"


def test_resume_and_cover_letters(client):
    hdr = login(client); onboard(client, hdr)
    r = client.post(f"{V1}/resume/improve", headers=hdr, json={"sectionType": "experience", "current": "Wrote services."})
    assert r.json()["improved"].startswith("Built and shipped")
    assert client.get(f"{V1}/resume", headers=hdr).status_code == 404
    assert client.put(f"{V1}/resume", headers=hdr, json={"content": "# Me"}).json()["content"] == "# Me"
    assert client.put(f"{V1}/resume", headers=hdr, json={"content": "# Me v2"}).status_code == 200
    assert client.get(f"{V1}/resume", headers=hdr).json()["content"] == "# Me v2"

    r = client.post(f"{V1}/cover-letters", headers=hdr, json={"jobTitle": "Engineer", "companyName": "Acme", "jobDescription": "Build APIs"})
    assert r.status_code == 201
    letter = r.json()
    assert letter["content"].startswith("Dear Hiring Manager")
    assert letter["status"] == "completed"
    assert [l["id"] for l in client.get(f"{V1}/cover-letters", headers=hdr).json()] == [letter["id"]]

    other = login(client, "someone-else"); onboard(client, other)
    assert client.get(f"{V1}/cover-letters/{letter['id']}", headers=other).status_code == 404
    assert client.delete(f"{V1}/cover-letters/{letter['id']}", headers=hdr).status_code == 204
    assert client.get(f"{V1}/cover-letters/{letter['id']}", headers=hdr).status_code == 404


def test_admin_routes_need_admin_role(client):
    hdr = login(client)
    assert client.post(f"{V1}/admin/insights/refresh", headers=hdr).status_code == 403


def test_insight_by_key_limited_to_own_industry(client, fake):
    hdr = login(client); onboard(client, hdr)
    assert client.get(f"{V1}/insights/tech-software", headers=hdr).status_code == 200
    calls = len(fake.prompts)
    r = client.get(f"{V1}/insights/finance-banking", headers=hdr)
    assert r.status_code == 403
    assert len(fake.prompts) == calls

    admin = login(client, "ops", roles=("admin",))
    assert client.get(f"{V1}/insights/finance-banking", headers=admin).status_code == 200


def test_missing_or_expired_token_is_401(client):
    r = client.get(f"{V1}/assessments")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    expired = issue_token("tester", ["user"], ttl_minutes=-5)
    assert client.get(f"{V1}/assessments", headers={"Authorization": f"Bearer {expired}"}).status_code == 401
    assert client.get(f"{V1}/assessments", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
