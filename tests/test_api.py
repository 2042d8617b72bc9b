from fastapi.testclient import TestClient

from skillproof import config, models
from skillproof.main import app
from skillproof.services import proofs, skills


def _register(client, email="worker@skillmail.com", full_name="John Doe"):
    response = client.post("/auth/register", json={
        "full_name": full_name,
        "email": email,
        "password": "password123",
        "phone": "+1234567890",
    })
    assert response.status_code == 200, response.text
    return response.json()


def _error_code(response):
    body = response.json()
    assert body["success"] is False
    return body["error"]["code"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_login_me(client):
    user = _register(client)
    assert "password_hash" not in user

    response = client.post("/auth/login", json={"email": "worker@skillmail.com", "password": "password123"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_auth_errors(client):
    _register(client)

    duplicate = client.post("/auth/register", json={
        "full_name": "Jane", "email": "worker@skillmail.com", "password": "password123",
    })
    assert duplicate.status_code == 409
    assert _error_code(duplicate) == "ALREADY_EXISTS"

    bad_login = client.post("/auth/login", json={"email": "worker@skillmail.com", "password": "nope"})
    assert bad_login.status_code == 401
    assert _error_code(bad_login) == "NOT_AUTHORIZED"

    bad_token = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad_token.status_code == 401

    invalid = client.post("/auth/register", json={"full_name": "J", "email": "broken", "password": "1"})
    assert invalid.status_code == 422
    assert _error_code(invalid) == "VALIDATION_ERROR"


def test_profile_endpoints(client):
    user = _register(client)

    patched = client.patch(f"/profile/{user['id']}", json={"location": "Pune"})
    assert patched.status_code == 200
    assert patched.json()["location"] == "Pune"
    assert patched.json()["full_name"] == "John Doe"

    photo = client.post(f"/profile/{user['id']}/photo", json={"file_url": "https://m/me.jpg"})
    assert photo.json()["profile_photo"] == "https://m/me.jpg"

    portfolio = client.get(f"/profile/{user['id']}/portfolio")
    assert portfolio.status_code == 200
    assert portfolio.json()["total_certificates"] == 0

    missing = client.get("/profile/999/portfolio")
    assert missing.status_code == 404
    assert _error_code(missing) == "NOT_FOUND"


def test_skill_to_certificate_flow(client, db, make_test):
    worker = _register(client)
    other = _register(client, email="other@skillmail.com", full_name="Other Person")

    skill = client.post("/skills/", json={"name": "Welding", "category": "Technical"}).json()
    user_skill = client.post("/skills/user", json={"user_id": worker["id"], "skill_id": skill["id"]}).json()
    assert user_skill["is_verified"] is False

    again = client.post("/skills/user", json={"user_id": worker["id"], "skill_id": skill["id"]})
    assert again.status_code == 409

    proof_body = {
        "user_id": worker["id"],
        "user_skill_id": user_skill["id"],
        "file_url": "https://m/weld.mp4",
        "file_type": "video",
    }
    foreign = client.post("/proofs/", json={**proof_body, "user_id": other["id"]})
    assert foreign.status_code == 403
    assert _error_code(foreign) == "NOT_AUTHORIZED"

    proof = client.post("/proofs/", json=proof_body).json()
    assert proof["upload_status"] == "uploaded"
    assert client.get(f"/proofs/{proof['id']}/status").json() == {"status": "uploaded", "progress": 50}

    test = make_test(db.get(models.Skill, skill["id"]), questions=(("a", 50), ("b", 50)), passing_score=80)

    proofs.run_verification(db, proof["id"], score_source=lambda: 91.5)
    listed = client.get(f"/proofs/user-skill/{user_skill['id']}").json()
    assert listed[0]["upload_status"] == "verified"

    questions = client.get(f"/tests/{test.id}/questions").json()
    assert [q["order_index"] for q in questions] == [1, 2]
    assert all("correct_answer" not in q for q in questions)

    early = client.post("/certificates/generate", json={"user_skill_id": user_skill["id"]})
    assert early.status_code == 409
    assert _error_code(early) == "NOT_VERIFIED"

    attempt = client.post("/tests/start", json={
        "user_id": worker["id"], "user_skill_id": user_skill["id"], "test_id": test.id,
    }).json()
    assert attempt["completed_at"] is None
    assert attempt["total_points"] == 100

    answers = {str(questions[0]["id"]): "a", str(questions[1]["id"]): "b"}
    submit_body = {"user_id": worker["id"], "attempt_id": attempt["id"], "answers": answers}
    submitted = client.post("/tests/submit", json=submit_body)
    assert submitted.status_code == 200
    assert submitted.json()["score"] == 100
    assert submitted.json()["passed"] is True

    twice = client.post("/tests/submit", json=submit_body)
    assert twice.status_code == 409
    assert _error_code(twice) == "ALREADY_COMPLETED"

    attempts = client.get(f"/tests/attempts/{worker['id']}", params={"skill_id": skill["id"]}).json()
    assert [a["id"] for a in attempts] == [attempt["id"]]

    certificate = client.post("/certificates/generate", json={"user_skill_id": user_skill["id"]})
    assert certificate.status_code == 200
    number = certificate.json()["certificate_number"]

    verified = client.get(f"/certificates/verify/{number}").json()
    assert verified["valid"] is True
    assert verified["certificate"]["user_skill_id"] == user_skill["id"]

    unknown = client.get("/certificates/verify/CERT-0-DEADBEEF").json()
    assert unknown == {"valid": False, "certificate": None}

    download = client.get(f"/certificates/{certificate.json()['id']}/download").json()
    assert download["filename"] == "John_Doe_Welding_Certificate.pdf"
    assert download["url"].endswith(f"/{number}.pdf")

    listed_certificates = client.get(f"/certificates/user/{worker['id']}").json()
    assert [c["certificate_number"] for c in listed_certificates] == [number]


def test_marketplace_endpoints(client, make_user, make_skill, make_user_skill):
    skill = make_skill()
    worker = make_user("Alice Welder", location="Pune", rating=4.5)
    employer = make_user("Bob Employer")
    make_user_skill(worker, skill, verified=True)

    workers = client.get("/marketplace/workers", params={"skill_id": skill.id}).json()
    assert [w["id"] for w in workers] == [worker.id]
    assert workers[0]["verified_skills"][0]["skill_name"] == "Welding"

    out_of_range = client.get("/marketplace/workers", params={"min_rating": 6})
    assert out_of_range.status_code == 422

    profile = client.get(f"/marketplace/workers/{worker.id}").json()
    assert profile["contact_info"] == worker.email

    job = client.post("/marketplace/jobs", json={
        "employer_id": employer.id,
        "title": "Certified welder",
        "description": "Fabrication shop needs a certified welder",
        "skill_id": skill.id,
        "employment_type": "contract",
        "location": "Pune",
    })
    assert job.status_code == 200
    job_id = job.json()["id"]

    assert [j["id"] for j in client.get("/marketplace/jobs", params={"location": "pune"}).json()] == [job_id]

    application = client.post("/marketplace/jobs/apply", json={"applicant_id": worker.id, "job_listing_id": job_id})
    assert application.json()["status"] == "pending"
    duplicate = client.post("/marketplace/jobs/apply", json={"applicant_id": worker.id, "job_listing_id": job_id})
    assert duplicate.status_code == 409

    inbox = client.get(f"/marketplace/applications/{employer.id}", params={"is_employer": True}).json()
    assert [a["applicant_id"] for a in inbox] == [worker.id]


def test_unhandled_error_hides_internals(db, monkeypatch):
    def broken(_db):
        raise RuntimeError("database is locked: SELECT * FROM skills")

    monkeypatch.setattr(skills, "list_skills", broken)
    assert config.DEBUG is False

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/skills/")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "INTERNAL_SERVER_ERROR"
    assert error["message"] == "An unexpected error occurred"
    assert "traceback" not in error["details"]
    assert "SELECT" not in response.text
