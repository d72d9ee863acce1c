from __future__ import annotations


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _login(api, email="rec@jobsetu.com", password="Recruit@123"):
    return api.post("/recruiter", json={"email": email, "password": password})


def test_recruiter_login(api, make_recruiter, issuer) -> None:
    recruiter = make_recruiter()

    r = _login(api)
    assert r.status_code == 200, r.text
    assert issuer.verify(r.json()["data"]["token"]) == {
        "recruiterId": recruiter.id,
        "firstName": "Riya",
        "lastName": "Sharma",
        "email": "rec@jobsetu.com",
        "role": "recruiter",
    }
    assert _login(api, password="Wrong@123").status_code == 401
    assert _login(api, email="ghost@jobsetu.com").status_code == 404


def test_deleted_recruiter_cannot_log_in(api, make_recruiter) -> None:
    make_recruiter(is_deleted=True)
    assert _login(api).status_code == 404


def test_recruiter_views(api, make_recruiter, make_client, make_job, make_candidate) -> None:
    make_recruiter()
    active = make_client()
    make_client(email="new@globex.com", organization_name="Globex", status="registered")
    job = make_job(active, "Backend Engineer")
    candidate = make_candidate()
    headers = _auth(_login(api).json()["data"]["token"])

    assert [j["id"] for j in api.get("/recruiter/jobs", headers=headers).json()["jobs"]] == [job.id]
    assert api.get(f"/recruiter/job/{job.id}", headers=headers).json()["data"]["jobTitle"] == "Backend Engineer"
    assert api.get("/recruiter/job/999", headers=headers).status_code == 404

    clients = api.get("/recruiter/clients", headers=headers).json()["clients"]
    assert [c["email"] for c in clients] == ["hr@acme.com"]
    assert api.get(f"/recruiter/client/{active.id}", headers=headers).status_code == 200

    candidates = api.get("/recruiter/candidates", headers=headers).json()["candidates"]
    assert [c["email"] for c in candidates] == [candidate.email]
    assert api.get(f"/recruiter/candidate/{candidate.id}", headers=headers).status_code == 200
    assert api.get("/recruiter/candidate/999", headers=headers).status_code == 404


def test_recruiter_routes_need_recruiter_token(api, make_candidate, issuer) -> None:
    candidate = make_candidate()
    token = issuer.issue({"candidateId": candidate.id, "email": candidate.email, "role": "candidate"})
    assert api.get("/recruiter/jobs", headers=_auth(token)).status_code == 401
    assert api.get("/recruiter/jobs").status_code == 401
