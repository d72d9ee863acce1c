from __future__ import annotations


def test_health(api) -> None:
    r = api.get("/")
    assert r.status_code == 200
    assert r.json() == {"message": "Successfully server up and running !"}


def test_public_job_board(api, make_client, make_job) -> None:
    client = make_client(logo="https://jobsetu-test.s3.amazonaws.com/clients/1/logos/acme.png")
    first = make_job(client, "Backend Engineer")
    second = make_job(client, "Frontend Engineer")
    make_job(client, "Closed Role", status="closed")

    r = api.get("/getalljobs")
    assert r.status_code == 200
    jobs = r.json()["jobs"]
    assert {j["id"] for j in jobs} == {first.id, second.id}
    assert jobs[0]["logo"].endswith("acme.png")
    assert jobs[0]["primaryContactFirstName"] == "Arjun"

    r = api.get(f"/getjobdetailsbyid/{first.id}")
    assert r.json()["data"]["jobTitle"] == "Backend Engineer"
    assert api.get("/getjobdetailsbyid/999").status_code == 404


def test_candidate_directory_needs_any_valid_token(api, make_client, make_candidate, issuer) -> None:
    candidate = make_candidate()
    client = make_client()
    headers = {"Authorization": f"Bearer {issuer.issue({'clientId': client.id, 'role': 'client'})}"}

    assert api.get("/getallcandidates").status_code == 401
    r = api.get("/getallcandidates", headers=headers)
    assert [c["id"] for c in r.json()["candidates"]] == [candidate.id]
    assert api.get(f"/getcandidatedetailsbyid/{candidate.id}", headers=headers).status_code == 200
    assert api.get("/getcandidatedetailsbyid/999", headers=headers).status_code == 404


def test_contact_us(api, dispatcher) -> None:
    body = {"name": "Neha", "email": "neha@x.com", "mobile": "9876543210", "message": " Need help "}
    r = api.post("/contactus", json=body)
    assert r.status_code == 200
    assert dispatcher.named("send_contact_us")[0][2] == {
        "name": "Neha",
        "email": "neha@x.com",
        "mobile": "9876543210",
        "message": "Need help",
    }
    assert api.post("/contactus", json=dict(body, message="")).status_code == 422
