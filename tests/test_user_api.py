def test_register_patient(register):
    resp = register("patient", "a@x.com", firstName="Ada", lastName="Lovelace")
    assert resp.status_code == 201
    assert resp.headers["Location"] == "/api/user/patient/a@x.com"
    body = resp.get_json()
    assert body["email"] == "a@x.com"
    assert body["role"] == "patient"
    assert body["firstName"] == "Ada"
    assert body["vitals"] == {"ecg": [], "heartRate": [], "spO2": []}
    assert "password" not in body
    assert "salt" not in body


def test_register_hcp(register):
    resp = register("hcp", "doc@x.com")
    assert resp.status_code == 201
    assert resp.headers["Location"] == "/api/user/hcp/doc@x.com"
    assert resp.get_json()["patients"] == []


def test_register_same_email_twice_conflicts(register):
    assert register("patient", "a@x.com").status_code == 201
    resp = register("patient", "a@x.com", password="other")
    assert resp.status_code == 409
    assert resp.get_json()["code"] == "conflict"


def test_register_validation(client, register):
    assert register("patient", "not-an-email").status_code == 400
    assert register("hcp", "doc@x.com", password="").status_code == 400

    resp = client.post("/api/user/auth/patient/register", data="nope",
                       content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "validation_error"


def test_login_example(client, register):
    assert register("patient", "a@x.com", password="pw1").status_code == 201

    ok = client.post("/api/user/auth/patient/login",
                     json={"email": "a@x.com", "password": "pw1"})
    assert ok.status_code == 200
    assert ok.get_json()["email"] == "a@x.com"

    bad = client.post("/api/user/auth/patient/login",
                      json={"email": "a@x.com", "password": "wrong"})
    assert bad.status_code == 401

    missing = client.post("/api/user/auth/patient/login",
                          json={"email": "b@x.com", "password": "pw1"})
    assert missing.status_code == 404


def test_hcp_login_does_not_accept_patient_account(client, register):
    register("patient", "a@x.com")
    resp = client.post("/api/user/auth/hcp/login",
                       json={"email": "a@x.com", "password": "pw1"})
    assert resp.status_code == 404


def test_get_users(client, register):
    register("patient", "a@x.com")
    register("hcp", "doc@x.com")

    assert client.get("/api/user/patient/a@x.com").get_json()["email"] == "a@x.com"
    assert client.get("/api/user/hcp/doc@x.com").get_json()["role"] == "hcp"
    assert client.get("/api/user/patient/doc@x.com").status_code == 404
    assert client.get("/api/user/hcp/nobody@x.com").status_code == 404
    assert client.get("/api/user/patient/not-an-email").status_code == 400


def test_patient_association_flow(client, register):
    register("patient", "a@x.com")
    register("hcp", "doc@x.com")
    base = "/api/user/hcp/doc@x.com/patients"

    assert client.get(base).get_json() == []

    added = client.put(f"{base}/a@x.com")
    assert added.status_code == 200
    assert added.get_json()["patients"] == ["a@x.com"]
    assert client.get(base).get_json() == ["a@x.com"]

    again = client.put(f"{base}/A@X.com")
    assert again.status_code == 409
    assert "already registered" in again.get_json()["message"]

    removed = client.delete(f"{base}/a@x.com")
    assert removed.status_code == 200
    assert removed.get_json()["patients"] == []

    assert client.delete(f"{base}/a@x.com").status_code == 409


def test_association_with_unknown_users(client, register):
    register("patient", "a@x.com")
    register("hcp", "doc@x.com")

    assert client.get("/api/user/hcp/nobody@x.com/patients").status_code == 404
    assert client.put("/api/user/hcp/doc@x.com/patients/ghost@x.com").status_code == 404
    assert client.put("/api/user/hcp/nobody@x.com/patients/a@x.com").status_code == 404
    assert client.delete("/api/user/hcp/nobody@x.com/patients/a@x.com").status_code == 404
    assert client.put("/api/user/hcp/doc@x.com/patients/bad-email").status_code == 400


def test_health(client):
    assert client.get("/health").get_json() == {"status": "OK"}


def test_register_rejects_password_longer_than_bcrypt_accepts(register):
    resp = register("patient", "a@x.com", password="x" * 73)
    assert resp.status_code == 400
    assert "password" in resp.get_json()["details"]
    assert register("patient", "a@x.com", password="x" * 72).status_code == 201
