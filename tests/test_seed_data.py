from __future__ import annotations

from models import Admin, Client, Job, Recruiter
from scripts.load_seed_data import load_data
from utils.passwords import check_password


def test_seed_loads_once(db) -> None:
    added = load_data(db=db)
    assert added == 3

    admin = db.query(Admin).one()
    assert admin.role == "superadmin"
    assert check_password("Admin@12345", admin.password_hash)
    assert db.query(Recruiter).count() == 1

    client = db.query(Client).one()
    assert client.email == "hr@acme-demo.com"
    assert client.status == "active"
    assert db.query(Job).filter(Job.client_id == client.id).count() == 2

    assert load_data(db=db) == 0
    assert db.query(Job).count() == 2


def test_seed_from_custom_file(db, tmp_path) -> None:
    path = tmp_path / "seed.yml"
    path.write_text(
        "admins:\n"
        "  - username: Ops@Example.com\n"
        "    password: Ops@12345\n"
    )
    assert load_data(path=str(path), db=db) == 1
    assert db.query(Admin).one().username == "ops@example.com"
    assert db.query(Admin).one().role == "admin"
