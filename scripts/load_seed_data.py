import os
import sys

import yaml

# Add repository root to path so we can import models/db
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from database import SessionLocal, engine, Base  # noqa: E402
from models import Admin, Client, Job, Recruiter  # noqa: E402
from utils.passwords import hash_password  # noqa: E402


def load_data(path=None, db=None):
    """
    Create the bootstrap superadmin, recruiters and demo clients/jobs.

    Rows whose key (username/email) already exists are skipped, so the script
    can be re-run safely.
    """
    Base.metadata.create_all(bind=engine)
    own_session = db is None
    if own_session:
        db = SessionLocal()

    path = path or os.path.join(os.path.dirname(__file__), "seed_data.yml")
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    added = 0
    for a in data.get("admins", []) or []:
        username = a["username"].strip().lower()
        if db.query(Admin).filter(Admin.username == username).first():
            print(f"Admin {username} already exists. Skipping.")
            continue
        db.add(Admin(username=username, password_hash=hash_password(a["password"]), role=a.get("role", "admin")))
        print(f"Adding admin {username}...")
        added += 1

    for r in data.get("recruiters", []) or []:
        email = r["email"].strip().lower()
        if db.query(Recruiter).filter(Recruiter.email == email).first():
            print(f"Recruiter {email} already exists. Skipping.")
            continue
        db.add(Recruiter(
            first_name=r["first_name"],
            last_name=r["last_name"],
            email=email,
            password_hash=hash_password(r["password"]),
        ))
        print(f"Adding recruiter {email}...")
        added += 1

    for c in data.get("clients", []) or []:
        email = c["email"].strip().lower()
        if db.query(Client).filter(Client.email == email).first():
            print(f"Client {email} already exists. Skipping.")
            continue
        jobs = c.pop("jobs", []) or []
        password = c.pop("password")
        c["email"] = email
        client = Client(**c, password_hash=hash_password(password))
        client.jobs = [Job(organization_name=client.organization_name, **j) for j in jobs]
        db.add(client)
        print(f"Adding client {email} with {len(jobs)} job(s)...")
        added += 1

    db.commit()
    if own_session:
        db.close()
    print("Seed data loaded.")
    return added


if __name__ == "__main__":
    load_data(sys.argv[1] if len(sys.argv) > 1 else None)
