"""
Tests for profile, upload, favorites and account endpoints.
"""

import os

from app.core.config import settings
from app.models.application import Application
from app.models.job import Job
from app.models.user import User, UserRole


class TestProfile:

    def test_get_profile(self, client, jobseeker, jobseeker_headers):
        response = client.get("/api/users/profile", headers=jobseeker_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == jobseeker.id
        assert user["profile"]["skills"] == []
        assert user["company"]["name"] is None

    def test_update_nested_fields(self, client, jobseeker_headers):
        response = client.put(
            "/api/users/profile",
            json={
                "name": "  Jane Q. Seeker ",
                "phone": "555-0100",
                "profile": {"bio": "Pythonista", "skills": ["python", "sql"], "github": "janeq"},
            },
            headers=jobseeker_headers
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["name"] == "Jane Q. Seeker"
        assert user["phone"] == "555-0100"
        assert user["profile"]["bio"] == "Pythonista"
        assert user["profile"]["skills"] == ["python", "sql"]
        assert user["profile"]["github"] == "janeq"

    def test_update_dotted_company_fields(self, client, employer_headers):
        response = client.put(
            "/api/users/profile",
            json={"company.name": "Globex", "company.industry": "Energy"},
            headers=employer_headers
        )

        assert response.status_code == 200
        company = response.json()["user"]["company"]
        assert company["name"] == "Globex"
        assert company["industry"] == "Energy"

    def test_protected_fields_are_ignored(self, client, db_session, jobseeker, jobseeker_headers):
        original_hash = jobseeker.hashed_password

        response = client.put(
            "/api/users/profile",
            json={"role": "admin", "email": "new@example.com", "password": "hacked!", "isActive": False},
            headers=jobseeker_headers
        )

        assert response.status_code == 200
        db_session.refresh(jobseeker)
        assert jobseeker.role == UserRole.JOBSEEKER
        assert jobseeker.email != "new@example.com"
        assert jobseeker.hashed_password == original_hash
        assert jobseeker.is_active is True

    def test_invalid_skills(self, client, jobseeker_headers):
        response = client.put(
            "/api/users/profile",
            json={"profile": {"skills": "python"}},
            headers=jobseeker_headers
        )

        assert response.status_code == 400

    def test_empty_name(self, client, jobseeker_headers):
        response = client.put("/api/users/profile", json={"name": "   "}, headers=jobseeker_headers)

        assert response.status_code == 400


class TestUploads:

    def test_upload_resume(self, client, db_session, jobseeker, jobseeker_headers, resume_file):
        response = client.post("/api/users/upload-resume", files={"resume": resume_file}, headers=jobseeker_headers)

        assert response.status_code == 200
        data = response.json()
        assert os.path.exists(data["path"])
        assert os.path.basename(os.path.dirname(data["path"])) == "resumes"
        assert data["user"]["profile"]["resume"] == data["path"]
        db_session.refresh(jobseeker)
        assert jobseeker.resume_path == data["path"]

    def test_upload_profile_picture(self, client, jobseeker_headers):
        response = client.post(
            "/api/users/upload-profile-picture",
            files={"profilePicture": ("me.png", b"\x89PNG fake", "image/png")},
            headers=jobseeker_headers
        )

        assert response.status_code == 200
        assert "/profiles/" in response.json()["path"].replace(os.sep, "/")

    def test_upload_company_logo(self, client, employer_headers):
        response = client.post(
            "/api/users/upload-company-logo",
            files={"companyLogo": ("logo.jpg", b"\xff\xd8 fake", "image/jpeg")},
            headers=employer_headers
        )

        assert response.status_code == 200
        assert response.json()["user"]["company"]["logo"] == response.json()["path"]

    def test_upload_wrong_type(self, client, jobseeker_headers, upload_dir):
        response = client.post(
            "/api/users/upload-resume",
            files={"resume": ("resume.png", b"\x89PNG", "image/png")},
            headers=jobseeker_headers
        )

        assert response.status_code == 400
        assert not (upload_dir / "resumes").exists()

    def test_upload_too_large(self, client, jobseeker_headers, upload_dir):
        too_big = b"x" * (settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024 + 1)

        response = client.post(
            "/api/users/upload-resume",
            files={"resume": ("resume.pdf", too_big, "application/pdf")},
            headers=jobseeker_headers
        )

        assert response.status_code == 400
        assert not (upload_dir / "resumes").exists()

    def test_upload_missing_file(self, client, jobseeker_headers):
        response = client.post("/api/users/upload-resume", headers=jobseeker_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Please upload a file"


class TestFavorites:

    def test_add_list_remove(self, client, employer, jobseeker_headers, create_job):
        job = create_job(employer)

        response = client.post(f"/api/users/favorites/{job.id}", headers=jobseeker_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Job added to favorites"

        favorites = client.get("/api/users/favorites", headers=jobseeker_headers).json()["favorites"]
        assert [favorite["id"] for favorite in favorites] == [job.id]

        profile = client.get("/api/users/profile", headers=jobseeker_headers).json()["user"]
        assert profile["favorites"] == [job.id]

        response = client.delete(f"/api/users/favorites/{job.id}", headers=jobseeker_headers)
        assert response.status_code == 200
        assert client.get("/api/users/favorites", headers=jobseeker_headers).json()["favorites"] == []

    def test_add_duplicate(self, client, employer, jobseeker_headers, create_job):
        job = create_job(employer)
        client.post(f"/api/users/favorites/{job.id}", headers=jobseeker_headers)

        response = client.post(f"/api/users/favorites/{job.id}", headers=jobseeker_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Job is already in favorites"

    def test_add_missing_job(self, client, jobseeker_headers):
        response = client.post("/api/users/favorites/9999", headers=jobseeker_headers)

        assert response.status_code == 404

    def test_remove_absent_favorite(self, client, jobseeker_headers):
        response = client.delete("/api/users/favorites/9999", headers=jobseeker_headers)

        assert response.status_code == 200


class TestDeleteAccount:

    def test_self_delete_keeps_jobs_and_applications(self, client, db_session, employer, employer_headers,
                                                     jobseeker, create_job):
        job = create_job(employer)
        job_id = job.id
        db_session.add(Application(job_id=job_id, applicant_id=jobseeker.id, resume_path="resumes/r.pdf"))
        db_session.commit()

        response = client.delete("/api/users/account", headers=employer_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Account deleted successfully"
        assert db_session.query(User).filter(User.role == UserRole.EMPLOYER).count() == 0
        db_session.expire_all()
        remaining = db_session.query(Job).filter(Job.id == job_id).first()
        assert remaining is not None
        assert remaining.posted_by_id is None
        assert db_session.query(Application).count() == 1

    def test_sole_admin_cannot_delete_own_account(self, client, db_session, admin, admin_headers):
        response = client.delete("/api/users/account", headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Cannot delete the last admin user"}
        assert db_session.query(User).filter(User.role == UserRole.ADMIN, User.is_active.is_(True)).count() == 1
        assert client.get("/api/auth/me", headers=admin_headers).status_code == 200

    def test_admin_can_delete_own_account_when_another_admin_remains(self, client, db_session, admin,
                                                                     admin_headers, create_user):
        other_admin = create_user(UserRole.ADMIN)

        response = client.delete("/api/users/account", headers=admin_headers)

        assert response.status_code == 200
        remaining = db_session.query(User).filter(User.role == UserRole.ADMIN).all()
        assert [user.id for user in remaining] == [other_admin.id]

    def test_self_delete_clears_session(self, client, create_user):
        create_user(email="leaving@example.com")
        client.post("/api/auth/login", json={"email": "leaving@example.com", "password": "secret123"})

        assert client.delete("/api/users/account").status_code == 200
        assert client.get("/api/auth/me").status_code == 401
