"""
Tests for the application workflow.

Tests:
- Applying (state checks, duplicates, resume handling)
- Counter consistency on apply/withdraw
- Status transitions and terminal states
- Visibility of applications
- Interview scheduling
"""

import os
from datetime import datetime, timedelta, timezone

from app.models.application import Application, ApplicationStatus
from app.models.job import JobStatus
from app.models.user import UserRole


def apply(client, job_id, headers, resume=None, cover_letter="I am a great fit"):
    files = {"resume": resume} if resume else None
    return client.post(
        f"/api/applications/{job_id}/apply",
        data={"coverLetter": cover_letter},
        files=files,
        headers=headers,
    )


def make_application(db_session, job, applicant, status=ApplicationStatus.PENDING):
    application = Application(
        job_id=job.id,
        applicant_id=applicant.id,
        resume_path="uploads/resumes/resume-test.pdf",
        status=status,
    )
    db_session.add(application)
    job.applications_count += 1
    db_session.commit()
    db_session.refresh(application)
    return application


class TestApply:
    """Test applying for a job"""

    def test_apply_with_upload(self, client, db_session, employer, jobseeker, jobseeker_headers,
                               create_job, resume_file, upload_dir):
        job = create_job(employer)

        response = apply(client, job.id, jobseeker_headers, resume=resume_file)

        assert response.status_code == 201
        data = response.json()["application"]
        assert data["status"] == "pending"
        assert data["coverLetter"] == "I am a great fit"
        assert data["applicantId"] == jobseeker.id
        assert data["resumePath"].startswith(str(upload_dir))
        assert os.path.exists(data["resumePath"])

        db_session.refresh(job)
        assert job.applications_count == 1

    def test_apply_with_profile_resume(self, client, create_user, headers_for, employer, create_job):
        seeker = create_user(UserRole.JOBSEEKER, resume_path="uploads/resumes/stored.pdf")
        job = create_job(employer)

        response = apply(client, job.id, headers_for(seeker))

        assert response.status_code == 201
        assert response.json()["application"]["resumePath"] == "uploads/resumes/stored.pdf"

    def test_apply_without_any_resume(self, client, db_session, employer, jobseeker_headers, create_job):
        job = create_job(employer)

        response = apply(client, job.id, jobseeker_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Resume is required to apply for a job"
        db_session.refresh(job)
        assert job.applications_count == 0

    def test_apply_twice(self, client, db_session, employer, jobseeker_headers, create_job, resume_file):
        job = create_job(employer)
        apply(client, job.id, jobseeker_headers, resume=resume_file)

        response = apply(client, job.id, jobseeker_headers, resume=resume_file)

        assert response.status_code == 400
        assert response.json()["message"] == "You have already applied for this job"
        assert db_session.query(Application).count() == 1
        db_session.refresh(job)
        assert job.applications_count == 1

    def test_apply_to_closed_job(self, client, employer, jobseeker_headers, create_job, resume_file, upload_dir):
        job = create_job(employer, status=JobStatus.CLOSED)

        response = apply(client, job.id, jobseeker_headers, resume=resume_file)

        assert response.status_code == 400
        assert response.json()["message"] == "Job is not currently active"
        assert not (upload_dir / "resumes").exists()

    def test_apply_after_deadline(self, client, employer, jobseeker_headers, create_job, resume_file):
        job = create_job(employer, application_deadline=datetime.now(timezone.utc) - timedelta(hours=1))

        response = apply(client, job.id, jobseeker_headers, resume=resume_file)

        assert response.status_code == 400
        assert response.json()["message"] == "Application deadline has passed"

    def test_apply_to_missing_job(self, client, jobseeker_headers, resume_file):
        response = apply(client, 9999, jobseeker_headers, resume=resume_file)

        assert response.status_code == 404

    def test_employer_cannot_apply(self, client, employer, employer_headers, create_job, resume_file):
        job = create_job(employer)

        response = apply(client, job.id, employer_headers, resume=resume_file)

        assert response.status_code == 403

    def test_reject_disallowed_file_type(self, client, employer, jobseeker_headers, create_job):
        job = create_job(employer)

        response = apply(client, job.id, jobseeker_headers, resume=("resume.exe", b"MZ", "application/octet-stream"))

        assert response.status_code == 400

    def test_cover_letter_too_long(self, client, employer, jobseeker_headers, create_job, resume_file):
        job = create_job(employer)

        response = apply(client, job.id, jobseeker_headers, resume=resume_file, cover_letter="x" * 1001)

        assert response.status_code == 400


class TestCounterConsistency:

    def test_count_matches_applies_minus_withdrawals(self, client, db_session, employer, create_user,
                                                     headers_for, create_job, resume_file):
        job = create_job(employer)
        seekers = [create_user(UserRole.JOBSEEKER) for _ in range(3)]
        application_ids = []
        for seeker in seekers:
            response = apply(client, job.id, headers_for(seeker), resume=resume_file)
            application_ids.append(response.json()["application"]["id"])

        response = client.delete(
            f"/api/applications/{application_ids[0]}/withdraw",
            headers=headers_for(seekers[0])
        )
        assert response.status_code == 200

        db_session.refresh(job)
        assert job.applications_count == 2
        assert db_session.query(Application).filter(Application.job_id == job.id).count() == 2

    def test_counter_never_goes_negative(self, client, db_session, employer, jobseeker, jobseeker_headers, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        job.applications_count = 0
        db_session.commit()

        client.delete(f"/api/applications/{application.id}/withdraw", headers=jobseeker_headers)

        db_session.refresh(job)
        assert job.applications_count == 0


class TestWithdraw:

    def test_withdraw_shortlisted(self, client, db_session, employer, jobseeker, jobseeker_headers, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker, status=ApplicationStatus.SHORTLISTED)

        response = client.delete(f"/api/applications/{application.id}/withdraw", headers=jobseeker_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Application withdrawn successfully"
        db_session.refresh(job)
        assert job.applications_count == 0

    def test_withdraw_terminal_status(self, client, db_session, employer, jobseeker, jobseeker_headers, create_job):
        job = create_job(employer)
        for status in (ApplicationStatus.HIRED, ApplicationStatus.REJECTED):
            application = make_application(db_session, job, jobseeker, status=status)

            response = client.delete(f"/api/applications/{application.id}/withdraw", headers=jobseeker_headers)

            assert response.status_code == 400
            assert response.json()["message"] == "Cannot withdraw application with current status"
            db_session.delete(application)
            db_session.commit()

    def test_only_applicant_can_withdraw(self, client, db_session, employer, jobseeker, create_user,
                                         headers_for, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        other = create_user(UserRole.JOBSEEKER)

        response = client.delete(f"/api/applications/{application.id}/withdraw", headers=headers_for(other))

        assert response.status_code == 403


class TestStatusUpdate:

    def test_owner_updates_status(self, client, db_session, employer, employer_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)

        response = client.put(
            f"/api/applications/{application.id}/status",
            json={"status": "shortlisted", "notes": "Strong profile", "rating": 4},
            headers=employer_headers
        )

        assert response.status_code == 200
        data = response.json()["application"]
        assert data["status"] == "shortlisted"
        assert data["notes"] == "Strong profile"
        assert data["rating"] == 4
        assert data["reviewedAt"] is not None
        assert data["reviewedBy"]["id"] == employer.id

    def test_empty_notes_clear_previous_notes(self, client, db_session, employer, employer_headers,
                                              jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        url = f"/api/applications/{application.id}/status"
        client.put(url, json={"status": "reviewed", "notes": "bad fit"}, headers=employer_headers)

        response = client.put(url, json={"status": "shortlisted", "notes": ""}, headers=employer_headers)

        assert response.status_code == 200
        assert response.json()["application"]["notes"] == ""

    def test_omitted_notes_are_kept(self, client, db_session, employer, employer_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        url = f"/api/applications/{application.id}/status"
        client.put(url, json={"status": "reviewed", "notes": "Call back"}, headers=employer_headers)

        response = client.put(url, json={"status": "shortlisted"}, headers=employer_headers)

        assert response.json()["application"]["notes"] == "Call back"

    def test_unknown_status(self, client, db_session, employer, employer_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)

        response = client.put(
            f"/api/applications/{application.id}/status",
            json={"status": "promoted"},
            headers=employer_headers
        )

        assert response.status_code == 400

    def test_terminal_status_is_final(self, client, db_session, employer, employer_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker, status=ApplicationStatus.HIRED)

        response = client.put(
            f"/api/applications/{application.id}/status",
            json={"status": "pending"},
            headers=employer_headers
        )

        assert response.status_code == 400
        db_session.refresh(application)
        assert application.status == ApplicationStatus.HIRED

    def test_other_employer_cannot_update(self, client, db_session, employer, jobseeker, create_user,
                                          headers_for, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        other = create_user(UserRole.EMPLOYER)

        response = client.put(
            f"/api/applications/{application.id}/status",
            json={"status": "rejected"},
            headers=headers_for(other)
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to update this application"

    def test_admin_can_update(self, client, db_session, employer, admin_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)

        response = client.put(
            f"/api/applications/{application.id}/status",
            json={"status": "reviewed"},
            headers=admin_headers
        )

        assert response.status_code == 200


class TestInterview:

    def test_schedule_interview(self, client, db_session, employer, employer_headers, jobseeker, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker, status=ApplicationStatus.SHORTLISTED)

        response = client.put(
            f"/api/applications/{application.id}/interview",
            json={"date": "2030-01-15T10:00:00Z", "time": "10:00", "type": "video", "location": "Zoom"},
            headers=employer_headers
        )

        assert response.status_code == 200
        interview = response.json()["application"]["interview"]
        assert interview["scheduled"] is True
        assert interview["type"] == "video"
        assert interview["location"] == "Zoom"

    def test_cannot_schedule_for_rejected(self, client, db_session, employer, employer_headers, jobseeker,
                                          create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker, status=ApplicationStatus.REJECTED)

        response = client.put(
            f"/api/applications/{application.id}/interview",
            json={"date": "2030-01-15T10:00:00Z"},
            headers=employer_headers
        )

        assert response.status_code == 400


class TestVisibility:

    def test_my_applications(self, client, db_session, employer, jobseeker, jobseeker_headers, create_user,
                             create_job):
        mine = make_application(db_session, create_job(employer), jobseeker)
        make_application(db_session, create_job(employer), create_user(UserRole.JOBSEEKER))

        response = client.get("/api/applications/my-applications", headers=jobseeker_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["applications"][0]["id"] == mine.id
        assert data["applications"][0]["job"]["title"] == "Backend Engineer"

    def test_my_applications_status_filter(self, client, db_session, employer, jobseeker, jobseeker_headers,
                                           create_job):
        make_application(db_session, create_job(employer), jobseeker)
        make_application(db_session, create_job(employer), jobseeker, status=ApplicationStatus.REVIEWED)

        response = client.get("/api/applications/my-applications?status=reviewed", headers=jobseeker_headers)

        assert response.json()["total"] == 1

    def test_job_applications_for_owner(self, client, db_session, employer, employer_headers, jobseeker,
                                        create_job):
        job = create_job(employer)
        make_application(db_session, job, jobseeker)

        response = client.get(f"/api/applications/job/{job.id}", headers=employer_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["applications"][0]["applicant"]["id"] == jobseeker.id

    def test_job_applications_forbidden_for_other_employer(self, client, employer, create_user, headers_for,
                                                          create_job):
        job = create_job(employer)
        other = create_user(UserRole.EMPLOYER)

        response = client.get(f"/api/applications/job/{job.id}", headers=headers_for(other))

        assert response.status_code == 403

    def test_get_application_access(self, client, db_session, employer, employer_headers, jobseeker,
                                    jobseeker_headers, admin_headers, create_user, headers_for, create_job):
        job = create_job(employer)
        application = make_application(db_session, job, jobseeker)
        stranger = create_user(UserRole.JOBSEEKER)
        url = f"/api/applications/{application.id}"

        assert client.get(url, headers=jobseeker_headers).status_code == 200
        assert client.get(url, headers=employer_headers).status_code == 200
        assert client.get(url, headers=admin_headers).status_code == 200
        response = client.get(url, headers=headers_for(stranger))
        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to view this application"

    def test_get_missing_application(self, client, jobseeker_headers):
        response = client.get("/api/applications/9999", headers=jobseeker_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Application not found"
