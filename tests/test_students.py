import pytest

from placement_portal.screens import SkillsCatalogue, StudentDetail, Students

STUDENT = {
    "_id": "s1",
    "firstName": "Asha",
    "lastName": "Rao",
    "email": "asha@example.edu",
    "studentProfile": {
        "currentSchool": "School of Programming",
        "currentModule": "Backend",
        "batch": "2025",
        "cgpa": 8.4,
        "currentStatus": "Active",
        "github": "https://github.com/asha",
        "resume": "https://files.example.edu/asha.pdf",
        "skills": [
            {"skill": {"_id": "k1", "name": "Python", "category": "technical"}, "status": "approved"},
            {"skill": {"_id": "k2", "name": "Docker", "category": "technical"}, "status": "pending"},
        ],
    },
}

READINESS = {
    "config": [{"criteriaId": "c1", "name": "Resume"}, {"criteriaId": "c2", "name": "Mock interview"}],
    "readiness": {"criteriaStatus": [{"criteriaId": "c1", "status": "verified"}]},
}


def _detail_routes(http):
    http.route("GET", "/users/students/s1", STUDENT)
    http.route("GET", "/applications", {"applications": [{"_id": "a1", "status": "applied"}]})
    http.route("GET", "/job-readiness/student/s1", READINESS)


def test_directory_pages_through_students(api, http):
    http.route("GET", "/users/students", {"students": [STUDENT], "pagination": {"pages": 2}})
    screen = Students(api)
    screen.refresh()

    screen.set_filters(page=2)

    assert http.paths() == ["/users/students", "/users/students"]
    assert http.calls[-1]["params"] == {"page": 2, "limit": 15}
    assert screen.total_pages == 2


def test_directory_filters_go_to_the_server(api, http):
    http.route("GET", "/users/students", {"students": []})
    screen = Students(api)
    screen.set_filters(page=2)

    screen.set_filters(school="School of Programming", status="Placed")

    params = http.calls[-1]["params"]
    assert params["school"] == "School of Programming"
    assert params["status"] == "Placed"
    assert params["page"] == 1


def test_directory_lists_known_schools(api, http):
    other = {"_id": "s2", "studentProfile": {"currentSchool": "School of Business"}}
    http.route("GET", "/users/students", {"students": [STUDENT, other, {"_id": "s3"}]})
    screen = Students(api)
    screen.refresh()

    assert screen.schools() == ["School of Business", "School of Programming"]


def test_unknown_student_status_is_refused(api, http):
    screen = Students(api)

    assert screen.update_status("s1", "Graduated") is False
    assert screen.alert == "Unknown status: Graduated"
    assert http.calls == []


def test_portfolio_collects_profile_and_approved_skills(api, http):
    _detail_routes(http)
    screen = StudentDetail(api, "s1")

    assert screen.refresh()
    folio = screen.portfolio()

    assert folio["name"] == "Asha Rao"
    assert folio["school"] == "School of Programming"
    assert folio["cgpa"] == 8.4
    assert folio["links"] == [("GitHub", "https://github.com/asha"),
                              ("Resume", "https://files.example.edu/asha.pdf")]
    assert [s["name"] for s in folio["skills"]] == ["Python"]
    assert [s["id"] for s in screen.skills("pending")] == ["k2"]
    assert [a["_id"] for a in screen.applications] == ["a1"]
    applications_call = next(c for c in http.calls if c["path"] == "/applications")
    assert applications_call["params"] == {"student": "s1"}


def test_portfolio_readiness_progress(api, http):
    _detail_routes(http)
    screen = StudentDetail(api, "s1")
    screen.refresh()

    prog = screen.progress

    assert (prog.completed, prog.total, prog.percentage) == (1, 2, 50)


def test_skill_review_then_refetch(api, http):
    _detail_routes(http)
    http.route("PUT", "/users/students/s1/skills/k2", {"ok": True})
    screen = StudentDetail(api, "s1")

    assert screen.review_skill("k2", "approved")

    put = next(c for c in http.calls if c["method"] == "PUT")
    assert put["json"] == {"status": "approved"}
    assert screen.notice == "Skill approved"
    assert screen.student["_id"] == "s1"


def test_unknown_skill_review_is_refused(api, http):
    screen = StudentDetail(api, "s1")

    assert screen.review_skill("k2", "maybe") is False
    assert http.calls == []


def test_missing_student_shows_error(api, http):
    screen = StudentDetail(api, "s1")

    assert screen.refresh() is False
    assert screen.error
    assert screen.student is None
    assert not screen.loading


def test_catalogue_filters_locally(api, http):
    http.route("GET", "/skills", {"skills": [
        {"_id": "k1", "name": "Python", "category": "technical"},
        {"_id": "k2", "name": "Public speaking", "category": "soft"},
    ]})
    http.route("GET", "/skills/categories", {"categories": ["technical", "soft"]})
    screen = SkillsCatalogue(api)
    screen.refresh()
    calls = len(http.calls)

    screen.set_filters(category="soft")

    assert [s["_id"] for s in screen.visible] == ["k2"]
    assert screen.categories == ["technical", "soft"]
    assert len(http.calls) == calls


@pytest.mark.parametrize("skill_id, method, path, notice", [
    (None, "POST", "/skills", "Skill created"),
    ("k1", "PUT", "/skills/k1", "Skill updated"),
])
def test_catalogue_save(api, http, skill_id, method, path, notice):
    http.route(method, path, {"ok": True})
    http.route("GET", "/skills", {"skills": []})
    http.route("GET", "/skills/categories", {"categories": []})
    screen = SkillsCatalogue(api)

    assert screen.save({"name": "Go", "category": "technical"}, skill_id)

    assert http.calls[0]["method"] == method
    assert http.calls[0]["json"] == {"name": "Go", "category": "technical"}
    assert screen.notice == notice


def test_nameless_skill_is_not_sent(api, http):
    screen = SkillsCatalogue(api)

    assert screen.save({"name": "  "}) is False
    assert screen.alert == "Skill name is required"
    assert http.calls == []
