import pytest

from placement_portal.models import Criterion
from placement_portal.readiness import (
    CriterionLocked,
    active_schools,
    ensure_editable,
    group_by_category,
    merge_criteria,
    progress,
    student_criteria,
    validate_criterion,
)


def crit(cid, category="other", targets=None):
    return {"criteriaId": cid, "name": cid.title(), "category": category, "targetSchools": targets or []}


@pytest.fixture
def configs():
    return [
        {"_id": "cfg-common", "school": "Common", "criteria": [crit("resume", "profile"), crit("mock")]},
        {"_id": "cfg-prog", "school": "School of Programming", "criteria": [
            crit("dsa", "technical", targets=["School of Business"]),
            crit("github", "profile"),
        ]},
        {"_id": "cfg-biz", "school": "School of Business", "criteria": [
            crit("excel", "skills"),
            crit("resume", "profile"),
        ]},
    ]


def ids(merged):
    return [(c.criteria_id, c.source, c.editable) for c in merged.criteria]


def test_school_view_orders_own_then_shared_then_common(configs):
    merged = merge_criteria(configs, "School of Business")

    assert merged.config_id == "cfg-biz"
    assert ids(merged) == [
        ("excel", "School of Business", True),
        ("resume", "School of Business", True),
        ("dsa", "School of Programming", False),
        ("mock", "Common", False),
    ]


def test_untargeted_criteria_stay_home(configs):
    merged = merge_criteria(configs, "School of Programming")

    assert [c.criteria_id for c in merged.criteria] == ["dsa", "github", "resume", "mock"]
    assert all(c.editable for c in merged.criteria[:2])
    assert not any(c.editable for c in merged.criteria[2:])


def test_common_view_lists_every_shared_criterion(configs):
    merged = merge_criteria(configs, "Common")

    assert merged.config_id == "cfg-common"
    assert ids(merged) == [
        ("resume", "Common", True),
        ("mock", "Common", True),
        ("dsa", "School of Programming", False),
    ]


def test_school_without_config_has_no_config_id(configs):
    merged = merge_criteria(configs, "School of Finance")

    assert merged.config_id is None
    assert [c.criteria_id for c in merged.criteria] == ["resume", "mock"]
    assert merged.find("mock").source == "Common"
    assert merged.find("nope") is None


def test_shared_criterion_cannot_be_edited_here(configs):
    shared = merge_criteria(configs, "School of Business").find("dsa")

    with pytest.raises(CriterionLocked) as excinfo:
        ensure_editable(shared, "School of Business")

    assert str(excinfo.value) == (
        "This is shared from School of Programming. Switch to School of Programming to edit it."
    )


def test_validation_messages():
    with pytest.raises(ValueError, match="Name is required"):
        validate_criterion(Criterion(criteria_id="x", name="  "), adding=True)
    with pytest.raises(ValueError, match="Unique ID is required"):
        validate_criterion(Criterion(criteria_id="", name="Resume"), adding=True)
    validate_criterion(Criterion(criteria_id="", name="Resume"), adding=False)


def test_payload_is_trimmed_camel_case():
    c = Criterion(criteria_id=" resume ", name=" Resume ", description=" one page ",
                  category="profile", target_schools=["School of Business"])

    body = c.to_payload()

    assert body["criteriaId"] == "resume"
    assert body["name"] == "Resume"
    assert body["description"] == "one page"
    assert body["targetSchools"] == ["School of Business"]
    assert body["pocRatingScale"] == 4


def test_unknown_category_lands_in_other():
    c = Criterion.from_dict({"criteriaId": "x", "name": "X", "category": "misc"}, source="Common", editable=True)

    assert c.category == "other"


def test_grouping_keeps_order_and_other(configs):
    merged = merge_criteria(configs, "School of Programming")

    groups = group_by_category([c for c in merged.criteria if c.category != "other"])

    assert [cat for cat, _ in groups] == ["profile", "technical", "other"]
    assert groups[-1][1] == []


def test_active_schools_prepends_common_and_skips_inactive():
    settings = {"schools": ["School of Programming", "School of Finance"],
                "inactiveSchools": ["School of Finance"]}

    assert active_schools(settings) == ["Common", "School of Programming"]
    assert active_schools(None)[0] == "Common"


def test_student_rows_join_config_and_status():
    rows = student_criteria({
        "config": [crit("resume"), crit("github"), crit("dsa")],
        "readiness": {"criteriaStatus": [
            {"criteriaId": "resume", "status": "verified"},
            {"criteriaId": "github", "status": "completed", "selfReportedValue": "gh/asha"},
        ]},
    })

    assert [r["verificationStatus"] for r in rows] == ["verified", "pending", "not_started"]
    assert [r["completed"] for r in rows] == [True, True, False]
    assert rows[1]["selfReportedValue"] == "gh/asha"

    p = progress(rows)
    assert (p.completed, p.submitted, p.total, p.percentage) == (1, 2, 3, 33)


@pytest.mark.parametrize("verified,total,expected", [(2, 3, 67), (1, 8, 13), (0, 5, 0), (0, 0, 0), (4, 4, 100)])
def test_progress_percentage_rounds_half_up(verified, total, expected):
    rows = [{"verificationStatus": "verified", "completed": True}] * verified
    rows += [{"verificationStatus": "not_started", "completed": False}] * (total - verified)

    assert progress(rows).percentage == expected
