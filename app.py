"""Streamlit UI for the campus placement portal."""
from __future__ import annotations

import base64
import sys
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import streamlit as st
from streamlit import runtime
from streamlit.runtime.scriptrunner import get_script_run_ctx

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from placement_portal.api import ApiError, PortalAPI
from placement_portal.config import ensure_dirs
from placement_portal.events import get_channel, release_channel
from placement_portal.log import get_logger
from placement_portal.models import (
    CRITERION_TYPES,
    JOB_TYPES,
    SELF_APPLICATION_STATUSES,
    STUDENT_STATUSES,
    Criterion,
)
from placement_portal.notifications import badge_text
from placement_portal.poller import UnreadCounter
from placement_portal.readiness import CATEGORY_LABELS
from placement_portal.routes import ROLE_SECTIONS, page_path
from placement_portal.scam_detector import PRESCREEN_MIN_CHARS, prescreen
from placement_portal.screens import (
    CoordinatorJobs,
    CriteriaConfig,
    Forum,
    JobDetail,
    JobReadiness,
    Jobs,
    MyApplications,
    Notifications,
    Profile,
    ProfileApprovals,
    ReadinessReview,
    ScamDetector,
    ScamReportDetail,
    ScamReportsRepository,
    SelfApplications,
    SelfApplicationsReview,
    Settings,
    SkillApprovals,
    SkillsCatalogue,
    StudentDetail,
    Students,
    verification_state,
)
from placement_portal.screens.base import person_name
from placement_portal.screens.jobs import APPLY_BLOCKED, MIN_INTEREST_REASON, company_name, format_salary
from placement_portal.session import SessionProvider
from placement_portal.storage import browser_storage, is_browser_id, new_browser_id

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

VERDICT_BADGE = {"SAFE": "🟢 SAFE", "WARNING": "🟠 WARNING", "DANGER": "🔴 DANGER"}

_PORTAL_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #eef2ff 0%, #f8fafc 55%, #ecfdf5 100%);
}
[data-testid="stSidebar"] {
    background: rgba(248,250,252,0.8);
    backdrop-filter: blur(10px);
    -webkit-backdrop-filter: blur(10px);
    border-right: 1px solid #e2e8f0;
}
.block-container { padding-top: 2rem; }
[data-testid="stMetric"] {
    background: #ffffff;
    padding: 0.75rem 1rem;
    border-radius: 10px;
    border: 1px solid #e2e8f0;
    box-shadow: 0 2px 8px rgba(15,23,42,0.08);
}
[data-testid="stForm"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.5);
    border-radius: 10px;
    border: 1px solid #e2e8f0;
}
.flag-chip {
    display: inline-block; padding: 0.15rem 0.6rem; margin: 0.1rem;
    background: rgba(231,76,60,0.1); border: 1px solid #e74c3c;
    border-radius: 999px; font-size: 0.8rem; color: #c0392b;
}
</style>
"""

# ── Session plumbing ─────────────────────────────────────────────────────


def _browser_id() -> str:
    """Random id naming this browser's credential file, carried in the ``sid`` query parameter."""
    if "browser_id" not in st.session_state:
        sid = st.query_params.get("sid")
        st.session_state["browser_id"] = sid if is_browser_id(sid) else new_browser_id()
    browser_id = st.session_state["browser_id"]
    if st.query_params.get("sid") != browser_id:
        st.query_params["sid"] = browser_id
    return browser_id


def _session() -> SessionProvider:
    browser_id = _browser_id()
    if "session" not in st.session_state:
        ensure_dirs()
        storage = browser_storage(browser_id)
        channel = get_channel(browser_id)
        api = PortalAPI.create(storage, channel=channel)
        session = SessionProvider(api, storage, channel=channel)
        session.rehydrate("/")
        st.session_state["session"] = session
    return st.session_state["session"]


def _api() -> PortalAPI:
    return _session().api


def _screen(key: str, factory: Callable[[], Any]) -> Any:
    """Per-browser-session controller, refreshed once when first shown."""
    screens = st.session_state.setdefault("screens", {})
    if key not in screens:
        screen = factory()
        screen.refresh()
        screens[key] = screen
    return screens[key]


def _liveness() -> Callable[[], bool]:
    """True while the Streamlit session that started the pollers is still connected."""
    ctx = get_script_run_ctx()
    session_id = ctx.session_id if ctx is not None else None

    def alive() -> bool:
        return (
            session_id is not None
            and runtime.exists()
            and runtime.get_instance().is_active_session(session_id)
        )

    return alive


def _counters() -> dict[str, UnreadCounter]:
    if "counters" not in st.session_state:
        api = _api()
        session = _session()
        browser_id = st.session_state["browser_id"]
        alive = _liveness()

        def orphaned() -> None:
            session.close()
            release_channel(browser_id)

        st.session_state["counters"] = {
            "navbar": UnreadCounter(api, "navbar", alive=alive, on_orphaned=orphaned).start(),
            "sidebar": UnreadCounter(api, "sidebar", alive=alive, on_orphaned=orphaned).start(),
        }
    return st.session_state["counters"]


def _teardown() -> None:
    for counter in st.session_state.pop("counters", {}).values():
        counter.stop()
    st.session_state.pop("screens", None)
    st.session_state.pop("scam_detector", None)
    st.session_state.pop("deep_link", None)


def _flash(screen: Any) -> None:
    if getattr(screen, "alert", None):
        st.error(screen.alert)
        screen.alert = None
    if getattr(screen, "notice", None):
        st.success(screen.notice)
        screen.notice = None


def _error_banner(screen: Any) -> bool:
    if screen.error:
        st.error(screen.error)
        if st.button("Retry", key=f"retry_{id(screen)}"):
            screen.refresh()
            st.rerun()
        return True
    return False


def _rerun_if(ok: bool) -> None:
    if ok:
        st.rerun()


def _take_link(section: str) -> dict[str, str]:
    """Parameters of a notification link aimed at *section*, consumed once."""
    route = st.session_state.get("deep_link")
    if route is None or route.section != section:
        return {}
    del st.session_state["deep_link"]
    return dict(route.params)


def _pager(screen: Any, key: str) -> None:
    page, pages = screen.page, screen.total_pages
    p1, p2, p3 = st.columns([1, 2, 1])
    if page > 1 and p1.button("← Previous", key=f"{key}_prev"):
        screen.set_filters(page=page - 1)
        st.rerun()
    p2.caption(f"Page {page} of {pages}")
    if page < pages and p3.button("Next →", key=f"{key}_next"):
        screen.set_filters(page=page + 1)
        st.rerun()


# ── Page: Login ──────────────────────────────────────────────────────────


def page_login() -> None:
    st.header("Campus Placement Portal")
    tab_login, tab_register = st.tabs(["Sign in", "Register"])
    session = _session()

    with tab_login:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Sign in", type="primary", use_container_width=True):
                try:
                    session.login(email.strip(), password)
                    st.rerun()
                except ApiError as exc:
                    st.error(exc.message or "Login failed")

    with tab_register:
        with st.form("register"):
            c1, c2 = st.columns(2)
            first = c1.text_input("First name")
            last = c2.text_input("Last name")
            email = st.text_input("Email", key="reg_email")
            password = st.text_input("Password", type="password", key="reg_pass")
            if st.form_submit_button("Create account", use_container_width=True):
                try:
                    user = session.register({
                        "firstName": first, "lastName": last,
                        "email": email.strip(), "password": password, "role": "student",
                    })
                    if user:
                        st.rerun()
                    st.success("Account created. Sign in to continue.")
                except ApiError as exc:
                    for field, msg in exc.field_errors.items():
                        st.error(f"{field}: {msg}")
                    if not exc.field_errors:
                        st.error(exc.message or "Registration failed")


# ── Page: Student ────────────────────────────────────────────────────────


def _jobs() -> Jobs:
    screen = Jobs(_api())
    screen.load_role_categories()
    return screen


def page_jobs() -> None:
    link = _take_link("jobs")
    if link.get("id"):
        st.query_params["job"] = link["id"]
    job_id = st.query_params.get("job")
    if job_id:
        _job_detail(job_id)
        return

    st.header("Jobs")
    screen = _screen("jobs", _jobs)
    _flash(screen)
    if not screen.can_apply:
        st.warning(APPLY_BLOCKED["profile_required"])

    labels = {"jobs": "Jobs", "internships": "Internships", "paid-projects": "Paid Projects"}
    c1, c2 = st.columns(2)
    category = c1.radio("Category", list(labels), format_func=labels.get, horizontal=True, key="jobs_cat")
    tab = c2.radio("Show", ["all", "matching"], format_func=lambda t: "All" if t == "all" else "Matching me",
                   horizontal=True, key="jobs_tab")
    c3, c4 = st.columns([2, 1])
    roles = ["", *screen.role_categories]
    screen.set_filters(
        category=category, tab=tab,
        search=c3.text_input("Search title, company or location", key="jobs_search"),
        roleCategory=c4.selectbox("Role", roles, format_func=lambda r: r or "All roles", key="jobs_role"),
    )
    if _error_banner(screen):
        return

    if not screen.visible:
        st.info("No matching jobs right now." if tab == "matching" else "No jobs posted yet.")
    for job in screen.visible:
        with st.container(border=True):
            st.markdown(f"**{job.get('title', '')}** · {company_name(job)}")
            details = [job.get("location") or "", format_salary(job.get("salary"), job.get("jobType", ""))]
            if job.get("matchPercentage") is not None:
                details.append(f"{job['matchPercentage']}% match")
            st.caption(" · ".join(d for d in details if d))
            if st.button("View", key=f"job_{job['_id']}"):
                st.query_params["job"] = job["_id"]
                st.rerun()

    if tab == "all":
        _pager(screen, "jobs")


def _job_detail(job_id: str) -> None:
    screen = _screen(f"job_{job_id}", lambda: JobDetail(_api(), job_id))
    _flash(screen)
    if st.button("← All jobs"):
        del st.query_params["job"]
        st.rerun()
    if _error_banner(screen) or not screen.job:
        return
    job = screen.job
    st.header(job.get("title", ""))
    st.markdown(f"**{company_name(job)}** · {job.get('location', '')} · "
                f"{format_salary(job.get('salary'), job.get('jobType', ''))}")
    if job.get("applicationDeadline"):
        st.caption(f"Apply by {str(job['applicationDeadline'])[:10]}")
    st.write(job.get("description", ""))

    if screen.match:
        m = screen.match_breakdown()
        st.subheader(f"Your match: {m['overall']}%")
        c1, c2 = st.columns(2)
        c1.metric("Skills", f"{m['skills_matched']}/{m['skills_required']}")
        c2.metric("Eligibility", f"{m['eligibility_passed']}/{m['eligibility_total']}")
        for line in m["summary"]:
            st.markdown(f"- {line}")

    state = screen.apply_state()
    if state == "open":
        with st.form("apply"):
            cover = st.text_area("Cover letter (optional)")
            confirmations = {}
            for i, req in enumerate(screen.custom_requirements):
                label = req.get("requirement", "")
                confirmations[i] = st.checkbox(f"{label}{' *' if req.get('isMandatory') else ''}", key=f"req_{i}")
            if st.form_submit_button("Apply", type="primary"):
                _rerun_if(screen.apply(cover, confirmations))
    elif state == "interest_needed":
        st.info(APPLY_BLOCKED[state])
        with st.form("interest"):
            reason = st.text_area(f"Why are you interested? (at least {MIN_INTEREST_REASON} characters)")
            gaps = st.text_area("Gaps you are aware of")
            plan = st.text_area("How you plan to close them")
            if st.form_submit_button("Show interest"):
                _rerun_if(screen.submit_interest(reason, gaps, plan))
    else:
        st.info(APPLY_BLOCKED[state])

    st.subheader("Questions")
    for q in screen.questions:
        st.markdown(f"**Q:** {q.get('question', '')}")
        if q.get("answer"):
            st.markdown(f"**A:** {q['answer']}")
    with st.form("ask", clear_on_submit=True):
        question = st.text_input("Ask the placement team")
        if st.form_submit_button("Ask"):
            _rerun_if(screen.ask_question(question))


def page_my_applications() -> None:
    st.header("My Applications")
    screen = _screen("my_applications", lambda: MyApplications(_api()))
    _flash(screen)
    if _error_banner(screen):
        return

    counts = screen.status_counts()
    cols = st.columns(len(counts))
    for col, (status, n) in zip(cols, counts.items()):
        col.metric(status.replace("_", " ").title(), n)

    status = st.selectbox("Status", ["all", *counts.keys()], key="myapps_status")
    screen.set_filters(status=status)

    rows = [{
        "id": a.get("_id"),
        "job": (a.get("job") or {}).get("title", ""),
        "company": ((a.get("job") or {}).get("company") or {}).get("name", ""),
        "status": a.get("status"),
        "applied": a.get("createdAt", "")[:10],
    } for a in screen.visible]
    if not rows:
        st.info("No applications yet.")
        return
    focus = _take_link("applications").get("appId")
    linked = next((r for r in rows if r["id"] == focus), None) if focus else None
    if linked:
        st.info(f"{linked['job']} · {linked['company']}: now **{linked['status']}**")
    st.dataframe(pd.DataFrame(rows).drop(columns=["id"]), use_container_width=True, hide_index=True)

    withdrawable = [r for r in rows if r["status"] not in ("withdrawn", "rejected", "selected")]
    if withdrawable:
        pick = st.selectbox("Withdraw application", withdrawable,
                            format_func=lambda r: f"{r['job']} · {r['company']}")
        if st.button("Withdraw"):
            _rerun_if(screen.withdraw(pick["id"]))


def page_self_applications() -> None:
    st.header("Self Applications")
    st.caption("Track jobs you've applied to outside the placement portal.")
    screen = _screen("self_applications", lambda: SelfApplications(_api()))
    _flash(screen)
    if _error_banner(screen):
        return

    stats = screen.stats()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total", stats["total"])
    c2.metric("Active", stats["active"])
    c3.metric("Offers", stats["offers"])
    c4.metric("Rejected", stats["rejected"])

    with st.expander("Add application", expanded=not screen.items):
        with st.form("self_app_new", clear_on_submit=True):
            c1, c2 = st.columns(2)
            company = c1.text_input("Company *")
            title = c2.text_input("Job title *")
            url = c1.text_input("Job URL")
            location = c2.text_input("Location")
            status = c1.selectbox("Status", SELF_APPLICATION_STATUSES)
            applied_on = c2.date_input("Applied on")
            notes = st.text_area("Notes")
            if st.form_submit_button("Save", type="primary"):
                _rerun_if(screen.save({
                    "companyName": company, "jobTitle": title, "jobUrl": url,
                    "location": location, "status": status,
                    "applicationDate": applied_on.isoformat(), "notes": notes,
                }))

    focus = _take_link("self-applications").get("appId")
    status = st.selectbox("Filter", ["all", *SELF_APPLICATION_STATUSES], key="selfapps_status")
    screen.set_filters(status=status)

    for app in screen.visible:
        title = f"{app.get('companyName', '')} · {app.get('jobTitle', '')}  [{app.get('status')}]"
        with st.expander(title, expanded=app.get("_id") == focus):
            st.write(f"Verification: **{verification_state(app)}**")
            c1, c2, c3 = st.columns([2, 1, 1])
            new_status = c1.selectbox(
                "Update status", SELF_APPLICATION_STATUSES,
                index=SELF_APPLICATION_STATUSES.index(app["status"]) if app.get("status") in SELF_APPLICATION_STATUSES else 0,
                key=f"sa_status_{app['_id']}",
            )
            if c2.button("Update", key=f"sa_upd_{app['_id']}"):
                _rerun_if(screen.update_status(app["_id"], new_status))
            if c3.button("Delete", key=f"sa_del_{app['_id']}"):
                _rerun_if(screen.delete(app["_id"]))


def page_job_readiness() -> None:
    st.header("Job Readiness")
    screen = _screen("job_readiness", lambda: JobReadiness(_api()))
    _flash(screen)
    if screen.error == "profile_incomplete":
        st.warning("Complete your profile and set your school before tracking job readiness.")
        return
    if _error_banner(screen):
        return

    prog = screen.progress
    c1, c2, c3 = st.columns(3)
    c1.metric("Verified", f"{prog.completed} / {prog.total}")
    c2.metric("Submitted", prog.submitted)
    c3.metric("Progress", f"{prog.percentage}%")
    st.progress(prog.percentage / 100)
    if screen.is_job_ready:
        st.success("You are marked **job ready** by your campus PoC.")

    for category, rows in screen.grouped():
        if not rows:
            continue
        st.subheader(CATEGORY_LABELS.get(category, category.title()))
        for crit in rows:
            cid = crit["criteriaId"]
            status = crit["verificationStatus"]
            icon = {"verified": "✅", "pending": "⏳"}.get(status, "⬜")
            with st.expander(f"{icon} {crit.get('name', cid)}"):
                if crit.get("description"):
                    st.caption(crit["description"])
                if crit.get("pocComment"):
                    st.info(f"PoC comment: {crit['pocComment']}")
                if crit.get("verificationNotes"):
                    st.write(f"Verification notes: {crit['verificationNotes']}")
                if status == "verified":
                    continue
                with st.form(f"jr_{cid}"):
                    if crit.get("type") == "yes/no":
                        value = st.radio("Answer", ["yes", "no"], horizontal=True)
                    elif crit.get("type") == "comment":
                        value = st.text_area("Response", value=crit.get("selfReportedValue", ""))
                    else:
                        value = st.text_input("Response", value=crit.get("selfReportedValue", ""))
                    notes = st.text_area("Reflection", value=crit.get("notes", ""))
                    proof = st.file_uploader("Proof (optional)", key=f"proof_{cid}")
                    if st.form_submit_button("Submit"):
                        proof_file = (proof.name, proof) if proof is not None else None
                        _rerun_if(screen.submit(cid, value, notes, proof_file))


def page_scam_detector() -> None:
    st.header("Scam Detector")
    detector = st.session_state.get("scam_detector")
    if detector is None:
        detector = ScamDetector(_api())
        detector.load_keys()
        st.session_state["scam_detector"] = detector
    _flash(detector)

    if not detector.ai_keys:
        st.warning("Add your AI API key below before running an analysis.")

    tab_text, tab_image, tab_email = st.tabs(["Offer text", "Screenshot", "Email"])
    with tab_text:
        text = st.text_area("Paste the offer", height=180, key="scam_text")
        hits = prescreen(text, PRESCREEN_MIN_CHARS)
        if hits:
            st.markdown(" ".join(f'<span class="flag-chip">{h}</span>' for h in hits),
                        unsafe_allow_html=True)
        if st.button("Analyze text", type="primary", disabled=not detector.ai_keys):
            with st.spinner("Analyzing…"):
                detector.analyze("text", text=text)
            st.rerun()
    with tab_image:
        upload = st.file_uploader("Screenshot", type=["png", "jpg", "jpeg", "webp"])
        if st.button("Analyze screenshot", type="primary", disabled=not detector.ai_keys):
            data = base64.b64encode(upload.getvalue()).decode() if upload else ""
            with st.spinner("Analyzing…"):
                detector.analyze("image", image_base64=data,
                                 image_mime_type=(upload.type if upload else "image/jpeg"))
            st.rerun()
    with tab_email:
        header = st.text_area("Email body / header")
        c1, c2 = st.columns(2)
        sender = c1.text_input("Sender email")
        url = c2.text_input("Company URL")
        if st.button("Analyze email", type="primary", disabled=not detector.ai_keys):
            with st.spinner("Analyzing…"):
                detector.analyze("email", email_header=header, sender_email=sender, company_url=url)
            st.rerun()

    result = detector.result
    if result:
        st.divider()
        st.subheader(f"{result.company} · {result.role}")
        c1, c2 = st.columns([1, 3])
        c1.metric("Trust score", f"{result.trust_score:.0f}")
        c2.markdown(f"### {VERDICT_BADGE.get(result.verdict, result.verdict)}\n{result.summary}")
        if result.analysis_warning:
            st.warning(result.analysis_warning)
        sub = result.sub_scores
        s1, s2, s3, s4 = st.columns(4)
        s1.metric("Company legitimacy", f"{sub.company_legitimacy:.0f}")
        s2.metric("Offer realism", f"{sub.offer_realism:.0f}")
        s3.metric("Process flags", f"{sub.process_flags:.0f}")
        s4.metric("Community sentiment", f"{sub.community_sentiment:.0f}")
        c1, c2 = st.columns(2)
        with c1:
            st.markdown("**Red flags**")
            for f in result.red_flags:
                st.markdown(f"- {f.get('title', f) if isinstance(f, dict) else f}")
        with c2:
            st.markdown("**Green flags**")
            for f in result.green_flags:
                st.markdown(f"- {f.get('title', f) if isinstance(f, dict) else f}")
        st.info(result.final_verdict)
        for item in result.action_items:
            st.markdown(f"- {item}")
        st.markdown("**Resources**")
        for link in result.resource_links:
            st.markdown(f"[{link.title}]({link.url}) · {link.desc}")
        if detector.company_stats:
            with st.expander("Community reports for this company"):
                st.json(detector.company_stats)
        if not detector.report_saved and st.button("Share to community repository"):
            detector.save_report()
            st.rerun()

    with st.expander("AI API keys"):
        for key in detector.ai_keys:
            c1, c2, c3 = st.columns([3, 1, 1])
            c1.write(f"{key.get('label') or 'Key'} · {'active' if key.get('isActive') else 'inactive'}")
            if c2.button("Toggle", key=f"k_t_{key.get('_id')}"):
                _rerun_if(detector.toggle_key(key["_id"], bool(key.get("isActive"))))
            if c3.button("Delete", key=f"k_d_{key.get('_id')}"):
                _rerun_if(detector.delete_key(key["_id"]))
        with st.form("ai_key_add", clear_on_submit=True):
            new_key = st.text_input("API key", type="password")
            label = st.text_input("Label")
            if st.form_submit_button("Add key"):
                _rerun_if(detector.add_key(new_key, label))
        if detector.ai_keys and st.button("Test key"):
            st.write(detector.test_key())


def page_scam_reports() -> None:
    report_id = st.query_params.get("report")
    if report_id:
        _report_detail(report_id)
        return

    st.header("Scam Reports")
    screen = _screen("scam_reports", lambda: ScamReportsRepository(_api()))
    _flash(screen)

    c1, c2, c3 = st.columns([2, 1, 1])
    search = c1.text_input("Company", key="sr_search")
    verdict = c2.selectbox("Verdict", ["all", "danger", "warning", "safe"], key="sr_verdict")
    sort_by = c3.selectbox("Sort", ["recent", "trustScore", "helpful"], key="sr_sort")
    screen.set_filters(search=search, verdict=verdict, sortBy=sort_by)
    if _error_banner(screen):
        return

    stats = screen.quick_stats()
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Reports", stats["totalReports"])
    m2.metric("Dangerous", stats["dangerousCompanies"])
    m3.metric("Last 24h", stats["recentAlerts"])
    m4.metric("Helpful votes", stats["helpfulVotes"])

    for report in screen.visible:
        votes = report.get("communityVotes") or {}
        with st.container(border=True):
            st.markdown(f"**{report.get('companyName')}** · {report.get('roleName', '')} · "
                        f"{VERDICT_BADGE.get(report.get('verdict'), report.get('verdict'))} · "
                        f"trust {report.get('trustScore', 0)}")
            st.caption(report.get("summary", ""))
            c1, c2, c3, c4 = st.columns(4)
            for col, vt in zip((c1, c2, c3), ("agree", "disagree", "helpful")):
                if col.button(f"{vt} ({votes.get(vt, 0)})", key=f"v_{vt}_{report['_id']}"):
                    _rerun_if(screen.vote(report["_id"], vt))
            if c4.button("Open", key=f"open_{report['_id']}"):
                st.query_params["report"] = report["_id"]
                st.rerun()

    _pager(screen, "reports")


def _report_detail(report_id: str) -> None:
    screen = _screen(f"scam_report_{report_id}", lambda: ScamReportDetail(_api(), report_id))
    _flash(screen)
    if st.button("← All reports"):
        del st.query_params["report"]
        st.rerun()
    if _error_banner(screen) or not screen.report:
        return
    report = screen.report
    st.header(f"{report.get('companyName')} · {report.get('roleName', '')}")
    st.markdown(f"{VERDICT_BADGE.get(report.get('verdict'), report.get('verdict'))} · "
                f"trust score **{report.get('trustScore', 0)}**")
    st.write(report.get("summary", ""))

    votes = report.get("communityVotes") or {}
    cols = st.columns(3)
    for col, vt in zip(cols, ("agree", "disagree", "helpful")):
        if col.button(f"{vt} ({votes.get(vt, 0)})", key=f"dv_{vt}"):
            _rerun_if(screen.vote(vt))

    st.subheader("Discussion")
    for comment, replies in screen.threads():
        with st.container(border=True):
            st.markdown(f"**{person_name(comment.get('author'))}** {comment.get('content', '')}")
            likes = (comment.get("likes") or {}).get("count", 0)
            c1, c2 = st.columns(2)
            if c1.button(f"👍 {likes}", key=f"like_{comment['_id']}"):
                _rerun_if(screen.like_comment(comment["_id"]))
            if c2.button("Delete", key=f"cdel_{comment['_id']}"):
                _rerun_if(screen.delete_comment(comment["_id"]))
            for reply in replies:
                st.markdown(f"↳ **{person_name(reply.get('author'))}** {reply.get('content', '')}")
            reply_text = st.text_input("Reply", key=f"reply_{comment['_id']}")
            if reply_text and st.button("Send reply", key=f"send_{comment['_id']}"):
                _rerun_if(screen.add_comment(reply_text, comment["_id"]))
    with st.form("comment", clear_on_submit=True):
        text = st.text_area("Add a comment")
        if st.form_submit_button("Post"):
            _rerun_if(screen.add_comment(text))


def page_profile() -> None:
    st.header("My Profile")
    screen = _screen("profile", lambda: Profile(_api(), _session()))
    _flash(screen)
    if _error_banner(screen):
        return

    status = screen.status
    if status == "needs_revision" and screen.revision_notes:
        st.warning(f"Changes requested: {screen.revision_notes}")
    elif status == "pending_approval":
        st.info("Your profile is awaiting approval by your campus PoC.")
    elif status == "draft":
        st.info("Complete your profile and submit it for approval before applying to jobs.")

    user = screen.user
    sp = screen.student_profile
    with st.form("profile"):
        c1, c2 = st.columns(2)
        first = c1.text_input("First name", value=user.get("firstName", ""))
        last = c2.text_input("Last name", value=user.get("lastName", ""))
        phone = c1.text_input("Phone", value=user.get("phone", ""))
        github = c2.text_input("GitHub", value=sp.get("github", ""))
        linkedin = c1.text_input("LinkedIn", value=sp.get("linkedIn", ""))
        portfolio = c2.text_input("Portfolio", value=sp.get("portfolio", ""))
        about = st.text_area("About", value=sp.get("about", ""))
        if st.form_submit_button("Save", type="primary"):
            _rerun_if(screen.save({
                "firstName": first, "lastName": last, "phone": phone,
                "studentProfile": {"github": github, "linkedIn": linkedin,
                                   "portfolio": portfolio, "about": about},
            }))

    resume = st.file_uploader("Resume (PDF)", type=["pdf"])
    if resume is not None and st.button("Upload resume"):
        _rerun_if(screen.upload_resume(resume.name, resume))

    if status != "approved" and st.button("Submit for approval", disabled=status == "pending_approval"):
        _rerun_if(screen.submit())

    with st.expander("Change password"):
        with st.form("password", clear_on_submit=True):
            cur = st.text_input("Current password", type="password")
            new = st.text_input("New password", type="password")
            confirm = st.text_input("Confirm new password", type="password")
            if st.form_submit_button("Change password"):
                screen.change_password(cur, new, confirm)
                st.rerun()


# ── Page: Campus PoC ─────────────────────────────────────────────────────


def page_skill_approvals() -> None:
    st.header("Skill Approvals")
    screen = _screen("skill_approvals", lambda: SkillApprovals(_api()))
    _flash(screen)
    if _error_banner(screen):
        return
    screen.set_filters(search=st.text_input("Search students", key="skill_search"))
    st.caption(f"{screen.pending_count()} skill(s) awaiting review")
    if not screen.visible:
        st.info("No pending skill approvals.")
    for student in screen.visible:
        sid = student["_id"]
        with st.expander(f"{person_name(student)} · {student.get('email', '')}", expanded=True):
            for item in student.get("pendingSkills") or []:
                skill = item.get("skill") or {}
                c1, c2, c3 = st.columns([3, 1, 1])
                c1.write(f"{skill.get('name', '')} · level {item.get('selfRating', '-')}")
                if c2.button("Approve", key=f"sk_a_{sid}_{skill.get('_id')}"):
                    _rerun_if(screen.review(sid, skill["_id"], "approved"))
                if c3.button("Reject", key=f"sk_r_{sid}_{skill.get('_id')}"):
                    _rerun_if(screen.review(sid, skill["_id"], "rejected"))
            if st.button(f"Approve all ({len(student.get('pendingSkills') or [])})", key=f"sk_all_{sid}"):
                _rerun_if(screen.approve_all(sid))


def page_profile_approvals() -> None:
    st.header("Profile Approvals")
    screen = _screen("profile_approvals", lambda: ProfileApprovals(_api()))
    _flash(screen)
    if _error_banner(screen):
        return
    screen.set_filters(search=st.text_input("Search students", key="profile_search"))
    if not screen.visible:
        st.info("No profiles awaiting approval.")
    for student in screen.visible:
        sid = student["_id"]
        sp = student.get("studentProfile") or {}
        with st.expander(f"{person_name(student)} · {student.get('email', '')}"):
            st.write(sp.get("about", ""))
            links = {k: sp.get(k) for k in ("github", "linkedIn", "portfolio") if sp.get(k)}
            for label, link in links.items():
                st.markdown(f"[{label}]({link})")
            c1, c2 = st.columns(2)
            if c1.button("Approve", key=f"pa_{sid}", type="primary"):
                _rerun_if(screen.approve(sid))
            notes = c2.text_area("Changes needed", key=f"pn_{sid}")
            if c2.button("Request changes", key=f"pr_{sid}"):
                _rerun_if(screen.request_changes(sid, notes))


def page_self_applications_review() -> None:
    st.header("Self Applications Review")
    screen = _screen("self_applications_review", lambda: SelfApplicationsReview(_api()))
    _flash(screen)
    if _error_banner(screen):
        return

    stats = screen.stats or {}
    if stats:
        cols = st.columns(min(4, len(stats)) or 1)
        for col, (k, v) in zip(cols, list(stats.items())[:4]):
            if isinstance(v, (int, float)):
                col.metric(k, v)

    c1, c2, c3 = st.columns(3)
    screen.set_filters(
        status=c1.selectbox("Status", ["all", *SELF_APPLICATION_STATUSES], key="sar_status"),
        verified=c2.selectbox("Verification", ["pending", "verified", "rejected", "all"], key="sar_ver"),
        search=c3.text_input("Search", key="sar_search"),
    )

    focus = _take_link("self-applications").get("appId")
    groups = screen.grouped_by_student()
    if not groups:
        st.info("No applications match the filters.")
    for group in groups.values():
        apps = group["applications"]
        linked = any(app.get("_id") == focus for app in apps)
        with st.expander(f"{person_name(group['student']) or 'Unknown'} ({len(apps)})", expanded=linked):
            for app in apps:
                company = app.get("company") or {}
                cname = company.get("name") if isinstance(company, dict) else app.get("companyName")
                st.markdown(f"**{cname or app.get('companyName', '')}** · {app.get('jobTitle', '')} · "
                            f"{app.get('status')} · _{verification_state(app)}_")
                if verification_state(app) == "pending":
                    notes = st.text_input("Notes", key=f"vn_{app['_id']}")
                    v1, v2 = st.columns(2)
                    if v1.button("Verify", key=f"vy_{app['_id']}"):
                        _rerun_if(screen.verify(app["_id"], True, notes))
                    if v2.button("Reject", key=f"vr_{app['_id']}"):
                        _rerun_if(screen.verify(app["_id"], False, notes))


def page_readiness_review() -> None:
    st.header("Job Readiness Review")
    screen = _screen("readiness_review", lambda: ReadinessReview(_api()))
    _flash(screen)
    c1, c2 = st.columns(2)
    screen.set_filters(
        view=c1.radio("Show", ["pending", "all", "job-ready"], horizontal=True, key="rr_view"),
        search=c2.text_input("Search", key="rr_search"),
    )
    if _error_banner(screen):
        return

    overall = screen.overall()
    m1, m2, m3 = st.columns(3)
    m1.metric("Students", overall["total"])
    m2.metric("Job ready", overall["jobReady"])
    m3.metric("Pending review", overall["pendingReview"])

    for record in screen.visible:
        student = record.get("student") or {}
        sid = student.get("_id") if isinstance(student, dict) else student
        with st.expander(f"{person_name(student) or 'Unknown'} · {'✅ job ready' if record.get('isJobReady') else ''}"):
            for cs in record.get("criteriaStatus") or []:
                cid = cs.get("criteriaId")
                st.markdown(f"**{cs.get('name', cid)}** · {cs.get('status')} · {cs.get('selfReportedValue', '')}")
                if cs.get("status") == "completed":
                    notes = st.text_input("Notes", key=f"rn_{sid}_{cid}")
                    v1, v2 = st.columns(2)
                    if v1.button("Verify", key=f"rv_{sid}_{cid}"):
                        _rerun_if(screen.verify(sid, cid, "verified", notes))
                    if v2.button("Send back", key=f"rb_{sid}_{cid}"):
                        _rerun_if(screen.verify(sid, cid, "in_progress", notes))
                r1, r2 = st.columns(2)
                rating = r1.select_slider("Rating", [1, 2, 3, 4], key=f"rr_{sid}_{cid}")
                if r1.button("Rate", key=f"rrb_{sid}_{cid}"):
                    _rerun_if(screen.rate(sid, cid, rating))
                comment = r2.text_input("Comment", key=f"rc_{sid}_{cid}")
                if r2.button("Comment", key=f"rcb_{sid}_{cid}"):
                    _rerun_if(screen.comment(sid, cid, comment))
            if st.button("Approve job ready", key=f"ja_{sid}", type="primary"):
                _rerun_if(screen.approve(record))


def page_criteria_config() -> None:
    st.header("Job Readiness Criteria")
    screen = _screen("criteria_config", lambda: CriteriaConfig(_api()))
    if not screen.schools:
        screen.load_schools()
    _flash(screen)

    school = st.selectbox("School", screen.schools, index=screen.schools.index(screen.school))
    screen.select_school(school)
    if _error_banner(screen):
        return
    screen.set_filters(search=st.text_input("Search criteria", key="cc_search"))

    if st.button("Add criterion"):
        screen.open_editor(None)

    for category, items in screen.grouped():
        st.subheader(CATEGORY_LABELS[category])
        if not items:
            st.caption("No criteria in this category.")
        for crit in items:
            c1, c2, c3 = st.columns([4, 1, 1])
            shared = "" if crit.editable else f" · _shared from {crit.source}_"
            targets = f" → {', '.join(crit.target_schools)}" if crit.target_schools else ""
            c1.markdown(f"**{crit.name}** `{crit.criteria_id}` · {crit.type}{shared}{targets}")
            if c2.button("Edit", key=f"ce_{crit.criteria_id}"):
                screen.open_editor(crit)
                st.rerun()
            if c3.button("Delete", key=f"cd_{crit.criteria_id}"):
                _rerun_if(screen.delete(crit))

    if screen.modal.open:
        _criterion_form(screen)


def _criterion_form(screen: CriteriaConfig) -> None:
    editing: Criterion | None = screen.modal.payload
    base = editing or Criterion(criteria_id="", name="")
    st.divider()
    st.subheader("Edit criterion" if editing else "New criterion")
    with st.form("criterion"):
        c1, c2 = st.columns(2)
        cid = c1.text_input("Unique ID", value=base.criteria_id, disabled=editing is not None)
        name = c2.text_input("Name", value=base.name)
        description = st.text_area("Description", value=base.description)
        ctype = c1.selectbox("Type", CRITERION_TYPES, index=CRITERION_TYPES.index(base.type)
                             if base.type in CRITERION_TYPES else 0)
        category = c2.selectbox("Category", list(CATEGORY_LABELS), format_func=CATEGORY_LABELS.get,
                                index=list(CATEGORY_LABELS).index(base.category))
        mandatory = c1.checkbox("Mandatory", value=base.is_mandatory)
        comment_req = c2.checkbox("PoC comment required", value=base.poc_comment_required)
        rating_req = c1.checkbox("PoC rating required", value=base.poc_rating_required)
        share_options = [s for s in screen.schools if s not in ("Common", screen.school)]
        targets = st.multiselect("Share with schools", share_options,
                                 default=[s for s in base.target_schools if s in share_options])
        s1, s2 = st.columns(2)
        if s1.form_submit_button("Save", type="primary"):
            crit = Criterion(
                criteria_id=cid, name=name, description=description, type=ctype,
                category=category, is_mandatory=mandatory, target_schools=targets,
                poc_comment_required=comment_req, poc_rating_required=rating_req,
                poc_comment_template=base.poc_comment_template,
                poc_rating_scale=base.poc_rating_scale,
            )
            _rerun_if(screen.save(crit, editing.criteria_id if editing else None))
        if s2.form_submit_button("Cancel"):
            screen.modal.close()
            st.rerun()


# ── Page: Staff ──────────────────────────────────────────────────────────


def page_students() -> None:
    link = _take_link("students")
    if link.get("id"):
        st.query_params["student"] = link["id"]
    student_id = st.query_params.get("student")
    if student_id:
        _student_detail(student_id)
        return

    st.header("Students")
    screen = _screen("students", lambda: Students(_api()))
    _flash(screen)
    c1, c2, c3, c4 = st.columns([2, 1, 1, 1])
    screen.set_filters(
        search=c1.text_input("Search name or email", key="st_search"),
        school=c2.selectbox("School", ["", *screen.schools()], format_func=lambda s: s or "All schools",
                            key="st_school"),
        batch=c3.text_input("Batch", key="st_batch"),
        status=c4.selectbox("Status", ["", *STUDENT_STATUSES], format_func=lambda s: s or "All",
                            key="st_status"),
    )
    if _error_banner(screen):
        return

    if not screen.visible:
        st.info("No students match the filters.")
    for student in screen.visible:
        profile = student.get("studentProfile") or {}
        with st.container(border=True):
            c1, c2 = st.columns([4, 1])
            c1.markdown(f"**{person_name(student)}** · {student.get('email', '')}")
            c1.caption(" · ".join(str(v) for v in (profile.get("currentSchool"), profile.get("batch"),
                                                   profile.get("currentStatus")) if v))
            if c2.button("Portfolio", key=f"stu_{student['_id']}"):
                st.query_params["student"] = student["_id"]
                st.rerun()

    _pager(screen, "students")


def _student_detail(student_id: str) -> None:
    screen = _screen(f"student_{student_id}", lambda: StudentDetail(_api(), student_id))
    _flash(screen)
    if st.button("← All students"):
        del st.query_params["student"]
        st.rerun()
    if _error_banner(screen) or not screen.student:
        return

    folio = screen.portfolio()
    st.header(folio["name"])
    st.caption(" · ".join(str(v) for v in (folio["email"], folio["school"], folio["module"], folio["batch"]) if v))
    if folio["cgpa"] is not None:
        st.metric("CGPA", folio["cgpa"])
    if folio["about"]:
        st.write(folio["about"])
    if folio["links"]:
        st.markdown(" · ".join(f"[{label}]({url})" for label, url in folio["links"]))

    c1, c2 = st.columns([2, 1])
    current = folio["status"] if folio["status"] in STUDENT_STATUSES else STUDENT_STATUSES[0]
    status = c1.selectbox("Status", STUDENT_STATUSES, index=STUDENT_STATUSES.index(current), key="sd_status")
    if status != folio["status"] and c2.button("Update status"):
        _rerun_if(screen.update_status(status))

    tab_skills, tab_apps, tab_ready = st.tabs(["Skills", "Applications", "Job readiness"])
    with tab_skills:
        skills = screen.skills()
        if not skills:
            st.info("No skills added yet.")
        for skill in skills:
            c1, c2, c3 = st.columns([3, 1, 1])
            c1.markdown(f"**{skill['name']}** · {skill['category']} · _{skill['status']}_")
            if skill["status"] == "pending" and skill["id"]:
                if c2.button("Approve", key=f"sa_{skill['id']}"):
                    _rerun_if(screen.review_skill(skill["id"], "approved"))
                if c3.button("Reject", key=f"sr_{skill['id']}"):
                    _rerun_if(screen.review_skill(skill["id"], "rejected"))
    with tab_apps:
        rows = [{
            "job": (a.get("job") or {}).get("title", ""),
            "company": company_name(a.get("job") or {}),
            "status": a.get("status"),
            "applied": str(a.get("createdAt", ""))[:10],
        } for a in screen.applications]
        if rows:
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        else:
            st.info("No applications yet.")
    with tab_ready:
        prog = screen.progress
        st.progress(prog.percentage / 100, text=f"{prog.completed}/{prog.total} criteria complete")
        for c in screen.criteria:
            st.markdown(f"- {c.get('name', '')} · _{c.get('verificationStatus') or 'not started'}_")


# ── Page: Coordinator / Manager ──────────────────────────────────────────


def _coordinator_jobs() -> CoordinatorJobs:
    screen = CoordinatorJobs(_api())
    screen.load_stages()
    return screen


def page_coordinator_jobs() -> None:
    st.header("Jobs")
    screen = _screen("coordinator_jobs", _coordinator_jobs)
    link = _take_link("jobs")
    if link.get("jobId") or link.get("id"):
        screen.focus(link.get("jobId") or link.get("id"))
    _flash(screen)

    c1, c2, c3 = st.columns([2, 1, 1])
    screen.set_filters(
        search=c1.text_input("Search", key="cj_search"),
        status=c2.selectbox("Stage", ["", *screen.stage_ids], format_func=lambda s: s or "All stages",
                            key="cj_status"),
        jobType=c3.selectbox("Type", ["", *JOB_TYPES], format_func=lambda t: t or "All types", key="cj_type"),
    )
    if _error_banner(screen):
        return

    with st.expander("New job", expanded=screen.modal.open and screen.modal.payload is None):
        _job_form(screen)

    for job in screen.visible:
        focused = job["_id"] == screen.focused
        with st.expander(f"{'➜ ' if focused else ''}{job.get('title', '')} · {company_name(job)} · "
                         f"{job.get('status', '')}", expanded=focused):
            c1, c2 = st.columns([2, 1])
            stage = c1.selectbox("Pipeline stage", screen.stage_ids, key=f"cjs_{job['_id']}",
                                 index=screen.stage_ids.index(job["status"]) if job.get("status") in screen.stage_ids else 0)
            if stage != job.get("status") and c2.button("Move", key=f"cjm_{job['_id']}"):
                _rerun_if(screen.update_status(job["_id"], stage))
            _job_form(screen, job)
            if st.button("Delete job", key=f"cjd_{job['_id']}"):
                _rerun_if(screen.delete(job["_id"]))

            if job["_id"] not in screen.questions and st.button("Load questions", key=f"cjq_{job['_id']}"):
                screen.load_questions(job["_id"])
                st.rerun()
            for q in screen.questions.get(job["_id"], []):
                st.markdown(f"**Q:** {q.get('question', '')}")
                if q.get("answer"):
                    st.markdown(f"**A:** {q['answer']}")
                else:
                    answer = st.text_input("Answer", key=f"cja_{q['_id']}")
                    if st.button("Answer", key=f"cjab_{q['_id']}"):
                        _rerun_if(screen.answer_question(job["_id"], q["_id"], answer))

    _pager(screen, "cjobs")


def _job_form(screen: CoordinatorJobs, job: dict[str, Any] | None = None) -> None:
    job = job or {}
    key = job.get("_id", "new")
    salary = job.get("salary") or {}
    with st.form(f"job_form_{key}"):
        c1, c2 = st.columns(2)
        title = c1.text_input("Title", value=job.get("title", ""))
        company = c2.text_input("Company", value=company_name(job))
        job_type = c1.selectbox("Type", JOB_TYPES,
                                index=JOB_TYPES.index(job["jobType"]) if job.get("jobType") in JOB_TYPES else 0)
        location = c2.text_input("Location", value=job.get("location", ""))
        low = c1.number_input("Salary from", min_value=0, value=int(salary.get("min") or 0), step=10000)
        high = c2.number_input("Salary to", min_value=0, value=int(salary.get("max") or 0), step=10000)
        deadline = st.text_input("Application deadline (YYYY-MM-DD)",
                                 value=str(job.get("applicationDeadline") or "")[:10])
        description = st.text_area("Description", value=job.get("description", ""))
        if st.form_submit_button("Save job" if job else "Create job"):
            _rerun_if(screen.save({
                "title": title, "company": {"name": company}, "jobType": job_type,
                "location": location, "description": description,
                "salary": {"min": low, "max": high},
                "applicationDeadline": deadline or None,
            }, job.get("_id")))


def page_skills() -> None:
    st.header("Skills")
    screen = _screen("skills", lambda: SkillsCatalogue(_api()))
    _flash(screen)
    if _error_banner(screen):
        return
    c1, c2 = st.columns([2, 1])
    screen.set_filters(
        search=c1.text_input("Search skills", key="sk_search"),
        category=c2.selectbox("Category", ["", *screen.categories], format_func=lambda c: c or "All",
                              key="sk_cat"),
    )
    with st.form("skill_new", clear_on_submit=True):
        c1, c2 = st.columns(2)
        name = c1.text_input("Skill name")
        category = c2.selectbox("Category", screen.categories or ["technical"])
        if st.form_submit_button("Add skill"):
            _rerun_if(screen.save({"name": name, "category": category}))

    rows = screen.visible
    if not rows:
        st.info("No skills in the catalogue.")
    for skill in rows:
        c1, c2 = st.columns([4, 1])
        c1.markdown(f"**{skill.get('name', '')}** · {skill.get('category', '')}")
        if c2.button("Delete", key=f"skd_{skill['_id']}"):
            _rerun_if(screen.delete(skill["_id"]))


def page_forum() -> None:
    st.header("Q&A Forum")
    screen = _screen("forum", lambda: Forum(_api()))
    _flash(screen)
    if _error_banner(screen):
        return
    if screen.unanswered_count:
        st.markdown(f"**{screen.unanswered_count} unanswered**")
    c1, c2 = st.columns(2)
    screen.set_filters(
        search=c1.text_input("Search", key="forum_search"),
        answered=c2.selectbox("Show", ["all", "unanswered", "answered"], key="forum_answered"),
    )
    groups = screen.grouped()
    if not groups:
        st.info("No questions yet.")
    for company, questions in groups.items():
        st.subheader(company)
        for q in questions:
            with st.container(border=True):
                st.markdown(f"**Q:** {q.get('question', '')}")
                st.caption(f"{person_name(q.get('askedBy'))} · {str(q.get('createdAt', ''))[:10]}")
                if q.get("answer"):
                    st.markdown(f"**A:** {q['answer']}")
                else:
                    answer = st.text_area("Answer", key=f"fa_{q['_id']}")
                    if st.button("Submit answer", key=f"fab_{q['_id']}"):
                        _rerun_if(screen.answer(q["_id"], answer))
                if st.button("Delete", key=f"fd_{q['_id']}"):
                    _rerun_if(screen.delete(q["_id"]))


def page_settings() -> None:
    st.header("Settings")
    screen = _screen("settings", lambda: Settings(_api()))
    _flash(screen)
    if _error_banner(screen):
        return

    tab_schools, tab_lists, tab_cycles = st.tabs(["Schools", "Lists", "Placement cycles"])
    with tab_schools:
        inactive = set(screen.settings.get("inactiveSchools") or [])
        for school in screen.settings.get("schools") or []:
            c1, c2 = st.columns([4, 1])
            c1.write(f"{school}{' (inactive)' if school in inactive else ''}")
            if c2.button("Toggle", key=f"st_{school}"):
                _rerun_if(screen.toggle_school(school))
        with st.form("add_school", clear_on_submit=True):
            new_school = st.text_input("New school")
            if st.form_submit_button("Add school"):
                _rerun_if(screen.add_item("schools", new_school))

    with tab_lists:
        for key in ("rolePreferences", "technicalSkills", "degreeOptions"):
            with st.expander(key):
                for item in screen.settings.get(key) or []:
                    c1, c2 = st.columns([4, 1])
                    c1.write(item)
                    if c2.button("Remove", key=f"rm_{key}_{item}"):
                        _rerun_if(screen.remove_item(key, item))
                new_item = st.text_input("Add", key=f"add_{key}")
                if st.button("Add", key=f"addb_{key}"):
                    _rerun_if(screen.add_item(key, new_item))

    with tab_cycles:
        if screen.cycles:
            df = pd.DataFrame(screen.cycles)
            cols = [c for c in ("name", "startDate", "endDate", "isActive") if c in df.columns]
            st.dataframe(df[cols], use_container_width=True, hide_index=True)
        for cycle in screen.cycles:
            c1, c2, c3 = st.columns([3, 1, 1])
            c1.write(cycle.get("name", ""))
            if c2.button("Toggle", key=f"cy_t_{cycle['_id']}"):
                _rerun_if(screen.toggle_cycle(cycle["_id"], bool(cycle.get("isActive"))))
            if c3.button("Delete", key=f"cy_d_{cycle['_id']}"):
                _rerun_if(screen.delete_cycle(cycle["_id"]))
        with st.form("cycle", clear_on_submit=True):
            name = st.text_input("Cycle name")
            c1, c2 = st.columns(2)
            start = c1.date_input("Start")
            end = c2.date_input("End")
            if st.form_submit_button("Create cycle"):
                _rerun_if(screen.create_cycle(name, start.isoformat(), end.isoformat()))


def page_notifications() -> None:
    st.header("Notifications")
    session = _session()
    screen = _screen("notifications", lambda: Notifications(_api(), session.role))
    _flash(screen)
    if _error_banner(screen):
        return

    c1, c2, c3 = st.columns([2, 1, 1])
    screen.set_filters(read=c1.radio("Show", ["all", "unread", "read"], horizontal=True, key="n_read"))
    if c2.button("Mark all read"):
        _rerun_if(screen.mark_all_read())
    if c3.button("Clear read"):
        _rerun_if(screen.clear_read())

    if not screen.visible:
        st.info("Nothing here.")
    for n in screen.visible:
        with st.container(border=True):
            dot = "" if n.get("read") else "🔵 "
            st.markdown(f"{dot}**{n.get('title', '')}**  \n{n.get('message', '')}")
            c1, c2, c3 = st.columns(3)
            route = screen.route_for(n)
            if route and c1.button("Open", key=f"no_{n['_id']}"):
                if not n.get("read"):
                    screen.mark_read(n["_id"])
                st.session_state["deep_link"] = route
                st.switch_page(st.session_state["pages"][route.section])
            if not n.get("read") and c2.button("Mark read", key=f"nr_{n['_id']}"):
                _rerun_if(screen.mark_read(n["_id"]))
            if c3.button("Delete", key=f"nd_{n['_id']}"):
                _rerun_if(screen.delete(n["_id"]))


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_PORTAL_CSS, unsafe_allow_html=True)


def _sidebar_status() -> None:
    session = _session()
    counters = _counters()
    with st.sidebar:
        st.divider()
        user = session.user
        st.markdown(f"**{user.display_name}**  \n{user.role.replace('_', ' ')}")
        badge = badge_text(counters["sidebar"].count)
        st.markdown(f"🔔 Notifications {f'**{badge}**' if badge else ''}")
        if st.button("Refresh", use_container_width=True):
            st.session_state.pop("screens", None)
            st.rerun()
        if st.button("Log out", use_container_width=True):
            session.logout()
            _teardown()
            st.rerun()


def _wrap(page: Callable[[], None]) -> Callable[[], None]:
    def run() -> None:
        _inject_css()
        _sidebar_status()
        page()
    run.__name__ = page.__name__
    return run


# Page function, title and icon for each section a role can open.
ROLE_PAGES: dict[str, dict[str, tuple[Callable[[], None], str, str]]] = {
    "student": {
        "jobs": (page_jobs, "Jobs", "💼"),
        "applications": (page_my_applications, "My Applications", "📋"),
        "self-applications": (page_self_applications, "Self Applications", "🗂️"),
        "job-readiness": (page_job_readiness, "Job Readiness", "🎯"),
        "scam-detector": (page_scam_detector, "Scam Detector", "🛡️"),
        "scam-reports": (page_scam_reports, "Scam Reports", "🚩"),
        "profile": (page_profile, "Profile", "👤"),
    },
    "campus_poc": {
        "students": (page_students, "Students", "🎓"),
        "skill-approvals": (page_skill_approvals, "Skill Approvals", "✅"),
        "profile-approvals": (page_profile_approvals, "Profile Approvals", "🪪"),
        "self-applications": (page_self_applications_review, "Self Applications", "🗂️"),
        "job-readiness": (page_readiness_review, "Readiness Review", "🎯"),
        "criteria": (page_criteria_config, "Readiness Criteria", "🧩"),
    },
    "coordinator": {
        "jobs": (page_coordinator_jobs, "Jobs", "💼"),
        "students": (page_students, "Students", "🎓"),
        "forum": (page_forum, "Q&A Forum", "💬"),
        "skills": (page_skills, "Skills", "🧠"),
        "criteria": (page_criteria_config, "Readiness Criteria", "🧩"),
    },
    "manager": {
        "students": (page_students, "Students", "🎓"),
        "settings": (page_settings, "Settings", "⚙️"),
        "criteria": (page_criteria_config, "Readiness Criteria", "🧩"),
    },
}


def _pages() -> list:
    session = _session()
    if not session.is_authenticated:
        _teardown()
        st.session_state.pop("pages", None)
        return [st.Page(page_login, title="Sign in", icon="🔑", url_path="login", default=True)]

    role = session.role
    badge = badge_text(_counters()["navbar"].count)
    entries = dict(ROLE_PAGES.get(role, {}))
    entries["notifications"] = (page_notifications, f"Notifications {badge}".strip(), "🔔")
    pages = {}
    for i, section in enumerate(ROLE_SECTIONS.get(role, ("notifications",))):
        fn, title, icon = entries[section]
        pages[section] = st.Page(_wrap(fn), title=title, icon=icon,
                                 url_path=page_path(role, section), default=i == 0)
    st.session_state["pages"] = pages
    return list(pages.values())


nav = st.navigation(_pages())
nav.run()
