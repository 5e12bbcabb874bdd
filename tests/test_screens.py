"""
Tests for the screen controllers against the in-memory backend.
"""
from __future__ import annotations

from unittest.mock import patch

from benchdesk.errors import ApiError
from benchdesk.files import LocalFile
from benchdesk.models import ActivityType, DocumentType
from benchdesk.screens import CandidateDetailScreen, CandidateFormScreen, CandidateListScreen
from benchdesk.screens.candidate_detail import linkedin_profile_url
from benchdesk.screens.candidate_form import split_full_name


def _pdf(name: str, data: bytes = b"%PDF-1.4") -> LocalFile:
    return LocalFile(name, "application/pdf", data)


def _fill(screen: CandidateFormScreen, **overrides) -> None:
    values = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "phoneNumber": "555-0100",
        "email": "ada@example.com",
        "primarySkill": "Python",
        "yearsOfExperience": "7",
    }
    values.update(overrides)
    for key, value in values.items():
        screen.set_field(key, value)


# ============================================================================
# Form
# ============================================================================

def test_form_validation_never_reaches_the_network(desk, backend):
    screen = CandidateFormScreen(desk)
    _fill(screen, email="", yearsOfExperience="75")

    assert screen.submit() is None
    assert "Email is required" in screen.errors
    assert "Years of Experience must be between 0 and 50" in screen.errors
    assert backend.calls == []


def test_form_requires_text_for_other_choices(desk):
    screen = CandidateFormScreen(desk)
    _fill(screen, visaStatus="OTHER", primarySkill="OTHER")
    errors = screen.validate()
    assert "Please specify the visa status" in errors
    assert "Please specify the primary skill" in errors


def test_untyped_upload_blocks_submit(desk, backend):
    screen = CandidateFormScreen(desk)
    _fill(screen)
    screen.add_files([_pdf("cv.pdf")])

    assert screen.submit() is None
    assert screen.errors == ["Select a document type for cv.pdf"]
    assert backend.calls == []


def test_oversize_upload_blocks_submit(desk, backend):
    screen = CandidateFormScreen(desk, max_file_size=4)
    _fill(screen)
    (item,) = screen.add_files([_pdf("cv.pdf", b"123456")])
    screen.set_document_type(item.id, DocumentType.RESUME)

    assert screen.submit() is None
    assert screen.errors[0].startswith("cv.pdf: File size exceeds")
    assert backend.calls == []


def test_create_submits_fields_and_documents(desk, backend):
    screen = CandidateFormScreen(desk)
    _fill(screen, middleName="King", visaStatus="OTHER", otherVisaStatus="TN", targetRate="85.5")
    screen.toggle_domain("Banking", True)
    screen.toggle_domain("Healthcare", True)
    screen.toggle_domain("Banking", False)
    cv, passport = screen.add_files([_pdf("cv.pdf"), _pdf("passport.pdf")])
    screen.set_document_type(cv.id, "RESUME")
    screen.set_document_type(passport.id, "PASSPORT")

    saved = screen.submit()

    assert saved is not None
    assert screen.notice == "Bench candidate created successfully!"
    assert saved.full_name == "Ada King Lovelace"
    assert backend.last_form["visaStatus"] == ["TN"]
    assert backend.last_form["domains"] == ["Healthcare"]
    assert backend.last_form["documentTypes"] == ["RESUME", "PASSPORT"]
    assert len(screen.uploads) == 0


def test_server_rejection_shows_server_message(desk, backend):
    backend.fail("create_candidate", 409, "A candidate with this email already exists")
    screen = CandidateFormScreen(desk)
    _fill(screen)

    assert screen.submit() is None
    assert screen.error == "A candidate with this email already exists"


def test_edit_loads_and_updates(desk, backend):
    cand = backend.add_candidate(
        fullName="Grace Brewster Hopper", email="grace@example.com", phoneNumber="555-0199",
        primarySkill="COBOL", experienceYears=40, domains="Defense, Research",
    )
    screen = CandidateFormScreen(desk, cand["id"])
    assert screen.load() is True
    assert (screen.form["firstName"], screen.form["middleName"], screen.form["lastName"]) == (
        "Grace", "Brewster", "Hopper",
    )
    assert screen.form["domains"] == ["Defense", "Research"]

    screen.set_field("city", "Arlington")
    saved = screen.submit()
    assert saved.city == "Arlington"
    assert screen.notice == "Bench candidate updated successfully!"


def test_consultants_load(desk):
    screen = CandidateFormScreen(desk)
    assert [c.id for c in screen.load_consultants()] == [7, 8]


def test_split_full_name():
    assert split_full_name("Ada") == ("Ada", "", "")
    assert split_full_name("Ada Lovelace") == ("Ada", "", "Lovelace")
    assert split_full_name("  Ada  King   Byron Lovelace ") == ("Ada", "King Byron", "Lovelace")


# ============================================================================
# List
# ============================================================================

def test_list_load_filters_and_delete(desk, backend):
    for name in ("Ada Lovelace", "Grace Hopper", "Alan Turing"):
        backend.add_candidate(fullName=name)

    screen = CandidateListScreen(desk, page_size=2)
    assert len(screen.load()) == 2
    assert screen.total_elements == 3
    assert screen.total_pages == 2

    (grace,) = screen.search({"fullName": "grace"})
    assert grace.full_name == "Grace Hopper"

    assert screen.delete(grace.id) is True
    assert screen.candidates == []
    assert grace.id not in backend.candidates


def test_list_load_failure_keeps_fallback_message(unreachable_desk):
    screen = CandidateListScreen(unreachable_desk)
    assert screen.load() == []
    assert screen.error == "Failed to load bench candidates"


# ============================================================================
# Detail
# ============================================================================

def test_detail_renders_when_secondary_reads_fail(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace", linkedinUrl="in/ada")
    backend.fail("list_documents", 500)
    backend.fail("list_activities", 500)

    screen = CandidateDetailScreen(desk, cand["id"])
    assert screen.load() is True
    assert screen.candidate.full_name == "Ada Lovelace"
    assert screen.documents == []
    assert screen.activities == []
    assert screen.error == ""
    assert screen.linkedin_url == "https://www.linkedin.com/in/ada"


def test_detail_fails_when_candidate_missing(desk):
    screen = CandidateDetailScreen(desk, 404)
    assert screen.load() is False
    assert screen.error == "Bench candidate not found"


def test_activity_counters(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    screen = CandidateDetailScreen(desk, cand["id"])
    screen.load()

    for activity_type in ("SUBMITTED", "SUBMITTED", "INTERVIEW_SCHEDULED", "INTERVIEW_COMPLETED", "REJECTED"):
        assert screen.add_activity({"activityType": activity_type, "clientName": "Acme"}) is not None

    assert screen.submissions == 2
    assert screen.interviews == 2
    assert screen.rejections == 1
    assert screen.activity_form["activityType"] == ActivityType.APPLIED.value


def test_failed_refresh_keeps_previous_documents(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    backend.add_document(cand["id"], "old.pdf", "RESUME", b"x", "application/pdf")
    screen = CandidateDetailScreen(desk, cand["id"])
    screen.load()
    assert [d.original_filename for d in screen.documents] == ["old.pdf"]

    backend.fail("list_documents", 500)
    assert screen.upload_documents([_pdf("new.pdf")], DocumentType.PASSPORT) == 1
    assert [d.original_filename for d in screen.documents] == ["old.pdf"]
    assert screen.notice == "1 document(s) uploaded successfully!"


def test_invalid_files_are_not_uploaded(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    screen = CandidateDetailScreen(desk, cand["id"])

    assert screen.upload_documents([_pdf("ok.pdf"), _pdf("empty.pdf", b"")]) == 0
    assert "empty.pdf: File appears to be empty" in screen.error
    assert backend.documents[cand["id"]] == []


def test_upload_batch_sends_one_request(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    screen = CandidateDetailScreen(desk, cand["id"])
    form = CandidateFormScreen(desk)
    a, b = form.add_files([_pdf("cv.pdf"), _pdf("ead.pdf")])
    form.set_document_type(a.id, "RESUME")
    form.set_document_type(b.id, "EAD")

    created = screen.upload_batch(form.uploads)
    assert [d.document_type for d in created] == [DocumentType.RESUME, DocumentType.EAD]
    assert [c for c in backend.calls if c[0] == "POST"] == [
        ("POST", f"/api/bench-candidates/{cand['id']}/documents/multiple"),
    ]
    assert len(form.uploads) == 0


def test_preview_owns_one_object_url(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    first = backend.add_document(cand["id"], "cv.pdf", "RESUME", b"%PDF", "application/pdf")
    second = backend.add_document(cand["id"], "photo.png", "OTHER", b"\x89PNG", "image/png")
    screen = CandidateDetailScreen(desk, cand["id"])
    screen.load()
    blobs = desk.ctx.blobs

    one = screen.open_preview(first["id"])
    assert one["inline"] is True and one["type"] == "pdf"
    assert blobs.resolve(one["url"]).data == b"%PDF"

    two = screen.open_preview(second["id"])
    assert one["url"] not in blobs
    assert two["url"] in blobs
    assert len(blobs) == 1

    screen.close_preview()
    assert len(blobs) == 0
    assert screen.preview is None


def test_deleting_previewed_document_closes_preview(desk, backend):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    doc = backend.add_document(cand["id"], "cv.pdf", "RESUME", b"%PDF", "application/pdf")
    screen = CandidateDetailScreen(desk, cand["id"])
    screen.load()
    url = screen.open_preview(doc["id"])["url"]

    assert screen.delete_document(doc["id"]) is True
    assert screen.preview is None
    assert url not in desk.ctx.blobs
    assert screen.documents == []


def test_download_writes_original_filename(desk, backend, tmp_path):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    doc = backend.add_document(cand["id"], "cv.pdf", "RESUME", b"%PDF-data", "application/pdf")
    screen = CandidateDetailScreen(desk, cand["id"])
    screen.load()

    target = screen.download(doc["id"], tmp_path)
    assert target == tmp_path / "cv.pdf"
    assert target.read_bytes() == b"%PDF-data"


def test_download_failure_message(desk, backend, tmp_path):
    cand = backend.add_candidate(fullName="Ada Lovelace")
    screen = CandidateDetailScreen(desk, cand["id"])
    with patch.object(desk.documents.api, "get", side_effect=ApiError("NETWORK", "Request failed: timed out")):
        assert screen.download(1, tmp_path) is None
    assert screen.error == "Failed to download document. Please try again."


def test_linkedin_profile_url():
    assert linkedin_profile_url("") is None
    assert linkedin_profile_url("https://linkedin.com/in/ada") == "https://linkedin.com/in/ada"
    assert linkedin_profile_url("www.linkedin.com/in/ada") == "https://www.linkedin.com/in/ada"
    assert linkedin_profile_url("ada-lovelace") == "https://www.linkedin.com/in/ada-lovelace"
