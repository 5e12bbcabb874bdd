"""
Create / edit form for a bench candidate.

Keeps the form values, the pending document uploads and the submit flow:
validate the form, validate every attached file, then send one multipart
create or update carrying both.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from benchdesk.client import BenchDesk
from benchdesk.errors import ApiError, error_message
from benchdesk.files import LocalFile, validate_file
from benchdesk.models import Candidate, DocumentType, Employee
from benchdesk.uploads import PendingUpload, UploadBatch


logger = logging.getLogger(__name__)


def empty_form() -> dict[str, Any]:
    return {
        "firstName": "",
        "middleName": "",
        "lastName": "",
        "phoneNumber": "",
        "email": "",
        "passportNumber": "",
        "countryOfCitizenship": "",
        "linkedinUrl": "",
        "address1": "",
        "address2": "",
        "city": "",
        "state": "",
        "country": "",
        "visaStatus": "H1B",
        "otherVisaStatus": "",
        "startDate": "",
        "endDate": "",
        "primarySkill": "",
        "otherPrimarySkill": "",
        "additionalSkills": "",
        "yearsOfExperience": "",
        "domains": [],
        "targetRate": "",
        "assignedConsultantId": "",
        "notes": "",
    }


def split_full_name(full_name: str) -> tuple[str, str, str]:
    parts = str(full_name or "").split()
    first = parts[0] if parts else ""
    last = parts[-1] if len(parts) > 1 else ""
    middle = " ".join(parts[1:-1]) if len(parts) > 2 else ""
    return first, middle, last


def _s(value: Any) -> str:
    return "" if value is None else str(value).strip()


class CandidateFormScreen:
    def __init__(self, desk: BenchDesk, candidate_id: int | None = None, *, max_file_size: int | None = None):
        self.desk = desk
        self.candidate_id = candidate_id
        self.max_file_size = max_file_size
        self.form = empty_form()
        self.uploads = UploadBatch()
        self.consultants: list[Employee] = []
        self.loading = False
        self.errors: list[str] = []
        self.error = ""
        self.notice = ""
        self.saved: Candidate | None = None

    @property
    def is_edit(self) -> bool:
        return self.candidate_id is not None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_consultants(self) -> list[Employee]:
        try:
            self.consultants = self.desk.employees.get_all()
        except ApiError as e:
            self.error = error_message(e, "Failed to load employees")
        return self.consultants

    def load(self) -> bool:
        if not self.is_edit:
            return True
        self.loading = True
        try:
            candidate = self.desk.candidates.get_by_id(self.candidate_id)
        except ApiError as e:
            self.error = error_message(e, "Failed to load candidate details")
            return False
        finally:
            self.loading = False
        self.form = self.form_from_candidate(candidate)
        return True

    @staticmethod
    def form_from_candidate(candidate: Candidate) -> dict[str, Any]:
        first, middle, last = split_full_name(candidate.full_name or "")
        form = empty_form()
        form.update(
            {
                "firstName": candidate.first_name or first,
                "middleName": candidate.middle_name or middle,
                "lastName": candidate.last_name or last,
                "phoneNumber": candidate.phone_number or "",
                "email": candidate.email or "",
                "passportNumber": candidate.passport_number or "",
                "countryOfCitizenship": candidate.country_of_citizenship or "",
                "linkedinUrl": candidate.linkedin_url or "",
                "address1": candidate.address1 or "",
                "address2": candidate.address2 or "",
                "city": candidate.city or "",
                "state": candidate.state or "",
                "country": candidate.country or "",
                "visaStatus": candidate.visa_status or "H1B",
                "otherVisaStatus": candidate.other_visa_status or "",
                "startDate": candidate.start_date.isoformat() if candidate.start_date else "",
                "endDate": candidate.end_date.isoformat() if candidate.end_date else "",
                "primarySkill": candidate.primary_skill or "",
                "otherPrimarySkill": candidate.other_primary_skill or "",
                "additionalSkills": candidate.additional_skills or "",
                "yearsOfExperience": candidate.experience_years if candidate.experience_years is not None else "",
                "domains": candidate.domain_list,
                "targetRate": str(candidate.target_rate) if candidate.target_rate is not None else "",
                "assignedConsultantId": candidate.assigned_consultant_id or "",
                "notes": candidate.notes or "",
            }
        )
        return form

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.form:
            raise KeyError(name)
        self.form[name] = value

    def toggle_domain(self, domain: str, checked: bool) -> None:
        domains = [d for d in self.form["domains"] if d != domain]
        if checked:
            domains.append(domain)
        self.form["domains"] = domains

    def add_files(self, files: Iterable[LocalFile]) -> list[PendingUpload]:
        return self.uploads.add(files)

    def set_document_type(self, upload_id: str, document_type: DocumentType | str | None) -> None:
        self.uploads.set_type(upload_id, document_type)

    def remove_file(self, upload_id: str) -> None:
        self.uploads.remove(upload_id)

    # ------------------------------------------------------------------
    # Validation and submit
    # ------------------------------------------------------------------

    def validate(self) -> list[str]:
        f = self.form
        errors: list[str] = []
        if not _s(f["firstName"]):
            errors.append("First Name is required")
        if not _s(f["lastName"]):
            errors.append("Last Name is required")
        if not _s(f["phoneNumber"]):
            errors.append("Phone Number is required")
        if not _s(f["email"]):
            errors.append("Email is required")
        if not _s(f["primarySkill"]):
            errors.append("Primary Skill is required")
        if not _s(f["yearsOfExperience"]):
            errors.append("Years of Experience is required")
        else:
            try:
                years = int(_s(f["yearsOfExperience"]))
                if years < 0 or years > 50:
                    errors.append("Years of Experience must be between 0 and 50")
            except ValueError:
                errors.append("Years of Experience must be a number")

        if _s(f["visaStatus"]) == "OTHER" and not _s(f["otherVisaStatus"]):
            errors.append("Please specify the visa status")
        if _s(f["primarySkill"]) == "OTHER" and not _s(f["otherPrimarySkill"]):
            errors.append("Please specify the primary skill")
        if _s(f["targetRate"]):
            try:
                float(_s(f["targetRate"]))
            except ValueError:
                errors.append("Target Rate must be a number")

        for item in self.uploads.untyped():
            errors.append(f"Select a document type for {item.file.name}")
        for item in self.uploads.items:
            result = validate_file(item.file, max_size=self.max_file_size)
            errors.extend(f"{item.file.name}: {msg}" for msg in result.errors)
        return errors

    def to_fields(self) -> dict[str, Any]:
        """Text fields of the multipart body; empty values are dropped on encode."""
        f = self.form
        first, middle, last = _s(f["firstName"]), _s(f["middleName"]), _s(f["lastName"])
        primary = _s(f["otherPrimarySkill"]) if _s(f["primarySkill"]) == "OTHER" else _s(f["primarySkill"])
        visa = _s(f["otherVisaStatus"]) if _s(f["visaStatus"]) == "OTHER" else _s(f["visaStatus"])
        rate = _s(f["targetRate"])
        years = _s(f["yearsOfExperience"])

        return {
            "fullName": " ".join(p for p in (first, middle, last) if p),
            "phoneNumber": _s(f["phoneNumber"]),
            "email": _s(f["email"]),
            "city": _s(f["city"]),
            "state": _s(f["state"]),
            "primarySkill": primary,
            "experienceYears": int(years) if years else None,
            "visaStatus": visa,
            "targetRate": float(rate) if rate else None,
            "assignedConsultantId": f["assignedConsultantId"] or None,
            "notes": _s(f["notes"]),
            "firstName": first,
            "middleName": middle,
            "lastName": last,
            "passportNumber": _s(f["passportNumber"]),
            "countryOfCitizenship": _s(f["countryOfCitizenship"]),
            "linkedinUrl": _s(f["linkedinUrl"]),
            "address1": _s(f["address1"]),
            "address2": _s(f["address2"]),
            "country": _s(f["country"]),
            "startDate": _s(f["startDate"]),
            "endDate": _s(f["endDate"]),
            "additionalSkills": _s(f["additionalSkills"]),
            "domains": ",".join(f["domains"]),
        }

    def submit(self) -> Candidate | None:
        """Validate, then create or update. Validation failures never reach the network."""
        self.errors = self.validate()
        self.error = ""
        if self.errors:
            return None

        action = "update" if self.is_edit else "create"
        self.loading = True
        try:
            if self.is_edit:
                saved = self.desk.candidates.update(self.candidate_id, self.to_fields(), self.uploads.eligible())
            else:
                saved = self.desk.candidates.create(self.to_fields(), self.uploads.eligible())
        except ApiError as e:
            self.error = error_message(e, f"Failed to {action} bench candidate")
            logger.info("candidate %s failed: %s", action, e.message)
            return None
        finally:
            self.loading = False

        self.uploads.mark_submitted()
        self.saved = saved
        self.notice = f"Bench candidate {action}d successfully!"
        return saved
