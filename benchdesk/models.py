from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DocumentType(str, Enum):
    RESUME = "RESUME"
    PASSPORT = "PASSPORT"
    VISA_DOCUMENT = "VISA_DOCUMENT"
    I94 = "I94"
    EAD = "EAD"
    SSN = "SSN"
    DIPLOMA = "DIPLOMA"
    TRANSCRIPT = "TRANSCRIPT"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return _DOCUMENT_TYPE_LABELS[self]


_DOCUMENT_TYPE_LABELS = {
    DocumentType.RESUME: "Resume/CV",
    DocumentType.PASSPORT: "Passport",
    DocumentType.VISA_DOCUMENT: "Visa Document",
    DocumentType.I94: "I-94 Document",
    DocumentType.EAD: "EAD Card",
    DocumentType.SSN: "SSN Card",
    DocumentType.DIPLOMA: "Diploma/Degree",
    DocumentType.TRANSCRIPT: "Transcript",
    DocumentType.OTHER: "Other",
}


class ActivityType(str, Enum):
    APPLIED = "APPLIED"
    SUBMITTED = "SUBMITTED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"
    FEEDBACK_RECEIVED = "FEEDBACK_RECEIVED"
    REJECTED = "REJECTED"
    ON_HOLD = "ON_HOLD"

    @property
    def label(self) -> str:
        return _ACTIVITY_TYPE_LABELS[self]


_ACTIVITY_TYPE_LABELS = {
    ActivityType.APPLIED: "Applied to Job",
    ActivityType.SUBMITTED: "Submitted to Client",
    ActivityType.INTERVIEW_SCHEDULED: "Interview Scheduled",
    ActivityType.INTERVIEW_COMPLETED: "Interview Completed",
    ActivityType.FEEDBACK_RECEIVED: "Feedback Received",
    ActivityType.REJECTED: "Rejected",
    ActivityType.ON_HOLD: "On Hold",
}


class VisaStatus(str, Enum):
    H1B = "H1B"
    H4EAD = "H4EAD"
    L1 = "L1"
    L2EAD = "L2EAD"
    OPT = "OPT"
    STEM_OPT = "STEM_OPT"
    CPT = "CPT"
    F1 = "F1"
    GC = "GC"
    CITIZEN = "CITIZEN"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return _VISA_LABELS.get(self, self.value)


_VISA_LABELS = {
    VisaStatus.STEM_OPT: "STEM OPT",
    VisaStatus.GC: "Green Card",
    VisaStatus.CITIZEN: "US Citizen",
    VisaStatus.OTHER: "Other",
}


class Record(BaseModel):
    """Backend JSON record: camelCase on the wire, unknown keys ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Candidate(Record):
    id: Optional[int] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    passport_number: Optional[str] = None
    country_of_citizenship: Optional[str] = None
    linkedin_url: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    # Free text is allowed here: "OTHER" is substituted by the typed value on submit.
    visa_status: Optional[str] = None
    other_visa_status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    primary_skill: Optional[str] = None
    other_primary_skill: Optional[str] = None
    additional_skills: Optional[str] = None
    experience_years: Optional[int] = None
    domains: Optional[str] = None
    target_rate: Optional[Decimal] = None
    assigned_consultant_id: Optional[int] = None
    assigned_consultant_name: Optional[str] = None
    notes: Optional[str] = None
    resume_filename: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_name: Optional[str] = None
    document_count: int = 0

    @property
    def domain_list(self) -> List[str]:
        return [d.strip() for d in str(self.domains or "").split(",") if d.strip()]

    @property
    def location(self) -> str:
        return ", ".join(p for p in (self.city, self.state) if p)

    @property
    def full_address(self) -> str:
        parts = (self.address1, self.address2, self.city, self.state, self.country)
        return ", ".join(str(p).strip() for p in parts if p and str(p).strip())

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        names = (self.first_name, self.middle_name, self.last_name)
        return " ".join(n.strip() for n in names if n and n.strip())


class CandidateDocument(Record):
    id: int
    original_filename: Optional[str] = None
    document_type: DocumentType = DocumentType.OTHER
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    description: Optional[str] = None
    is_verified: bool = False

    @field_validator("document_type", mode="before")
    @classmethod
    def _unknown_type_is_other(cls, v):
        try:
            return DocumentType(str(v or "OTHER").upper())
        except ValueError:
            return DocumentType.OTHER


class Activity(Record):
    id: Optional[int] = None
    candidate_id: Optional[int] = None
    activity_type: ActivityType = ActivityType.APPLIED
    client_name: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    submitted_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    activity_date: Optional[date] = None

    @field_validator("submitted_rate", mode="before")
    @classmethod
    def _blank_rate(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Vendor(Record):
    id: Optional[int] = None
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None


class Employee(Record):
    id: Optional[int] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class CandidatePage(Record):
    """Page envelope returned by candidate list and search endpoints."""

    content: List[Candidate] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    number: int = 0
    size: int = 0
