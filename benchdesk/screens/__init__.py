from benchdesk.screens.candidate_detail import CandidateDetailScreen
from benchdesk.screens.candidate_form import CandidateFormScreen
from benchdesk.screens.candidate_list import CandidateListScreen

__all__ = ["CandidateDetailScreen", "CandidateFormScreen", "CandidateListScreen"]
