from __future__ import annotations

from typing import Callable

import requests

from benchdesk.api_client import ApiClient
from benchdesk.config import Config, get_config
from benchdesk.logging_setup import setup_logging
from benchdesk.resources import (
    ActivitiesClient,
    AnalyticsClient,
    CandidatesClient,
    DocumentsClient,
    EmployeesClient,
    SystemClient,
    VendorsClient,
    WorkingCandidatesClient,
)
from benchdesk.session import SessionContext, TokenStore


class BenchDesk:
    """All resource clients bound to one session context."""

    def __init__(self, ctx: SessionContext, *, http: requests.Session | None = None, verify: bool = True):
        self.ctx = ctx
        self.api = ApiClient(ctx, session=http, verify=verify)
        self.candidates = CandidatesClient(self.api)
        self.documents = DocumentsClient(self.api)
        self.activities = ActivitiesClient(self.api)
        self.vendors = VendorsClient(self.api)
        self.employees = EmployeesClient(self.api)
        self.working_candidates = WorkingCandidatesClient(self.api)
        self.analytics = AnalyticsClient(self.api)
        self.system = SystemClient(self.api)

    def close(self) -> None:
        self.ctx.close()

    def __enter__(self) -> "BenchDesk":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def connect(
    cfg: Config | None = None,
    *,
    tokens: TokenStore | None = None,
    navigate: Callable[[str], None] | None = None,
    http: requests.Session | None = None,
) -> BenchDesk:
    cfg = cfg or get_config()
    setup_logging(cfg.LOG_LEVEL)
    ctx = SessionContext.from_config(cfg, tokens=tokens, navigate=navigate)
    return BenchDesk(ctx, http=http, verify=cfg.VERIFY_TLS)
