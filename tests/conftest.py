from __future__ import annotations

import itertools
from urllib.parse import urlsplit

import pytest
import requests
from flask import Flask, Response, jsonify, request
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from benchdesk.client import BenchDesk
from benchdesk.session import MemoryTokenStore, SessionContext


SERVER = "http://testserver"
BASE_URL = f"{SERVER}/api"
GOOD_TOKEN = "good-token"


def _peek(storage) -> bytes:
    data = storage.read()
    storage.stream.seek(0)
    return data


# ============================================================================
# In-memory REST backend
# ============================================================================

class FakeBackend:
    """
    Minimal bench back office served by Flask under /api.

    `fail(endpoint, status, message)` makes one endpoint answer with an error;
    `calls` records (method, path) of every request that reached a route.
    """

    def __init__(self):
        self.app = Flask(__name__)
        self.candidates: dict[int, dict] = {}
        self.documents: dict[int, list[dict]] = {}
        self.contents: dict[int, tuple[bytes, str, str]] = {}
        self.activities: list[dict] = []
        self.employees = [
            {"id": 7, "fullName": "Rita Recruiter", "email": "rita@example.com", "role": "RECRUITER"},
            {"id": 8, "fullName": "Sam Sourcer", "email": "sam@example.com", "role": "RECRUITER"},
        ]
        self.failures: dict[str, tuple[int, str | None]] = {}
        self.calls: list[tuple[str, str]] = []
        self.last_form: dict[str, list[str]] = {}
        self.last_files: list[tuple[str, str, bytes]] = []
        self.last_args: dict[str, list[str]] = {}
        self.last_report: dict = {}
        self._ids = itertools.count(1)
        self._routes()

    # ------------------------------------------------------------------

    def fail(self, endpoint: str, status: int = 500, message: str | None = None) -> None:
        self.failures[endpoint] = (status, message)

    def add_candidate(self, **fields) -> dict:
        cid = next(self._ids)
        row = {"id": cid, "documentCount": 0, **fields}
        self.candidates[cid] = row
        self.documents.setdefault(cid, [])
        return row

    def add_document(self, candidate_id: int, filename: str, doc_type: str, data: bytes, ctype: str) -> dict:
        doc_id = next(self._ids)
        doc = {
            "id": doc_id,
            "originalFilename": filename,
            "documentType": doc_type,
            "fileSize": len(data),
            "contentType": ctype,
        }
        self.documents.setdefault(candidate_id, []).append(doc)
        self.contents[doc_id] = (data, ctype, filename)
        return doc

    def _capture(self) -> None:
        self.last_form = {k: request.form.getlist(k) for k in request.form.keys()}
        self.last_files = [
            (name, f.filename, _peek(f)) for name in request.files.keys() for f in request.files.getlist(name)
        ]
        self.last_args = {k: request.args.getlist(k) for k in request.args.keys()}

    def _candidate_from_form(self, row: dict) -> dict:
        for key, values in request.form.lists():
            if key == "documentTypes":
                continue
            value = values[-1]
            if key == "experienceYears":
                row[key] = int(value)
            elif key in ("targetRate",):
                row[key] = float(value)
            elif key == "assignedConsultantId":
                row[key] = int(value)
            else:
                row[key] = value
        files = request.files.getlist("documents")
        types = request.form.getlist("documentTypes")
        for f, doc_type in zip(files, types):
            self.add_document(row["id"], f.filename, doc_type, f.read(), f.mimetype)
        row["documentCount"] = len(self.documents.get(row["id"], []))
        return row

    # ------------------------------------------------------------------

    def _routes(self) -> None:
        app = self.app

        @app.before_request
        def _guard():
            self.calls.append((request.method, request.path))
            if request.headers.get("Authorization") != f"Bearer {GOOD_TOKEN}":
                return jsonify({"message": "Unauthorized"}), 401
            failure = self.failures.get(request.endpoint or "")
            if failure:
                status, message = failure
                if message is None:
                    return Response("", status=status)
                return jsonify({"message": message}), status
            return None

        def _page(rows: list[dict]):
            page = int(request.args.get("page", 0))
            size = int(request.args.get("size", 10))
            chunk = rows[page * size:(page + 1) * size]
            total_pages = (len(rows) + size - 1) // size if size else 0
            return jsonify(
                {
                    "content": chunk,
                    "totalElements": len(rows),
                    "totalPages": total_pages,
                    "number": page,
                    "size": size,
                }
            )

        @app.get("/api/bench-candidates")
        def list_candidates():
            return _page(list(self.candidates.values()))

        @app.get("/api/bench-candidates/search")
        def search_candidates():
            self._capture()
            rows = list(self.candidates.values())
            for key in ("fullName", "visaStatus", "primarySkill", "state", "email"):
                needle = request.args.get(key)
                if needle:
                    rows = [r for r in rows if needle.lower() in str(r.get(key) or "").lower()]
            return _page(rows)

        @app.get("/api/bench-candidates/<int:cid>")
        def get_candidate(cid):
            row = self.candidates.get(cid)
            if row is None:
                return jsonify({"message": "Bench candidate not found"}), 404
            return jsonify(row)

        @app.post("/api/bench-candidates")
        def create_candidate():
            self._capture()
            if not request.form.get("fullName"):
                return jsonify({"message": "Full name is required"}), 400
            row = self.add_candidate()
            return jsonify(self._candidate_from_form(row)), 201

        @app.put("/api/bench-candidates/<int:cid>")
        def update_candidate(cid):
            self._capture()
            row = self.candidates.get(cid)
            if row is None:
                return jsonify({"message": "Bench candidate not found"}), 404
            return jsonify(self._candidate_from_form(row))

        @app.delete("/api/bench-candidates/<int:cid>")
        def delete_candidate(cid):
            self.candidates.pop(cid, None)
            return Response("", status=204)

        @app.delete("/api/bench-candidates/bulk")
        def bulk_delete():
            self._capture()
            for raw in request.args.getlist("ids"):
                self.candidates.pop(int(raw), None)
            return Response("", status=204)

        @app.post("/api/bench-candidates/export")
        def export_candidates():
            body = request.get_json(silent=True) or {}
            ids = ",".join(str(i) for i in body.get("candidateIds") or [])
            return Response(
                f"ids:{ids}".encode(),
                mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                headers={"Content-Disposition": 'attachment; filename="bench_candidates.xlsx"'},
            )

        @app.get("/api/bench-candidates/<int:cid>/resume")
        def download_resume(cid):
            return jsonify({"message": "Resume not found"}), 404

        @app.get("/api/bench-candidates/<int:cid>/documents")
        def list_documents(cid):
            return jsonify(self.documents.get(cid, []))

        @app.post("/api/bench-candidates/<int:cid>/documents")
        def upload_document(cid):
            self._capture()
            f = request.files["file"]
            doc = self.add_document(cid, f.filename, request.args.get("documentType", "OTHER"), f.read(), f.mimetype)
            return jsonify(doc), 201

        @app.post("/api/bench-candidates/<int:cid>/documents/multiple")
        def upload_documents(cid):
            self._capture()
            files = request.files.getlist("files")
            types = request.form.getlist("documentTypes")
            if len(files) != len(types):
                return jsonify({"message": "Each file needs a document type"}), 400
            created = [self.add_document(cid, f.filename, t, f.read(), f.mimetype) for f, t in zip(files, types)]
            return jsonify(created), 201

        @app.get("/api/bench-candidates/<int:cid>/documents/<int:doc_id>")
        def get_document(cid, doc_id):
            if doc_id not in self.contents:
                return Response("", status=404)
            data, ctype, filename = self.contents[doc_id]
            return Response(
                data,
                mimetype=ctype,
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )

        @app.get("/api/bench-candidates/<int:cid>/documents/<int:doc_id>/info")
        def document_info(cid, doc_id):
            for doc in self.documents.get(cid, []):
                if doc["id"] == doc_id:
                    return jsonify(doc)
            return jsonify({"message": "Document not found"}), 404

        @app.delete("/api/bench-candidates/<int:cid>/documents/<int:doc_id>")
        def delete_document(cid, doc_id):
            docs = self.documents.get(cid, [])
            if not any(d["id"] == doc_id for d in docs):
                return Response("", status=404)
            self.documents[cid] = [d for d in docs if d["id"] != doc_id]
            self.contents.pop(doc_id, None)
            return Response("", status=204)

        @app.get("/api/candidate-activities/candidate/<int:cid>")
        def list_activities(cid):
            return jsonify([a for a in self.activities if a.get("candidateId") == cid])

        @app.post("/api/candidate-activities")
        def create_activity():
            body = request.get_json(silent=True) or {}
            row = {**body, "id": next(self._ids)}
            self.activities.append(row)
            return jsonify(row), 201

        @app.get("/api/employees")
        def list_employees():
            return jsonify(self.employees)

        @app.get("/api/dashboard/stats")
        def dashboard_stats():
            return jsonify({"totalBench": len(self.candidates)})

        @app.get("/api/dashboard/consultant-performance")
        def consultant_performance():
            return jsonify({"Rita Recruiter": {"submissions": 3}})

        @app.get("/api/system/health")
        def health():
            return jsonify({"status": "UP"})

        @app.post("/api/system/error-report")
        def error_report():
            self.last_report = request.get_json(silent=True) or {}
            return Response("", status=204)


# ============================================================================
# Transport adapters
# ============================================================================

class FlaskAdapter(BaseAdapter):
    """requests transport that hands each prepared request to a Flask test client."""

    def __init__(self, app: Flask):
        super().__init__()
        self.client = app.test_client()
        self.timeouts: list = []
        self.requests: list[requests.PreparedRequest] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.timeouts.append(timeout)
        self.requests.append(request)
        parts = urlsplit(request.url)
        body = request.body or b""
        if isinstance(body, str):
            body = body.encode("utf-8")

        res = self.client.open(
            parts.path,
            method=request.method,
            headers=dict(request.headers),
            data=body,
            query_string=parts.query,
        )

        resp = requests.Response()
        resp.status_code = res.status_code
        resp._content = res.get_data()
        resp.headers = CaseInsensitiveDict(dict(res.headers))
        resp.url = request.url
        resp.request = request
        resp.reason = res.status.split(" ", 1)[-1]
        return resp

    def close(self):
        pass


class UnreachableAdapter(BaseAdapter):
    def send(self, request, **kwargs):
        raise requests.exceptions.ConnectionError(f"Failed to establish a new connection: {request.url}")

    def close(self):
        pass


# ============================================================================
# Fixtures
# ============================================================================

def _desk(adapter: BaseAdapter, navigations: list, token: str | None = GOOD_TOKEN) -> BenchDesk:
    http = requests.Session()
    http.mount(SERVER, adapter)
    ctx = SessionContext(BASE_URL, tokens=MemoryTokenStore(token), navigate=navigations.append)
    return BenchDesk(ctx, http=http)


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def adapter(backend):
    return FlaskAdapter(backend.app)


@pytest.fixture()
def navigations():
    return []


@pytest.fixture()
def desk(adapter, navigations):
    d = _desk(adapter, navigations)
    yield d
    d.close()


@pytest.fixture()
def expired_desk(adapter, navigations):
    d = _desk(adapter, navigations, token="expired-token")
    yield d
    d.close()


@pytest.fixture()
def unreachable_desk(navigations):
    d = _desk(UnreachableAdapter(), navigations)
    yield d
    d.close()
