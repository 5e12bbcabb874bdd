"""
Plain JSON CRUD resources used around the bench screens:
vendors, employees (assignable consultants) and working candidates.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from benchdesk.models import Employee, Vendor
from benchdesk.resources.base import ResourceClient


def _items(payload: Any) -> list:
    if isinstance(payload, dict):
        return list(payload.get("content") or [])
    return list(payload or [])


class CrudClient(ResourceClient):
    model: type[BaseModel] | None = None

    def _one(self, payload: Any) -> Any:
        return self.model.model_validate(payload) if self.model and payload is not None else payload

    def _many(self, payload: Any) -> list:
        return [self._one(p) for p in _items(payload)]

    def get_all(self, params: dict[str, Any] | None = None) -> list:
        return self._many(self.api.get(self.path(), params=params or {}))

    def get_by_id(self, item_id: int | str) -> Any:
        return self._one(self.api.get(self.path(item_id)))

    def create(self, data: dict[str, Any]) -> Any:
        return self._one(self.api.post(self.path(), json=data))

    def update(self, item_id: int | str, data: dict[str, Any]) -> Any:
        return self._one(self.api.put(self.path(item_id), json=data))

    def delete(self, item_id: int | str) -> None:
        self.api.delete(self.path(item_id))

    def search(self, params: dict[str, Any]) -> list:
        return self._many(self.api.get(self.path("search"), params=params))


class VendorsClient(CrudClient):
    base_path = "/vendors"
    model = Vendor

    def by_status(self, status: str) -> list[Vendor]:
        return self._many(self.api.get(self.path("status", status)))


class EmployeesClient(CrudClient):
    base_path = "/employees"
    model = Employee


class WorkingCandidatesClient(CrudClient):
    base_path = "/working-candidates"

    def get_statistics(self) -> dict[str, Any]:
        return self.api.get(self.path("statistics")) or {}
