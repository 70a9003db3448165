"""CRUD and bulk-delete endpoints, one router per record type.

Routes are thin: request bodies are handed to the record type's coordinator,
which validates them and raises folio errors that the app maps to status
codes (see folio.api.main).

Per record type (``/api/posts``, ``/api/case-studies``, ...):
- POST   /                  create
- GET    /                  list (page, limit, search, sort_by, sort_order, field filters)
- GET    /{record_id}       fetch one (case studies also by slug)
- PUT    /{record_id}       partial update
- DELETE /{record_id}       delete record and images
- POST   /bulk/delete       delete many records and their images
- POST   /bulk/update       same patch on many records (inquiries)
- PUT    /bulk/reorder      set ``order`` on many records (team members)
"""

from typing import Any, Literal

from fastapi import APIRouter, Body, Query, Request, status
from pydantic import BaseModel, Field

from folio.api.dependencies import Service
from folio.lifecycle.bulk import BulkDeleteResult
from folio.lifecycle.coordinator import DeleteReport
from folio.lifecycle.record_type import RecordType

RESERVED_PARAMS = {"page", "limit", "search", "sort_by", "sort_order"}

ROUTE_PREFIXES = {
    "post": "posts",
    "job": "jobs",
    "case-study": "case-studies",
    "client": "clients",
    "team-member": "team",
    "inquiry": "inquiries",
}


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(default_factory=list, description="Record ids to delete")


class RecordResponse(BaseModel):
    message: str
    record: dict[str, Any]


class DeleteResponse(BaseModel):
    message: str
    report: DeleteReport


class BulkDeleteResponse(BaseModel):
    message: str
    result: BulkDeleteResult


class BulkUpdateRequest(BaseModel):
    ids: list[str] = Field(default_factory=list, description="Record ids to update")
    update_data: dict[str, Any] = Field(
        default_factory=dict, description="Fields to set on every record"
    )


class BulkUpdateResponse(BaseModel):
    message: str
    updated_count: int
    updated_ids: list[str]


class OrderUpdate(BaseModel):
    id: str
    order: int


class ReorderRequest(BaseModel):
    updates: list[OrderUpdate] = Field(description="New order per record id")


class ReorderResponse(BaseModel):
    message: str
    updated_count: int


def _filters_from_query(record_type: RecordType, request: Request) -> dict[str, Any]:
    """Equality filters from query params naming scalar model fields.

    ``all`` means no filter; ``true``/``false`` become booleans.
    """
    fields = record_type.model.model_fields
    filters: dict[str, Any] = {}
    for name, raw in request.query_params.items():
        if name in RESERVED_PARAMS or name not in fields or raw in ("", "all"):
            continue
        if fields[name].annotation is bool:
            filters[name] = raw.lower() == "true"
        elif fields[name].annotation is int:
            try:
                filters[name] = int(raw)
            except ValueError:
                continue
        else:
            filters[name] = raw
    return filters


def build_router(record_type: RecordType) -> APIRouter:
    """Create the router for one record type."""
    prefix = ROUTE_PREFIXES.get(record_type.name, record_type.collection)
    label = record_type.label
    router = APIRouter(prefix=f"/api/{prefix}", tags=[label])

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_record(service: Service, payload: dict[str, Any] = Body(...)) -> RecordResponse:
        record = await service.coordinator(record_type.name).create(payload)
        return RecordResponse(
            message=f"{label} created successfully", record=record.model_dump(mode="json")
        )

    @router.get("")
    async def list_records(
        request: Request,
        service: Service,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: Literal["asc", "desc"] | None = None,
    ) -> dict[str, Any]:
        page_result = await service.coordinator(record_type.name).find(
            filters=_filters_from_query(record_type, request),
            search=search,
            page=page,
            limit=limit,
            sort_by=sort_by,
            descending=None if sort_order is None else sort_order == "desc",
        )
        # Items are typed as RecordBase; dump here so subclass fields survive
        return page_result.model_dump(mode="json")

    @router.get("/{record_id}")
    async def get_record(record_id: str, service: Service) -> dict[str, Any]:
        record = await service.coordinator(record_type.name).lookup(record_id)
        return record.model_dump(mode="json")

    @router.put("/{record_id}")
    async def update_record(
        record_id: str, service: Service, payload: dict[str, Any] = Body(...)
    ) -> RecordResponse:
        record = await service.coordinator(record_type.name).update(record_id, payload)
        return RecordResponse(
            message=f"{label} updated successfully", record=record.model_dump(mode="json")
        )

    @router.delete("/{record_id}")
    async def delete_record(record_id: str, service: Service) -> DeleteResponse:
        report = await service.coordinator(record_type.name).delete(record_id)
        return DeleteResponse(message=f"{label} deleted successfully", report=report)

    @router.post("/bulk/delete")
    async def bulk_delete_records(request: BulkDeleteRequest, service: Service) -> BulkDeleteResponse:
        result = await service.bulk[record_type.name].delete_many(request.ids)
        return BulkDeleteResponse(
            message=f"{result.deleted_count} {label.lower()} records deleted",
            result=result,
        )

    if record_type.bulk_update:

        @router.post("/bulk/update")
        async def bulk_update_records(
            request: BulkUpdateRequest, service: Service
        ) -> BulkUpdateResponse:
            updated = await service.coordinator(record_type.name).update_many(
                request.ids, request.update_data
            )
            return BulkUpdateResponse(
                message=f"{len(updated)} {label.lower()} records updated",
                updated_count=len(updated),
                updated_ids=[r.id for r in updated],
            )

    if "order" in record_type.model.model_fields:

        @router.put("/bulk/reorder")
        async def reorder_records(request: ReorderRequest, service: Service) -> ReorderResponse:
            count = await service.coordinator(record_type.name).reorder(
                {u.id: u.order for u in request.updates}
            )
            return ReorderResponse(message=f"{label} order updated", updated_count=count)

    return router
