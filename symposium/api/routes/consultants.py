"""
Consultant Routes - Consultants, templates, API configuration and Airtable helpers.

Endpoints:
- GET/POST            /api/consultants
- GET/PUT/DELETE      /api/consultants/{id}
- GET                 /api/consultant-templates
- PUT/GET/DELETE      /api/consultants/{id}/api-config  (GET masks secrets)
- GET                 /api/consultants/{id}/tables
- POST                /api/consultants/{id}/query       (query builder, no LLM)
- POST                /api/airtable/test
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from symposium.api.dependencies import get_query_service, get_symposium_service
from symposium.core.logging_config import get_logger
from symposium.models.chat import StatusResponse
from symposium.models.symposium import (
    AirtableTestRequest,
    ApiConfigRequest,
    ConsultantCreate,
    ConsultantUpdate,
    TableQueryRequest,
)
from symposium.services.query_service import TableQueryService
from symposium.services.symposium_service import SymposiumService

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Consultants"])


@router.get("/consultants", summary="List consultants")
def list_consultants(
    symposium_id: Optional[int] = Query(default=None, description="Only consultants of this symposium"),
    service: SymposiumService = Depends(get_symposium_service),
):
    return service.list_consultants(symposium_id)


@router.post("/consultants", status_code=201, summary="Create a consultant")
def create_consultant(body: ConsultantCreate, service: SymposiumService = Depends(get_symposium_service)):
    return service.create_consultant(
        symposium_id=body.symposium_id,
        name=body.name,
        model=body.model,
        system_prompt=body.system_prompt,
        template_id=body.template_id,
        consultant_type=body.consultant_type,
    )


@router.get("/consultants/{consultant_id}", summary="Get a consultant")
def get_consultant(consultant_id: int, service: SymposiumService = Depends(get_symposium_service)):
    return service.get_consultant(consultant_id)


@router.put("/consultants/{consultant_id}", summary="Update a consultant")
def update_consultant(
    consultant_id: int,
    body: ConsultantUpdate,
    service: SymposiumService = Depends(get_symposium_service),
):
    return service.update_consultant(consultant_id, body.name, body.model, body.system_prompt)


@router.delete("/consultants/{consultant_id}", response_model=StatusResponse, summary="Delete a consultant")
def delete_consultant(consultant_id: int, service: SymposiumService = Depends(get_symposium_service)):
    service.delete_consultant(consultant_id)
    return StatusResponse(detail={"consultant_id": consultant_id})


@router.get("/consultant-templates", summary="List consultant templates")
def list_templates(service: SymposiumService = Depends(get_symposium_service)):
    return service.list_templates()


# ============================================================
# API configuration
# ============================================================

@router.put("/consultants/{consultant_id}/api-config", summary="Save a consultant's API configuration")
def save_api_config(
    consultant_id: int,
    body: ApiConfigRequest,
    service: SymposiumService = Depends(get_symposium_service),
):
    return service.save_api_config(consultant_id, body.config)


@router.get("/consultants/{consultant_id}/api-config", summary="Get a consultant's API configuration (masked)")
def get_api_config(consultant_id: int, service: SymposiumService = Depends(get_symposium_service)):
    return service.get_api_config(consultant_id)


@router.delete(
    "/consultants/{consultant_id}/api-config",
    response_model=StatusResponse,
    summary="Deactivate a consultant's API configuration",
)
def delete_api_config(consultant_id: int, service: SymposiumService = Depends(get_symposium_service)):
    deactivated = service.delete_api_config(consultant_id)
    return StatusResponse(success=deactivated, detail={"consultant_id": consultant_id})


# ============================================================
# Airtable helpers
# ============================================================

@router.get("/consultants/{consultant_id}/tables", summary="List tables of the consultant's Airtable base")
def list_tables(consultant_id: int, service: TableQueryService = Depends(get_query_service)):
    return service.list_tables(consultant_id)


@router.post("/consultants/{consultant_id}/query", summary="Run a structured Airtable query")
def run_query(
    consultant_id: int,
    body: TableQueryRequest,
    service: TableQueryService = Depends(get_query_service),
):
    logger.info(
        f"Structured query: consultant={consultant_id}, table={body.table_name}, "
        f"conditions={len(body.conditions)}"
    )
    return service.run_query(
        consultant_id,
        body.table_name,
        conditions=[c.to_condition() for c in body.conditions],
        fields=body.fields,
        sort=[s.model_dump() for s in body.sort],
        max_records=body.max_records,
    )


@router.post("/airtable/test", summary="Test Airtable credentials")
def test_airtable(body: AirtableTestRequest, service: TableQueryService = Depends(get_query_service)):
    return service.test_connection(body.api_key, body.base_id, body.table_name)
