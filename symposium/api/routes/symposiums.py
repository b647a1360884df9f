"""
Symposium Routes - Conversation workspace CRUD.

Endpoints:
- GET    /api/symposiums
- POST   /api/symposiums
- GET    /api/symposiums/{id}  (includes consultants)
- PUT    /api/symposiums/{id}
- DELETE /api/symposiums/{id}  (removes consultants and messages too)
"""
from fastapi import APIRouter, Depends

from symposium.api.dependencies import get_symposium_service
from symposium.models.chat import StatusResponse
from symposium.models.symposium import SymposiumCreate, SymposiumUpdate
from symposium.services.symposium_service import SymposiumService

router = APIRouter(prefix="/api/symposiums", tags=["Symposiums"])


@router.get("", summary="List symposiums")
def list_symposiums(service: SymposiumService = Depends(get_symposium_service)):
    return service.list_symposiums()


@router.post("", status_code=201, summary="Create a symposium")
def create_symposium(body: SymposiumCreate, service: SymposiumService = Depends(get_symposium_service)):
    return service.create_symposium(body.name, body.description)


@router.get("/{symposium_id}", summary="Get a symposium with its consultants")
def get_symposium(symposium_id: int, service: SymposiumService = Depends(get_symposium_service)):
    return service.get_symposium(symposium_id)


@router.put("/{symposium_id}", summary="Update a symposium")
def update_symposium(
    symposium_id: int,
    body: SymposiumUpdate,
    service: SymposiumService = Depends(get_symposium_service),
):
    return service.update_symposium(symposium_id, body.name, body.description)


@router.delete("/{symposium_id}", response_model=StatusResponse, summary="Delete a symposium")
def delete_symposium(symposium_id: int, service: SymposiumService = Depends(get_symposium_service)):
    service.delete_symposium(symposium_id)
    return StatusResponse(detail={"symposium_id": symposium_id})
