"""페르소나 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import CreatedResponse, SuccessResponse
from app.schemas.persona import (
    PersonaCreate,
    PersonaDetailResponse,
    PersonaListResponse,
    PersonaResponse,
    PersonaUpdate,
)
from app.services.persona_service import PersonaService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Union[PersonaDetailResponse, PersonaListResponse])
async def get_personas(
    id: Optional[str] = Query(None, description="페르소나 ID (지정 시 단건 조회)"),
    db: AsyncSession = Depends(get_db),
):
    service = PersonaService(db)

    if id:
        persona = await service.get_persona(id)
        if persona is None:
            raise NotFoundError("Persona not found")
        return PersonaDetailResponse(persona=PersonaResponse.model_validate(persona))

    return PersonaListResponse(
        personas=[PersonaResponse.model_validate(p) for p in await service.list_personas()]
    )


@router.post("", response_model=CreatedResponse)
async def create_persona(
    body: PersonaCreate,
    db: AsyncSession = Depends(get_db),
):
    if not body.name or not body.system_prompt:
        raise ValidationError("Name and system prompt are required")

    persona_id = await PersonaService(db).create_persona(
        name=body.name,
        system_prompt=body.system_prompt,
        description=body.description,
    )
    return CreatedResponse(id=persona_id)


@router.put("", response_model=SuccessResponse)
async def update_persona(
    body: PersonaUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not body.id:
        raise ValidationError("Persona ID is required")

    updated = await PersonaService(db).update_persona(
        body.id,
        name=body.name,
        description=body.description,
        system_prompt=body.system_prompt,
    )
    if not updated:
        raise NotFoundError("Persona not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_persona(
    id: Optional[str] = Query(None, description="페르소나 ID"),
    db: AsyncSession = Depends(get_db),
):
    if not id:
        raise ValidationError("Persona ID is required")

    if not await PersonaService(db).delete_persona(id):
        raise NotFoundError("Persona not found")
    return SuccessResponse()
