"""페르소나 스키마"""
from typing import List, Optional
from datetime import datetime

from app.schemas.base import CamelModel


class PersonaCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    system_prompt: Optional[str] = None


class PersonaUpdate(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    system_prompt: Optional[str] = None


class PersonaResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    system_prompt: str
    created_at: datetime


class PersonaListResponse(CamelModel):
    personas: List[PersonaResponse]


class PersonaDetailResponse(CamelModel):
    persona: PersonaResponse
