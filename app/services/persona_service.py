"""
페르소나(시스템 프롬프트 프리셋) 관리 서비스
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.persona import Persona
from app.services.common import new_id, utc_now

logger = logging.getLogger(__name__)


class PersonaService:
    """페르소나 CRUD"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_personas(self) -> List[Persona]:
        result = await self.db.execute(select(Persona).order_by(Persona.created_at.desc()))
        return list(result.scalars().all())

    async def get_persona(self, persona_id: str) -> Optional[Persona]:
        return await self.db.get(Persona, persona_id, populate_existing=True)

    async def create_persona(
        self,
        name: str,
        system_prompt: str,
        description: Optional[str] = None,
    ) -> str:
        persona = Persona(
            id=new_id(),
            name=name,
            description=description,
            system_prompt=system_prompt,
            created_at=utc_now(),
        )
        self.db.add(persona)
        await self.db.flush()
        logger.info(f"페르소나 생성: id={persona.id}, name={name}")
        return persona.id

    async def update_persona(
        self,
        persona_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        system_prompt: Optional[str] = None,
    ) -> bool:
        values = {
            column: value
            for column, value in (
                ("name", name),
                ("description", description),
                ("system_prompt", system_prompt),
            )
            if value is not None
        }
        if not values:
            return await self.get_persona(persona_id) is not None

        result = await self.db.execute(
            update(Persona).where(Persona.id == persona_id).values(**values)
        )
        return result.rowcount > 0

    async def delete_persona(self, persona_id: str) -> bool:
        result = await self.db.execute(delete(Persona).where(Persona.id == persona_id))
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"페르소나 삭제: id={persona_id}")
        return deleted
