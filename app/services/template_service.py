"""Template catalog and template file downloads."""

from pathlib import Path
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.database.models import Template
from app.repositories.template_repository import TemplateRepository
from app.schemas.template import TemplateCreate
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TemplateService:
    def __init__(self, db_session: AsyncSession, files_dir: Optional[str] = None):
        self.repository = TemplateRepository(db_session)
        self.files_dir = Path(files_dir or settings.template_files_dir)

    async def list_templates(self) -> List[Template]:
        return await self.repository.list_active()

    async def get_template(self, template_id: UUID) -> Template:
        template = await self.repository.get_by_id(template_id)
        if not template:
            raise NotFoundError(f"Template {template_id} not found")
        return template

    async def create_template(self, data: TemplateCreate, creator_id: Optional[UUID]) -> Template:
        template = await self.repository.create(
            name=data.name,
            description=data.description,
            type=data.type.value,
            content=data.content,
            is_active=True,
            created_by=creator_id,
        )
        LOGGER.info(f"Created template {template.id} ({template.name})")
        return template

    def get_template_file(self, template_name: str) -> Path:
        """Locate a blank ``.docx`` template on disk.

        Raises:
            NotFoundError: If the file is missing or the name escapes the directory
        """
        name = template_name if template_name.endswith(".docx") else f"{template_name}.docx"
        base = self.files_dir.resolve()
        path = (base / name).resolve()
        if base not in path.parents or not path.is_file():
            raise NotFoundError(f"Template file {name} not found")
        return path
