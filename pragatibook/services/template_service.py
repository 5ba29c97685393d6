from __future__ import annotations

import logging

import pydantic

from pragatibook.errors import NotFoundError, ValidationError
from pragatibook.models.template import DEFAULT_TEMPLATE, EDITABLE_FIELDS, Template
from pragatibook.repositories.base import TemplateRepository

logger = logging.getLogger(__name__)


def _build(base: dict, fields: dict) -> Template:
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unknown template fields: {', '.join(sorted(unknown))}")
    try:
        template = Template.model_validate({**base, **fields})
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid template: {exc.errors()[0]['msg']}") from exc
    if not template.name.strip():
        raise ValidationError("Template name is required")
    return template


class TemplateService:
    def __init__(self, template_repo: TemplateRepository) -> None:
        self.template_repo = template_repo

    def list_templates(self, owner_id: int) -> list[Template]:
        return self.template_repo.list_for_owner(owner_id)

    def get_template(self, uuid: str, owner_id: int) -> Template:
        template = self.template_repo.get_for_owner(uuid, owner_id)
        if template is None:
            raise NotFoundError("Template not found")
        return template

    def resolve_template(self, owner_id: int) -> Template:
        """The owner's active template, or DEFAULT_TEMPLATE when none is active."""
        return self.template_repo.get_active(owner_id) or DEFAULT_TEMPLATE

    def create_template(self, owner_id: int, **fields) -> Template:
        template = _build({"owner_id": owner_id}, fields)
        created = self.template_repo.create(template)
        logger.info("Template created: uuid=%s owner=%s", created.uuid, owner_id)
        return created

    def update_template(self, uuid: str, owner_id: int, **fields) -> Template:
        existing = self.get_template(uuid, owner_id)
        updated = self.template_repo.update(_build(existing.model_dump(), fields))
        logger.info("Template updated: uuid=%s", uuid)
        return updated

    def duplicate_template(self, uuid: str, owner_id: int) -> Template:
        source = self.get_template(uuid, owner_id)
        fields = source.model_dump(include=set(EDITABLE_FIELDS))
        fields["name"] = f"{source.name} (Copy)"
        return self.create_template(owner_id, **fields)

    def activate_template(self, uuid: str, owner_id: int) -> Template:
        """Make this template the one used for PDFs; the owner's others are deactivated."""
        template = self.get_template(uuid, owner_id)
        if template.id is None:
            raise ValueError("Cannot activate template without an id")
        self.template_repo.set_active(template.id, owner_id)
        logger.info("Template %s activated for owner=%s", uuid, owner_id)
        return self.get_template(uuid, owner_id)

    def delete_template(self, uuid: str, owner_id: int) -> None:
        template = self.get_template(uuid, owner_id)
        if template.id is None:
            raise ValueError("Cannot delete template without an id")
        self.template_repo.delete(template.id)
        logger.info("Template deleted: uuid=%s owner=%s", uuid, owner_id)
