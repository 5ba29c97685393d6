from unittest.mock import MagicMock

import pytest

from pragatibook.errors import NotFoundError, ValidationError
from pragatibook.models.template import DEFAULT_TEMPLATE, Template
from pragatibook.services.template_service import TemplateService


def _stored(**overrides) -> Template:
    defaults = dict(id=3, uuid="tpl-uuid", owner_id=1, name="Shop", company_name="Pragati Glass")
    defaults.update(overrides)
    return Template(**defaults)


class TestTemplateService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_repo.create.side_effect = lambda t: t.model_copy(update={"id": 9, "uuid": "new-uuid"})
        self.mock_repo.update.side_effect = lambda t: t
        self.service = TemplateService(self.mock_repo)

    def test_create_template(self):
        template = self.service.create_template(1, name="Shop", company_name="Pragati Glass", due_days=15)
        assert template.uuid == "new-uuid"
        sent = self.mock_repo.create.call_args[0][0]
        assert sent.owner_id == 1
        assert sent.due_days == 15
        assert sent.is_active is False

    def test_create_template_rejects_unknown_field(self):
        with pytest.raises(ValidationError, match="Unknown template fields: is_active"):
            self.service.create_template(1, name="Shop", is_active=True)

    def test_create_template_rejects_invalid_value(self):
        with pytest.raises(ValidationError, match="Invalid template"):
            self.service.create_template(1, name="Shop", font_size="huge")

    def test_create_template_requires_name(self):
        with pytest.raises(ValidationError, match="name is required"):
            self.service.create_template(1, name="  ")

    def test_get_template_not_found(self):
        self.mock_repo.get_for_owner.return_value = None
        with pytest.raises(NotFoundError, match="Template not found"):
            self.service.get_template("nope", 1)

    def test_update_template_keeps_identity(self):
        self.mock_repo.get_for_owner.return_value = _stored()
        updated = self.service.update_template("tpl-uuid", 1, primary_color="#111111")
        assert updated.id == 3
        assert updated.uuid == "tpl-uuid"
        assert updated.primary_color == "#111111"
        assert updated.company_name == "Pragati Glass"

    def test_duplicate_template(self):
        self.mock_repo.get_for_owner.return_value = _stored(is_active=True, footer_text="Thanks")
        copy = self.service.duplicate_template("tpl-uuid", 1)
        assert copy.name == "Shop (Copy)"
        assert copy.footer_text == "Thanks"
        assert copy.uuid == "new-uuid"
        assert copy.is_active is False

    def test_activate_template(self):
        self.mock_repo.get_for_owner.side_effect = [_stored(), _stored(is_active=True)]
        result = self.service.activate_template("tpl-uuid", 1)
        self.mock_repo.set_active.assert_called_once_with(3, 1)
        assert result.is_active is True

    def test_delete_template(self):
        self.mock_repo.get_for_owner.return_value = _stored()
        self.service.delete_template("tpl-uuid", 1)
        self.mock_repo.delete.assert_called_once_with(3)

    def test_delete_foreign_template(self):
        self.mock_repo.get_for_owner.return_value = None
        with pytest.raises(NotFoundError):
            self.service.delete_template("tpl-uuid", 2)
        self.mock_repo.delete.assert_not_called()

    def test_resolve_template_active(self):
        active = _stored(is_active=True)
        self.mock_repo.get_active.return_value = active
        assert self.service.resolve_template(1) is active

    def test_resolve_template_default(self):
        self.mock_repo.get_active.return_value = None
        assert self.service.resolve_template(1) is DEFAULT_TEMPLATE
