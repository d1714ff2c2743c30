from unittest.mock import AsyncMock

import pytest

from app.core.exceptions import NotFoundError
from app.services.template_service import TemplateService


@pytest.fixture
def service(tmp_path):
    (tmp_path / "COA Template.docx").write_bytes(b"PK")
    return TemplateService(AsyncMock(), files_dir=str(tmp_path))


def test_template_file_lookup_appends_extension(service):
    path = service.get_template_file("COA Template")
    assert path.name == "COA Template.docx"


def test_template_file_missing(service):
    with pytest.raises(NotFoundError):
        service.get_template_file("Missing")


def test_template_file_path_traversal(service):
    with pytest.raises(NotFoundError):
        service.get_template_file("../secrets")
