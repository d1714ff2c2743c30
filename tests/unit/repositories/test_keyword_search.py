"""Unit tests for BaseRepository.search_contains.

Tests:
- LIKE wildcards in the term match literally
- The escape character itself is escaped
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.repositories.product_repository import ProductRepository


@pytest.fixture
def session():
    session = AsyncMock()
    session.execute.return_value = MagicMock()
    return session


def _compiled(session):
    stmt = session.execute.call_args.args[0]
    return stmt.compile(dialect=postgresql.dialect())


@pytest.mark.asyncio
async def test_wildcards_in_term_are_escaped(session):
    await ProductRepository(session).search("50%_off", 10)

    compiled = _compiled(session)
    sql = str(compiled)
    assert "ESCAPE '/'" in sql
    assert "50/%/_off" in compiled.params.values()
    assert "50%_off" not in compiled.params.values()


@pytest.mark.asyncio
async def test_escape_character_in_term_is_doubled(session):
    await ProductRepository(session).search("1/2 tablet", 10)

    compiled = _compiled(session)
    assert "1//2 tablet" in compiled.params.values()
