"""
Repository Dependency.

Provides a SqlRepoBundle bound to the request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.database import get_session
from bookclub.core.database.repositories.bundle import SqlRepoBundle, build_sql_repos_from_session


async def get_repos(session: AsyncSession = Depends(get_session)) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]
