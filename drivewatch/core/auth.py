# (c) Copyright Datacraft, 2026
"""
Identity lookup.

Authentication happens upstream; the reverse proxy forwards the username in
the configured remote user header.
"""
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.config import get_settings
from drivewatch.core.db.engine import get_session
from drivewatch.core.features.users.db import api as usr_dbapi
from drivewatch.core.features.users.db.orm import User


async def get_current_user(
	request: Request,
	session: Annotated[AsyncSession, Depends(get_session)],
) -> User:
	settings = get_settings()
	username = request.headers.get(settings.remote_user_header)
	if not username:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail="Not authenticated",
		)

	user = await usr_dbapi.get_user_by_username(session, username)
	if user is None or not user.is_active:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail="Unknown or inactive user",
		)
	return user


__all__ = ['get_current_user']
