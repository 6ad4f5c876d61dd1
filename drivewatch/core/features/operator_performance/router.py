# (c) Copyright Datacraft, 2026
"""FastAPI router for operator performance."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from drivewatch.core.auth import get_current_user
from drivewatch.core.db.engine import get_session
from drivewatch.core.exceptions import DrivewatchError
from drivewatch.core.features.users.db.orm import User, UserRole
from drivewatch.core.http_errors import to_http_exception

from .service import OperatorPerformanceService
from .views import (
	ComputeRequest,
	PerformanceCheckRequest,
	PerformanceCheckSummary,
	PerformanceSnapshotOut,
)

router = APIRouter(prefix="/operator-performance", tags=["operator-performance"])


def _require_admin(user: User) -> None:
	if user.role != UserRole.ADMIN.value:
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail="Only admins can view operator performance",
		)


@router.get("/attention", response_model=list[PerformanceSnapshotOut])
async def get_users_needing_attention(
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	_require_admin(current_user)
	snapshots = await OperatorPerformanceService(session).get_users_needing_attention()
	return [PerformanceSnapshotOut.model_validate(s) for s in snapshots]


@router.post("/check", response_model=PerformanceCheckSummary)
async def run_performance_check(
	data: PerformanceCheckRequest,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	_require_admin(current_user)
	try:
		summary = await OperatorPerformanceService(session).run_performance_check(
			window_days=data.window_days
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return PerformanceCheckSummary(**summary)


@router.post("/{user_id}", response_model=PerformanceSnapshotOut)
async def compute_operator_performance(
	user_id: str,
	data: ComputeRequest,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
):
	if current_user.id != user_id:
		_require_admin(current_user)
	try:
		snapshot = await OperatorPerformanceService(session).compute_operator_performance(
			user_id, window_days=data.window_days
		)
	except DrivewatchError as e:
		raise to_http_exception(e)
	return PerformanceSnapshotOut.model_validate(snapshot)


@router.get("/{user_id}/history", response_model=list[PerformanceSnapshotOut])
async def list_user_history(
	user_id: str,
	session: Annotated[AsyncSession, Depends(get_session)],
	current_user: Annotated[User, Depends(get_current_user)],
	limit: int = Query(default=30, ge=1, le=365),
):
	if current_user.id != user_id:
		_require_admin(current_user)
	rows = await OperatorPerformanceService(session).list_user_history(user_id, limit=limit)
	return [PerformanceSnapshotOut.model_validate(row) for row in rows]
