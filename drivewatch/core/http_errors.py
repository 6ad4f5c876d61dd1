# (c) Copyright Datacraft, 2026
"""Translation of domain errors into HTTP responses."""
from fastapi import HTTPException, status

from drivewatch.core.exceptions import (
	DrivewatchError,
	MissingRequiredTasks,
	NotFound,
	PersistenceFailure,
	StateConflict,
	ValidationError,
)


def to_http_exception(error: DrivewatchError) -> HTTPException:
	if isinstance(error, ValidationError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
	if isinstance(error, NotFound):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
	if isinstance(error, MissingRequiredTasks):
		return HTTPException(
			status_code=status.HTTP_409_CONFLICT,
			detail={"message": str(error), "missing_tasks": error.task_names},
		)
	if isinstance(error, StateConflict):
		return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
	if isinstance(error, PersistenceFailure):
		return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
	return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
