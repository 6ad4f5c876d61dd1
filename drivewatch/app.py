# (c) Copyright Datacraft, 2026
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from logging.config import dictConfig

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from drivewatch.core.version import __version__
from drivewatch.core.config import get_settings
from drivewatch.core.db.engine import get_engine
from drivewatch.core.features.inspections.router import router as inspections_router
from drivewatch.core.features.maintenance.router import router as maintenance_router
from drivewatch.core.features.operator_performance.router import router as performance_router

logger = logging.getLogger(__name__)
config = get_settings()
prefix = config.api_prefix


@asynccontextmanager
async def lifespan(app: FastAPI):
	"""Application lifespan handler for startup/shutdown events."""
	logger.info("Starting drivewatch API server...")

	yield

	logger.info("Shutting down drivewatch API server...")
	await get_engine().dispose()


app = FastAPI(
	title="Drivewatch Inspection REST API",
	version=__version__,
	lifespan=lifespan,
)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

app.include_router(inspections_router, prefix=prefix)
app.include_router(maintenance_router, prefix=prefix)
app.include_router(performance_router, prefix=prefix)


@app.get(f"{prefix}/version", tags=["version"])
async def get_version():
	return {"version": __version__}


logging_config_path = Path(
	os.environ.get("DRIVEWATCH_LOGGING_CFG", str(config.log_config or ""))
)

if logging_config_path.is_file():
	with open(logging_config_path, "r") as stream:
		logging_config = yaml.load(stream, Loader=yaml.FullLoader)

	dictConfig(logging_config)
