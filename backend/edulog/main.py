import logging

from fastapi import Depends, FastAPI

from .controller import AppController
from .db import SessionLocal, init_db
from .deps import get_controller
from .settings import settings
from .storage import SqlStorage
from .routers import records, rewrite, roster, sheet

logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="EduLog API")
app.include_router(roster.router)
app.include_router(sheet.router)
app.include_router(records.router)
app.include_router(rewrite.router)


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}


@app.get("/status")
def status(controller: AppController = Depends(get_controller)):
	return controller.status()


@app.on_event("startup")
async def startup_event():
	# Tests may install their own controller before startup
	if getattr(app.state, "controller", None) is not None:
		return
	init_db()
	controller = AppController(SqlStorage(SessionLocal))
	app.state.controller = controller
	await controller.boot()
	logger.info("EduLog started: %d records, connected=%s", len(controller.records), controller.roster.connected)


@app.on_event("shutdown")
async def shutdown_event():
	controller = getattr(app.state, "controller", None)
	if controller is not None:
		await controller.aclose()
