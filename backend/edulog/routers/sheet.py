from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from ..companion import APPS_SCRIPT, SETUP_STEPS
from ..controller import AppController
from ..deps import get_controller
from ..settings import settings

router = APIRouter(prefix="/settings", tags=["settings"])


class SheetSettings(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	sheet_url: str = Field(default="", alias="sheetUrl")


@router.get("")
def get_settings(controller: AppController = Depends(get_controller)):
	return {
		"sheetUrl": controller.sheet_url,
		"geminiConfigured": bool(settings.gemini_api_key),
		"setupSteps": SETUP_STEPS,
	}


@router.put("")
async def save_settings(req: SheetSettings, controller: AppController = Depends(get_controller)):
	await controller.save_settings(req.sheet_url)
	return {
		"sheetUrl": controller.sheet_url,
		"connected": controller.roster.connected,
		"notifications": controller.drain_notifications(),
	}


@router.get("/script", response_class=PlainTextResponse)
def get_script():
	return APPS_SCRIPT
