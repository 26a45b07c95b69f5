from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..controller import AppController
from ..deps import get_controller

router = APIRouter(prefix="/roster", tags=["roster"])


@router.get("")
def list_classes(q: Optional[str] = None, controller: AppController = Depends(get_controller)):
	classes = controller.roster.search(q or "")
	return {
		"connected": controller.roster.connected,
		"loading": controller.loading,
		"classes": [c.model_dump() for c in classes],
	}


@router.post("/refresh")
async def refresh(controller: AppController = Depends(get_controller)):
	ok = await controller.refresh_roster()
	return {
		"ok": ok,
		"connected": controller.roster.connected,
		"classes": [c.model_dump() for c in controller.roster.classes],
		"notifications": controller.drain_notifications(),
	}


@router.get("/{class_id}")
def get_class(class_id: str, controller: AppController = Depends(get_controller)):
	group = controller.roster.find_class(class_id)
	if group is None:
		raise HTTPException(status_code=404, detail="class not found")
	return group.model_dump()
