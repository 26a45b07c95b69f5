from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..controller import AppController
from ..deps import get_controller
from ..errors import ControllerBusy

router = APIRouter(prefix="/rewrite", tags=["rewrite"])


class RewriteRequest(BaseModel):
	content: str


@router.post("")
async def rewrite(req: RewriteRequest, controller: AppController = Depends(get_controller)):
	statuses: List[str] = []
	try:
		text = await controller.polish(req.content, statuses.append)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except ControllerBusy as e:
		raise HTTPException(status_code=409, detail=str(e))
	return {"text": text, "statuses": statuses, "notifications": controller.drain_notifications()}
