from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..controller import AppController, SaveOutcome
from ..deps import get_controller
from ..errors import ControllerBusy, RecordNotFound, StorageWriteError

router = APIRouter(prefix="/records", tags=["records"])


class SaveRecordRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	content: str
	class_id: Optional[str] = Field(default=None, alias="classId")
	student_id: Optional[str] = Field(default=None, alias="studentId")
	editing_record_id: Optional[str] = Field(default=None, alias="editingRecordId")


class UpdateRecordRequest(BaseModel):
	content: str


def _outcome_response(outcome: SaveOutcome, controller: AppController) -> dict:
	return {
		"record": outcome.record.to_storage(),
		"created": outcome.created,
		"synced": outcome.synced,
		"state": outcome.state.value,
		"notifications": controller.drain_notifications(),
	}


async def _save(controller: AppController, content: str, **kwargs) -> SaveOutcome:
	try:
		return await controller.save_record(content, **kwargs)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except RecordNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except ControllerBusy as e:
		raise HTTPException(status_code=409, detail=str(e))
	except StorageWriteError as e:
		raise HTTPException(
			status_code=503,
			detail={"message": str(e), "notifications": [n.model_dump() for n in controller.drain_notifications()]},
		)


@router.get("")
def list_records(controller: AppController = Depends(get_controller)):
	groups = controller.records.grouped_by_date(controller.timezone)
	return {"groups": [g.model_dump(by_alias=True, exclude_none=True) for g in groups]}


@router.get("/{record_id}")
def get_record(record_id: str, controller: AppController = Depends(get_controller)):
	record = controller.records.get(record_id)
	if record is None:
		raise HTTPException(status_code=404, detail="record not found")
	return record.to_storage()


@router.post("", status_code=201)
async def save_record(req: SaveRecordRequest, controller: AppController = Depends(get_controller)):
	if req.editing_record_id:
		outcome = await _save(controller, req.content, editing_record_id=req.editing_record_id)
		return _outcome_response(outcome, controller)
	group = controller.roster.find_class(req.class_id)
	if group is None:
		raise HTTPException(status_code=404, detail="class not found")
	student = next((s for s in group.students if s.id == req.student_id), None)
	if student is None:
		raise HTTPException(status_code=404, detail="student not found")
	outcome = await _save(controller, req.content, student=student, class_id=group.id)
	return _outcome_response(outcome, controller)


@router.put("/{record_id}")
async def update_record(record_id: str, req: UpdateRecordRequest, controller: AppController = Depends(get_controller)):
	outcome = await _save(controller, req.content, editing_record_id=record_id)
	return _outcome_response(outcome, controller)
