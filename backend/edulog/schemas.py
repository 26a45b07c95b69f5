from __future__ import annotations
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ACTIVITY_TYPE = "활동"


class Student(BaseModel):
	# Sheet cells holding only digits arrive as JSON numbers
	model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

	id: str
	name: str
	number: int


class ClassGroup(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: str
	name: str
	students: List[Student] = Field(default_factory=list)


class ActivityRecord(BaseModel):
	# Student and class fields are snapshots taken at creation, not live links
	model_config = ConfigDict(populate_by_name=True)

	id: str
	student_id: str = Field(alias="studentId")
	student_name: str = Field(alias="studentName")
	student_number: int = Field(alias="studentNumber")
	class_id: str = Field(alias="classId")
	class_name: str = Field(alias="className")
	type: Literal["활동"] = ACTIVITY_TYPE
	content: str
	ai_polished_content: Optional[str] = Field(default=None, alias="aiPolishedContent")
	timestamp: int

	def to_storage(self) -> dict:
		return self.model_dump(by_alias=True, exclude_none=True)


class DateGroup(BaseModel):
	date: str
	records: List[ActivityRecord]


class Notification(BaseModel):
	text: str
	kind: Literal["success", "info", "error"] = "success"


class SyncPayload(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	class_name: str = Field(alias="className")
	student_number: int = Field(alias="studentNumber")
	student_name: str = Field(alias="studentName")
	content: str

	@classmethod
	def from_record(cls, record: ActivityRecord) -> "SyncPayload":
		return cls(
			class_name=record.class_name,
			student_number=record.student_number,
			student_name=record.student_name,
			content=record.content,
		)
