from __future__ import annotations
from enum import Enum
from typing import Optional


class EduLogError(Exception):
	"""Base class for errors raised inside the application."""


class ErrorKind(str, Enum):
	PERMISSION = "permission"
	RATE_LIMIT = "rate_limit"
	EMPTY_RESPONSE = "empty_response"
	GENERIC = "generic"

	@classmethod
	def from_status(cls, status_code: Optional[int]) -> "ErrorKind":
		if status_code in (401, 403):
			return cls.PERMISSION
		if status_code == 429:
			return cls.RATE_LIMIT
		return cls.GENERIC

	@classmethod
	def from_message(cls, message: str) -> "ErrorKind":
		# Errors without a status code still carry it in the text sometimes
		if "403" in message:
			return cls.PERMISSION
		if "429" in message:
			return cls.RATE_LIMIT
		return cls.GENERIC


class GeminiError(EduLogError):
	def __init__(self, message: str, *, kind: Optional[ErrorKind] = None, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code
		if kind is None:
			kind = ErrorKind.from_status(status_code) if status_code is not None else ErrorKind.from_message(message)
		self.kind = kind


class RosterFetchError(EduLogError):
	"""Roster could not be fetched.

	`transport` is True for network failures and non-2xx responses, False
	when the response arrived but its body is not a list of class groups.
	"""

	def __init__(self, message: str, *, transport: bool) -> None:
		super().__init__(message)
		self.transport = transport


class RecordNotFound(EduLogError):
	def __init__(self, record_id: str) -> None:
		super().__init__(f"record not found: {record_id}")
		self.record_id = record_id


class ControllerBusy(EduLogError):
	"""A rewrite is in flight; the editing controls are locked."""


class StorageWriteError(EduLogError):
	"""The record list could not be written; memory was left unchanged."""
