"""Rewrite a raw activity memo into school-record (생기부) register.

`polish_record` always returns displayable text: either the rewritten memo
or a message describing why the rewrite failed.
"""

from __future__ import annotations
import logging
from typing import Callable, Optional

from .errors import ErrorKind, GeminiError
from .gemini_client import GeminiClient
from .settings import settings

logger = logging.getLogger(__name__)

REWRITE_TEMPERATURE = 0.1
REWRITE_TOP_P = 0.95

STATUS_POLISHING = "Gemini AI가 문장을 다듬는 중..."

MSG_NOT_CONFIGURED = "시스템 설정에서 API_KEY가 구성되지 않았습니다. 관리자에게 문의하세요."
MSG_PERMISSION = "API 키 권한 오류입니다. 키가 활성화되어 있는지 확인해주세요."
MSG_RATE_LIMIT = "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."
MSG_GENERIC = "AI 변환 중 오류가 발생했습니다. (사유: {reason})"
MSG_NO_REASON = "네트워크 상태 확인 요망"
MSG_EMPTY = "AI 응답 생성 실패"


def build_rewrite_prompt(raw_text: str) -> str:
	return (
		"당신은 대한민국 고등학교 교사입니다. 다음의 학생 활동 메모를 학교생활기록부(생기부) 기재 요령에 맞게 전문적인 문체로 다듬어주세요.\n\n"
		"문체 가이드:\n"
		"- '~함', '~임', '~함.' 형태의 명조체 종결 어미를 사용하세요.\n"
		"- 주어(학생 이름)는 문맥상 필요한 경우에만 최소한으로 사용하고 가급적 생략하세요.\n"
		"- 구체적인 행동과 변화, 성취 위주로 기술하세요.\n"
		"- 결과물만 출력하고 부연 설명은 하지 마세요.\n\n"
		f"메모: {raw_text}"
	)


def error_message(err: Exception) -> str:
	if isinstance(err, GeminiError):
		kind = err.kind
	else:
		kind = ErrorKind.from_message(str(err))
	if kind is ErrorKind.PERMISSION:
		return MSG_PERMISSION
	if kind is ErrorKind.RATE_LIMIT:
		return MSG_RATE_LIMIT
	return MSG_GENERIC.format(reason=str(err) or MSG_NO_REASON)


async def polish_record(
	raw_text: str,
	on_status: Optional[Callable[[str], None]] = None,
	*,
	client: Optional[GeminiClient] = None,
) -> str:
	if client is None and not settings.gemini_api_key:
		return MSG_NOT_CONFIGURED
	owns_client = client is None
	if client is None:
		client = GeminiClient()
	try:
		if on_status is not None:
			on_status(STATUS_POLISHING)
		result = await client.generate(
			build_rewrite_prompt(raw_text),
			temperature=REWRITE_TEMPERATURE,
			top_p=REWRITE_TOP_P,
		)
		result = (result or "").strip()
		if not result:
			raise GeminiError(MSG_EMPTY, kind=ErrorKind.EMPTY_RESPONSE)
		return result
	except Exception as e:
		logger.error("Gemini rewrite failed: %s", e)
		return error_message(e)
	finally:
		if owns_client:
			await client.aclose()
