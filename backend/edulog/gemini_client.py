from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .errors import ErrorKind, GeminiError
from .settings import settings

class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=settings.http_timeout_seconds, transport=transport)

	async def generate(
		self,
		prompt: str,
		*,
		role: str = "user",
		temperature: Optional[float] = None,
		top_p: Optional[float] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": role, "parts": [{"text": prompt}]}]}
		generation_config: Dict[str, Any] = {}
		if temperature is not None:
			generation_config["temperature"] = temperature
		if top_p is not None:
			generation_config["topP"] = top_p
		if generation_config:
			payload["generationConfig"] = generation_config
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			status = http_err.response.status_code
			raise GeminiError(f"Gemini request failed with status {status}: {_error_detail(http_err.response)}", status_code=status) from http_err
		except httpx.RequestError as net_err:
			# Keep the transport text as-is; it may be empty (e.g. ReadTimeout)
			raise GeminiError(str(net_err), kind=ErrorKind.GENERIC) from net_err
		try:
			data = r.json()
		except ValueError:
			raise GeminiError(f"Unexpected Gemini response: {r.text}", kind=ErrorKind.GENERIC)
		return _first_text(data)

	async def aclose(self) -> None:
		await self._client.aclose()


def _first_text(data: Any) -> str:
	# A reply without candidates or text parts reads as empty, like the SDK's response.text
	try:
		return data["candidates"][0]["content"]["parts"][0]["text"] or ""
	except (KeyError, IndexError, TypeError):
		return ""


def _error_detail(response: httpx.Response) -> str:
	try:
		return str(response.json()["error"]["message"])
	except Exception:
		return response.text[:200]
