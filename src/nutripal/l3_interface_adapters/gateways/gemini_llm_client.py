"""Gateway: Gemini generateContent over REST — implements LLMClient port."""

from __future__ import annotations

import os

import httpx

from nutripal.l1_entities.chat_message import ChatMessage
from nutripal.l1_entities.errors import (
    ConnectionFailedError,
    MalformedResponseError,
    RetryableUpstreamError,
    UpstreamRejected,
)

DEFAULT_GEMINI_BASE = 'https://generativelanguage.googleapis.com'


def build_payload(system_prompt: str, messages: list[ChatMessage]) -> dict:
    """Map chat history onto Gemini's role vocabulary (assistant turns are 'model')."""
    return {
        'contents': [
            {'role': 'model' if m.role == 'assistant' else 'user', 'parts': [{'text': m.text}]} for m in messages
        ],
        'systemInstruction': {'parts': [{'text': system_prompt}]},
    }


def extract_text(data: object) -> str:
    """First candidate's first part. Raises MalformedResponseError on any other shape."""
    try:
        text = data['candidates'][0]['content']['parts'][0]['text']  # ty: ignore[non-subscriptable]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f'Unexpected response shape: {type(e).__name__}: {e}') from e
    if not isinstance(text, str):
        raise MalformedResponseError(f'Candidate text is {type(text).__name__}, not str')
    return text


def _error_message(resp: httpx.Response) -> str:
    default = f'API call failed with status {resp.status_code}'
    try:
        body = resp.json()
    except ValueError:
        return default
    if isinstance(body, dict) and isinstance(body.get('error'), dict):
        return body['error'].get('message') or default
    return default


class GeminiLLMClient:
    """One generateContent POST per call. The API key travels in the x-goog-api-key header."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_GEMINI_BASE,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._transport = transport

    def _key(self) -> str:
        key = (self._api_key or os.environ.get('GEMINI_API_KEY', '')).strip()
        if not key:
            raise UpstreamRejected('GEMINI_API_KEY is not set')
        return key

    def _url(self, model: str) -> str:
        return f'{self._base_url}/v1beta/models/{model}:generateContent'

    async def generate(self, model: str, system_prompt: str, messages: list[ChatMessage]) -> str:
        headers = {'Content-Type': 'application/json', 'x-goog-api-key': self._key()}
        body = build_payload(system_prompt, messages)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self._url(model), json=body, headers=headers)
        except httpx.TransportError as e:
            raise ConnectionFailedError(f'{type(e).__name__}: {e}') from e
        except httpx.DecodingError as e:
            raise MalformedResponseError(f'Response body could not be decoded: {e}') from e
        except httpx.HTTPError as e:
            raise ConnectionFailedError(f'{type(e).__name__}: {e}') from e

        status = resp.status_code
        if status == 429 or status >= 500:
            raise RetryableUpstreamError(status, _error_message(resp))
        if status >= 400:
            raise UpstreamRejected(_error_message(resp), status=status)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f'Response body is not JSON: {e}') from e
        return extract_text(data)

    def check_connectivity(self, model: str) -> tuple[bool, str]:
        try:
            key = self._key()
        except UpstreamRejected as e:
            return False, str(e)
        url = f'{self._base_url}/v1beta/models/{model}'
        try:
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.get(url, headers={'x-goog-api-key': key})
        except httpx.HTTPError as e:
            return False, f'Cannot connect to Gemini API: {e}'
        if resp.status_code in (401, 403):
            return False, f'Authentication failed: {_error_message(resp)}'
        if resp.status_code == 404:
            return False, f'Model {model} not found'
        if resp.status_code >= 400:
            return False, _error_message(resp)
        return True, ''
