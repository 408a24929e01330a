"""Gateway: REST nutrition backend over httpx — implements NutritionBackend port."""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from nutripal.l1_entities.errors import BackendError, NotLoggedInError
from nutripal.l1_entities.meal import MealDraft, StoredMeal
from nutripal.l1_entities.profile import AppData, NutritionGoals, Registration, UserProfile

log = logging.getLogger('nutripal.backend')

M = TypeVar('M', bound=BaseModel)


class HttpNutritionBackend:
    """Bearer-token JSON client for the tracker backend (/api/...)."""

    def __init__(
        self,
        base_url: str = 'http://localhost:3001',
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._transport = transport
        self._token: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    async def _request(self, method: str, path: str, body: dict | None = None, *, auth: bool = True) -> object:
        headers = {'Content-Type': 'application/json'}
        if auth:
            if self._token is None:
                raise NotLoggedInError(f'{method} {path} needs a logged-in session')
            headers['Authorization'] = f'Bearer {self._token}'
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, json=body, headers=headers)
        except httpx.HTTPError as e:
            log.error('Backend unreachable: %s %s: %s', method, path, e)
            raise BackendError(f'Cannot reach backend: {e}') from e

        if resp.is_error:
            message = 'API call failed'
            try:
                data = resp.json()
                if isinstance(data, dict) and data.get('error'):
                    message = str(data['error'])
            except ValueError:
                pass
            log.error('Backend error: %s %s -> %d %s', method, path, resp.status_code, message)
            raise BackendError(message, status=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f'Backend sent invalid JSON for {method} {path}') from e

    async def _token_from(self, path: str, body: dict) -> str:
        data = await self._request('POST', path, body, auth=False)
        token = data.get('token') if isinstance(data, dict) else None
        if not token:
            raise BackendError('Backend did not return a session token')
        self._token = str(token)
        return self._token

    async def login(self, email: str, password: str) -> str:
        return await self._token_from('/api/login', {'email': email, 'password': password})

    async def register(self, registration: Registration) -> str:
        return await self._token_from('/api/register', registration.model_dump(by_alias=True))

    async def forgot_password(self, email: str) -> str:
        data = await self._request('POST', '/api/forgot-password', {'email': email}, auth=False)
        return _message(data, 'If that account exists, a reset token has been sent.')

    async def reset_password(self, email: str, token: str, new_password: str) -> str:
        data = await self._request(
            'POST',
            '/api/reset-password',
            {'email': email, 'token': token, 'newPassword': new_password},
            auth=False,
        )
        return _message(data, 'Password has been reset.')

    async def load_app_data(self) -> AppData:
        return _parse(AppData, await self._request('GET', '/api/me'), '/api/me')

    async def create_meal(self, meal: MealDraft) -> StoredMeal:
        return _parse(StoredMeal, await self._request('POST', '/api/meals', meal.model_dump()), '/api/meals')

    async def delete_meal(self, meal_id: int | str) -> None:
        await self._request('DELETE', f'/api/meals/{meal_id}')

    async def update_profile(self, profile: UserProfile) -> UserProfile:
        body = profile.model_dump(by_alias=True, exclude_none=True)
        return _parse(UserProfile, await self._request('PUT', '/api/profile', body), '/api/profile')

    async def update_goals(self, goals: NutritionGoals) -> NutritionGoals:
        data = await self._request('PUT', '/api/goals', goals.model_dump())
        return _parse(NutritionGoals, data, '/api/goals')

    def logout(self) -> None:
        self._token = None


def _message(data: object, default: str) -> str:
    if isinstance(data, dict) and data.get('message'):
        return str(data['message'])
    return default


def _parse(model: type[M], data: object, path: str) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        log.error('Unexpected %s payload: %s', path, e)
        raise BackendError(f'Backend sent an unexpected {path} payload') from e
