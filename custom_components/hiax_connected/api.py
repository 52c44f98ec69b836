"""Authentication for the Hiax Connected API."""

from __future__ import annotations

from abc import ABC, abstractmethod

from homeassistant.helpers import config_entry_oauth2_flow


class AbstractAuth(ABC):
    """Provide bearer tokens for API requests."""

    @abstractmethod
    async def async_get_access_token(self) -> str:
        """Return a valid access token."""


class AsyncConfigEntryAuth(AbstractAuth):
    """Auth backed by a config entry OAuth2 session."""

    def __init__(self, oauth_session: config_entry_oauth2_flow.OAuth2Session) -> None:
        """Initialize the auth."""
        self._oauth_session = oauth_session

    async def async_get_access_token(self) -> str:
        """Return a valid access token, refreshing it when expired."""
        await self._oauth_session.async_ensure_token_valid()
        return self._oauth_session.token["access_token"]


class ConfigFlowAuth(AbstractAuth):
    """Auth holding the fresh token obtained during the config flow."""

    def __init__(self, token: str) -> None:
        """Initialize the auth."""
        self._token = token

    async def async_get_access_token(self) -> str:
        """Return the access token."""
        return self._token
