"""Minimal Google Slides / Drive REST client."""

import logging
from typing import Any, Optional

import requests

from .. import config
from ..core.requests import Request, to_batch
from ..errors import SlidesApiError

logger = logging.getLogger("Md2Slides.remote.client")


class SlidesClient:
    """Bearer-token client for the handful of endpoints generation needs.

    Calls are not retried. Transport failures, non-2xx responses and
    undecodable bodies all raise SlidesApiError.
    """

    def __init__(self, access_token: str, timeout: Optional[int] = None):
        if not access_token:
            raise ValueError("An access token is required")
        self.access_token = access_token
        self.timeout = timeout or config.REQUEST_TIMEOUT

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _send(self, method: str, url: str, action: str, **kwargs) -> dict[str, Any]:
        send = requests.post if method == "POST" else requests.get
        try:
            resp = send(url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise SlidesApiError(f"Failed to {action}: {e}") from e
        return self._check(resp, action)

    @staticmethod
    def _check(resp: requests.Response, action: str) -> dict[str, Any]:
        if not resp.ok:
            raise SlidesApiError(
                f"Failed to {action}: {resp.reason}\nError details: {resp.text}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise SlidesApiError(
                f"Failed to {action}: response is not JSON", status_code=resp.status_code,
            ) from e

    def create_presentation(self, title: str) -> dict[str, Any]:
        presentation = self._send(
            "POST", f"{config.SLIDES_API_BASE}/presentations",
            "create presentation", json={"title": title},
        )
        logger.info(f"Created presentation {presentation.get('presentationId')}")
        return presentation

    def get_presentation(self, presentation_id: str) -> dict[str, Any]:
        return self._send(
            "GET", f"{config.SLIDES_API_BASE}/presentations/{presentation_id}",
            "get presentation",
        )

    def copy_presentation(self, presentation_id: str, title: str) -> str:
        """Copy a deck through Drive and return the new file id."""
        data = self._send(
            "POST", f"{config.DRIVE_API_BASE}/files/{presentation_id}/copy",
            "copy presentation", json={"name": title},
        )
        copy_id = data.get("id")
        if not copy_id:
            raise SlidesApiError("Failed to copy presentation: response has no file id")
        logger.info(f"Copied presentation {presentation_id} to {copy_id}")
        return copy_id

    def batch_update(self, presentation_id: str,
                     requests_: list[Request]) -> Optional[dict[str, Any]]:
        """Send one ordered batch. An empty batch sends nothing."""
        if not requests_:
            logger.debug("Skipping empty batch for %s", presentation_id)
            return None
        result = self._send(
            "POST", f"{config.SLIDES_API_BASE}/presentations/{presentation_id}:batchUpdate",
            "update presentation", json=to_batch(requests_),
        )
        logger.info(f"Applied {len(requests_)} requests to {presentation_id}")
        return result
