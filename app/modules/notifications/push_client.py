"""Client for the Expo push relay (https://docs.expo.dev/push-notifications/sending-notifications/)."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

DEVICE_NOT_REGISTERED = "DeviceNotRegistered"


class PushDeliveryError(Exception):
    """The relay could not be reached or rejected the whole request."""


@dataclass
class PushMessage:
    to: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    sound: Optional[str] = "default"

    def to_payload(self) -> Dict[str, Any]:
        payload = {"to": self.to, "title": self.title, "body": self.body, "data": self.data}
        if self.sound:
            payload["sound"] = self.sound
        return payload


@dataclass
class PushTicket:
    token: str
    status: str
    id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def device_not_registered(self) -> bool:
        return self.error == DEVICE_NOT_REGISTERED


class ExpoPushClient:
    def __init__(
        self,
        url: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: Optional[float] = None,
        batch_size: Optional[int] = None
    ):
        self.url = url or settings.expo_push_url
        self.access_token = access_token if access_token is not None else settings.expo_access_token
        self.timeout = timeout or settings.push_timeout_seconds
        self.batch_size = batch_size or settings.push_batch_size

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def send_batch(self, messages: List[PushMessage]) -> List[PushTicket]:
        """POST one batch; tickets come back in message order."""
        if not messages:
            return []
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.url,
                    json=[m.to_payload() for m in messages],
                    headers=self._headers()
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise PushDeliveryError(f"Push relay request failed: {e}") from e
        except ValueError as e:
            raise PushDeliveryError(f"Push relay returned invalid JSON: {e}") from e

        if body.get("errors"):
            raise PushDeliveryError(f"Push relay rejected request: {body['errors']}")

        data = body.get("data") or []
        if isinstance(data, dict):
            data = [data]
        tickets = []
        for message, raw in zip(messages, data):
            details = raw.get("details") or {}
            tickets.append(PushTicket(
                token=message.to,
                status=raw.get("status", "error"),
                id=raw.get("id"),
                message=raw.get("message"),
                error=details.get("error")
            ))
        for message in messages[len(data):]:
            tickets.append(PushTicket(token=message.to, status="error", message="No ticket returned"))
        return tickets

    def send(self, messages: List[PushMessage]) -> List[PushTicket]:
        """Send in batches. A failed batch yields error tickets instead of raising."""
        tickets: List[PushTicket] = []
        for i in range(0, len(messages), self.batch_size):
            batch = messages[i:i + self.batch_size]
            try:
                tickets.extend(self.send_batch(batch))
            except PushDeliveryError as e:
                logger.error(f"Push batch of {len(batch)} failed: {e}")
                tickets.extend(
                    PushTicket(token=m.to, status="error", message=str(e), error="TransportError")
                    for m in batch
                )
        return tickets
