import logging
from typing import Sequence

import requests

from ..errors import NotificationError

logger = logging.getLogger(__name__)


class NtfyNotifier:
    """Pushes notifications to an ntfy server"""

    def __init__(self, base_url: str = "https://ntfy.sh", timeout: float = 30) -> None:
        """Initialize the notifier

        Args:
            base_url: ntfy server, without a trailing topic
            timeout: seconds to wait for the server before giving up

        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def send(self, topic: str, title: str, body: str, tags: Sequence[str] = ()) -> None:
        """Publish `body` to `topic`, raising NotificationError on any failure"""
        url = f"{self.base_url}/{topic}"
        headers = {"Title": title.encode("utf-8")}
        if tags:
            headers["Tags"] = ",".join(tags)

        try:
            response = requests.post(url, data=body.encode("utf-8"), headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"error sending http request: {e}") from e

        if not response.ok:
            raise NotificationError(f"server responded with status={response.status_code}")
        logger.info(f"Notification sent to {topic}")
