from __future__ import annotations

import datetime
import json
import logging
from typing import Optional

import requests

from algorithms import DayMonth
from workout_schema import validate_custom_workout

logger = logging.getLogger(__name__)

GREETING = "Hi, how can I help you plan your workout?"


class CoachService:
    """Chat with the workout coach service and keep the transcript.

    The remote service receives the conversation and answers with one JSON
    workout. Only replies that parse and match the workout schema become
    structured messages; everything else is recorded as an error string.
    Nothing here writes to the ledger until :meth:`save_workout` hands a
    workout to ``templates.add_template``.
    """

    def __init__(
        self,
        templates,
        url: str = "http://localhost:3000/api/chat",
        api_key: str = "",
        timeout: float = 30.0,
        session=None,
    ) -> None:
        self.templates = templates
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.transcript: list[dict] = [{"role": "assistant", "content": GREETING}]
        self.saved: set[int] = set()

    @staticmethod
    def _wire_message(message: dict) -> dict:
        content = message["content"]
        if not isinstance(content, str):
            content = json.dumps(content)
        return {"role": message["role"], "content": content}

    def _post(self, messages: list[dict]) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        resp = self.session.post(
            self.url,
            json={"messages": messages},
            headers=headers,
            timeout=self.timeout,
        )
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("error") if isinstance(body, dict) else None
            raise RuntimeError(
                str(detail) if detail
                else f"API request failed with status {resp.status_code}"
            )
        body = resp.json()
        if not isinstance(body, dict):
            raise RuntimeError("Received malformed response from API")
        reply = body.get("response")
        if not reply:
            raise RuntimeError("Received empty response from API")
        if not isinstance(reply, str):
            raise RuntimeError("Received malformed response from API")
        return reply

    def send(self, text: str) -> Optional[dict]:
        """Send ``text`` and append the assistant's reply to the transcript.

        Returns the appended reply, or ``None`` when ``text`` is blank.
        """
        if not text or not text.strip():
            return None
        self.transcript.append({"role": "user", "content": text})
        try:
            reply = self._post([self._wire_message(m) for m in self.transcript])
        except (requests.RequestException, RuntimeError, ValueError) as e:
            logger.warning("Coach request failed: %s", e)
            return self._append(f"Error: {e}")
        try:
            workout = validate_custom_workout(json.loads(reply))
        except ValueError as e:
            logger.warning("Coach reply did not match the workout schema: %s", e)
            return self._append(f"Failed to parse workout: {reply}")
        return self._append(workout)

    def _append(self, content) -> dict:
        message = {"role": "assistant", "content": content}
        self.transcript.append(message)
        return message

    def save_workout(
        self, index: int, today: Optional[datetime.date] = None
    ) -> Optional[dict]:
        """Store the workout suggested at transcript ``index`` as a template.

        A message is saved at most once; later calls return ``None``.
        """
        if index in self.saved:
            return None
        if index < 0 or index >= len(self.transcript):
            raise IndexError("message index out of range")
        content = self.transcript[index]["content"]
        if not isinstance(content, dict):
            raise ValueError("message does not contain a workout")
        today = today or datetime.date.today()
        date = DayMonth.from_iso(content["date"]) if content["date"] else DayMonth.format(today)
        template = {
            "name": content["name"],
            "date": date,
            "exercises": content["exercises"],
        }
        self.templates.add_template(template)
        self.saved.add(index)
        return template
