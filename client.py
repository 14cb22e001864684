import requests
from typing import Optional

class LedgerClient:
    """Simple REST client for the workout ledger API."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def log_set(
        self,
        exercise: str,
        reps: float,
        weight: float,
        date: Optional[str] = None,
        notes: str = "",
    ) -> dict:
        params = {"reps": reps, "weight": weight, "notes": notes}
        if date:
            params["date"] = date
        resp = requests.post(
            f"{self.base_url}/exercises/{exercise}/sets",
            params=params,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def history(self) -> dict:
        resp = requests.get(f"{self.base_url}/history", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def templates(self) -> list:
        resp = requests.get(f"{self.base_url}/templates", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def save_template(self, name: str, date: str) -> dict:
        resp = requests.post(
            f"{self.base_url}/templates",
            params={"name": name, "date": date},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def export_data(self) -> Optional[str]:
        resp = requests.get(f"{self.base_url}/export", timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.text

    def import_data(self, contents: str) -> dict:
        resp = requests.post(
            f"{self.base_url}/import",
            data=contents.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
