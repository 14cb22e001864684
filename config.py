import os
from typing import Optional

import keyring
import yaml

SETTINGS_ENV = "WORKOUT_LEDGER_SETTINGS"
KEYRING_SERVICE = "workout-ledger"


class YamlConfig:
    """The ledger's YAML settings file.

    The path defaults to ``$WORKOUT_LEDGER_SETTINGS``, then ``settings.yaml``.
    With ``ENCRYPT_SETTINGS=1`` the coach API key is written to the OS
    keyring and the file only keeps :attr:`PLACEHOLDER` in its place. A
    placeholder is resolved on every load, whatever the current flag says.
    """

    SECRET_KEYS = ("coach_api_key",)
    PLACEHOLDER = "<keyring>"

    def __init__(self, path: Optional[str] = None, encrypt: Optional[bool] = None) -> None:
        self.path = path or os.environ.get(SETTINGS_ENV, "settings.yaml")
        if encrypt is None:
            encrypt = os.environ.get("ENCRYPT_SETTINGS") == "1"
        self.encrypt = encrypt

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping of settings")
        return data

    def load(self) -> dict:
        data = self._read()
        for key in self.SECRET_KEYS:
            if data.get(key) != self.PLACEHOLDER:
                continue
            secret = keyring.get_password(KEYRING_SERVICE, key)
            if secret is None:
                data.pop(key)
            else:
                data[key] = secret
        return data

    def save(self, data: dict) -> None:
        out = dict(data)
        if self.encrypt:
            for key in self.SECRET_KEYS:
                value = out.get(key)
                if value and value != self.PLACEHOLDER:
                    keyring.set_password(KEYRING_SERVICE, key, str(value))
                    out[key] = self.PLACEHOLDER
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(out, f)

    def update(self, changes: dict) -> dict:
        """Merge ``changes`` into the file and return the loaded result.

        Untouched secrets keep their keyring placeholder.
        """
        data = self._read()
        data.update(changes)
        self.save(data)
        return self.load()
