import copy
import math
import re
from typing import Union

SetRecord = dict
RawSet = Union[str, dict]

SET_VALUE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)x(\d+(?:\.\d+)?)$")


class SetNormalizer:
    """Convert stored sets into the canonical ``{"value", "notes"}`` record.

    Older ledgers store a set as the bare ``"RxW"`` string. Newer ones store
    a mapping with the same ``value`` and an optional free-text ``notes``.
    Everything downstream of the store only ever sees the mapping form.
    """

    @staticmethod
    def normalize(raw: RawSet) -> SetRecord:
        """Return ``raw`` as a canonical set record.

        Legacy strings become ``{"value": raw, "notes": ""}``. Mappings keep
        their ``value`` and get ``notes`` defaulted to an empty string. The
        result is always a new dictionary.
        """
        if isinstance(raw, str):
            return {"value": raw, "notes": ""}
        notes = raw.get("notes")
        return {"value": raw["value"], "notes": notes if notes else ""}

    @classmethod
    def normalize_sets(cls, sets: list) -> list[SetRecord]:
        return [cls.normalize(s) for s in sets]

    @classmethod
    def normalize_entry(cls, entry: dict) -> dict:
        """Return a deep copy of ``entry`` with every set normalized."""
        out = copy.deepcopy(entry)
        out["sets"] = cls.normalize_sets(entry.get("sets", []))
        return out

    @classmethod
    def normalize_ledger(cls, ledger: dict) -> dict:
        return {
            name: [cls.normalize_entry(e) for e in entries]
            for name, entries in ledger.items()
        }

    @staticmethod
    def is_legacy(raw: RawSet) -> bool:
        return isinstance(raw, str)

    @staticmethod
    def is_set_shape(raw) -> bool:
        """True for a legacy string or a mapping with a string ``value``."""
        if isinstance(raw, str):
            return True
        if not isinstance(raw, dict) or not isinstance(raw.get("value"), str):
            return False
        return raw.get("notes") is None or isinstance(raw.get("notes"), str)

    @staticmethod
    def parse_value(value: str) -> tuple[float, float]:
        """Split ``"RxW"`` into ``(reps, weight)``.

        Raises ``ValueError`` when ``value`` does not match the
        ``<reps>x<weight>`` pattern of non-negative numeric literals.
        """
        if not isinstance(value, str):
            raise ValueError(f"invalid set value: {value!r}")
        match = SET_VALUE_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"invalid set value: {value!r}")
        return float(match.group(1)), float(match.group(2))

    @classmethod
    def is_valid_value(cls, value: str) -> bool:
        try:
            cls.parse_value(value)
        except ValueError:
            return False
        return True

    @staticmethod
    def format_number(number: float) -> str:
        if float(number).is_integer():
            return str(int(number))
        return str(float(number))

    @classmethod
    def format_value(cls, reps: float, weight: float) -> str:
        """Build the ``"RxW"`` string for ``reps`` and ``weight``."""
        if not (math.isfinite(reps) and math.isfinite(weight)):
            raise ValueError("reps and weight must be finite numbers")
        if reps < 0 or weight < 0:
            raise ValueError("reps and weight must be non-negative")
        value = f"{cls.format_number(reps)}x{cls.format_number(weight)}"
        # exponent notation such as 1e-07 never matches the stored format
        if not cls.is_valid_value(value):
            raise ValueError(f"cannot store {reps!r} x {weight!r} as a set value")
        return value
