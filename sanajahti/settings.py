import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    WORDLIST_PATH: Path = field(init=False)

    GRID_SIZE: int = 4
    MIN_WORD_LENGTH: int = 3
    MAX_RESULTS: int = 50

    SEARCH_WORKERS: int = 0
    SOLVE_TIMEOUT: float = 0.0

    DEBUG: bool = False
    HOST: str = "127.0.0.1"
    PORT: int = 10001

    def __post_init__(self):
        self.WORDLIST_PATH = self.BASE_DIR / "wordlist.txt"

        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                current = getattr(self, fld)
                if isinstance(current, bool):
                    setattr(self, fld, _parse_bool(env_val))
                elif isinstance(current, int):
                    setattr(self, fld, int(env_val))
                elif isinstance(current, float):
                    setattr(self, fld, float(env_val))
                elif isinstance(current, Path):
                    setattr(self, fld, Path(env_val))
                else:
                    setattr(self, fld, env_val)


# Fields that may be changed while the service is running
EDITABLE_FIELDS: dict[str, type] = {
    "MIN_WORD_LENGTH": int,
    "MAX_RESULTS": int,
    "SEARCH_WORKERS": int,
    "SOLVE_TIMEOUT": float,
    "DEBUG": bool,
}

# Lower bounds for numeric editable fields
_MINIMUMS = {
    "MIN_WORD_LENGTH": 1,
    "MAX_RESULTS": 0,
    "SEARCH_WORKERS": 0,
    "SOLVE_TIMEOUT": 0.0,
}


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes")


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply editable values to ``cfg``; returns a field -> error message map.

    Valid fields are applied even when others in the same call fail.
    """
    errors: dict[str, str] = {}
    for name, raw in values.items():
        kind = EDITABLE_FIELDS.get(name)
        if kind is None:
            if hasattr(cfg, name):
                errors[name] = "field is not editable"
            else:
                errors[name] = "unknown field"
            continue
        try:
            if kind is bool:
                value = _parse_bool(raw)
            elif kind is int:
                if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
                    raise ValueError(f"expected an integer, got {raw!r}")
                value = int(raw)
            else:
                value = kind(raw)
        except (TypeError, ValueError) as e:
            errors[name] = str(e)
            continue
        minimum = _MINIMUMS.get(name)
        if minimum is not None and value < minimum:
            errors[name] = f"must be >= {minimum}"
            continue
        setattr(cfg, name, value)
    return errors


settings = Settings()
