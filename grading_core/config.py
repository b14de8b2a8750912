from __future__ import annotations
import os, json, pathlib
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Tuple


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Wire values, not QuestionType members: types.py imports this module.
STRICT_TYPES: FrozenSet[str] = frozenset({
    "multiple-choice",
    "multiple-choice-multi",
    "true-false-not-given",
    "yes-no-not-given",
    "matching-headings",
    "matching-information",
    "matching-features",
    "map-labeling",
    "table-completion",
})

# (threshold percentage, band), descending. Anything below the last row gets BAND_FLOOR.
BAND_TABLE: Tuple[Tuple[float, float], ...] = (
    (90.0, 9.0),
    (82.0, 8.5),
    (75.0, 8.0),
    (67.0, 7.5),
    (60.0, 7.0),
    (52.0, 6.5),
    (45.0, 6.0),
    (37.0, 5.5),
    (30.0, 5.0),
    (22.0, 4.5),
    (15.0, 4.0),
    (10.0, 3.5),
    (5.0, 3.0),
)
BAND_FLOOR: float = 2.5
BAND_EMPTY: float = 0.0

# Resolver gates; tuned on real authoring data.
RESOLVER_MIN_CANDIDATE_LEN: int = 1
RESOLVER_INCLUSION_MIN_CHARS: int = 15
RESOLVER_OVERLAP_MIN_CHARS: int = 20
RESOLVER_OVERLAP_MIN_TOKEN_LEN: int = 4
RESOLVER_OVERLAP_MIN_TOKENS: int = 5
RESOLVER_OVERLAP_RATIO: float = 0.6

WEAK_AREA_THRESHOLD: float = 50.0
FUNDAMENTALS_BAND: float = 6.0

AUDIT_EXPORT_ENABLED: bool = True
DEBUG_TRACE: bool = False
TRACE_FIELDS: tuple[str, ...] = (
    "question_id",
    "type",
    "policy",
    "scored",
    "total",
    "attempted",
)

# // env overrides for staging/ops; defaults remain conservative.
RESOLVER_MIN_CANDIDATE_LEN = _env_int("RESOLVER_MIN_CANDIDATE_LEN", RESOLVER_MIN_CANDIDATE_LEN)
RESOLVER_INCLUSION_MIN_CHARS = _env_int("RESOLVER_INCLUSION_MIN_CHARS", RESOLVER_INCLUSION_MIN_CHARS)
RESOLVER_OVERLAP_MIN_CHARS = _env_int("RESOLVER_OVERLAP_MIN_CHARS", RESOLVER_OVERLAP_MIN_CHARS)
RESOLVER_OVERLAP_MIN_TOKEN_LEN = _env_int("RESOLVER_OVERLAP_MIN_TOKEN_LEN", RESOLVER_OVERLAP_MIN_TOKEN_LEN)
RESOLVER_OVERLAP_MIN_TOKENS = _env_int("RESOLVER_OVERLAP_MIN_TOKENS", RESOLVER_OVERLAP_MIN_TOKENS)
RESOLVER_OVERLAP_RATIO = _env_float("RESOLVER_OVERLAP_RATIO", RESOLVER_OVERLAP_RATIO)
WEAK_AREA_THRESHOLD = _env_float("WEAK_AREA_THRESHOLD", WEAK_AREA_THRESHOLD)
AUDIT_EXPORT_ENABLED = _env_bool("AUDIT_EXPORT_ENABLED", AUDIT_EXPORT_ENABLED)
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)


@dataclass(frozen=True)
class ResolverSettings:
    min_candidate_len: int = RESOLVER_MIN_CANDIDATE_LEN
    inclusion_min_chars: int = RESOLVER_INCLUSION_MIN_CHARS
    overlap_min_chars: int = RESOLVER_OVERLAP_MIN_CHARS
    overlap_min_token_len: int = RESOLVER_OVERLAP_MIN_TOKEN_LEN
    overlap_min_tokens: int = RESOLVER_OVERLAP_MIN_TOKENS
    overlap_ratio: float = RESOLVER_OVERLAP_RATIO


@dataclass(frozen=True)
class GradingSettings:
    """Every tunable structure the engine reads, bundled so callers can inject it."""

    strict_types: FrozenSet[str] = STRICT_TYPES
    band_table: Tuple[Tuple[float, float], ...] = BAND_TABLE
    band_floor: float = BAND_FLOOR
    resolver: ResolverSettings = field(default_factory=ResolverSettings)
    weak_area_threshold: float = WEAK_AREA_THRESHOLD
    fundamentals_band: float = FUNDAMENTALS_BAND

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "GradingSettings":
        base = cls()
        updates: Dict[str, Any] = {}
        strict = cfg.get("STRICT_TYPES")
        if isinstance(strict, (list, tuple, set)):
            updates["strict_types"] = frozenset(str(t) for t in strict)
        table = cfg.get("BAND_TABLE")
        if isinstance(table, (list, tuple)):
            rows = []
            for row in table:
                try:
                    rows.append((float(row[0]), float(row[1])))
                except (TypeError, ValueError, IndexError):
                    continue
            if rows:
                updates["band_table"] = tuple(sorted(rows, key=lambda r: r[0], reverse=True))
        for key, attr in (("BAND_FLOOR", "band_floor"), ("WEAK_AREA_THRESHOLD", "weak_area_threshold")):
            if key in cfg:
                try:
                    updates[attr] = float(cfg[key])
                except (TypeError, ValueError):
                    pass
        resolver_cfg = cfg.get("RESOLVER")
        if isinstance(resolver_cfg, dict):
            r_updates: Dict[str, Any] = {}
            for name in ("min_candidate_len", "inclusion_min_chars", "overlap_min_chars",
                         "overlap_min_token_len", "overlap_min_tokens"):
                if name in resolver_cfg:
                    try:
                        r_updates[name] = int(resolver_cfg[name])
                    except (TypeError, ValueError):
                        pass
            if "overlap_ratio" in resolver_cfg:
                try:
                    r_updates["overlap_ratio"] = float(resolver_cfg["overlap_ratio"])
                except (TypeError, ValueError):
                    pass
            if r_updates:
                updates["resolver"] = replace(base.resolver, **r_updates)
        return replace(base, **updates) if updates else base


DEFAULT_SETTINGS = GradingSettings()


def load_config() -> dict:
    cfg: dict = {}
    p = pathlib.Path(os.getenv("GRADING_CONFIG", "grading.json"))
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    if not isinstance(cfg, dict):
        cfg = {}
    e = os.environ
    if e.get("STRICT_TYPES"):
        cfg["STRICT_TYPES"] = [t.strip() for t in e["STRICT_TYPES"].split(",") if t.strip()]
    if e.get("WEAK_AREA_THRESHOLD"):
        cfg["WEAK_AREA_THRESHOLD"] = e.get("WEAK_AREA_THRESHOLD")
    return cfg


def load_settings() -> GradingSettings:
    return GradingSettings.from_config(load_config())
