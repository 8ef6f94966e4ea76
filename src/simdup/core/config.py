from __future__ import annotations

import binascii
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

from ..errors import InvalidConfiguration
from ..features import FeatureMode, FeatureType, WordPolicy
from ..hashing import HashMethod
from ..index import BANDED, INDEX_KINDS, check_max_diff
from ..simdict import SimDict
from ..simhasher import SimHasher

ENV_PREFIX = "SIMDUP_"


@dataclass(frozen=True)
class Config:
    method: HashMethod = HashMethod.KEYED
    features: FeatureType = FeatureType.BYTES
    n: int = 2
    max_diff: int = 3
    index: str = BANDED
    word_policy: WordPolicy = WordPolicy.PUNCTUATION
    key_hex: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HashMethod.parse(self.method))
        object.__setattr__(self, "features", FeatureType.parse(self.features))
        object.__setattr__(self, "word_policy", WordPolicy.parse(self.word_policy))
        object.__setattr__(self, "n", _as_int("n", self.n))
        object.__setattr__(self, "max_diff", check_max_diff(_as_int("max_diff", self.max_diff)))
        index = str(self.index).strip().lower()
        if index not in INDEX_KINDS:
            raise InvalidConfiguration(
                f"Unknown index kind {self.index!r} (expected one of: {', '.join(INDEX_KINDS)})"
            )
        object.__setattr__(self, "index", index)
        FeatureMode(self.features, self.n, self.word_policy)

    @property
    def feature_mode(self) -> FeatureMode:
        return FeatureMode(self.features, self.n, self.word_policy)

    @property
    def key(self) -> Optional[bytes]:
        if not self.key_hex:
            return None
        try:
            return binascii.unhexlify(str(self.key_hex))
        except (binascii.Error, ValueError) as exc:
            raise InvalidConfiguration(f"key must be a hex string: {exc}") from exc

    def hasher(self) -> SimHasher:
        return SimHasher(self.method, self.feature_mode, key=self.key)

    def simdict(self) -> SimDict:
        return SimDict(self.max_diff, self.hasher(), index=self.index)

    def merged(self, values: Mapping[str, Any]) -> "Config":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown config keys: {', '.join(unknown)}")
        updates = {k: v for k, v in values.items() if v is not None}
        return replace(self, **updates) if updates else self

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        load_dotenv()
        base = base or cls()
        values: dict[str, Any] = {}
        env_names = {
            "method": "METHOD",
            "features": "FEATURES",
            "n": "N",
            "max_diff": "MAX_DIFF",
            "index": "INDEX",
            "word_policy": "WORD_POLICY",
            "key_hex": "KEY",
        }
        for name, suffix in env_names.items():
            raw = os.getenv(ENV_PREFIX + suffix)
            if raw is not None and raw.strip():
                values[name] = raw.strip()
        return base.merged(values)


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}") from exc


def load_config(path: str | Path | None = None, *, use_env: bool = True) -> Config:
    """
    Resolve configuration from defaults, an optional YAML file and the
    environment (highest priority).

    The YAML file may hold the keys at top level or under a ``simdup:`` section.
    """
    config = Config()
    if path is not None:
        p = Path(path)
        with p.open("r", encoding="utf-8") as fh:
            params = yaml.safe_load(fh) or {}
        if not isinstance(params, dict):
            raise InvalidConfiguration(f"{p}: expected a mapping at top level")
        section = params.get("simdup", params)
        if not isinstance(section, dict):
            raise InvalidConfiguration(f"{p}: 'simdup' section must be a mapping")
        if "key" in section:
            section = dict(section)
            section["key_hex"] = section.pop("key")
        config = config.merged(section)
    if use_env:
        config = Config.from_env(config)
    return config
