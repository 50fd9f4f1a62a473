"""Command-line option parsing and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence


class ConfigError(ValueError):
    """Raised when the command line is malformed or invalid."""


@dataclass(frozen=True)
class FECConfig:
    """Forward error correction ratio, or automatic selection."""

    auto: bool = False
    k: int = 0
    n: int = 0


@dataclass
class Config:
    src: str = ""
    dest: str = ""
    mtu: int = 1400
    fec: FECConfig = field(default_factory=lambda: FECConfig(auto=True))
    congestion: str = "bbr"
    id_key: str = ""
    peer_key: str = ""
    psk: str = ""
    cipher: str = "chacha20poly1305"
    port: int = 3703
    parallel: int = 1
    resume: bool = False
    no_compress: bool = False
    checksum: bool = False
    dry_run: bool = False


_INT_FLAGS = frozenset({"mtu", "port", "parallel"})
_STR_FLAGS = frozenset({"fec", "congestion", "id-key", "peer-key", "psk", "cipher"})
_BOOL_FLAGS = frozenset({"resume", "no-compress", "checksum", "dry-run"})
_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_OCTAL = re.compile(r"[+-]?0[0-7_]+", re.ASCII)
_DECIMAL = re.compile(r"[+-]?[0-9]+", re.ASCII)


def _parse_bool(text: str) -> bool:
    if text in _TRUE or text in _FALSE:
        return text in _TRUE
    raise ValueError(text)


def _parse_int(text: str) -> int:
    if text != text.strip():
        raise ValueError(text)
    if _OCTAL.fullmatch(text):
        return int(text, 8)
    return int(text, 0)


def _parse_flags(args: Sequence[str]) -> tuple[dict, list[str]]:
    values: dict = {"fec": "auto"}
    rest = list(args)
    while rest and len(rest[0]) > 1 and rest[0].startswith("-"):
        arg = rest.pop(0)
        if arg == "--":
            break
        name = arg[2:] if arg.startswith("--") else arg[1:]
        if not name or name[0] in "-=":
            raise ConfigError(f"bad flag syntax: {arg}")
        name, has_value, value = name.partition("=")
        attr = name.replace("-", "_")
        if name not in _INT_FLAGS | _STR_FLAGS | _BOOL_FLAGS:
            raise ConfigError(f"flag provided but not defined: -{name}")
        if name in _BOOL_FLAGS and not has_value:
            values[attr] = True
            continue
        if not has_value:
            if not rest:
                raise ConfigError(f"flag needs an argument: -{name}")
            value = rest.pop(0)
        try:
            if name in _INT_FLAGS:
                values[attr] = _parse_int(value)
            elif name in _BOOL_FLAGS:
                values[attr] = _parse_bool(value)
            else:
                values[attr] = value
        except ValueError as exc:
            raise ConfigError(f"invalid value {value!r} for flag -{name}") from exc
    return values, rest


def _parse_fec(text: str) -> FECConfig:
    if text == "auto":
        return FECConfig(auto=True)
    parts = text.split("/")
    if len(parts) != 2:
        raise ConfigError("fec must be k/n or auto")
    k_text, n_text = parts
    if not _DECIMAL.fullmatch(k_text):
        raise ConfigError("fec k invalid")
    if not _DECIMAL.fullmatch(n_text):
        raise ConfigError("fec n invalid")
    return FECConfig(k=int(k_text), n=int(n_text))


def _validate(cfg: Config) -> None:
    if cfg.mtu <= 0:
        raise ConfigError("mtu must be > 0")
    if cfg.congestion not in ("bbr", "ledbat"):
        raise ConfigError(f"invalid congestion: {cfg.congestion}")
    if cfg.cipher != "chacha20poly1305":
        raise ConfigError(f"invalid cipher: {cfg.cipher}")
    if not 0 < cfg.port <= 65535:
        raise ConfigError("invalid port")
    if cfg.parallel <= 0:
        raise ConfigError("parallel must be > 0")
    fec = cfg.fec
    if not fec.auto and (fec.k <= 0 or fec.n <= 0 or fec.k >= fec.n):
        raise ConfigError("invalid fec ratio")


def parse_args(args: Sequence[str]) -> Config:
    """Parse flags followed by SRC and DEST; raise ConfigError when invalid."""
    values, rest = _parse_flags(args)
    if len(rest) != 2:
        raise ConfigError("expected SRC and DEST")
    fec = _parse_fec(values.pop("fec"))
    cfg = Config(src=rest[0], dest=rest[1], fec=fec, **values)
    _validate(cfg)
    return cfg