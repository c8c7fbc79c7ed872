"""
Configuration management for ConnectionChecker.

Loads settings from environment variables or a .env file. The target list
lives on the config object and is handed to the probe runner explicitly.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

# Check common locations for .env
env_locations = [
    Path.home() / ".connectioncheck" / ".env",
    Path.home() / ".config" / "connectioncheck" / ".env",
    Path.cwd() / ".env",
]
for env_path in env_locations:
    if env_path.exists():
        load_dotenv(env_path)
        break


# DatHost server locations
# Source: https://dathost.net/reference/server-locations-mapping
DEFAULT_TARGETS: tuple[str, ...] = (
    "beauharnois.dathost.net",    # Canada - Toronto
    "new-york-city.dathost.net",  # USA - New York
    "los-angeles.dathost.net",    # USA CA - Los Angeles
    "miami.dathost.net",          # USA FL - Miami
    "chicago.dathost.net",        # USA IL - Chicago
    "portland.dathost.net",       # USA WA - Seattle
    "dallas.dathost.net",         # USA TX - Dallas
    "atlanta.dathost.net",        # USA GA - Atlanta
    "denver.dathost.net",         # USA CO - Denver
    "copenhagen.dathost.net",     # Denmark - Copenhagen
    "helsinki.dathost.net",       # Finland - Helsinki
    "strasbourg.dathost.net",     # France - Paris
    "dusseldorf.dathost.net",     # Germany - Frankfurt
    "amsterdam.dathost.net",      # Netherlands - Amsterdam
    "warsaw.dathost.net",         # Poland - Warsaw
    "barcelona.dathost.net",      # Spain - Madrid
    "stockholm.dathost.net",      # Sweden - Stockholm
    "istanbul.dathost.net",       # Turkey - Istanbul
    "bristol.dathost.net",        # United Kingdom - London
    "sydney.dathost.net",         # Australia - Sydney
    "sao-paulo.dathost.net",      # Brazil - Sao Paulo
    "santiago.dathost.net",       # Chile - Santiago
    "hong-kong.dathost.net",      # Hong Kong - Hong Kong
    "mumbai.dathost.net",         # India - Mumbai
    "tokyo.dathost.net",          # Japan - Tokyo
    "singapore.dathost.net",      # Singapore - Singapore
    "johannesburg.dathost.net",   # South Africa - Johannesburg
    "seoul.dathost.net",          # South Korea - Seoul
    "oslo.dathost.net",           # Norway - Oslo
    "prague.dathost.net",         # Czechia - Prague
    "milan.dathost.net",          # Italy - Milan
    "bucharest.dathost.net",      # Romania - Bucharest
    "dublin.dathost.net",         # Ireland - Dublin
    "auckland.dathost.net",       # New Zealand - Auckland
)

DEFAULT_PROBE_TIMEOUT = 120.0  # seconds, per traceroute
DEFAULT_IP_LOOKUP_URL = "https://api.ipify.org?format=text"
DEFAULT_IP_LOOKUP_TIMEOUT = 10.0
DEFAULT_BRAND = "Refrag"
REPORT_EXTENSION = ".txt"
TRACE_TOOLS: tuple[str, ...] = ("traceroute", "tracert")


@dataclass(frozen=True)
class CheckerConfig:
    """Run configuration: what to probe and how long to wait."""

    targets: tuple[str, ...] = DEFAULT_TARGETS
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT

    # Public IP lookup
    ip_lookup_url: str = DEFAULT_IP_LOOKUP_URL
    ip_lookup_timeout: float = DEFAULT_IP_LOOKUP_TIMEOUT

    # Report
    brand: str = DEFAULT_BRAND
    report_extension: str = REPORT_EXTENSION

    trace_tools: tuple[str, ...] = field(default=TRACE_TOOLS)

    @classmethod
    def from_env(cls) -> "CheckerConfig":
        """Load configuration from environment variables."""
        return cls(
            probe_timeout=_float_env("CONNECTIONCHECK_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT),
            ip_lookup_url=os.getenv("CONNECTIONCHECK_IP_LOOKUP_URL", DEFAULT_IP_LOOKUP_URL),
            ip_lookup_timeout=_float_env("CONNECTIONCHECK_IP_LOOKUP_TIMEOUT", DEFAULT_IP_LOOKUP_TIMEOUT),
            brand=os.getenv("CONNECTIONCHECK_BRAND", DEFAULT_BRAND),
        )

    def with_overrides(
        self,
        targets: tuple[str, ...] | None = None,
        probe_timeout: float | None = None,
    ) -> "CheckerConfig":
        """Return a copy with command-line overrides applied."""
        changes = {}
        if targets is not None:
            changes["targets"] = tuple(targets)
        if probe_timeout is not None:
            changes["probe_timeout"] = float(probe_timeout)
        return replace(self, **changes)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_targets_file(path: str | Path) -> tuple[str, ...]:
    """Read a target list: one hostname per line, '#' starts a comment."""
    targets = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        host = line.split("#", 1)[0].strip()
        if host:
            targets.append(host)
    if not targets:
        raise ValueError(f"No targets found in {path}")
    return tuple(targets)


# Global config instance
_config: CheckerConfig | None = None


def get_config() -> CheckerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = CheckerConfig.from_env()
    return _config


def set_config(config: CheckerConfig | None) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
