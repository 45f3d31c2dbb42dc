"""Configuration introspection for debugging and validation."""

import argparse
import json
import sys
from typing import Any

from scriptarc.core.exceptions import ConfigurationError

from .api import resolve_config
from .types import FIELD_ORDER, ResolvedConfig

# ruff: noqa: T201


def config_warnings(resolved: ResolvedConfig) -> list[str]:
    """Non-fatal issues worth pointing out."""
    warnings = []
    if not resolved.api_key:
        warnings.append("No API key configured - only mock responses will work")
    elif not resolved.use_real_api:
        warnings.append("API key is set but use_real_api is off - replies are mocked")
    if resolved.thinking_budget == 0:
        warnings.append("thinking_budget is 0 - full scripts are written without thinking")
    return warnings


def get_config_info(*, profile: str | None = None) -> dict[str, Any]:
    """Structured configuration information for programmatic use."""
    try:
        resolved = resolve_config(profile=profile)
    except ConfigurationError as e:
        return {
            "status": "invalid",
            "error": str(e),
            "config": None,
            "sources": {},
            "warnings": [],
        }
    config: dict[str, Any] = {
        field: getattr(resolved, field) for field in FIELD_ORDER if field != "api_key"
    }
    config["state_path"] = str(resolved.state_path)
    config["has_api_key"] = resolved.api_key is not None
    return {
        "status": "valid",
        "config": config,
        "sources": dict(resolved.origin),
        "warnings": config_warnings(resolved),
    }


def print_config_debug(*, profile: str | None = None, show_sources: bool = True) -> None:
    """Print the effective configuration, its sources and warnings."""
    try:
        resolved = resolve_config(profile=profile)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    print("=== Effective Configuration ===")
    for field in FIELD_ORDER:
        if field == "api_key":
            print(f"  api_key: {'[SET]' if resolved.api_key else '[NOT SET]'}")
        else:
            print(f"  {field}: {getattr(resolved, field)}")

    if show_sources:
        print("\n=== Configuration Sources ===")
        print("\n".join(f"  {line}" for line in resolved.audit().splitlines()))

    warnings = config_warnings(resolved)
    if warnings:
        print("\nWarnings:")
        for warning in warnings:
            print(f"  - {warning}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for configuration introspection."""
    parser = argparse.ArgumentParser(
        description="Inspect scriptarc configuration",
        prog="python -m scriptarc.config",
    )
    parser.add_argument("--profile", help="Configuration profile to use")
    parser.add_argument(
        "--no-sources", action="store_true", help="Don't show configuration sources"
    )
    parser.add_argument(
        "--json", action="store_true", help="Output as JSON instead of text"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only check validity (exit code 0=valid, 1=invalid)",
    )
    args = parser.parse_args(argv)

    if args.check:
        info = get_config_info(profile=args.profile)
        sys.exit(0 if info["status"] == "valid" else 1)

    if args.json:
        print(json.dumps(get_config_info(profile=args.profile), indent=2))
    else:
        print_config_debug(profile=args.profile, show_sources=not args.no_sources)
