"""
Configuration Doctor - Validates backend configuration and credentials.

Usage:
    python -m gpt_auto_test.llm.doctor --config config/llm.yaml
"""

import argparse
import os
import sys
from typing import Dict

from dotenv import load_dotenv

from ..errors import ConfigError
from .backends import get_backend_class
from .config import BackendConfig, LLMConfig, load_config


def check_backend(backend_cfg: BackendConfig) -> Dict:
    """Check a backend type is known and its credential is set.

    Returns:
        Dict with:
        - available: bool
        - error: str (if not available)
    """
    result = {"available": False, "error": None}

    try:
        get_backend_class(backend_cfg.type)
    except ConfigError as e:
        result["error"] = str(e)
        return result

    if not os.getenv(backend_cfg.api_key_env):
        result["error"] = f"Missing environment variable: {backend_cfg.api_key_env}"
        return result

    result["available"] = True
    return result


def check_config(config_path: str | None) -> Dict:
    """Validate configuration.

    Args:
        config_path: Path to configuration file, or None for defaults

    Returns:
        Dict with:
        - valid: bool
        - backends: {backend_id: status}
        - roles: {role_name: backend_id}
        - errors: [str]
        - warnings: [str]
    """
    result = {
        "valid": False,
        "backends": {},
        "roles": {},
        "errors": [],
        "warnings": [],
    }

    try:
        config: LLMConfig = load_config(config_path)
    except ConfigError as e:
        result["errors"].append(str(e))
        return result

    for backend_id, backend_cfg in config.backends.items():
        backend_result = check_backend(backend_cfg)
        result["backends"][backend_id] = backend_result
        if not backend_result["available"]:
            message = f"Backend '{backend_id}' unavailable: {backend_result['error']}"
            if backend_id == config.default_backend or backend_id in config.roles.values():
                result["errors"].append(message)
            else:
                result["warnings"].append(message)

    for role_name in ("implementer", "tester"):
        backend_id = config.roles.get(role_name, config.default_backend)
        result["roles"][role_name] = backend_id
        if role_name not in config.roles:
            result["warnings"].append(
                f"Role '{role_name}' not mapped, using default backend '{backend_id}'"
            )

    result["valid"] = len(result["errors"]) == 0
    return result


def format_status(available: bool) -> str:
    return "✓" if available else "✗"


def print_report(config_path: str | None, check_result: Dict) -> None:
    """Print configuration validation report."""
    print("gpt-auto-test Configuration Doctor")
    print("=" * 40)
    print()
    print(f"Config: {config_path or '(built-in defaults)'}")
    print()

    print("Backends:")
    for backend_id, backend_result in check_result["backends"].items():
        available = backend_result["available"]
        print(f"  {format_status(available)} {backend_id}", end="")
        if available:
            print(" - Available")
        else:
            print(f" - {backend_result['error']}")
    print()

    print("Roles:")
    for role_name, backend_id in check_result["roles"].items():
        print(f"  {role_name} -> {backend_id}")
    print()

    if check_result["warnings"]:
        print("Warnings:")
        for warning in check_result["warnings"]:
            print(f"  - {warning}")
        print()

    if check_result["errors"]:
        print("Errors:")
        for error in check_result["errors"]:
            print(f"  - {error}")
        print()

    if check_result["valid"]:
        print("Status: ✓ VALID")
    else:
        print(f"Status: ✗ INVALID ({len(check_result['errors'])} error(s))")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Validate backend configuration and credentials"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to configuration file (default: built-in configuration)"
    )
    args = parser.parse_args()

    load_dotenv()
    result = check_config(args.config)
    print_report(args.config, result)
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
