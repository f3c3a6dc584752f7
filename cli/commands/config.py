"""Display the effective configuration."""

import json

from cli.context import get_context


def config() -> None:
    """Print the effective configuration as JSON (secrets masked)."""
    cfg = get_context().config
    data = cfg.model_dump(mode="json")
    for key in ("token", "password"):
        if data["auth"].get(key):
            data["auth"][key] = "***"
    print(json.dumps(data, indent=2))
