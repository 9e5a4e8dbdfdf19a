from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import MissingRequiredField, ResolverError
from .logger import logger
from .schemas.spec import InstanceSpec


def parse_spec(data: Any) -> InstanceSpec:
    """
    Validates a raw configuration mapping into an InstanceSpec.
    Missing required fields surface as MissingRequiredField; any other
    validation problem is raised as pydantic's ValidationError.
    """
    if not isinstance(data, dict):
        raise ResolverError(
            "Configuration must be a mapping", {"type": type(data).__name__}
        )

    try:
        return InstanceSpec.model_validate(data)
    except ValidationError as e:
        for err in e.errors():
            if err["type"] == "missing":
                field = ".".join(str(part) for part in err["loc"])
                raise MissingRequiredField(field, {"name": data.get("name")}) from e
        raise


def load_spec(path: str | Path) -> InstanceSpec:
    """Loads a YAML (or JSON) configuration file."""
    with open(path) as f:
        data = yaml.safe_load(f)

    logger.debug(f"Loaded configuration from {path}")
    return parse_spec(data)
