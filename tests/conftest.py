from typing import Any

import pytest

from computevm.schemas.spec import InstanceSpec

SUBNET = "projects/my-project/regions/europe-west8/subnetworks/app"


@pytest.fixture
def make_spec():
    def _make(**overrides: Any) -> InstanceSpec:
        data: dict[str, Any] = {
            "project_id": "my-project",
            "zone": "europe-west8-b",
            "name": "test-vm",
            "network_interfaces": [
                {
                    "network": "projects/my-project/global/networks/vpc",
                    "subnetwork": SUBNET,
                }
            ],
            "firewall_rules": [],
        }
        data.update(overrides)
        return InstanceSpec.model_validate(data)

    return _make
