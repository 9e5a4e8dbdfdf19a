"""Address reservations requested by the network interfaces.

Reservations must exist before an interface can reference them, so
``allocate_addresses`` runs first and its result is a required input of
``resolve_network_interfaces``.
"""

from ..core import region_from_zone
from ..errors import InvalidCombination, UnsupportedCombination
from ..logger import logger
from ..schemas.decisions import AddressDecision
from ..schemas.spec import InstanceSpec


def allocate_addresses(spec: InstanceSpec) -> list[AddressDecision]:
    region = region_from_zone(spec.zone)
    reservations = []

    for index, nic in enumerate(spec.network_interfaces):
        context = {"name": spec.name, "nic": index}
        internal = nic.addresses.internal if nic.addresses else None
        external = nic.addresses.external if nic.addresses else None

        if nic.allocate_external_address and external:
            raise InvalidCombination(
                "Set either addresses.external or allocate_external_address",
                context,
            )

        wants_internal = bool(internal) or nic.allocate_internal_address
        wants_external = nic.nat and nic.allocate_external_address

        if spec.create_template and (wants_internal or wants_external):
            raise UnsupportedCombination(
                "Address reservations are not supported in instance templates",
                context,
            )

        if wants_internal:
            reservations.append(
                AddressDecision(
                    name=f"{spec.name}-int-{index}",
                    address_type="INTERNAL",
                    region=region,
                    nic_index=index,
                    address=internal,
                    subnetwork=nic.subnetwork,
                )
            )

        if wants_external:
            reservations.append(
                AddressDecision(
                    name=f"{spec.name}-ext-{index}",
                    address_type="EXTERNAL",
                    region=region,
                    nic_index=index,
                )
            )
        elif nic.allocate_external_address:
            logger.debug(
                f"NIC {index}: allocate_external_address ignored without nat"
            )

    return reservations
