from ..errors import InvalidCombination
from ..schemas.decisions import AccessConfig, AddressDecision, AliasIp, NicDecision
from ..schemas.spec import NetworkInterfaceSpec, NicOptions


def resolve_network_interfaces(
    interfaces: list[NetworkInterfaceSpec],
    options_by_index: dict[int, NicOptions],
    addresses: list[AddressDecision],
) -> list[NicDecision]:
    """
    Builds interface decisions, wiring in reservations from allocate_addresses.
    Extended options are matched by the interface's position in the list.
    """
    unknown = sorted(i for i in options_by_index if not 0 <= i < len(interfaces))
    if unknown:
        raise InvalidCombination(
            "network_interface_options references missing interfaces",
            {"indices": unknown, "interfaces": len(interfaces)},
        )

    reserved = {(a.nic_index, a.address_type): a for a in addresses}

    results = []
    for index, nic in enumerate(interfaces):
        opts = options_by_index.get(index, NicOptions())

        # 1. Internal address: static reservation or provider auto-assign
        internal = reserved.get((index, "INTERNAL"))

        # 2. External address, only with nat
        access_config = None
        if nic.nat:
            external = reserved.get((index, "EXTERNAL"))
            if external is not None:
                access_config = AccessConfig(address_ref=external.name)
            else:
                static_ip = nic.addresses.external if nic.addresses else None
                access_config = AccessConfig(nat_ip=static_ip)

        results.append(
            NicDecision(
                index=index,
                network=nic.network,
                subnetwork=nic.subnetwork,
                network_ip=internal.address if internal else None,
                address_ref=internal.name if internal else None,
                access_config=access_config,
                alias_ips=[
                    AliasIp(range_name=k, ip_cidr_range=v)
                    for k, v in opts.alias_ips.items()
                ],
                nic_type=opts.nic_type,
            )
        )

    return results
