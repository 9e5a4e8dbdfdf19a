from .schemas.decisions import InstanceDecision, ModuleOutputs, ResolvedModule


def outputs(resolved: ResolvedModule) -> ModuleOutputs:
    """
    Read values known once the decisions are resolved.
    Addresses the provider assigns at apply time are reported as None.
    """
    res = resolved.resource
    sa = res.service_account
    sa_email = sa.email if sa else None
    sa_iam_email = sa.iam_email if sa else None

    internal_ips = [nic.network_ip for nic in res.network_interfaces]
    external_ips = [
        nic.access_config.nat_ip if nic.access_config else None
        for nic in res.network_interfaces
    ]

    if not isinstance(res, InstanceDecision):
        # Template names are generated from the prefix by the provider
        return ModuleOutputs(
            internal_ips=internal_ips,
            external_ips=external_ips,
            service_account_email=sa_email,
            service_account_iam_email=sa_iam_email,
            template_name=res.name_prefix,
        )

    zone_path = f"projects/{res.project_id}/zones/{res.zone}"
    return ModuleOutputs(
        self_link=f"{zone_path}/instances/{res.name}",
        internal_ips=internal_ips,
        external_ips=external_ips,
        service_account_email=sa_email,
        service_account_iam_email=sa_iam_email,
        group_self_link=(
            f"{zone_path}/instanceGroups/{res.group.name}" if res.group else None
        ),
    )
