from ..errors import InvalidCombination
from ..logger import logger
from ..schemas.decisions import (
    FeatureSet,
    FirewallRuleDecision,
    GroupDecision,
    IamBinding,
    SchedulingDecision,
    ShieldedDecision,
    TagBinding,
)
from ..schemas.spec import InstanceSpec, SchedulingSpec


def resolve_scheduling(spec: InstanceSpec) -> SchedulingDecision:
    """
    Reconciles user scheduling with the features that constrain it.

    Confidential compute, spot provisioning and GPUs cannot live-migrate, so
    they force on_host_maintenance to TERMINATE. An explicit MIGRATE alongside
    any of them is rejected instead of being left for the provider to refuse.
    """
    sched = spec.scheduling or SchedulingSpec()
    spot = spec.options.spot
    context = {"name": spec.name}

    requires_terminate = []
    if spec.confidential_compute:
        requires_terminate.append("confidential_compute")
    if spot:
        requires_terminate.append("spot")
    if spec.gpu is not None:
        requires_terminate.append("gpu")

    if requires_terminate and sched.on_host_maintenance == "MIGRATE":
        raise InvalidCombination(
            "on_host_maintenance = MIGRATE is incompatible with "
            + ", ".join(requires_terminate),
            context,
        )

    if spot and sched.automatic_restart:
        raise InvalidCombination(
            "Spot instances cannot set automatic_restart", context
        )

    if spec.options.termination_action is not None and not spot:
        raise InvalidCombination(
            "termination_action is only valid for spot instances", context
        )

    if requires_terminate:
        on_host_maintenance = "TERMINATE"
    else:
        on_host_maintenance = sched.on_host_maintenance or "MIGRATE"

    if spot:
        automatic_restart = False
    elif sched.automatic_restart is None:
        automatic_restart = True
    else:
        automatic_restart = sched.automatic_restart

    return SchedulingDecision(
        automatic_restart=automatic_restart,
        on_host_maintenance=on_host_maintenance,
        preemptible=spot,
        provisioning_model="SPOT" if spot else "STANDARD",
        instance_termination_action=spec.options.termination_action,
        node_affinities=[a.model_dump() for a in sched.node_affinities],
    )


def resolve_firewall_rules(spec: InstanceSpec) -> list[FirewallRuleDecision]:
    default_network = spec.network_interfaces[0].network
    seen: set[str] = set()
    results = []

    for rule in spec.firewall_rules:
        if rule.name in seen:
            raise InvalidCombination(
                "Firewall rule names must be unique", {"rule": rule.name}
            )
        seen.add(rule.name)

        ingress = rule.direction == "INGRESS"
        results.append(
            FirewallRuleDecision(
                name=rule.name,
                network=rule.network or default_network,
                direction=rule.direction,
                priority=rule.priority,
                source_ranges=rule.ranges if ingress else [],
                destination_ranges=[] if ingress else rule.ranges,
                allow=[r.model_dump() for r in rule.rules],
                target_tags=rule.targets if rule.targets is not None else spec.tags,
                description=rule.description,
            )
        )

    return results


def instance_resource_name(spec: InstanceSpec) -> str:
    return (
        f"//compute.googleapis.com/projects/{spec.project_id}"
        f"/zones/{spec.zone}/instances/{spec.name}"
    )


def resolve_optional_features(spec: InstanceSpec) -> FeatureSet:
    """
    Resolves each optional feature independently.
    IAM, tag bindings and the unmanaged group only exist for instances; under
    a template they are dropped without error.
    """
    shielded = None
    if spec.shielded_config is not None:
        shielded = ShieldedDecision(**spec.shielded_config.model_dump())

    scheduling = resolve_scheduling(spec)
    firewall_rules = resolve_firewall_rules(spec)

    if spec.create_template:
        ignored = [
            k for k in ("group", "iam", "tag_bindings") if getattr(spec, k)
        ]
        if ignored:
            logger.debug(
                f"Template {spec.name}: ignoring instance-only {', '.join(ignored)}"
            )
        return FeatureSet(
            shielded_config=shielded,
            scheduling=scheduling,
            confidential_compute=spec.confidential_compute,
            firewall_rules=firewall_rules,
        )

    group = None
    if spec.group is not None:
        group = GroupDecision(
            name=spec.name, zone=spec.zone, named_ports=spec.group.named_ports
        )

    parent = instance_resource_name(spec)
    return FeatureSet(
        shielded_config=shielded,
        scheduling=scheduling,
        confidential_compute=spec.confidential_compute,
        iam=[
            IamBinding(role=role, members=members)
            for role, members in spec.iam.items()
        ],
        tag_bindings=[
            TagBinding(key=key, parent=parent, tag_value=value)
            for key, value in spec.tag_bindings.items()
        ],
        group=group,
        firewall_rules=firewall_rules,
    )
