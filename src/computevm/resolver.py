"""Maps an InstanceSpec to the set of resources the module declares."""

from .core import region_from_zone
from .errors import MissingRequiredField
from .logger import logger
from .resolvers.addresses import allocate_addresses
from .resolvers.disks import resolve_disks
from .resolvers.encryption import resolve_encryption
from .resolvers.features import resolve_optional_features
from .resolvers.network import resolve_network_interfaces
from .resolvers.service_account import resolve_service_account
from .schemas.decisions import (
    BootDiskDecision,
    FeatureSet,
    GpuDecision,
    InstanceDecision,
    ResolvedModule,
    TemplateDecision,
)
from .schemas.spec import InstanceSpec


def _resolve(
    spec: InstanceSpec,
) -> tuple[InstanceDecision | TemplateDecision, FeatureSet]:
    if not spec.network_interfaces:
        raise MissingRequiredField("network_interfaces", {"name": spec.name})

    template = spec.create_template

    # 1. Validation and sub-resource decisions
    encryption = resolve_encryption(spec, template=template)
    disks = resolve_disks(
        spec.attached_disks,
        spec.attached_disk_defaults,
        name=spec.name,
        zone=spec.zone,
        template=template,
        encryption=encryption.disks,
    )
    addresses = allocate_addresses(spec)
    nics = resolve_network_interfaces(
        spec.network_interfaces, spec.network_interface_options, addresses
    )
    features = resolve_optional_features(spec)
    service_account = resolve_service_account(spec)

    # 2. Assemble the shape
    common = dict(
        name=spec.name,
        project_id=spec.project_id,
        machine_type=spec.machine_type,
        description=spec.description,
        min_cpu_platform=spec.min_cpu_platform,
        can_ip_forward=spec.can_ip_forward,
        enable_display=spec.enable_display,
        labels=spec.labels,
        metadata=spec.metadata,
        tags=spec.tags,
        boot_disk=BootDiskDecision(
            image=spec.boot_disk.image,
            size=spec.boot_disk.size,
            type=spec.boot_disk.type,
            auto_delete=spec.boot_disk.auto_delete,
            encryption=encryption.boot,
        ),
        disks=disks,
        network_interfaces=nics,
        scheduling=features.scheduling,
        shielded_config=features.shielded_config,
        confidential_compute=features.confidential_compute,
        service_account=service_account,
        gpu=GpuDecision(**spec.gpu.model_dump()) if spec.gpu else None,
    )

    if template:
        logger.debug(f"Resolved {spec.name} as instance template")
        template_shape = TemplateDecision(
            **common,
            name_prefix=f"{spec.name}-",
            region=region_from_zone(spec.zone),
        )
        return template_shape, features

    logger.debug(f"Resolved {spec.name} as instance in {spec.zone}")
    instance_shape = InstanceDecision(
        **common,
        zone=spec.zone,
        hostname=spec.hostname,
        allow_stopping_for_update=spec.options.allow_stopping_for_update,
        deletion_protection=spec.options.deletion_protection,
        addresses=addresses,
        group=features.group,
        iam=features.iam,
        tag_bindings=features.tag_bindings,
    )
    return instance_shape, features


def resolve_shape(spec: InstanceSpec) -> InstanceDecision | TemplateDecision:
    """
    Selects exactly one top-level resource kind from create_template.

    Every check runs before the decision is built, so an error means nothing
    was produced. Instance-only features (group, IAM, tag bindings) are never
    evaluated for templates.
    """
    shape, _ = _resolve(spec)
    return shape


def resolve(spec: InstanceSpec) -> ResolvedModule:
    """Public API: resolves the full decision set for one module invocation."""
    shape, features = _resolve(spec)
    return ResolvedModule(resource=shape, firewall_rules=features.firewall_rules)
