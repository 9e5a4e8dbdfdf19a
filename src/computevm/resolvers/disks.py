from ..core import region_from_zone
from ..errors import InvalidCombination, MissingRequiredField, UnsupportedCombination
from ..logger import logger
from ..schemas.decisions import (
    DiskAttachment,
    DiskDecision,
    DiskEncryption,
    DiskResource,
    DiskScope,
)
from ..schemas.spec import AttachedDiskDefaults, AttachedDiskOptions, AttachedDiskSpec


def merge_disk_options(
    options: AttachedDiskOptions, defaults: AttachedDiskDefaults
) -> AttachedDiskDefaults:
    """Per-field override: any None in options falls back to the default."""
    overrides = {k: v for k, v in options.model_dump().items() if v is not None}
    return defaults.model_copy(update=overrides)


def attached_disk_scope(source: str) -> DiskScope:
    """
    Scope of an existing disk reference.
    A bare name or a zones/ link is zonal, a regions/ link is regional.
    """
    return "regional" if "regions" in source.split("/") else "zonal"


def _validate_disk(
    index: int,
    disk: AttachedDiskSpec,
    zone: str,
    replica_zone: str | None,
    template: bool,
) -> None:
    context = {"disk": disk.name, "index": index}

    if disk.source_type is not None and not disk.source:
        raise MissingRequiredField(f"attached_disks[{index}].source", context)

    if disk.source_type == "snapshot" and template:
        raise UnsupportedCombination(
            "Snapshot-sourced disks are not supported in instance templates", context
        )

    if replica_zone is not None:
        if disk.source_type == "attach" and "zones" in str(disk.source).split("/"):
            raise InvalidCombination(
                "replica_zone cannot be set when attaching a zonal disk link",
                {**context, "source": disk.source, "replica_zone": replica_zone},
            )
        if replica_zone == zone:
            raise InvalidCombination(
                "replica_zone must differ from the instance zone",
                {**context, "zone": zone},
            )
        if region_from_zone(replica_zone) != region_from_zone(zone):
            raise InvalidCombination(
                "replica_zone must be in the instance region",
                {**context, "zone": zone, "replica_zone": replica_zone},
            )


def resolve_disks(
    attached_disks: list[AttachedDiskSpec],
    defaults: AttachedDiskDefaults,
    *,
    name: str,
    zone: str,
    template: bool = False,
    encryption: DiskEncryption | None = None,
) -> list[DiskDecision]:
    """
    Decides the disk resource and attachment for each attached disk entry.

    Disks with source_type "attach" produce only an attachment reference to
    the existing disk; every other entry produces a new disk resource
    (regional when a replica zone is set) and an attachment to it.
    """
    seen: set[str] = set()
    merged: list[AttachedDiskDefaults] = []

    # 1. Validate every entry before building anything
    for index, disk in enumerate(attached_disks):
        if disk.name in seen:
            raise InvalidCombination(
                "Attached disk names must be unique", {"disk": disk.name}
            )
        seen.add(disk.name)

        opts = merge_disk_options(disk.options, defaults)
        _validate_disk(index, disk, zone, opts.replica_zone, template)
        merged.append(opts)

    # 2. Build decisions
    decisions = []
    for disk, opts in zip(attached_disks, merged):
        if disk.source_type == "attach":
            source = str(disk.source)
            scope = attached_disk_scope(source)
            if opts.replica_zone is not None:
                # A bare name with a replica zone names a regional disk
                scope = "regional"
            logger.debug(f"Disk {disk.name}: attaching existing {scope} disk {source}")
            decisions.append(
                DiskDecision(
                    device_name=disk.name,
                    attachment=DiskAttachment(
                        device_name=disk.name,
                        source=source,
                        scope=scope,
                        mode=opts.mode,
                        auto_delete=opts.auto_delete,
                    ),
                )
            )
            continue

        resource_name = disk.name if template else f"{name}-{disk.name}"
        init_source = disk.source if disk.source_type is not None else None
        if disk.source and init_source is None:
            logger.debug(f"Disk {disk.name}: source ignored for an empty disk")
        if opts.replica_zone is not None:
            resource = DiskResource(
                name=resource_name,
                scope="regional",
                region=region_from_zone(zone),
                replica_zones=[zone, opts.replica_zone],
                size=disk.size,
                type=opts.type,
                source_type=disk.source_type,
                source=init_source,
                inline=template,
                encryption=encryption,
            )
        else:
            resource = DiskResource(
                name=resource_name,
                scope="zonal",
                zone=zone,
                size=disk.size,
                type=opts.type,
                source_type=disk.source_type,
                source=init_source,
                inline=template,
                encryption=encryption,
            )

        logger.debug(
            f"Disk {disk.name}: new {resource.scope} disk {resource_name} "
            f"(source_type={disk.source_type}, size={disk.size})"
        )
        decisions.append(
            DiskDecision(
                device_name=disk.name,
                disk=resource,
                attachment=DiskAttachment(
                    device_name=disk.name,
                    source=resource_name,
                    scope=resource.scope,
                    mode=opts.mode,
                    auto_delete=opts.auto_delete,
                ),
            )
        )

    return decisions
