from typing import Literal

from pydantic import BaseModel, Field

from ..core import (
    DEFAULT_BOOT_IMAGE,
    DEFAULT_DISK_MODE,
    DEFAULT_DISK_SIZE,
    DEFAULT_DISK_TYPE,
    DEFAULT_MACHINE_TYPE,
)

DiskMode = Literal["READ_WRITE", "READ_ONLY"]
SourceType = Literal["image", "snapshot", "attach"]


class BootDiskSpec(BaseModel):
    image: str = DEFAULT_BOOT_IMAGE
    size: int = DEFAULT_DISK_SIZE
    type: str = DEFAULT_DISK_TYPE
    auto_delete: bool = True


class AttachedDiskOptions(BaseModel):
    """Per-disk overrides; None falls back to attached_disk_defaults."""

    auto_delete: bool | None = None
    mode: DiskMode | None = None
    replica_zone: str | None = None
    type: str | None = None


class AttachedDiskDefaults(BaseModel):
    auto_delete: bool = True
    mode: DiskMode = DEFAULT_DISK_MODE
    replica_zone: str | None = None
    type: str = DEFAULT_DISK_TYPE


class AttachedDiskSpec(BaseModel):
    name: str
    size: int = DEFAULT_DISK_SIZE
    source: str | None = Field(
        default=None, description="Image, snapshot, or existing disk name/link"
    )
    source_type: SourceType | None = None
    options: AttachedDiskOptions = Field(default_factory=AttachedDiskOptions)


class NicAddresses(BaseModel):
    internal: str | None = None
    external: str | None = None


class NetworkInterfaceSpec(BaseModel):
    network: str
    subnetwork: str
    nat: bool = False
    addresses: NicAddresses | None = None
    allocate_internal_address: bool = False
    allocate_external_address: bool = False


class NicOptions(BaseModel):
    alias_ips: dict[str, str] = Field(
        default_factory=dict, description="Secondary range name -> CIDR"
    )
    nic_type: Literal["GVNIC", "VIRTIO_NET"] | None = None


class InstanceOptions(BaseModel):
    allow_stopping_for_update: bool = True
    deletion_protection: bool = False
    spot: bool = False
    termination_action: Literal["STOP", "DELETE"] | None = None


class NodeAffinity(BaseModel):
    key: str
    operator: Literal["IN", "NOT_IN"] = "IN"
    values: list[str] = Field(default_factory=list)


class SchedulingSpec(BaseModel):
    automatic_restart: bool | None = None
    on_host_maintenance: Literal["MIGRATE", "TERMINATE"] | None = None
    node_affinities: list[NodeAffinity] = Field(default_factory=list)


class ShieldedConfig(BaseModel):
    enable_secure_boot: bool = True
    enable_vtpm: bool = True
    enable_integrity_monitoring: bool = True


class EncryptionSpec(BaseModel):
    encrypt_boot: bool = False
    disk_encryption_key_raw: str | None = None
    kms_key_self_link: str | None = None


class ServiceAccountSpec(BaseModel):
    email: str | None = None
    auto_create: bool = False
    scopes: list[str] | None = None


class GroupSpec(BaseModel):
    named_ports: dict[str, int] = Field(default_factory=dict)


class GpuSpec(BaseModel):
    type: str = Field(description="e.g., nvidia-tesla-t4")
    count: int = 1


class FirewallRulePorts(BaseModel):
    protocol: str = "tcp"
    ports: list[str] = Field(default_factory=list)


class FirewallRuleSpec(BaseModel):
    name: str
    description: str | None = None
    direction: Literal["INGRESS", "EGRESS"] = "INGRESS"
    priority: int = 1000
    ranges: list[str] = Field(default_factory=list)
    rules: list[FirewallRulePorts] = Field(
        default_factory=lambda: [FirewallRulePorts()]
    )
    network: str | None = Field(
        default=None, description="Defaults to the first interface network"
    )
    targets: list[str] | None = Field(
        default=None, description="Target tags; defaults to the instance tags"
    )


class InstanceSpec(BaseModel):
    project_id: str
    zone: str
    name: str
    network_interfaces: list[NetworkInterfaceSpec]
    firewall_rules: list[FirewallRuleSpec]

    create_template: bool = False
    description: str = "Managed by computevm."
    hostname: str | None = None
    machine_type: str = DEFAULT_MACHINE_TYPE
    min_cpu_platform: str | None = None
    can_ip_forward: bool = False
    enable_display: bool = False
    labels: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)

    boot_disk: BootDiskSpec = Field(default_factory=BootDiskSpec)
    attached_disks: list[AttachedDiskSpec] = Field(default_factory=list)
    attached_disk_defaults: AttachedDiskDefaults = Field(
        default_factory=AttachedDiskDefaults
    )
    network_interface_options: dict[int, NicOptions] = Field(default_factory=dict)

    options: InstanceOptions = Field(default_factory=InstanceOptions)
    scheduling: SchedulingSpec | None = None
    shielded_config: ShieldedConfig | None = None
    confidential_compute: bool = False
    encryption: EncryptionSpec | None = None
    gpu: GpuSpec | None = None

    service_account: ServiceAccountSpec | None = Field(
        default_factory=ServiceAccountSpec,
        description="None attaches no account; the default uses the project one",
    )
    iam: dict[str, list[str]] = Field(
        default_factory=dict, description="Role -> members"
    )
    tag_bindings: dict[str, str] = Field(
        default_factory=dict, description="Key -> tag value id"
    )
    group: GroupSpec | None = None
