from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DiskScope = Literal["zonal", "regional"]


class Decision(BaseModel):
    """Resolved records are immutable once emitted."""

    model_config = ConfigDict(frozen=True)


class DiskEncryption(Decision):
    raw_key: str | None = Field(default=None, repr=False, exclude=True)
    kms_key_self_link: str | None = None


class EncryptionDecision(Decision):
    boot: DiskEncryption | None = None
    disks: DiskEncryption | None = None


class BootDiskDecision(Decision):
    image: str
    size: int
    type: str
    auto_delete: bool
    encryption: DiskEncryption | None = None


class DiskResource(Decision):
    name: str
    scope: DiskScope
    zone: str | None = None
    region: str | None = None
    replica_zones: list[str] = Field(default_factory=list)
    size: int
    type: str
    source_type: Literal["image", "snapshot"] | None = None
    source: str | None = None
    inline: bool = Field(
        default=False, description="Declared inside a template, not standalone"
    )
    encryption: DiskEncryption | None = None


class DiskAttachment(Decision):
    device_name: str
    source: str = Field(description="Created disk name or the existing disk verbatim")
    scope: DiskScope
    mode: str
    auto_delete: bool


class DiskDecision(Decision):
    device_name: str
    disk: DiskResource | None = Field(
        default=None, description="None when an existing disk is attached"
    )
    attachment: DiskAttachment

    @property
    def creates_resource(self) -> bool:
        return self.disk is not None

    @property
    def scope(self) -> DiskScope:
        return self.attachment.scope


class AddressDecision(Decision):
    name: str
    address_type: Literal["INTERNAL", "EXTERNAL"]
    region: str
    nic_index: int
    address: str | None = Field(
        default=None, description="None lets the provider pick the address"
    )
    subnetwork: str | None = None


class AliasIp(Decision):
    range_name: str
    ip_cidr_range: str


class AccessConfig(Decision):
    nat_ip: str | None = None
    address_ref: str | None = Field(
        default=None, description="Name of the external reservation"
    )


class NicDecision(Decision):
    index: int
    network: str
    subnetwork: str
    network_ip: str | None = None
    address_ref: str | None = Field(
        default=None, description="Name of the internal reservation"
    )
    access_config: AccessConfig | None = None
    alias_ips: list[AliasIp] = Field(default_factory=list)
    nic_type: str | None = None


class SchedulingDecision(Decision):
    automatic_restart: bool = True
    on_host_maintenance: Literal["MIGRATE", "TERMINATE"] = "MIGRATE"
    preemptible: bool = False
    provisioning_model: Literal["STANDARD", "SPOT"] = "STANDARD"
    instance_termination_action: str | None = None
    node_affinities: list[dict[str, Any]] = Field(default_factory=list)


class ShieldedDecision(Decision):
    enable_secure_boot: bool
    enable_vtpm: bool
    enable_integrity_monitoring: bool


class IamBinding(Decision):
    role: str
    members: list[str]


class TagBinding(Decision):
    key: str
    parent: str
    tag_value: str


class GroupDecision(Decision):
    name: str
    zone: str
    named_ports: dict[str, int] = Field(default_factory=dict)


class FirewallRuleDecision(Decision):
    name: str
    network: str
    direction: str
    priority: int
    source_ranges: list[str] = Field(default_factory=list)
    destination_ranges: list[str] = Field(default_factory=list)
    allow: list[dict[str, Any]] = Field(default_factory=list)
    target_tags: list[str] = Field(default_factory=list)
    description: str | None = None


class FeatureSet(Decision):
    shielded_config: ShieldedDecision | None = None
    scheduling: SchedulingDecision = Field(default_factory=SchedulingDecision)
    confidential_compute: bool = False
    iam: list[IamBinding] = Field(default_factory=list)
    tag_bindings: list[TagBinding] = Field(default_factory=list)
    group: GroupDecision | None = None
    firewall_rules: list[FirewallRuleDecision] = Field(default_factory=list)


class ServiceAccountDecision(Decision):
    email: str | None = Field(
        default=None, description="None means the project default account"
    )
    create: bool = False
    account_id: str | None = None
    scopes: list[str] = Field(default_factory=list)

    @property
    def iam_email(self) -> str | None:
        return f"serviceAccount:{self.email}" if self.email else None


class GpuDecision(Decision):
    type: str
    count: int


class _ComputeDecision(Decision):
    name: str
    project_id: str
    machine_type: str
    description: str
    min_cpu_platform: str | None = None
    can_ip_forward: bool = False
    enable_display: bool = False
    labels: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    boot_disk: BootDiskDecision
    disks: list[DiskDecision] = Field(default_factory=list)
    network_interfaces: list[NicDecision] = Field(default_factory=list)
    scheduling: SchedulingDecision = Field(default_factory=SchedulingDecision)
    shielded_config: ShieldedDecision | None = None
    confidential_compute: bool = False
    service_account: ServiceAccountDecision | None = None
    gpu: GpuDecision | None = None

    @property
    def disk_resources(self) -> list[DiskResource]:
        return [d.disk for d in self.disks if d.disk is not None]

    @property
    def attachments(self) -> list[DiskAttachment]:
        return [d.attachment for d in self.disks]


class InstanceDecision(_ComputeDecision):
    kind: Literal["instance"] = "instance"
    zone: str
    hostname: str | None = None
    allow_stopping_for_update: bool = True
    deletion_protection: bool = False
    addresses: list[AddressDecision] = Field(default_factory=list)
    group: GroupDecision | None = None
    iam: list[IamBinding] = Field(default_factory=list)
    tag_bindings: list[TagBinding] = Field(default_factory=list)


class TemplateDecision(_ComputeDecision):
    kind: Literal["template"] = "template"
    name_prefix: str
    region: str


ResourceShape = Annotated[
    InstanceDecision | TemplateDecision, Field(discriminator="kind")
]


class ResolvedModule(Decision):
    resource: ResourceShape
    firewall_rules: list[FirewallRuleDecision] = Field(default_factory=list)

    @property
    def is_template(self) -> bool:
        return isinstance(self.resource, TemplateDecision)


class ModuleOutputs(Decision):
    self_link: str | None = None
    internal_ips: list[str | None] = Field(default_factory=list)
    external_ips: list[str | None] = Field(default_factory=list)
    service_account_email: str | None = None
    service_account_iam_email: str | None = None
    template_name: str | None = None
    group_self_link: str | None = None
