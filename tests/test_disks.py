import pytest

from computevm.errors import (
    InvalidCombination,
    MissingRequiredField,
    UnsupportedCombination,
)
from computevm.resolvers.disks import (
    attached_disk_scope,
    merge_disk_options,
    resolve_disks,
)
from computevm.schemas.decisions import DiskEncryption
from computevm.schemas.spec import (
    AttachedDiskDefaults,
    AttachedDiskOptions,
    AttachedDiskSpec,
)

ZONE = "europe-west8-b"


def _resolve(disks, template=False, defaults=None, encryption=None):
    return resolve_disks(
        disks,
        defaults or AttachedDiskDefaults(),
        name="vm",
        zone=ZONE,
        template=template,
        encryption=encryption,
    )


def test_merge_disk_options_falls_back_per_field():
    defaults = AttachedDiskDefaults(mode="READ_WRITE", type="pd-balanced")
    options = AttachedDiskOptions(mode=None, type="pd-ssd", replica_zone=None)

    merged = merge_disk_options(options, defaults)

    assert merged.mode == "READ_WRITE"
    assert merged.type == "pd-ssd"
    assert merged.replica_zone is None
    assert merged.auto_delete is True


def test_image_disk_is_zonal_resource():
    decisions = _resolve(
        [AttachedDiskSpec(name="data", source_type="image", source="debian-11")]
    )

    assert len(decisions) == 1
    d = decisions[0]
    assert d.creates_resource
    assert d.disk.name == "vm-data"
    assert d.disk.scope == "zonal"
    assert d.disk.zone == ZONE
    assert d.disk.source_type == "image"
    assert d.disk.source == "debian-11"
    assert d.attachment.source == "vm-data"
    assert d.attachment.device_name == "data"


def test_snapshot_disk_in_instance():
    decisions = _resolve(
        [AttachedDiskSpec(name="restore", source_type="snapshot", source="snap-1")]
    )
    assert decisions[0].disk.source_type == "snapshot"
    assert decisions[0].disk.source == "snap-1"


def test_snapshot_disk_in_template_is_unsupported():
    with pytest.raises(UnsupportedCombination):
        _resolve(
            [AttachedDiskSpec(name="restore", source_type="snapshot", source="s")],
            template=True,
        )


@pytest.mark.parametrize(
    "source",
    [
        "existing-disk",
        "projects/p/zones/europe-west8-b/disks/existing-disk",
        "projects/p/regions/europe-west8/disks/existing-disk",
    ],
)
def test_attach_emits_only_reference(source):
    decisions = _resolve(
        [AttachedDiskSpec(name="shared", source_type="attach", source=source)]
    )

    assert len(decisions) == 1
    assert decisions[0].disk is None
    assert decisions[0].attachment.source == source


def test_attached_disk_scope():
    assert attached_disk_scope("my-disk") == "zonal"
    assert attached_disk_scope("projects/p/zones/z/disks/d") == "zonal"
    assert attached_disk_scope("projects/p/regions/r/disks/d") == "regional"


def test_empty_disk_uses_size():
    decisions = _resolve([AttachedDiskSpec(name="scratch", size=200)])
    disk = decisions[0].disk
    assert disk.size == 200
    assert disk.source is None
    assert disk.source_type is None


def test_empty_disk_ignores_stray_source():
    decisions = _resolve([AttachedDiskSpec(name="scratch", size=50, source="leftover")])
    disk = decisions[0].disk
    assert disk.source_type is None
    assert disk.source is None
    assert disk.size == 50


def test_replica_zone_makes_regional_disk():
    decisions = _resolve(
        [
            AttachedDiskSpec(
                name="ha",
                options=AttachedDiskOptions(replica_zone="europe-west8-c"),
            ),
            AttachedDiskSpec(name="local"),
        ]
    )

    regional, zonal = decisions
    assert regional.disk.scope == "regional"
    assert regional.disk.region == "europe-west8"
    assert regional.disk.replica_zones == [ZONE, "europe-west8-c"]
    assert regional.attachment.scope == "regional"
    assert zonal.disk.scope == "zonal"


def test_replica_zone_from_defaults():
    defaults = AttachedDiskDefaults(replica_zone="europe-west8-a")
    decisions = _resolve([AttachedDiskSpec(name="ha")], defaults=defaults)
    assert decisions[0].disk.scope == "regional"


def test_replica_zone_same_as_zone_is_invalid():
    with pytest.raises(InvalidCombination):
        _resolve(
            [
                AttachedDiskSpec(
                    name="ha", options=AttachedDiskOptions(replica_zone=ZONE)
                )
            ]
        )


def test_replica_zone_outside_region_is_invalid():
    with pytest.raises(InvalidCombination):
        _resolve(
            [
                AttachedDiskSpec(
                    name="ha", options=AttachedDiskOptions(replica_zone="us-east1-b")
                )
            ]
        )


def test_missing_source_for_image():
    with pytest.raises(MissingRequiredField) as exc:
        _resolve([AttachedDiskSpec(name="data", source_type="image")])
    assert exc.value.field == "attached_disks[0].source"


def test_duplicate_disk_names():
    with pytest.raises(InvalidCombination):
        _resolve([AttachedDiskSpec(name="data"), AttachedDiskSpec(name="data")])


def test_encryption_applies_to_created_disks_only():
    key = DiskEncryption(
        kms_key_self_link="projects/p/locations/l/keyRings/r/cryptoKeys/k"
    )
    decisions = _resolve(
        [
            AttachedDiskSpec(name="new"),
            AttachedDiskSpec(name="old", source_type="attach", source="old-disk"),
        ],
        encryption=key,
    )
    assert decisions[0].disk.encryption == key
    assert decisions[1].disk is None


def test_template_disks_are_inline():
    decisions = _resolve(
        [AttachedDiskSpec(name="data", source_type="image", source="debian-11")],
        template=True,
    )
    assert decisions[0].disk.inline is True
    assert decisions[0].disk.name == "data"


def test_attach_with_replica_zone_is_regional():
    decisions = _resolve(
        [
            AttachedDiskSpec(
                name="shared",
                source_type="attach",
                source="existing-disk",
                options=AttachedDiskOptions(replica_zone="europe-west8-c"),
            )
        ]
    )
    assert decisions[0].disk is None
    assert decisions[0].scope == "regional"
    assert decisions[0].attachment.source == "existing-disk"


def test_attach_inherits_replica_zone_from_defaults():
    defaults = AttachedDiskDefaults(replica_zone="europe-west8-c")
    decisions = _resolve(
        [AttachedDiskSpec(name="shared", source_type="attach", source="existing")],
        defaults=defaults,
    )
    assert decisions[0].scope == "regional"


def test_attach_zonal_link_with_replica_zone_is_invalid():
    with pytest.raises(InvalidCombination):
        _resolve(
            [
                AttachedDiskSpec(
                    name="shared",
                    source_type="attach",
                    source="projects/p/zones/europe-west8-b/disks/existing",
                    options=AttachedDiskOptions(replica_zone="europe-west8-c"),
                )
            ]
        )


def test_attach_replica_zone_outside_region_is_invalid():
    with pytest.raises(InvalidCombination):
        _resolve(
            [
                AttachedDiskSpec(
                    name="shared",
                    source_type="attach",
                    source="existing",
                    options=AttachedDiskOptions(replica_zone="us-east1-b"),
                )
            ]
        )
