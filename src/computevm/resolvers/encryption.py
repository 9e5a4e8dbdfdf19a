from ..errors import InvalidCombination, UnsupportedCombination
from ..schemas.decisions import DiskEncryption, EncryptionDecision
from ..schemas.spec import InstanceSpec


def resolve_encryption(
    spec: InstanceSpec, *, template: bool = False
) -> EncryptionDecision:
    """
    Decides which disks carry customer-supplied encryption.

    The boot disk is encrypted only when encrypt_boot is set; created attached
    disks get the key whenever one is configured.
    """
    enc = spec.encryption
    if enc is None:
        return EncryptionDecision()

    if enc.disk_encryption_key_raw and enc.kms_key_self_link:
        raise InvalidCombination(
            "disk_encryption_key_raw and kms_key_self_link are mutually exclusive",
            {"name": spec.name},
        )

    if template and enc.disk_encryption_key_raw:
        raise UnsupportedCombination(
            "Instance templates only accept KMS keys for disk encryption",
            {"name": spec.name},
        )

    if not (enc.disk_encryption_key_raw or enc.kms_key_self_link):
        return EncryptionDecision()

    key = DiskEncryption(
        raw_key=enc.disk_encryption_key_raw,
        kms_key_self_link=enc.kms_key_self_link,
    )
    return EncryptionDecision(boot=key if enc.encrypt_boot else None, disks=key)
