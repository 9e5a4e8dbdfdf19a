# Module defaults applied when the input bundle leaves a field unset.
DEFAULT_BOOT_IMAGE = "projects/debian-cloud/global/images/family/debian-11"
DEFAULT_MACHINE_TYPE = "f1-micro"
DEFAULT_DISK_TYPE = "pd-balanced"
DEFAULT_DISK_SIZE = 10
DEFAULT_DISK_MODE = "READ_WRITE"

# Scopes attached when a service account is given explicitly or auto-created.
CUSTOM_SA_SCOPES = [
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/userinfo.email",
]

# Scopes attached when the project default compute account is used.
DEFAULT_SA_SCOPES = [
    "https://www.googleapis.com/auth/devstorage.read_only",
    "https://www.googleapis.com/auth/logging.write",
    "https://www.googleapis.com/auth/monitoring.write",
]

# Prefix for auto-created service account ids
# e.g. my-vm -> tf-vm-my-vm@my-project.iam.gserviceaccount.com
SA_ID_PREFIX = "tf-vm-"


def region_from_zone(zone: str) -> str:
    """europe-west8-b -> europe-west8"""
    return zone.rsplit("-", 1)[0]
