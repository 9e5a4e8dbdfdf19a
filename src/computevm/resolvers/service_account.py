from ..core import CUSTOM_SA_SCOPES, DEFAULT_SA_SCOPES, SA_ID_PREFIX
from ..errors import InvalidCombination
from ..schemas.decisions import ServiceAccountDecision
from ..schemas.spec import InstanceSpec


def resolve_service_account(spec: InstanceSpec) -> ServiceAccountDecision | None:
    """
    Decides which service account the VM runs as.

    None: no account and no scopes. Otherwise an explicit email, an account
    created alongside the VM, or the project default compute account.
    """
    sa = spec.service_account
    if sa is None:
        return None

    if sa.email and sa.auto_create:
        raise InvalidCombination(
            "service_account.email and service_account.auto_create are "
            "mutually exclusive",
            {"name": spec.name, "email": sa.email},
        )

    if sa.auto_create:
        account_id = f"{SA_ID_PREFIX}{spec.name}"
        return ServiceAccountDecision(
            email=f"{account_id}@{spec.project_id}.iam.gserviceaccount.com",
            create=True,
            account_id=account_id,
            scopes=sa.scopes if sa.scopes is not None else CUSTOM_SA_SCOPES,
        )

    if sa.email:
        return ServiceAccountDecision(
            email=sa.email,
            scopes=sa.scopes if sa.scopes is not None else CUSTOM_SA_SCOPES,
        )

    return ServiceAccountDecision(
        scopes=sa.scopes if sa.scopes is not None else DEFAULT_SA_SCOPES
    )
