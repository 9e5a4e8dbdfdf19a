from pathlib import Path

import humanize
import jinja2

from .outputs import outputs
from .schemas.decisions import InstanceDecision, ResolvedModule


def disk_size(size_gb: int | None) -> str:
    if not size_gb:
        return "-"
    return str(humanize.naturalsize(size_gb * 1024**3, binary=True))


def summarize(resolved: ResolvedModule) -> list[tuple[str, str, str]]:
    """
    Flattens the decision set into (resource type, name, details) rows,
    in the order the resources are declared.
    """
    res = resolved.resource
    rows = []

    if isinstance(res, InstanceDecision):
        rows.append(("instance", res.name, f"{res.machine_type} in {res.zone}"))
    else:
        details = f"{res.machine_type} in {res.region}"
        rows.append(("instance template", res.name_prefix, details))

    boot = res.boot_disk
    rows.append(("boot disk", boot.image, f"{disk_size(boot.size)} {boot.type}"))

    for d in res.disks:
        if d.disk is None:
            details = f"existing {d.scope} {d.attachment.source}"
            rows.append(("disk attachment", d.device_name, details))
            continue
        source = f" from {d.disk.source_type} {d.disk.source}" if d.disk.source else ""
        kind = "inline disk" if d.disk.inline else f"{d.disk.scope} disk"
        rows.append(
            (kind, d.disk.name, f"{disk_size(d.disk.size)} {d.disk.type}{source}")
        )

    sa = res.service_account
    if sa is not None and sa.create:
        rows.append(("service account", sa.account_id or "", sa.email or ""))

    if isinstance(res, InstanceDecision):
        for addr in res.addresses:
            rows.append(
                ("address", addr.name, f"{addr.address_type} {addr.address or 'auto'}")
            )
        if res.group is not None:
            ports = ", ".join(f"{k}:{v}" for k, v in res.group.named_ports.items())
            rows.append(("instance group", res.group.name, ports or "no named ports"))
        for b in res.iam:
            rows.append(("iam binding", b.role, ", ".join(b.members)))
        for t in res.tag_bindings:
            rows.append(("tag binding", t.key, t.tag_value))

    for rule in resolved.firewall_rules:
        ranges = rule.source_ranges or rule.destination_ranges
        rows.append(
            ("firewall rule", rule.name, f"{rule.direction} {', '.join(ranges) or '-'}")
        )

    return rows


def generate_report(resolved: ResolvedModule, output_path: str) -> None:
    """
    Writes an HTML plan report for the resolved decision set.
    """
    template_dir = Path(__file__).parent / "templates"
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
    )
    env.filters["disk_size"] = disk_size

    template = env.get_template("report.html")
    html_content = template.render(
        resource=resolved.resource,
        rows=summarize(resolved),
        outputs=outputs(resolved),
    )

    Path(output_path).write_text(html_content)
