from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, percent, ready, sum_of, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("proxmox.vms", "proxmox.lxc", "resources.cpu", "resources.mem")


def _running(guests: list[dict]) -> str:
    running = sum(1 for g in guests if g.get("status") == "running")
    return f"{running} / {len(guests)}"


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    resources = payloads["resources"].data.get("data") or []
    node = spec.option("node")
    if node:
        resources = [r for r in resources if r.get("node") == node]

    vms = [r for r in resources if r.get("type") == "qemu" and not to_number(r.get("template"))]
    lxc = [r for r in resources if r.get("type") == "lxc" and not to_number(r.get("template"))]
    nodes = [r for r in resources if r.get("type") == "node" and r.get("status") == "online"]

    # node "cpu" is a 0..1 load fraction of that node's cores
    used_cpu = sum(to_number(n.get("cpu")) * to_number(n.get("maxcpu")) for n in nodes)
    return ready(
        selected,
        NormalizedField("proxmox.vms", _running(vms)),
        NormalizedField("proxmox.lxc", _running(lxc)),
        NormalizedField("resources.cpu", percent(used_cpu, sum_of(nodes, "maxcpu"))),
        NormalizedField("resources.mem", percent(sum_of(nodes, "mem"), sum_of(nodes, "maxmem"))),
    )


widget = WidgetDefinition(
    kind=WidgetKind.PROXMOX,
    api="{url}/api2/json/{endpoint}",
    mappings={"resources": Mapping("cluster/resources")},
    auth=Auth.header("Authorization", "PVEAPIToken={username}={password}"),
    normalize=normalize,
    placeholders=LABELS,
)
