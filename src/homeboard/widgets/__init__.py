from __future__ import annotations

from . import (
    argocd,
    audiobookshelf,
    caddy,
    changedetectionio,
    channelsdvrserver,
    checkmk,
    cloudflared,
    frigate,
    mailcow,
    medusa,
    miniflux,
    myspeed,
    netdata,
    npm,
    plantit,
    prometheus,
    prowlarr,
    proxmox,
    pterodactyl,
    readarr,
    romm,
    seerr,
    sparkyfitness,
    spoolman,
    strelaysrv,
    tailscale,
    tandoor,
    tracearr,
    traefik,
    vikunja,
    watchtower,
    whatsupdocker,
    xteve,
)
from .base import WidgetResult, WidgetSpec
from .kinds import WidgetKind, resolve_kind
from .proxy import Transport, WidgetDefinition, refresh

REGISTRY: dict[WidgetKind, WidgetDefinition] = {
    mod.widget.kind: mod.widget
    for mod in (
        argocd, audiobookshelf, caddy, changedetectionio, channelsdvrserver, checkmk,
        cloudflared, frigate, mailcow, medusa, miniflux, myspeed, netdata, npm, plantit,
        prometheus, prowlarr, proxmox, pterodactyl, readarr, romm, seerr, sparkyfitness,
        spoolman, strelaysrv, tailscale, tandoor, tracearr, traefik, vikunja, watchtower,
        whatsupdocker, xteve,
    )
}

_unregistered = sorted(k.value for k in set(WidgetKind) - set(REGISTRY))
if _unregistered:
    raise RuntimeError(f"Widget kinds without a definition: {_unregistered}")


def get_definition(kind: str | WidgetKind) -> WidgetDefinition:
    return REGISTRY[resolve_kind(kind)]


async def refresh_widget(spec: WidgetSpec, transport: Transport | None = None) -> WidgetResult:
    return await refresh(REGISTRY[spec.kind], spec, transport)
