from __future__ import annotations

from enum import Enum


class UnknownWidgetError(ValueError):
    pass


class WidgetKind(str, Enum):
    ARGOCD = "argocd"
    AUDIOBOOKSHELF = "audiobookshelf"
    CADDY = "caddy"
    CHANGEDETECTIONIO = "changedetectionio"
    CHANNELSDVRSERVER = "channelsdvrserver"
    CHECKMK = "checkmk"
    CLOUDFLARED = "cloudflared"
    FRIGATE = "frigate"
    MAILCOW = "mailcow"
    MEDUSA = "medusa"
    MINIFLUX = "miniflux"
    MYSPEED = "myspeed"
    NETDATA = "netdata"
    NPM = "npm"
    PLANTIT = "plantit"
    PROMETHEUS = "prometheus"
    PROWLARR = "prowlarr"
    PROXMOX = "proxmox"
    PTERODACTYL = "pterodactyl"
    READARR = "readarr"
    ROMM = "romm"
    SEERR = "seerr"
    SPARKYFITNESS = "sparkyfitness"
    SPOOLMAN = "spoolman"
    STRELAYSRV = "strelaysrv"
    TAILSCALE = "tailscale"
    TANDOOR = "tandoor"
    TRACEARR = "tracearr"
    TRAEFIK = "traefik"
    VIKUNJA = "vikunja"
    WATCHTOWER = "watchtower"
    WHATSUPDOCKER = "whatsupdocker"
    XTEVE = "xteve"


# Older type names still accepted in configuration.
ALIASES = {
    "overseerr": WidgetKind.SEERR,
    "jellyseerr": WidgetKind.SEERR,
}


def resolve_kind(value: str | WidgetKind) -> WidgetKind:
    if isinstance(value, WidgetKind):
        return value
    key = str(value).strip().lower()
    if key in ALIASES:
        return ALIASES[key]
    try:
        return WidgetKind(key)
    except ValueError:
        raise UnknownWidgetError(f"Unknown widget type {value!r}") from None
