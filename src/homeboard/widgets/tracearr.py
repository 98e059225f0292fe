from __future__ import annotations

from .base import Loading, NormalizedField, Payload, Ready, WidgetResult, WidgetSpec, loading, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

SUMMARY_LABELS = ("tracearr.streams", "tracearr.transcodes", "tracearr.directplay", "tracearr.bitrate")
VIEWS = ("details", "summary", "both")


def format_duration(milliseconds) -> str:
    total = int(to_number(milliseconds)) // 1000
    hours = (total // 3600) % 24
    minutes = (total // 60) % 60
    seconds = total % 60
    parts = ([hours] if hours > 0 else []) + [minutes, seconds]
    return ":".join(f"{p:02d}" for p in parts)


def stream_title(session: dict, enable_user: bool = False, show_episode_number: bool = False) -> str:
    title = session.get("mediaTitle") or ""
    if session.get("mediaType") == "episode":
        show = session.get("showTitle")
        if show_episode_number:
            season = int(to_number(session.get("seasonNumber")))
            episode = int(to_number(session.get("episodeNumber")))
            title = f"{show}: S{season:02d} · E{episode:02d} - {title}"
        else:
            title = f"{show} - {title}"
    if enable_user:
        title = f"{title} ({session.get('username')})"
    return title


def _summary(summary: dict) -> tuple[NormalizedField, ...]:
    return (
        NormalizedField("tracearr.streams", summary.get("total")),
        NormalizedField("tracearr.transcodes", summary.get("transcodes")),
        NormalizedField("tracearr.directplay", summary.get("directPlays")),
        NormalizedField("tracearr.bitrate", summary.get("totalBitrate")),
    )


def _details(sessions: list[dict], spec: WidgetSpec) -> tuple[NormalizedField, ...]:
    if not sessions:
        return (NormalizedField("tracearr.no_active"),)
    enable_user = bool(spec.option("enableUser"))
    show_episode_number = bool(spec.option("showEpisodeNumber"))
    return tuple(
        NormalizedField(
            stream_title(s, enable_user, show_episode_number),
            f"{format_duration(s.get('progressMs'))} / {format_duration(s.get('durationMs'))}",
        )
        for s in sessions
    )


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    view = spec.option("view", "details")
    if view not in VIEWS:
        view = "details"
    activity = payloads["streams"].data
    if activity.get("data") is None:
        if view == "details":
            return Loading()
        return loading((), SUMMARY_LABELS)

    sessions = sorted(activity["data"], key=lambda s: to_number(s.get("progressMs")))
    summary = activity.get("summary") or {}
    if view == "summary":
        return Ready(_summary(summary))
    if view == "both":
        return Ready(_summary(summary) + _details(sessions, spec))
    return Ready(_details(sessions, spec))


widget = WidgetDefinition(
    kind=WidgetKind.TRACEARR,
    api="{url}/api/v1/public/{endpoint}",
    mappings={"streams": Mapping("streams")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=SUMMARY_LABELS,
    refresh_interval=5.0,
)
