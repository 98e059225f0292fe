from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, ready, sum_of
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = (
    "audiobookshelf.podcasts",
    "audiobookshelf.podcastsDuration",
    "audiobookshelf.books",
    "audiobookshelf.booksDuration",
)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    data = payloads["libraries"].data
    libraries = (data.get("libraries") or []) if isinstance(data, dict) else data
    podcasts = [lib for lib in libraries if lib.get("mediaType") == "podcast"]
    books = [lib for lib in libraries if lib.get("mediaType") == "book"]
    return ready(
        selected,
        NormalizedField("audiobookshelf.podcasts", sum_of(podcasts, "stats", "totalItems")),
        NormalizedField("audiobookshelf.podcastsDuration", sum_of(podcasts, "stats", "totalDuration")),
        NormalizedField("audiobookshelf.books", sum_of(books, "stats", "totalItems")),
        NormalizedField("audiobookshelf.booksDuration", sum_of(books, "stats", "totalDuration")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.AUDIOBOOKSHELF,
    api="{url}/api/{endpoint}",
    mappings={"libraries": Mapping("libraries")},
    auth=Auth.bearer(),
    normalize=normalize,
    placeholders=LABELS,
)
