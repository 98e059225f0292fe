from __future__ import annotations

from .base import NormalizedField, Payload, WidgetResult, WidgetSpec, dig, ready, to_number
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("readarr.wanted", "readarr.queued", "readarr.books")


def _books_on_disk(books) -> int | None:
    if isinstance(books, dict):
        return books.get("have")
    return sum(1 for b in books if to_number(dig(b, "statistics", "bookFileCount")) > 0)


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    return ready(
        selected,
        NormalizedField("readarr.wanted", dig(payloads["wanted/missing"].data, "totalRecords")),
        NormalizedField("readarr.queued", dig(payloads["queue/status"].data, "totalCount")),
        NormalizedField("readarr.books", _books_on_disk(payloads["book"].data)),
    )


widget = WidgetDefinition(
    kind=WidgetKind.READARR,
    api="{url}/api/v1/{endpoint}",
    mappings={
        "book": Mapping("book"),
        "wanted/missing": Mapping("wanted/missing"),
        "queue/status": Mapping("queue/status"),
    },
    auth=Auth.header("X-Api-Key"),
    normalize=normalize,
    placeholders=LABELS,
)
