from __future__ import annotations

from .base import Error, NormalizedField, Payload, WidgetResult, WidgetSpec, ready, sum_of
from .kinds import WidgetKind
from .proxy import Auth, Mapping, WidgetDefinition

LABELS = ("mailcow.domains", "mailcow.mailboxes", "mailcow.mails", "mailcow.storage")


def normalize(payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
    domains = payloads["domains"].data
    if not domains:
        return Error("No domains found")
    return ready(
        selected,
        NormalizedField("mailcow.domains", len(domains)),
        NormalizedField("mailcow.mailboxes", sum_of(domains, "mboxes_in_domain")),
        NormalizedField("mailcow.mails", sum_of(domains, "msgs_total")),
        NormalizedField("mailcow.storage", sum_of(domains, "bytes_total")),
    )


widget = WidgetDefinition(
    kind=WidgetKind.MAILCOW,
    api="{url}/api/v1/{endpoint}",
    mappings={"domains": Mapping("get/domain/all")},
    auth=Auth.header("X-API-Key"),
    normalize=normalize,
    placeholders=LABELS,
)
