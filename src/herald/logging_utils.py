from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from textwrap import wrap
from typing import TYPE_CHECKING, Union

from .utils import mask_recipient

if TYPE_CHECKING:
    from .models import Notification
    from .results import NotificationResult

DEFAULT_WRAP_WIDTH = 110
DEFAULT_LABEL_WIDTH = 18
DEFAULT_INDENT = "    "
MAX_LOGGED_RECIPIENTS = 3

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_stringify(item) for item in value)
    if hasattr(value, "name") and hasattr(value, "value"):  # enums
        return str(getattr(value, "name"))
    return str(value)


class LogBlockBuilder:
    """Builds the titled, label-aligned multi-line blocks used throughout herald's logs."""

    def __init__(
        self,
        title: str,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
        label_width: int = DEFAULT_LABEL_WIDTH,
        indent: str = DEFAULT_INDENT,
        pad_top: bool = True,
    ) -> None:
        self.wrap_width = wrap_width
        self.label_width = label_width
        self.indent = indent
        self.lines: MutableSequence[str] = []
        if pad_top:
            self.lines.append("")
        self.lines.append(title)
        self.lines.append("-" * len(title))

    def add_fields(self, fields: FieldMapping | None) -> None:
        if not fields:
            return
        items = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
        if not items:
            return

        label_width = max(min(max(len(str(key)) for key, _ in items), self.label_width), 8)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 4, 32)
        for key, value in items:
            wrapped = wrap(_stringify(value), width=value_width) or [""]
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {wrapped[0]}")
            for continuation in wrapped[1:]:
                self.lines.append(f"{self.indent}{'':<{label_width}}  {continuation}")

    def add_list(self, heading: str, items: Iterable[str], *, empty_label: str = "(none)") -> None:
        if self.lines and self.lines[-1] != "":
            self.lines.append("")
        self.lines.append(f"{heading}:")
        materialized = [_stringify(item) for item in items if item is not None]
        if not materialized:
            self.lines.append(f"{self.indent}{empty_label}")
            return
        for item in materialized:
            self.lines.append(f"{self.indent}- {item}")

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping, *, pad_top: bool = True) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    return builder.render()


def render_errors_block(
    title: str,
    fields: FieldMapping,
    errors: Iterable[str],
    *,
    pad_top: bool = True,
) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    builder.add_list("Errors", errors)
    return builder.render()


def describe_recipients(recipients: Sequence[str]) -> str:
    shown = [mask_recipient(item) for item in recipients[:MAX_LOGGED_RECIPIENTS]]
    hidden = len(recipients) - len(shown)
    if hidden > 0:
        shown.append(f"+{hidden} more")
    return ", ".join(shown) or "(none)"


def notification_fields(notification: Notification) -> dict[str, object]:
    return {
        "Notification": notification.id,
        "Kind": notification.kind or "any",
        "Recipients": describe_recipients(notification.recipients),
        "Priority": notification.priority,
    }


def result_fields(result: NotificationResult) -> dict[str, object]:
    fields: dict[str, object] = {
        "Notification": result.notification_id,
        "Channel": result.channel,
        "Provider": result.provider_name,
    }
    if result.success:
        fields["Message ID"] = result.message_id
    else:
        fields["Error"] = result.error_message
        fields["Code"] = result.error_code
    return fields
