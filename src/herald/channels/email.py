from __future__ import annotations

from ..models import ChannelType, Notification
from .base import Channel, is_valid_email


class EmailChannel(Channel):
    type = ChannelType.EMAIL

    def matches_recipient(self, recipient: str) -> bool:
        return is_valid_email(recipient)

    def _validate_channel(self, notification: Notification) -> list[str]:
        options = notification.email
        errors = [
            f"invalid email address for recipient: {recipient}"
            for recipient in notification.recipients
            if not is_valid_email(recipient)
        ]
        if options.sender is not None and not is_valid_email(options.sender):
            errors.append(f"invalid email address for sender: {options.sender}")
        if not (notification.subject or "").strip():
            errors.append("subject is required for email")
        for label, addresses in (("cc", options.cc), ("bcc", options.bcc)):
            errors.extend(f"invalid email address in {label}: {address}" for address in addresses if not is_valid_email(address))
        if options.reply_to is not None and not is_valid_email(options.reply_to):
            errors.append(f"invalid email address for reply-to: {options.reply_to}")
        return errors
