from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Protocol

from kpiwidget.utils.logging import get_logger

logger = get_logger(__name__)

FilterHandler = Callable[[Any], None]


class Subscription:
    """Handle returned by FilterChannel.subscribe; close() stops delivery."""

    def __init__(self, channel: LocalFilterChannel, group: str, handler: FilterHandler):
        self.channel = channel
        self.group = group
        self.handler = handler
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        if not self._closed:
            self.channel._unsubscribe(self)
            self._closed = True


class FilterChannel(Protocol):
    """
    Publish/subscribe transport for selection events, keyed by group name.

    Event values are either a sequence of 1-based row identifiers (apply a
    filter) or None / an empty sequence (clear the filter).
    """

    def subscribe(self, group: str, handler: FilterHandler) -> Subscription:
        ...

    def publish(self, group: str, value: Any) -> None:
        ...


class LocalFilterChannel:
    """
    In-process FilterChannel.

    publish() delivers synchronously to every handler of the group, in
    subscription order. clear() publishes None, which resets subscribers to
    their unfiltered state.

    Example:

        >>> channel = LocalFilterChannel()
        >>> sub = channel.subscribe('cars', print)
        >>> channel.publish('cars', ['2', '3'])
            ['2', '3']
        >>> sub.close()
    """

    def __init__(self):
        self._handlers: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, group: str, handler: FilterHandler) -> Subscription:
        subscription = Subscription(self, group, handler)
        self._handlers[group].append(subscription)
        logger.debug(f'Subscribed handler to filter group {group!r}.')
        return subscription

    def publish(self, group: str, value: Any) -> None:
        # Copy: a handler may close its own subscription while being notified.
        for subscription in list(self._handlers.get(group, [])):
            subscription.handler(value)

    def clear(self, group: str) -> None:
        self.publish(group, None)

    def subscriber_count(self, group: str) -> int:
        return len(self._handlers.get(group, []))

    def _unsubscribe(self, subscription: Subscription):
        handlers = self._handlers.get(subscription.group, [])
        if subscription in handlers:
            handlers.remove(subscription)
