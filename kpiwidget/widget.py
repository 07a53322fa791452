from __future__ import annotations

from typing import Any, Mapping

from kpiwidget.channel import FilterChannel, Subscription
from kpiwidget.kpis.kpi import KPIResult
from kpiwidget.selection import RenderSink, SelectionController
from kpiwidget.utils.logging import get_logger

logger = get_logger(__name__)


class KPIWidget:
    """
    Host-facing widget: one SelectionController bound to a render sink and a filter channel.

    render_value() is called by the host with each new payload; the widget then
    follows the filter group named in settings.crosstalk_group on the channel.

    Example:

        >>> channel = LocalFilterChannel()
        >>> widget = KPIWidget(render=print, channel=channel)
        >>> widget.render_value({'data': [10, 20, 30], 'settings': {'kpi': 'sum', 'crosstalk_group': 'g'}})
            60
        >>> channel.publish('g', ['1'])
            10
    """

    def __init__(self, render: RenderSink | None = None, channel: FilterChannel | None = None):
        self.controller = SelectionController(render=render)
        self.channel = channel
        self._subscription: Subscription | None = None

    @property
    def display_value(self) -> str:
        return self.controller.display_value

    @property
    def filter_group(self) -> str | None:
        return self._subscription.group if self._subscription is not None else None

    def render_value(self, payload: Mapping[str, Any]) -> KPIResult:
        """Initialize from a host payload and (re)subscribe to its filter group."""
        self._unsubscribe()
        result = self.controller.initialize(payload)

        settings = self.controller.settings
        if settings is not None and settings.crosstalk_group and self.channel is not None:
            self._subscription = self.channel.subscribe(settings.crosstalk_group, self.on_filter_change)
        return result

    def on_filter_change(self, value: Any) -> KPIResult | None:
        return self.controller.on_selection_event(value)

    def resize(self, width: int | float | None, height: int | float | None):
        # The display is a single string; nothing depends on the size.
        logger.debug(f'Resize to {width}x{height} ignored.')

    def destroy(self):
        self._unsubscribe()

    def _unsubscribe(self):
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
