"""
Decoding of the payload a host delivers to the widget.

Hosts may deliver list-like fields either as lists or as JSON-encoded strings.
This module turns them into pandas Series once, at the boundary, so that the
aggregation core only ever sees:

    data           -> object Series of raw values (RangeIndex 0..n-1)
    group1_filter  -> bool Series or None
    group2_filter  -> bool Series or None
    key            -> object Series of row identifiers or None
    settings       -> Settings

A field that cannot be decoded is reported as a 'decode_failure' diagnostic and
treated as absent.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np
import pandas as pd

from kpiwidget.diagnostics import Diagnostic
from kpiwidget.exceptions import InvalidPayloadError
from kpiwidget.settings import Settings
from kpiwidget.utils.logging import get_logger

logger = get_logger(__name__)

_TRUE_STRINGS = {'true', 't', '1', 'yes', 'y'}


@dataclass(frozen=True)
class WidgetPayload:
    data: pd.Series
    group1_filter: pd.Series | None = None
    group2_filter: pd.Series | None = None
    key: pd.Series | None = None
    settings: Settings = field(default_factory=Settings)

    @property
    def n_rows(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class DecodeResult:
    payload: WidgetPayload
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def decode_payload(raw: Mapping[str, Any] | WidgetPayload) -> DecodeResult:
    """
    Decode a raw host payload into a WidgetPayload.

    Args:
        raw: Mapping with keys data, group1_filter, group2_filter, key and
            settings; an already decoded WidgetPayload is passed through

    Returns:
        DecodeResult with the payload and any decode diagnostics

    Raises:
        InvalidPayloadError: If raw is not a mapping or settings is not a mapping
        UnknownComparisonError: If settings.comparison is not a known mode
    """
    if isinstance(raw, WidgetPayload):
        return DecodeResult(raw)
    if not isinstance(raw, Mapping):
        raise InvalidPayloadError(f'Widget payload must be a mapping, got {type(raw).__name__}')

    raw_settings = raw.get('settings') or {}
    if not isinstance(raw_settings, Mapping):
        raise InvalidPayloadError(f'Payload settings must be a mapping, got {type(raw_settings).__name__}')

    diagnostics: list[Diagnostic] = []

    data = _decode_field(raw, 'data', diagnostics)
    group1 = _decode_field(raw, 'group1_filter', diagnostics)
    group2 = _decode_field(raw, 'group2_filter', diagnostics)
    key = _decode_field(raw, 'key', diagnostics)

    payload = WidgetPayload(
        data=_to_value_series(data) if data is not None else pd.Series([], dtype=object),
        group1_filter=_to_mask_series(group1),
        group2_filter=_to_mask_series(group2),
        key=_to_value_series(key),
        settings=Settings.from_dict(raw_settings),
    )
    return DecodeResult(payload, tuple(diagnostics))


def _decode_field(raw: Mapping[str, Any], name: str, diagnostics: list[Diagnostic]):
    value = raw.get(name)
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        diagnostic = Diagnostic.error('decode_failure', f'Error parsing payload field {name!r}: {e}')
        logger.error(diagnostic.message)
        diagnostics.append(diagnostic)
        return None


def _as_list(value) -> list:
    if isinstance(value, pd.Series):
        return value.tolist()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _to_value_series(value) -> pd.Series | None:
    if value is None:
        return None
    return pd.Series(_as_list(value), dtype=object)


def _to_mask_series(value) -> pd.Series | None:
    if value is None:
        return None
    return pd.Series([_to_bool(v) for v in _as_list(value)], dtype=bool)


def _to_bool(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, float) and np.isnan(value):
        return False
    return bool(value)
