import pytest

from kpiwidget import SelectionController


class RecordingSink:
    """Render sink that remembers every string it was given."""

    def __init__(self):
        self.values: list[str] = []

    def __call__(self, text: str):
        self.values.append(text)

    @property
    def last(self) -> str | None:
        return self.values[-1] if self.values else None


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def controller(sink):
    return SelectionController(render=sink)


@pytest.fixture
def sum_payload():
    return {'data': [10, 20, 30], 'settings': {'kpi': 'sum'}}


@pytest.fixture
def share_payload():
    return {
        'data': [1, 1, 1, 1],
        'group1_filter': [True, True, False, False],
        'group2_filter': [True, True, True, True],
        'settings': {'kpi': 'sum', 'comparison': 'share', 'suffix': '%', 'decimals': 0},
    }
