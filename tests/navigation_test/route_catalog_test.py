import pytest

from conftest import equator_path, make_route
from navigation.guidance.nav_config import NavConfig
from navigation.guidance.route_catalog import RejectReason, RouteCatalog, SelectionStatus

T0 = 1_000.0


@pytest.fixture
def catalog(route):
    alternates = [
        make_route(equator_path(6, lat=0.001)),
        make_route(equator_path(6, lat=0.002), with_steps=False),
        make_route(equator_path(6, lat=0.003), duration_text=""),
        make_route([]),
    ]
    return RouteCatalog(route, alternates, NavConfig())


def assert_unchanged(catalog, index=0, last_switch=None):
    assert catalog.selected_index == index
    assert catalog.last_switch_at == last_switch


def test_starts_on_primary(catalog, route):
    assert catalog.selected_index == 0
    assert catalog.selected_route is route
    assert catalog.route_count == 5


def test_select_valid_alternate(catalog):
    result = catalog.select(1, T0)

    assert result.accepted
    assert result.status is SelectionStatus.ACCEPTED
    assert catalog.selected_index == 1
    assert catalog.last_switch_at == T0
    assert catalog.selected_route is catalog.alternates[0]


@pytest.mark.parametrize("index", [5, 6, 100])
def test_out_of_range_is_rejected(catalog, index):
    result = catalog.select(index, T0)

    assert result.status is SelectionStatus.REJECTED
    assert result.reason is RejectReason.OUT_OF_RANGE
    assert_unchanged(catalog)


@pytest.mark.parametrize("index", [-1, 1.0, "1", None, True])
def test_non_integer_or_negative_is_rejected(catalog, index):
    result = catalog.select(index, T0)

    assert result.reason is RejectReason.INVALID_INDEX
    assert_unchanged(catalog)


@pytest.mark.parametrize("index", [2, 4])
def test_route_without_steps_or_geometry_is_rejected(catalog, index):
    result = catalog.select(index, T0)

    assert result.reason is RejectReason.INCOMPLETE_ROUTE
    assert_unchanged(catalog)


def test_route_without_metrics_text_is_rejected(catalog):
    result = catalog.select(3, T0)

    assert result.reason is RejectReason.MISSING_METRICS
    assert_unchanged(catalog)


def test_rejection_keeps_previous_selection(catalog):
    catalog.select(1, T0)

    catalog.select(4, T0 + 10)

    assert_unchanged(catalog, index=1, last_switch=T0)


def test_rapid_reselection_is_ignored(catalog):
    catalog.select(1, T0)

    result = catalog.select(0, T0 + 0.2)

    assert result.status is SelectionStatus.IGNORED
    assert result.reason is None
    assert_unchanged(catalog, index=1, last_switch=T0)


def test_selection_allowed_after_debounce(catalog):
    catalog.select(1, T0)

    result = catalog.select(0, T0 + 0.5)

    assert result.accepted
    assert_unchanged(catalog, index=0, last_switch=T0 + 0.5)


def test_replace_resets_to_primary(catalog, route):
    catalog.select(1, T0)
    fresh = [make_route(equator_path(4)), route]

    catalog.replace(fresh)

    assert catalog.selected_index == 0
    assert catalog.route_count == 2
    assert catalog.primary is fresh[0]


def test_empty_catalog_refused(catalog):
    with pytest.raises(ValueError):
        catalog.replace([])
    with pytest.raises(ValueError):
        RouteCatalog.from_routes([])


def test_incomplete_primary_is_kept_but_logged(caplog, route):
    broken = make_route(equator_path(4), with_steps=False)

    with caplog.at_level("WARNING"):
        catalog = RouteCatalog.from_routes([broken, route])

    assert catalog.selected_route is broken
    assert "incomplete_route" in caplog.text


def test_replace_with_incomplete_primary_is_logged(caplog, catalog, route):
    with caplog.at_level("WARNING"):
        catalog.replace([make_route([]), route])

    assert catalog.selected_index == 0
    assert "incomplete_route" in caplog.text
