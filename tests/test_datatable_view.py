import pytest


COLUMNS = [
    {"key": "id", "label": "ID"},
    {"key": "name", "label": "Name"},
    {"key": "amount", "label": "Amount"},
]
FILTER_FIELDS = [
    {"key": "amount", "label": "Amount", "kind": "numberRange"},
    {"key": "status", "label": "Status", "type": "select", "options": [{"value": "open", "label": "Open"}]},
]
DATA = [
    {"id": 1, "name": "Acme", "amount": 100, "status": "open"},
    {"id": 2, "name": "Beta", "amount": 50, "status": "closed"},
]


def _view(client, **overrides):
    payload = {"data": DATA, "columns": COLUMNS, "filter_fields": FILTER_FIELDS}
    payload.update(overrides)
    return client.post("/datatable/view", json=payload)


def test_view_number_range_filter(client):
    response = _view(client, filters={"amount": {"min": "60"}})
    assert response.status_code == 200
    payload = response.json()
    assert [row["id"] for row in payload["rows"]] == [1]
    assert payload["total_count"] == 2
    assert payload["filtered_count"] == 1
    assert payload["active_filters"] == ["amount"]
    assert payload["status"] == "ok"


def test_view_scoped_search(client):
    payload = _view(client, search={"term": "be", "scope": "name"}).json()
    assert [row["id"] for row in payload["rows"]] == [2]


def test_view_select_alias_filter(client):
    payload = _view(client, filters={"status": "open"}).json()
    assert [row["id"] for row in payload["rows"]] == [1]


def test_view_sort_descending(client):
    payload = _view(client, sort={"key": "amount", "direction": "desc"}).json()
    assert [row["amount"] for row in payload["rows"]] == [100, 50]
    assert payload["sort"] == {"key": "amount", "direction": "desc"}


def test_view_pagination_window_and_clamp(client):
    data = [{"id": index, "name": f"row-{index}", "amount": index} for index in range(1, 101)]
    payload = _view(client, data=data, page=5, page_size=10).json()
    assert payload["total_pages"] == 10
    assert payload["current_page"] == 5
    assert payload["visible_pages"] == [1, "...", 3, 4, 5, 6, 7, "...", 10]
    assert payload["range_start"] == 41
    assert payload["range_end"] == 50

    clamped = _view(client, data=data, page=99, page_size=10).json()
    assert clamped["current_page"] == 10
    assert [row["id"] for row in clamped["rows"]][0] == 91


@pytest.mark.parametrize(
    ("data", "search", "status"),
    [
        ([], {"term": ""}, "no_data"),
        (DATA, {"term": "zzz"}, "no_results"),
    ],
)
def test_view_empty_states(client, data, search, status):
    payload = _view(client, data=data, search=search).json()
    assert payload["status"] == status
    assert payload["rows"] == []
    assert payload["total_pages"] == 0
    assert payload["current_page"] == 1
    assert payload["visible_pages"] == [1]


def test_view_rejects_unknown_filter_key(client):
    response = _view(client, filters={"missing": "x"})
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert "missing" in payload["details"]["message"]


def test_view_rejects_unknown_search_scope(client):
    response = _view(client, search={"term": "a", "scope": "nope"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_view_rejects_unknown_sort_column(client):
    response = _view(client, sort={"key": "status", "direction": "asc"})
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert "status" in payload["details"]["message"]


def test_view_rejects_duplicate_column_keys(client):
    response = _view(client, columns=[{"key": "id", "label": "ID"}, {"key": "id", "label": "Other"}])
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_view_rejects_page_size_over_limit(make_client):
    with make_client(MAX_PAGE_SIZE=20) as client:
        response = _view(client, page_size=21)
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["details"]["max_page_size"] == 20


def test_view_request_validation_error_shape(client):
    response = client.post("/datatable/view", json={"data": []})
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["details"]["errors"][0]["field"] == "columns"
