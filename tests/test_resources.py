# tests/test_resources.py — Inventory endpoints and status derivation
import pytest
from bson import ObjectId

from errors import BadRequestError, NotFoundError
from schemas import ResourceCreate, WorkspaceCreate
from tests.conftest import WORKSPACE_PAYLOAD


def resources_url(workspace):
    return f"/workspaces/{workspace['id']}/resources"


class TestResourceEndpoints:
    def test_list(self, client, auth_headers, workspace):
        res = client.get(resources_url(workspace), headers=auth_headers)
        assert res.status_code == 200
        assert len(res.json()["data"]) == 5

    def test_add_and_status_round_trip(self, client, auth_headers, workspace):
        res = client.post(
            resources_url(workspace),
            json={"name": "Paint", "quantity": 20, "unit": "L", "threshold": 30},
            headers=auth_headers,
        )
        assert res.status_code == 201
        resource = res.json()["data"]
        url = f"{resources_url(workspace)}/{resource['id']}"

        fetched = client.get(url, headers=auth_headers).json()["data"]
        assert fetched["status"] == "Low"

        res = client.patch(f"{url}/quantity", json={"quantity": 10}, headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["data"]["status"] == "Critical"

        res = client.patch(f"{url}/quantity", json={"quantity": 40}, headers=auth_headers)
        assert res.json()["data"]["status"] == "Good"
        assert client.get(url, headers=auth_headers).json()["data"]["quantity"] == 40

    def test_whole_numbers_stay_integers(self, client, auth_headers, workspace):
        res = client.post(
            resources_url(workspace),
            json={"name": "Paint", "quantity": 20, "unit": "L", "threshold": 30},
            headers=auth_headers,
        )
        assert res.status_code == 201
        assert '"quantity":20.0' not in res.text
        resource = res.json()["data"]
        assert isinstance(resource["quantity"], int)
        assert isinstance(resource["threshold"], int)

        res = client.patch(
            f"{resources_url(workspace)}/{resource['id']}/quantity", json={"quantity": 12.5}, headers=auth_headers
        )
        assert res.json()["data"]["quantity"] == 12.5

    def test_add_negative_quantity(self, client, auth_headers, workspace):
        res = client.post(
            resources_url(workspace),
            json={"name": "Paint", "quantity": -1, "unit": "L", "threshold": 30},
            headers=auth_headers,
        )
        assert res.status_code == 400

    def test_add_missing_field(self, client, auth_headers, workspace):
        res = client.post(resources_url(workspace), json={"name": "Paint", "quantity": 1}, headers=auth_headers)
        assert res.status_code == 400
        assert res.json()["type"] == "VALIDATION_ERROR"

    def test_update_rederives_status(self, client, auth_headers, workspace):
        resource = workspace["resources"][0]
        url = f"{resources_url(workspace)}/{resource['id']}"
        res = client.put(url, json={"quantity": 500, "unit": "Sacks"}, headers=auth_headers)
        assert res.status_code == 200
        updated = res.json()["data"]
        assert updated["status"] == "Good"
        assert updated["unit"] == "Sacks"
        assert updated["name"] == resource["name"]

        res = client.put(url, json={"threshold": 1000}, headers=auth_headers)
        assert res.json()["data"]["status"] == "Critical"

    def test_update_negative_threshold(self, client, auth_headers, workspace):
        url = f"{resources_url(workspace)}/{workspace['resources'][0]['id']}"
        res = client.put(url, json={"threshold": -5}, headers=auth_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Threshold must be a positive number"

    def test_quantity_negative(self, client, auth_headers, workspace):
        url = f"{resources_url(workspace)}/{workspace['resources'][0]['id']}/quantity"
        res = client.patch(url, json={"quantity": -3}, headers=auth_headers)
        assert res.status_code == 400

    def test_unknown_resource(self, client, auth_headers, workspace):
        url = f"{resources_url(workspace)}/does-not-exist"
        assert client.get(url, headers=auth_headers).status_code == 404
        assert client.put(url, json={"quantity": 1}, headers=auth_headers).status_code == 404
        assert client.delete(url, headers=auth_headers).status_code == 404

    def test_delete(self, client, auth_headers, workspace):
        resource_id = workspace["resources"][0]["id"]
        res = client.delete(f"{resources_url(workspace)}/{resource_id}", headers=auth_headers)
        assert res.status_code == 204
        remaining = client.get(resources_url(workspace), headers=auth_headers).json()["data"]
        assert len(remaining) == 4
        assert resource_id not in {r["id"] for r in remaining}

    def test_bulk_replace(self, client, auth_headers, workspace):
        res = client.put(
            resources_url(workspace),
            json={"resources": [
                {"name": "Paint", "quantity": 100, "unit": "L", "threshold": 30},
                {"name": "Glass", "quantity": 3, "unit": "Panes", "threshold": 10},
            ]},
            headers=auth_headers,
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert [r["status"] for r in data] == ["Good", "Critical"]
        listed = client.get(resources_url(workspace), headers=auth_headers).json()["data"]
        assert [r["name"] for r in listed] == ["Paint", "Glass"]

    def test_bulk_replace_invalid_item_changes_nothing(self, client, auth_headers, workspace):
        before = client.get(resources_url(workspace), headers=auth_headers).json()["data"]
        res = client.put(
            resources_url(workspace),
            json={"resources": [
                {"name": "Paint", "quantity": 100, "unit": "L", "threshold": 30},
                {"name": "Glass", "quantity": -3, "unit": "Panes", "threshold": 10},
            ]},
            headers=auth_headers,
        )
        assert res.status_code == 400
        after = client.get(resources_url(workspace), headers=auth_headers).json()["data"]
        assert after == before

    def test_statistics(self, client, auth_headers, workspace):
        client.put(
            resources_url(workspace),
            json={"resources": [
                {"name": "Paint", "quantity": 100, "unit": "L", "threshold": 30},
                {"name": "Glass", "quantity": 3, "unit": "Panes", "threshold": 10},
                {"name": "Tiles", "quantity": 8, "unit": "Boxes", "threshold": 10},
            ]},
            headers=auth_headers,
        )
        res = client.get(f"{resources_url(workspace)}/statistics", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["data"] == {"total": 3, "critical": 1, "low": 1, "good": 1, "totalQuantity": 111}

    def test_other_owner_cannot_touch_resources(self, client, other_headers, workspace):
        url = resources_url(workspace)
        assert client.get(url, headers=other_headers).status_code == 404
        res = client.post(url, json={"name": "Paint", "quantity": 1, "unit": "L", "threshold": 1}, headers=other_headers)
        assert res.status_code == 404
        assert client.get(f"{url}/statistics", headers=other_headers).status_code == 404


class TestResourceService:
    def test_bulk_replace_is_all_or_nothing(self, service):
        owner_id = ObjectId()
        ws = service.create_workspace(owner_id, WorkspaceCreate(**WORKSPACE_PAYLOAD))
        items = [
            ResourceCreate(name="Paint", quantity=5, unit="L", threshold=1),
            ResourceCreate(name="Glass", quantity=-1, unit="Panes", threshold=1),
        ]
        with pytest.raises(BadRequestError):
            service.bulk_replace_resources(ws["id"], owner_id, items)
        assert service.list_resources(ws["id"], owner_id) == ws["resources"]

    def test_bulk_replace_with_empty_list_clears(self, service):
        owner_id = ObjectId()
        ws = service.create_workspace(owner_id, WorkspaceCreate(**WORKSPACE_PAYLOAD))
        assert service.bulk_replace_resources(ws["id"], owner_id, []) == []
        assert service.resource_statistics(ws["id"], owner_id)["total"] == 0

    def test_wrong_owner_is_not_found(self, service):
        ws = service.create_workspace(ObjectId(), WorkspaceCreate(**WORKSPACE_PAYLOAD))
        with pytest.raises(NotFoundError):
            service.list_resources(ws["id"], ObjectId())
