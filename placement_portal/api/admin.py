"""Administrative resources: settings, placement cycles, campuses, dashboard stats."""
from __future__ import annotations

from typing import Any

from placement_portal.api.base import ApiResponse, ResourceGroup


class SettingsAPI(ResourceGroup):
    def all(self) -> ApiResponse:
        return self.client.get("/settings")

    def get(self, key: str) -> ApiResponse:
        return self.client.get(f"/settings/{key}")

    def update(self, key: str, value: Any) -> ApiResponse:
        return self.client.put(f"/settings/{key}", json={"value": value})

    def update_many(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.put("/settings", json=data)

    def add_item(self, key: str, item: Any) -> ApiResponse:
        return self.client.post(f"/settings/{key}/add", json={"item": item})

    def remove_item(self, key: str, item: Any) -> ApiResponse:
        return self.client.post(f"/settings/{key}/remove", json={"item": item})

    def add_school(self, school: str) -> ApiResponse:
        return self.client.post("/settings/schools", json={"school": school})

    def pipeline_stages(self) -> ApiResponse:
        return self.client.get("/settings/pipeline-stages")


class PlacementCyclesAPI(ResourceGroup):
    def list(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/placement-cycles", params=params)

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/placement-cycles", json=data)

    def update(self, cycle_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/placement-cycles/{cycle_id}", json=data)

    def delete(self, cycle_id: str) -> ApiResponse:
        return self.client.delete(f"/placement-cycles/{cycle_id}")

    def update_my_cycle(self, cycle_id: str) -> ApiResponse:
        return self.client.put("/placement-cycles/my-cycle", json={"cycleId": cycle_id})


class CampusesAPI(ResourceGroup):
    def list(self) -> ApiResponse:
        return self.client.get("/campuses")

    def get(self, campus_id: str) -> ApiResponse:
        return self.client.get(f"/campuses/{campus_id}")

    def create(self, data: dict[str, Any]) -> ApiResponse:
        return self.client.post("/campuses", json=data)

    def update(self, campus_id: str, data: dict[str, Any]) -> ApiResponse:
        return self.client.put(f"/campuses/{campus_id}", json=data)

    def delete(self, campus_id: str) -> ApiResponse:
        return self.client.delete(f"/campuses/{campus_id}")


class StatsAPI(ResourceGroup):
    def dashboard(self, params: dict[str, Any] | None = None) -> ApiResponse:
        return self.client.get("/stats/dashboard", params=params)

    def student(self) -> ApiResponse:
        return self.client.get("/stats/student")

    def campus_poc(self, status: str | None = None) -> ApiResponse:
        return self.client.get("/stats/campus-poc", params={"status": status})
