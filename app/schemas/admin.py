from pydantic import BaseModel


class QRCodeOut(BaseModel):
    location_id: str
    location_name: str
    token: str
    payload: str      # string to encode into the printed entry QR image


class DashboardStatsOut(BaseModel):
    active_checkins: int
    total_users: int
    total_occupancy: int
    avg_occupancy_percent: int
    location_count: int


class DemoToggle(BaseModel):
    enabled: bool
