from roomchat.app.common.data.client import DataClient, Order
from roomchat.app.common.utils.consts import Table
from roomchat.app.v1.admin.schema.capture_response import AudioCapture, ImageCapture, LocationCapture


class CaptureRepository:

    def __init__(self, client: DataClient):
        self.client = client

    async def recent_images(self, user_id: str, limit: int) -> list[ImageCapture]:
        rows = await self.client.select(Table.VERIFICATION_IMAGES, {"user_id": user_id}, order=Order.desc("captured_at"), limit=limit)
        return [ImageCapture.model_validate(row) for row in rows]

    async def recent_audio(self, user_id: str, limit: int) -> list[AudioCapture]:
        rows = await self.client.select(Table.VERIFICATION_AUDIO, {"user_id": user_id}, order=Order.desc("recorded_at"), limit=limit)
        return [AudioCapture.model_validate(row) for row in rows]

    async def recent_locations(self, user_id: str, limit: int) -> list[LocationCapture]:
        rows = await self.client.select(Table.LOCATION_TRACKING, {"user_id": user_id}, order=Order.desc("recorded_at"), limit=limit)
        return [LocationCapture.model_validate(row) for row in rows]
