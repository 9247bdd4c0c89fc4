import asyncio
import logging

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from roomchat.app.common.data.client import ChangeEvent, Subscription
from roomchat.app.common.exceptions import BackendError
from roomchat.app.common.utils.consts import PRIVATE_COLUMNS
from roomchat.config.database.redis import change_channel

logger = logging.getLogger(__name__)


class RedisChangeFeed:
    """Redis Pub/Sub 위에 올린 테이블 변경 피드.

    쓰기 쪽은 ``changes:<table>`` 채널로 이벤트를 발행하고, 구독마다
    별도의 pubsub 연결과 소비 태스크를 둔다. 필터는 수신 측에서 적용한다.
    """

    def __init__(self, redis: Redis):
        self.redis = redis
        self._listeners: dict[str, tuple[object, asyncio.Task]] = {}

    @staticmethod
    def _redact(event: ChangeEvent) -> ChangeEvent:
        private = PRIVATE_COLUMNS.get(event.table)
        if not private:
            return event
        return event.model_copy(
            update={
                "new": {column: value for column, value in event.new.items() if column not in private},
                "old": {column: value for column, value in event.old.items() if column not in private},
            }
        )

    async def publish(self, event: ChangeEvent):
        try:
            await self.redis.publish(change_channel(event.table), self._redact(event).model_dump_json())
        except RedisError as e:
            # 쓰기는 이미 커밋됨, 알림만 유실
            logger.error(f"Failed to publish {event.type.value} on {event.table}: {e}")

    async def listen(self, subscription: Subscription):
        pubsub = self.redis.pubsub()
        try:
            await pubsub.subscribe(change_channel(subscription.table))
        except RedisError as e:
            await pubsub.aclose()
            logger.error(f"Failed to subscribe to {subscription.table}: {e}")
            raise BackendError(f"Failed to subscribe to {subscription.table}: {e}")

        task = asyncio.create_task(self._consume(subscription, pubsub))
        self._listeners[subscription.id] = (pubsub, task)
        logger.info(f"Listening on {change_channel(subscription.table)} for {subscription!r}")

    async def release(self, subscription: Subscription):
        subscription.closed = True
        listener = self._listeners.pop(subscription.id, None)
        if listener is None:
            return

        pubsub, task = listener
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        try:
            await pubsub.unsubscribe()
            await pubsub.aclose()
        except RedisError as e:
            logger.warning(f"Error while closing pubsub for {subscription!r}: {e}")

    async def _consume(self, subscription: Subscription, pubsub):
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    event = ChangeEvent.model_validate_json(message["data"])
                except PydanticValidationError as e:
                    logger.error(f"Malformed change event on {subscription.table}: {e}")
                    continue

                if not subscription.accepts(event):
                    continue

                # 핸들러는 순서대로 await 하여 전달 순서를 유지
                try:
                    await subscription.handler(event)
                except Exception as e:
                    logger.error(f"Change handler failed for {subscription!r}: {e}")
        except RedisError as e:
            logger.error(f"Change feed connection lost for {subscription!r}: {e}")
        finally:
            logger.info(f"Stopped listening for {subscription!r}")
