import json
import logging
import time
from typing import Any, Dict

import pika
import pika.exceptions

from .config import get_settings

logger = logging.getLogger(__name__)


class EventPublisher:
    """RabbitMQ publisher for domain events (task.created, project.deleted, ...)"""

    def __init__(self, url: str, exchange: str, enabled: bool = True):
        self.url = url
        self.exchange = exchange
        self.enabled = enabled
        self.connection = None
        self.channel = None

    def connect(self, max_retries: int = 3, retry_delay: int = 2) -> bool:
        """Establish connection to RabbitMQ with retries"""
        if not self.enabled:
            return False

        for attempt in range(max_retries):
            try:
                parameters = pika.URLParameters(self.url)
                parameters.heartbeat = 600
                parameters.blocked_connection_timeout = 300

                self.connection = pika.BlockingConnection(parameters)
                self.channel = self.connection.channel()

                # Declare exchange
                self.channel.exchange_declare(
                    exchange=self.exchange,
                    exchange_type='topic',
                    durable=True
                )

                logger.info(f"Connected to RabbitMQ exchange '{self.exchange}'")
                return True

            except pika.exceptions.AMQPConnectionError as e:
                logger.warning(f"RabbitMQ connection attempt {attempt + 1}/{max_retries} failed: {e}")
                if attempt < max_retries - 1:
                    time.sleep(retry_delay)
                else:
                    logger.error("Failed to connect to RabbitMQ after all retries")
        return False

    def publish_event(self, event_type: str, data: Dict[str, Any]) -> bool:
        """
        Publish an event; the routing key is the event type.

        Never raises: a lost event must not undo a committed operation.
        """
        if not self.enabled:
            logger.debug(f"Event publishing disabled, dropping {event_type}")
            return False

        if not self.connection or self.connection.is_closed:
            if not self.connect(max_retries=1):
                logger.warning(f"Failed to publish {event_type} event - no connection")
                return False

        try:
            message = {
                'event_type': event_type,
                'data': data,
                'timestamp': time.time(),
            }

            self.channel.basic_publish(
                exchange=self.exchange,
                routing_key=event_type,
                body=json.dumps(message, default=str),
                properties=pika.BasicProperties(
                    delivery_mode=2,  # Persistent
                    content_type='application/json'
                )
            )

            logger.info(f"Published {event_type} event to RabbitMQ")
            return True

        except (pika.exceptions.AMQPError, TypeError, ValueError) as e:
            logger.error(f"Error publishing {event_type} event: {e}")
            return False

    def close(self):
        """Close connection"""
        try:
            if self.connection and not self.connection.is_closed:
                self.connection.close()
                logger.info("RabbitMQ connection closed")
        except pika.exceptions.AMQPError as e:
            logger.error(f"Error closing connection: {e}")
        finally:
            self.connection = None
            self.channel = None


def build_publisher(settings=None) -> EventPublisher:
    settings = settings or get_settings()
    return EventPublisher(
        url=settings.rabbitmq_url,
        exchange=settings.rabbitmq_exchange,
        enabled=settings.rabbitmq_enabled,
    )


# Global publisher instance
event_publisher = build_publisher()
