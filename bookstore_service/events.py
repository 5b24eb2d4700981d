import json
import logging

import pika
from flask import current_app

logger = logging.getLogger(__name__)


def publish(queue_setting, event_type, payload):
    """Envía un evento a RabbitMQ una vez confirmada la transacción.

    Si RABBITMQ_HOST no está configurado no se publica nada. Un fallo del
    broker se registra y no afecta a la respuesta: los datos ya están guardados.
    """
    host = current_app.config.get("RABBITMQ_HOST")
    if not host:
        return False

    queue = current_app.config[queue_setting]
    message = {"event": event_type, "data": payload}
    try:
        timeout = current_app.config["EVENTS_TIMEOUT"]
        parameters = pika.ConnectionParameters(
            host,
            connection_attempts=1,
            socket_timeout=timeout,
            stack_timeout=timeout,
            blocked_connection_timeout=timeout,
        )
        connection = pika.BlockingConnection(parameters)
        try:
            channel = connection.channel()
            channel.queue_declare(queue=queue)
            channel.basic_publish(exchange="", routing_key=queue, body=json.dumps(message))
        finally:
            connection.close()
    except pika.exceptions.AMQPError:
        logger.exception("No se pudo publicar %s en %s", event_type, queue)
        return False
    return True


def order_placed(order_id, user_id, total, lines):
    return publish("ORDER_EVENTS_QUEUE", "order_placed", {
        "id": order_id,
        "user_id": user_id,
        "total": str(total),
        "items": [
            {"book_id": line.book_id, "quantity": line.quantity, "price": str(line.price)}
            for line in lines
        ],
    })


def book_changed(event_type, book_payload):
    return publish("BOOK_EVENTS_QUEUE", event_type, book_payload)
