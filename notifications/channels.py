# notifications/channels.py
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


def send_telegram_message(chat_id: str, message: str) -> bool:
    """Send a plain-text Telegram message through the configured bot.

    Returns True when Telegram accepted the message. No parse_mode is set, so
    user-supplied text cannot break entity parsing.
    """
    token = settings.TELEGRAM_BOT_TOKEN
    if not token:
        logger.warning("TELEGRAM_BOT_TOKEN is not configured; message not sent to %s", chat_id)
        return False

    try:
        response = requests.post(
            TELEGRAM_API_URL.format(token=token),
            json={"chat_id": chat_id, "text": message},
            timeout=settings.TELEGRAM_TIMEOUT,
        )
    except requests.exceptions.RequestException:
        logger.exception("Network error while sending Telegram message to %s", chat_id)
        return False

    if response.status_code != 200:
        logger.error(
            "Failed to send Telegram message to %s. Status: %s, Response: %s",
            chat_id, response.status_code, response.text,
        )
        return False

    logger.debug("[TELEGRAM] Message sent to %s", chat_id)
    return True
