from telegram import Bot
from app.core.config import settings
from app.config.constants import MAX_TELEGRAM_MESSAGE_LENGTH
import logging

logger = logging.getLogger(__name__)

def format_notification_text(title: str, body: str = None) -> str:
    text = f"🐾 {title}"
    if body:
        text += f"\n\n{body}"
    return text[:MAX_TELEGRAM_MESSAGE_LENGTH]

async def send_telegram_message(telegram_id: int, text: str, silent: bool = False) -> bool:
    """
    Push a fired notification to the user's Telegram chat.
    Useful for background tasks/workers.
    """
    if not settings.TELEGRAM_BOT_TOKEN:
        logger.error("TELEGRAM_BOT_TOKEN is not set.")
        return False

    bot = Bot(token=settings.TELEGRAM_BOT_TOKEN)
    try:
        await bot.send_message(chat_id=telegram_id, text=text, disable_notification=silent)
        logger.info(f"Sent notification to {telegram_id}: {text[:20]}...")
        return True
    except Exception:
        logger.exception(f"Failed to send notification to {telegram_id}")
        return False
