import logging
from typing import Optional
from sqlmodel import Session

from .clients.llm_client import LLMClient
from .errors import InvalidInput, UpstreamFailure
from .prompts import ARTICLE_CONTEXT_BLOCK, CHAT_PROMPT, CHAT_SYSTEM_PROMPT
from .storage import save_chat

logger = logging.getLogger(__name__)

def build_chat_prompt(message: str, article_context: Optional[str] = None) -> str:
    article_block = ARTICLE_CONTEXT_BLOCK.format(article_context=article_context) if article_context else ""
    system_prompt = CHAT_SYSTEM_PROMPT.format(article_block=article_block)
    return CHAT_PROMPT.format(system_prompt=system_prompt, message=message)

def chat_reply(message: Optional[str], user_id: str, article_context: Optional[str], *,
               llm: LLMClient, session: Session) -> str:
    """Answer one user message and store the exchange."""
    if not message or not message.strip():
        raise InvalidInput("Message is required")

    try:
        result = llm.call(build_chat_prompt(message, article_context), temperature=0.7, max_tokens=2048)
        response = result["response"]
        save_chat(session, user_id=user_id, user_message=message,
                  assistant_response=response, article_context=article_context or None)
    except Exception as e:
        logger.exception(f"Chat error: {e}")
        raise UpstreamFailure("Failed to process chat message") from e

    return response
