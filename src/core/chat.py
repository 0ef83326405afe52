# src/core/chat.py

import logging
from typing import Optional, Protocol

import requests

from chart_models import ChatReply, parse_chat_reply
from src.config import REQUEST_TIMEOUT
from src.core.errors import MalformedResponseError, describe_failure, translate_request_error
from src.core.state import Error, FetchState, Success

logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Please enter a prompt"


class ChatBackend(Protocol):
    def ask(self, prompt: str) -> ChatReply: ...


class HttpChatBackend:
    """Posts prompts to a language-model backend that answers in the chat wire format."""

    def __init__(self, url: str, session: Optional[requests.Session] = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def ask(self, prompt: str) -> ChatReply:
        logger.info("POST %s (prompt of %d chars)", self.url, len(prompt))
        try:
            response = self.session.post(self.url, json={"prompt": prompt}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise translate_request_error(e) from e
        except ValueError as e:
            raise MalformedResponseError(str(e)) from e
        return parse_chat_reply(payload)


def ask_backend(backend: ChatBackend, prompt: str) -> FetchState:
    """Sends a prompt and returns Success(reply) or Error(message)."""
    if not prompt or not prompt.strip():
        return Error(EMPTY_PROMPT_MESSAGE)
    try:
        return Success(backend.ask(prompt.strip()))
    except Exception as e:
        logger.exception("Chat request failed")
        return Error(describe_failure(e))
