# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-27
# Updated: 2026-02-25
# Description: MemberChatService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from providers.GenerativeBackend import ChatTurn, GenerativeBackend
from providers.ProviderRegistry import NOT_CONFIGURED_MESSAGE, ProviderRegistry
from records.MemberRepository import MemberRepository
from records.MemberText import format_member_context
from services.MemberSearchService import MemberSearchService
from utility.errors import ProviderUnavailable, ValidationError, user_message_for
from utility.logging_utils import get_class_logger
from utility.sse import ChatEvent
import settings

HistoryItem = Union[ChatTurn, Mapping[str, Any]]

SYSTEM_PROMPT_TEMPLATE = (
    "You are the assistant for {directory_name}. You help members find and connect "
    "with other members.\n\n"
    "You have access to a directory of {total_count} members. Based on the user's "
    "question, here are the most relevant members from the directory:\n\n"
    "{context}\n\n"
    "Guidelines:\n"
    "- Be helpful and warm in tone\n"
    "- Answer questions about who is in what industry, location, or graduation year\n"
    "- If asked to find members matching certain criteria, list the relevant matches from the search results\n"
    "- Include contact info (email, phone) when listing members so they can connect\n"
    "- If the search results don't contain a good match, say so honestly\n"
    "- Never make up information about members that isn't in the data\n"
    "- Keep responses concise but informative"
)


class _SetupFailed(Exception):
    def __init__(self, errors: List[BaseException]) -> None:
        super().__init__("; ".join(str(e) for e in errors))
        self.errors = errors


def normalize_history(history: Optional[Iterable[HistoryItem]], window: int = settings.CHAT_HISTORY_WINDOW) -> List[ChatTurn]:
    """
    Keep user/assistant turns with content, most recent `window` only.
    """
    turns: List[ChatTurn] = []
    for item in history or []:
        if isinstance(item, ChatTurn):
            role, content = item.role, item.content
        else:
            role, content = item.get("role"), item.get("content")
        if role not in ("user", "assistant") or not isinstance(content, str) or not content:
            continue
        turns.append(ChatTurn(role=role, content=content))
    return turns[-window:] if window > 0 else []


class MemberChatService:
    """
    Chat Service:
        - retrieves relevant members using MemberSearchService
        - builds a system prompt with the member context block
        - streams the answer from the primary backend, falling back to the
          next configured backend only if the stream fails before its first token
        - always ends the stream with a done event
    """

    def __init__(
        self,
        *,
        search_service: MemberSearchService,
        repository: MemberRepository,
        providers: ProviderRegistry,
        directory_name: str = settings.DIRECTORY_NAME,
        history_window: int = settings.CHAT_HISTORY_WINDOW,
        logger: logging.Logger | None = None,
    ) -> None:
        self.search_service = search_service
        self.repository = repository
        self.providers = providers
        self.directory_name = directory_name
        self.history_window = history_window
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info(
            "MemberChatService initialised (search_service=%s history_window=%d)",
            type(self.search_service).__name__,
            self.history_window,
        )

    def open_stream(self, message: Optional[str], history: Optional[Iterable[HistoryItem]] = None) -> Iterator[ChatEvent]:
        """
        Validate the request and resolve backends eagerly, so ValidationError
        and ProviderUnavailable surface before any streaming starts. The
        returned iterator performs retrieval, grounding and streaming lazily.
        """
        q = (message or "").strip() if isinstance(message, str) else ""
        if not q:
            raise ValidationError("Message is required")

        backends = self.providers.available()
        if not backends:
            raise ProviderUnavailable(NOT_CONFIGURED_MESSAGE)

        turns = normalize_history(history, self.history_window)
        self.logger.info(
            "chat: message='%s' history_turns=%d backends=%s (start)",
            q[:120],
            len(turns),
            [b.name for b in backends],
        )
        return self._run(q, turns, backends)

    def chat(self, message: Optional[str], history: Optional[Iterable[HistoryItem]] = None) -> str:
        """Non-streaming convenience: the whole answer as one string."""
        return "".join(e.text for e in self.open_stream(message, history) if not e.is_done)

    def build_system_prompt(self, message: str) -> str:
        results = self.search_service.search(message)
        self.logger.info("chat: retrieved members=%d", len(results))

        try:
            total_count = self.repository.count()
        except Exception as e:
            self.logger.warning("chat: member count failed (non-fatal): %s", e)
            total_count = 0

        context = format_member_context(results)
        self.logger.debug("chat: context_chars=%d", len(context))
        return SYSTEM_PROMPT_TEMPLATE.format(
            directory_name=self.directory_name,
            total_count=total_count,
            context=context,
        )

    def _run(self, message: str, history: Sequence[ChatTurn], backends: Sequence[GenerativeBackend]) -> Iterator[ChatEvent]:
        stream: Optional[Iterator[str]] = None
        emitted = 0
        try:
            try:
                system_prompt = self.build_system_prompt(message)
                stream, first = self._open_first(backends, system_prompt, history, message)
            except _SetupFailed as e:
                self.logger.error("chat: all backends failed before streaming: %s", e)
                yield ChatEvent.delta(user_message_for(e.errors[-1]))
                yield ChatEvent.done()
                return
            except Exception as e:
                self.logger.error("chat: failed before streaming: %s", e, exc_info=True)
                yield ChatEvent.delta(user_message_for(e))
                yield ChatEvent.done()
                return

            if first:
                emitted += len(first)
                yield ChatEvent.delta(first)

            # No provider switch once output has started
            try:
                for text in stream:
                    if text:
                        emitted += len(text)
                        yield ChatEvent.delta(text)
            except Exception as e:
                self.logger.error("chat: stream error after %d chars: %s", emitted, e)
                yield ChatEvent.delta(f"\n\n{user_message_for(e)}")
            else:
                self.logger.info("chat: answer_chars=%d (done)", emitted)

            yield ChatEvent.done()
        finally:
            # Runs on normal completion and when the consumer abandons the stream
            if stream is not None:
                close = getattr(stream, "close", None)
                if callable(close):
                    close()

    def _open_first(
        self,
        backends: Sequence[GenerativeBackend],
        system_prompt: str,
        history: Sequence[ChatTurn],
        message: str,
    ):
        """
        Open the first backend that produces a first delta (or finishes cleanly).
        Returns (stream, first_text). Raises _SetupFailed when every backend fails.
        """
        errors: List[BaseException] = []
        for backend in backends:
            stream = None
            try:
                stream = iter(backend.stream_chat(system_prompt, history, message))
                first = next(stream, "")
                if errors:
                    self.logger.info("chat: fell back to backend '%s'", backend.name)
                return stream, first
            except Exception as e:
                self.logger.warning("chat: backend '%s' failed to start: %s", backend.name, e)
                errors.append(e)
                close = getattr(stream, "close", None)
                if callable(close):
                    close()
        raise _SetupFailed(errors)
