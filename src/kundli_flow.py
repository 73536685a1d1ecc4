"""Step-by-step conversational acquisition of birth details.

A user triggers the flow ("meri kundli banao", "create my birth chart"),
is asked for name, date, time and place one message at a time, and gets a
localized Kundli report back as soon as the place resolves.
"""

import asyncio
import contextlib
import logging
import os
import re
import time
from collections import Counter
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime

from astrology import compute_kundli, kundli_to_dict
from birth_parser import detect_language, extract_date, extract_place, extract_time
from ephemeris import Ephemeris
from errors import ComputationFailure, PlaceNotFound
from geocoding import is_cached, resolve_place
from messages import flow_text, format_kundli_report
from models import (
    BirthDetails,
    FlowResult,
    GeoResolution,
    KundliSession,
    KundliStep,
    Language,
)
from store import SESSION_TIMEOUT_SECONDS, InMemorySessionStore, SessionStore

logger = logging.getLogger("kundli_flow")

KUNDLI_TRIGGERS = [
    re.compile(r"\b(meri|mera|apni|apna)\s*(kundli|kundali|janampatri|patrika)\b", re.I),
    re.compile(r"\b(kundli|kundali|janampatri)\s*(banao|banana|chahiye|bana\s*do)\b", re.I),
    re.compile(r"\b(create|make|generate|show)\s*(my\s*)?(kundli|birth\s*chart)\b", re.I),
    re.compile(r"^kundli$", re.I),
    re.compile(r"^birth\s*chart$", re.I),
    re.compile(r"\bmy\s*kundli\b", re.I),
]

# Romanized Hindi words that mark an otherwise Latin-script trigger as Hinglish
HINGLISH_HINT_RE = re.compile(
    r"\b(meri|mera|apni|apna|banao|banana|bana\s*do|chahiye|janampatri|patrika)\b", re.I
)

MIN_NAME_LENGTH = 2
MIN_PLACE_LENGTH = 2


def is_kundli_trigger(message: str) -> bool:
    text = message.strip()
    return any(pattern.search(text) for pattern in KUNDLI_TRIGGERS)


def session_language(message: str) -> Language:
    """Reply language for a session started by ``message``."""
    detected = detect_language(message)
    if detected == Language.ENGLISH and HINGLISH_HINT_RE.search(message):
        return Language.HINGLISH
    return detected


def _reply(session: KundliSession | None, text: str) -> FlowResult:
    return FlowResult(
        is_kundli_flow=True, skip_llm=True, direct_response=text, session=session
    )


class KundliFlowManager:
    """Drives one Kundli acquisition session per user.

    Args:
        ephemeris: Oracle used to compute the finished chart.
        store: Session storage (defaults to an in-process dict).
        geocoder: Async place resolver (defaults to ``geocoding.resolve_place``).
        clock: Returns the current Unix time; also the "now" of the chart.
        session_timeout: Seconds after ``started_at`` at which a session expires.
        generate_timeout: Seconds allowed for chart computation.
    """

    def __init__(
        self,
        ephemeris: Ephemeris,
        store: SessionStore | None = None,
        geocoder: Callable[[str], Awaitable[GeoResolution]] = resolve_place,
        clock: Callable[[], float] = time.time,
        session_timeout: float = SESSION_TIMEOUT_SECONDS,
        generate_timeout: float | None = None,
    ):
        self._ephemeris = ephemeris
        self._store = store if store is not None else InMemorySessionStore()
        self._geocoder = geocoder
        self._clock = clock
        self._session_timeout = session_timeout
        if generate_timeout is None:
            generate_timeout = float(os.getenv("KUNDLI_GENERATE_TIMEOUT_SECONDS", "30.0"))
        self._generate_timeout = generate_timeout
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_holders: Counter[str] = Counter()
        self._handlers = {
            KundliStep.ASK_NAME: self._handle_name,
            KundliStep.ASK_DATE: self._handle_date,
            KundliStep.ASK_TIME: self._handle_time,
            KundliStep.ASK_PLACE: self._handle_place,
        }

    async def process(
        self, user_id: str, message: str, language: Language | None = None
    ) -> FlowResult:
        """Handle one user message.

        Args:
            user_id: Conversation owner; one session is kept per id.
            message: The raw user message.
            language: Reply language chosen by the host, if any. Overrides the
                session's language from this message on.

        Returns:
            A result with ``is_kundli_flow=False`` when the message is not part
            of a Kundli conversation, otherwise the direct reply to send.
        """
        async with self._user_lock(user_id):
            triggered = is_kundli_trigger(message)

            if triggered:
                # A fresh trigger always restarts from scratch
                await self._store.delete(user_id)
                session = None
            else:
                session = await self._active_session(user_id)

            if session is None:
                if not triggered:
                    return FlowResult(is_kundli_flow=False)
                return await self._start(user_id, message, language)

            if language is not None and language != session.language:
                session = replace(session, language=language)
                await self._store.set(user_id, session)

            handler = self._handlers.get(session.step)
            if handler is None:
                logger.warning(f"Dropping session for {user_id} stuck in {session.step.value}")
                await self._store.delete(user_id)
                return FlowResult(is_kundli_flow=False)

            logger.info(f"Kundli step {session.step.value} for {user_id} ({session.language.value})")
            return await handler(user_id, message, session)

    @contextlib.asynccontextmanager
    async def _user_lock(self, user_id: str):
        """Serialize turns for one user. The lock is dropped once nobody holds or awaits it."""
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_holders[user_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[user_id] -= 1
            if not self._lock_holders[user_id]:
                del self._lock_holders[user_id]
                del self._locks[user_id]

    async def has_active_session(self, user_id: str) -> bool:
        return await self._active_session(user_id) is not None

    async def clear_session(self, user_id: str) -> None:
        await self._store.delete(user_id)

    async def sweep_expired(self) -> int:
        """Eagerly delete every expired session. Returns how many were removed."""
        return await self._store.sweep(self._session_timeout, self._clock())

    async def _active_session(self, user_id: str) -> KundliSession | None:
        session = await self._store.get(user_id)
        if session is None:
            return None
        if self._clock() - session.started_at > self._session_timeout:
            logger.info(f"Kundli session for {user_id} expired")
            await self._store.delete(user_id)
            return None
        return session

    async def _start(
        self, user_id: str, message: str, language: Language | None
    ) -> FlowResult:
        language = language or session_language(message)
        session = KundliSession(
            step=KundliStep.ASK_NAME, language=language, started_at=self._clock()
        )
        await self._store.set(user_id, session)
        logger.info(f"New Kundli session for {user_id} ({language.value})")
        return _reply(session, flow_text(language, "ask_name"))

    async def _handle_name(
        self, user_id: str, message: str, session: KundliSession
    ) -> FlowResult:
        name = message.strip()
        if len(name) < MIN_NAME_LENGTH:
            return _reply(session, flow_text(session.language, "short_name"))

        session = replace(session, name=name, step=KundliStep.ASK_DATE)
        await self._store.set(user_id, session)
        return _reply(session, flow_text(session.language, "ask_date", name=name))

    async def _handle_date(
        self, user_id: str, message: str, session: KundliSession
    ) -> FlowResult:
        birth_date = extract_date(message)
        if not birth_date:
            return _reply(session, flow_text(session.language, "error_date"))

        session = replace(session, date=birth_date, step=KundliStep.ASK_TIME)
        await self._store.set(user_id, session)
        logger.info(f"Birth date for {user_id}: {birth_date}")
        return _reply(
            session, flow_text(session.language, "ask_time", name=session.name or "Friend")
        )

    async def _handle_time(
        self, user_id: str, message: str, session: KundliSession
    ) -> FlowResult:
        birth_time = extract_time(message)
        if not birth_time:
            return _reply(session, flow_text(session.language, "error_time"))

        session = replace(session, time=birth_time, step=KundliStep.ASK_PLACE)
        await self._store.set(user_id, session)
        logger.info(f"Birth time for {user_id}: {birth_time}")
        return _reply(
            session, flow_text(session.language, "ask_place", name=session.name or "Friend")
        )

    async def _handle_place(
        self, user_id: str, message: str, session: KundliSession
    ) -> FlowResult:
        raw = message.strip()
        if len(raw) < MIN_PLACE_LENGTH:
            return _reply(session, flow_text(session.language, "error_place"))

        # "Ferozepur, Punjab" is looked up as typed
        place = raw if is_cached(raw) else (extract_place(raw) or raw)
        try:
            geo = await self._geocoder(place)
        except PlaceNotFound:
            logger.info(f"Place not found for {user_id}: {place}")
            return _reply(session, flow_text(session.language, "error_place"))

        session = replace(session, place=geo.label, step=KundliStep.GENERATE)
        await self._store.set(user_id, session)

        try:
            return await self._generate(session, geo)
        except ComputationFailure as e:
            logger.exception(f"Kundli generation failed for {user_id}: {e}")
            return _reply(None, flow_text(session.language, "error_generic"))
        finally:
            await self._store.delete(user_id)

    async def _generate(self, session: KundliSession, geo: GeoResolution) -> FlowResult:
        try:
            birth = BirthDetails(
                date=datetime.strptime(session.date, "%Y-%m-%d").date(),
                time=datetime.strptime(session.time, "%H:%M").time(),
                latitude=geo.latitude,
                longitude=geo.longitude,
                timezone_offset=geo.timezone_offset,
            )
            now = datetime.fromtimestamp(self._clock())
            result = await asyncio.wait_for(
                asyncio.to_thread(compute_kundli, birth, self._ephemeris, now),
                timeout=self._generate_timeout,
            )
            data = kundli_to_dict(result)
            data["birthDetails"].update(
                {
                    "name": session.name,
                    "date": session.date,
                    "time": session.time,
                    "place": session.place,
                }
            )
            report = format_kundli_report(
                session.name or "Friend", result, session.language, data
            )
        except asyncio.TimeoutError as e:
            raise ComputationFailure(
                f"timed out after {self._generate_timeout:g}s"
            ) from e
        except Exception as e:
            raise ComputationFailure(str(e)) from e

        logger.info(f"Kundli generated for {session.name} ({session.place})")

        return FlowResult(
            is_kundli_flow=True,
            skip_llm=True,
            direct_response=report,
            session=None,
            kundli=result,
            kundli_data=data,
        )
