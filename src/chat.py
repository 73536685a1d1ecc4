"""Interactive terminal chat for the Kundli flow.

Type "meri kundli banao" or "create my birth chart" to start, or
"horoscope <sign>" for today's horoscope.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from ephemeris import SwissEphemeris
from errors import KundliError
from horoscope import daily_horoscope
from kundli_flow import KundliFlowManager
from models import Language
from store import InMemorySessionStore, RedisSessionStore, SessionStore

load_dotenv(".env.local")

logger = logging.getLogger("chat")

USER_ID = "terminal"


def build_store() -> SessionStore:
    kind = os.getenv("KUNDLI_SESSION_STORE", "memory").strip().lower()
    if kind == "redis":
        return RedisSessionStore()
    if kind != "memory":
        logger.warning(f"Unknown KUNDLI_SESSION_STORE={kind!r}, using memory")
    return InMemorySessionStore()


def _parse_language(value: str | None) -> Language | None:
    if not value:
        return None
    try:
        return Language(value.strip().lower())
    except ValueError:
        logger.warning(f"Ignoring unknown language {value!r}")
        return None


async def run(language: Language | None = None) -> None:
    ephemeris = SwissEphemeris()
    store = build_store()
    manager = KundliFlowManager(ephemeris, store=store)
    loop = asyncio.get_running_loop()

    print("Kundli chat. Ctrl-D to quit.")
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            message = line.strip()
            if not message:
                continue

            if message.lower().startswith("horoscope "):
                sign = message.split(maxsplit=1)[1]
                try:
                    horoscope = await asyncio.to_thread(daily_horoscope, sign, ephemeris)
                except (ValueError, KundliError) as e:
                    print(f"! {e}")
                    continue
                color, _hex = horoscope.lucky_color
                print(
                    f"{horoscope.sign.english} ({horoscope.sign.hindi}), {horoscope.date}\n"
                    f"{horoscope.prediction}\n"
                    f"Lucky number: {horoscope.lucky_number}, lucky color: {color}"
                )
                continue

            result = await manager.process(USER_ID, message, language)
            if result.is_kundli_flow:
                print(result.direct_response)
            else:
                print("(not a Kundli message)")
    finally:
        await store.close()


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    language = _parse_language(sys.argv[1] if len(sys.argv) > 1 else os.getenv("KUNDLI_LANGUAGE"))
    try:
        asyncio.run(run(language))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
