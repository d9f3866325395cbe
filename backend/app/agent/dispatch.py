import logging
import threading
import uuid
from collections.abc import Callable

from fastapi import BackgroundTasks
from sqlmodel import Session

from app.agent.orchestrator import generate_character_pack
from app.core.db import engine
from app.models import CharacterPack

logger = logging.getLogger(__name__)


def _default_session_factory() -> Session:
    return Session(engine)


class PackGenerationDispatcher:
    """
    Hands a freshly created pack to the orchestrator once the HTTP response is sent.

    A pack id is claimed on submission and released when its run ends, so a pack
    cannot be queued twice while a run is pending or in flight. Once released, the
    pending -> generating status guard in the database is what keeps a finished pack
    from running again. There is no retry and no durable queue, so a crash mid-run
    leaves the pack in "generating".
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None):
        self._session_factory = session_factory or _default_session_factory
        self._claimed: set[uuid.UUID] = set()
        self._lock = threading.Lock()

    def claim(self, pack_id: uuid.UUID) -> bool:
        with self._lock:
            if pack_id in self._claimed:
                return False
            self._claimed.add(pack_id)
            return True

    def release(self, pack_id: uuid.UUID) -> None:
        with self._lock:
            self._claimed.discard(pack_id)

    def is_claimed(self, pack_id: uuid.UUID) -> bool:
        with self._lock:
            return pack_id in self._claimed

    def submit(self, background_tasks: BackgroundTasks, *, pack: CharacterPack, owner_id: str) -> bool:
        if not self.claim(pack.id):
            logger.warning("Pack %s was already dispatched; ignoring duplicate submission", pack.id)
            return False
        background_tasks.add_task(
            self.run,
            pack_id=pack.id,
            character_ids=list(pack.characters),
            pack_settings=dict(pack.settings or {}),
            owner_id=owner_id,
        )
        logger.info("Dispatched generation for pack %s", pack.id)
        return True

    async def run(
        self,
        *,
        pack_id: uuid.UUID,
        character_ids: list[str],
        pack_settings: dict,
        owner_id: str,
    ) -> None:
        # The request's session is closed by now; each run owns its own.
        try:
            with self._session_factory() as session:
                await generate_character_pack(
                    session,
                    pack_id,
                    character_ids,
                    pack_settings,
                    owner_id=owner_id,
                )
        finally:
            self.release(pack_id)


_dispatcher: PackGenerationDispatcher | None = None


def get_dispatcher() -> PackGenerationDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = PackGenerationDispatcher()
    return _dispatcher
