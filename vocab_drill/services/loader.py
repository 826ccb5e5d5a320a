import logging
from typing import Any, Awaitable, Callable, Iterable, Mapping

from vocab_drill.models.entry import VocabEntry
from vocab_drill.models.session import ImportReport, LoadResult
from vocab_drill.services.session import DrillSession

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[Iterable[Mapping[str, Any] | VocabEntry]]]


class EntryLoader:
    """
    Runs remote loads for a session and applies only the newest one.

    Each call to ``load`` takes a new generation number; a result whose
    generation is no longer current when it lands is discarded. A failed
    fetch leaves the session untouched.

    Direct imports go through ``apply`` so they also supersede any load
    still in flight.
    """

    def __init__(self, session: DrillSession) -> None:
        self.session = session
        self.generation = 0
        self._in_flight = 0

    async def load(self, fetch: Fetch, source: str = "remote") -> LoadResult:
        self.generation += 1
        generation = self.generation
        self._in_flight += 1
        self.session.loading = True
        try:
            records = await fetch()
        except Exception as exc:
            if generation != self.generation:
                logger.info("Ignoring failure of superseded load #%d from %s", generation, source)
                return LoadResult(status="superseded")
            logger.warning("Load #%d from %s failed: %s", generation, source, exc)
            return LoadResult(status="failed", detail=str(exc) or exc.__class__.__name__)
        finally:
            self._in_flight -= 1
            self.session.loading = self._in_flight > 0

        if generation != self.generation:
            logger.info("Discarding superseded load #%d from %s", generation, source)
            return LoadResult(status="superseded")

        report = self.session.import_entries(records)
        return LoadResult(status=report.status, report=report)

    def apply(self, records: Iterable[Mapping[str, Any] | VocabEntry], source: str = "upload") -> ImportReport:
        self.generation += 1
        if self._in_flight:
            logger.info("Import from %s supersedes %d pending load(s)", source, self._in_flight)
        return self.session.import_entries(records)
