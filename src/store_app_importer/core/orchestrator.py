"""
Import Orchestrator — runs every application through the import pipeline.

Per application: manifest -> icon -> descriptor -> create -> assign. A stage
failure ends that application's import in the matching failed state; the
batch always moves on to the next application.
"""

import asyncio
import logging

import httpx

from store_app_importer.clients.graph import GraphClient
from store_app_importer.clients.store import IconResolver, ManifestResolver
from store_app_importer.core.assignments import AssignmentConfigurator
from store_app_importer.core.auth import AccessToken, BackendContext
from store_app_importer.core.builder import build_app_descriptor
from store_app_importer.core.errors import ImporterError
from store_app_importer.core.events import EventSink, ImportEvent, LoggingEventSink
from store_app_importer.core.importer import DEFAULT_SETTLE_DELAY, AppImporter
from store_app_importer.models.descriptor import AppDescriptor
from store_app_importer.models.result import ImportResult, ImportStage, ImportState

logger = logging.getLogger("ImportOrchestrator")


class StageFailed(Exception):
    """Internal signal that a stage recorded a failure on the result."""


class ImportOrchestrator:
    """
    Sequences the import stages for a batch of applications.

    Results are returned one per input application, in input order. With
    ``concurrency`` above 1 several applications run at once, each still
    isolated from the others' failures.
    """

    def __init__(
        self,
        manifests: ManifestResolver,
        icons: IconResolver,
        importer: AppImporter,
        configurator: AssignmentConfigurator,
        sink: EventSink | None = None,
        token: AccessToken | None = None,
        concurrency: int = 1,
    ):
        self.manifests = manifests
        self.icons = icons
        self.importer = importer
        self.configurator = configurator
        self.sink = sink or LoggingEventSink()
        self.token = token
        self.concurrency = max(1, concurrency)

    @classmethod
    def create(
        cls,
        client: httpx.AsyncClient,
        context: BackendContext,
        sink: EventSink | None = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        poll: bool = False,
        concurrency: int = 1,
    ) -> "ImportOrchestrator":
        """Wire the default store resolvers and backend stages onto one HTTP client."""
        sink = sink or LoggingEventSink()
        graph = GraphClient(client, context)
        importer = AppImporter(graph, settle_delay=settle_delay, poll=poll)
        return cls(
            manifests=ManifestResolver(client),
            icons=IconResolver(client),
            importer=importer,
            configurator=AssignmentConfigurator(graph, sink),
            sink=sink,
            token=context.token,
            concurrency=concurrency,
        )

    # ──────────────────────────────────────────────
    # Batch
    # ──────────────────────────────────────────────

    async def run(self, descriptors: list[AppDescriptor]) -> list[ImportResult]:
        """Import every application and return their results in input order."""
        logger.info(f"Starting import of {len(descriptors)} application(s).")
        sem = asyncio.Semaphore(self.concurrency)

        async def import_single(descriptor):
            async with sem:
                return await self.import_one(descriptor)

        results = await asyncio.gather(*(import_single(d) for d in descriptors))

        failed = sum(1 for r in results if not r.succeeded)
        logger.info(f"Import complete: {len(results) - failed} succeeded, {failed} failed.")
        return list(results)

    # ──────────────────────────────────────────────
    # Single application
    # ──────────────────────────────────────────────

    async def import_one(self, descriptor: AppDescriptor) -> ImportResult:
        """Run one application's state machine to a terminal state."""
        package_id = descriptor.package_identifier
        result = ImportResult(package_identifier=package_id)

        if self.token is not None and self.token.is_expired(skew=0):
            self._emit("token.expired", package_id, "Backend token has expired", logging.WARNING)

        try:
            manifest = await self._stage(result, ImportStage.MANIFEST, self.manifests.resolve(package_id))
            result.state = ImportState.METADATA_RESOLVED
            self._emit("manifest.resolved", package_id, f"{manifest.package_name} {manifest.latest_version}")

            icon = await self._stage(result, ImportStage.ICON, self.icons.resolve(package_id))
            result.state = ImportState.ICON_RESOLVED
            self._emit("icon.resolved", package_id, icon.source_url)

            app = await self._stage(result, ImportStage.BUILD, self._build(descriptor, manifest, icon))
            result.state = ImportState.DESCRIPTOR_BUILT

            app_id = await self._stage(result, ImportStage.CREATE, self.importer.create(app))
            result.application_id = app_id
            result.state = ImportState.BACKEND_CREATED
            self._emit("app.created", package_id, app_id, data={"applicationId": app_id})

            outcome = await self._stage(
                result,
                ImportStage.ASSIGN,
                self.configurator.assign(app_id, descriptor.assignments, package_id),
            )
        except StageFailed:
            self._emit(
                "import.failed",
                package_id,
                f"{result.stage.value}: {result.error_kind}: {result.message}",
                logging.ERROR,
                data=result.to_dict(),
            )
            return result

        result.assignments_submitted = outcome.submitted
        result.assignments_dropped = outcome.dropped
        result.state = ImportState.ASSIGNED
        self._emit(
            "import.completed",
            package_id,
            f"{app_id} with {outcome.submitted} assignment(s)",
            data=result.to_dict(),
        )
        return result

    async def _stage(self, result: ImportResult, stage: ImportStage, coro):
        """Await a stage, recording any importer error against it."""
        try:
            return await coro
        except ImporterError as e:
            result.fail(stage, e.kind, e.message)
            raise StageFailed() from e

    async def _build(self, descriptor, manifest, icon):
        return build_app_descriptor(descriptor, manifest, icon)

    def _emit(self, kind, package_id, message, level=logging.INFO, data=None):
        self.sink.emit(
            ImportEvent(kind=kind, package_identifier=package_id, message=message, level=level, data=data or {})
        )
