"""
Assignment configuration.

Maps each input AssignmentIntent onto a backend assignment record and submits
all records for one application in a single call. The backend replaces the
full assignment set on every call, so records are never sent one at a time.
"""

import logging
from dataclasses import dataclass

import httpx

from store_app_importer.clients.graph import GraphClient
from store_app_importer.core.errors import AssignmentRejected
from store_app_importer.core.events import EventSink, ImportEvent
from store_app_importer.models.backend import (
    AllDevicesTarget,
    AllLicensedUsersTarget,
    BackendAssignment,
    GroupTarget,
    UnrecognizedTarget,
    assignment_set_payload,
)
from store_app_importer.models.descriptor import AssignmentIntent, TargetType

logger = logging.getLogger(__name__)


def resolve_target(
    intent: AssignmentIntent,
) -> GroupTarget | AllDevicesTarget | AllLicensedUsersTarget | UnrecognizedTarget:
    """Map a target-type discriminant onto its target variant."""
    match intent.target_type:
        case TargetType.GROUP:
            return GroupTarget(group_id=intent.group_id)
        case TargetType.ALL_DEVICES:
            return AllDevicesTarget()
        case TargetType.ALL_LICENSED_USERS:
            return AllLicensedUsersTarget()
        case TargetType.OTHER:
            return UnrecognizedTarget(raw_type=intent.raw_target_type)


def to_backend_assignment(intent: AssignmentIntent) -> BackendAssignment | None:
    """Build the backend record for an intent, None for unrecognized targets."""
    target = resolve_target(intent)
    if isinstance(target, UnrecognizedTarget):
        return None
    return BackendAssignment(intent=intent.intent.value, target=target)


@dataclass(frozen=True)
class AssignmentOutcome:
    submitted: int
    dropped: int


class AssignmentConfigurator:
    """Builds and submits the assignment set for a created application."""

    def __init__(self, graph: GraphClient, sink: EventSink):
        self.graph = graph
        self.sink = sink

    def build(self, package_identifier: str, intents) -> tuple[list[BackendAssignment], int]:
        """Translate intents, reporting every dropped one to the sink."""
        assignments = []
        dropped = 0
        for intent in intents:
            record = to_backend_assignment(intent)
            if record is None:
                dropped += 1
                self.sink.emit(
                    ImportEvent(
                        kind="assignment.dropped",
                        package_identifier=package_identifier,
                        message=f"Unrecognized target type {intent.raw_target_type!r}, not submitted",
                        level=logging.WARNING,
                        data={"targetType": intent.raw_target_type},
                    )
                )
                continue
            assignments.append(record)
        return assignments, dropped

    async def assign(
        self, app_id: str, intents, package_identifier: str = ""
    ) -> AssignmentOutcome:
        """
        Submit all recognized assignments for ``app_id`` in one call.

        Raises:
            AssignmentRejected: Non-2xx response or transport error.
        """
        assignments, dropped = self.build(package_identifier or app_id, intents)
        if not assignments:
            logger.info(f"No assignments to submit for {app_id}")
            return AssignmentOutcome(submitted=0, dropped=dropped)

        try:
            resp = await self.graph.assign_mobile_app(app_id, assignment_set_payload(assignments))
        except httpx.HTTPError as e:
            raise AssignmentRejected(f"Assign request failed ({type(e).__name__}): {e}") from e

        if not resp.is_success:
            raise AssignmentRejected(
                f"Backend rejected assignments for {app_id}",
                status_code=resp.status_code,
                body=resp.text,
            )

        logger.info(f"Assigned {app_id} to {len(assignments)} target(s)")
        return AssignmentOutcome(submitted=len(assignments), dropped=dropped)
