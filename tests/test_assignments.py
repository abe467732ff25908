"""Tests for assignment dispatch and batch submission."""

import json

import httpx
import pytest

from store_app_importer.clients.graph import GraphClient
from store_app_importer.core.assignments import (
    AssignmentConfigurator,
    resolve_target,
    to_backend_assignment,
)
from store_app_importer.core.auth import AccessToken, BackendContext
from store_app_importer.core.errors import AssignmentRejected
from store_app_importer.models.backend import (
    AllDevicesTarget,
    AllLicensedUsersTarget,
    GroupTarget,
    UnrecognizedTarget,
)
from store_app_importer.models.descriptor import AssignmentIntent

CONTEXT = BackendContext(token=AccessToken(value="t", expires_at=4102444800.0))


def intent(target_type, intent="required", group_id=None):
    data = {"targetType": target_type, "intent": intent}
    if group_id:
        data["groupId"] = group_id
    return AssignmentIntent.from_dict(data)


# ═══════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════


class TestDispatch:
    def test_group(self):
        assert resolve_target(intent("group", group_id="G1")) == GroupTarget(group_id="G1")

    def test_all_devices(self):
        assert resolve_target(intent("allDevices")) == AllDevicesTarget()

    def test_all_licensed_users(self):
        assert resolve_target(intent("allLicensedUsers")) == AllLicensedUsersTarget()

    @pytest.mark.parametrize("raw", ["other", "exclusionGroup", "", "ALLDEVICES"])
    def test_unrecognized_produces_nothing(self, raw):
        i = intent(raw)
        assert isinstance(resolve_target(i), UnrecognizedTarget)
        assert to_backend_assignment(i) is None

    def test_intent_carried(self):
        record = to_backend_assignment(intent("allDevices", intent="uninstall"))
        assert record.intent == "uninstall"


# ═══════════════════════════════════════════
# Submission
# ═══════════════════════════════════════════


class TestAssignmentConfigurator:
    @pytest.mark.asyncio
    async def test_single_batch_call(self, sink):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(204)

        intents = [
            intent("group", group_id="G1"),
            intent("allDevices", intent="available"),
            intent("allLicensedUsers", intent="available"),
        ]
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            outcome = await AssignmentConfigurator(GraphClient(client, CONTEXT), sink).assign("app-1", intents)

        assert outcome.submitted == 3
        assert outcome.dropped == 0
        assert len(requests) == 1
        assert requests[0].url.path.endswith("/deviceAppManagement/mobileApps/app-1/assign")
        body = json.loads(requests[0].content)
        assert [a["target"]["@odata.type"] for a in body["mobileAppAssignments"]] == [
            "#microsoft.graph.groupAssignmentTarget",
            "#microsoft.graph.allDevicesAssignmentTarget",
            "#microsoft.graph.allLicensedUsersAssignmentTarget",
        ]

    @pytest.mark.asyncio
    async def test_unrecognized_dropped_with_diagnostic(self, sink):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(204)

        intents = [intent("exclusionGroup"), intent("allDevices")]
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            outcome = await AssignmentConfigurator(GraphClient(client, CONTEXT), sink).assign(
                "app-1", intents, "Publisher.App"
            )

        assert outcome.submitted == 1
        assert outcome.dropped == 1
        assert len(json.loads(requests[0].content)["mobileAppAssignments"]) == 1
        assert sink.kinds() == ["assignment.dropped"]
        assert sink.events[0].package_identifier == "Publisher.App"

    @pytest.mark.asyncio
    async def test_nothing_to_submit_makes_no_call(self, sink):
        def handler(request):
            raise AssertionError("no request expected")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            outcome = await AssignmentConfigurator(GraphClient(client, CONTEXT), sink).assign(
                "app-1", [intent("other")]
            )

        assert outcome.submitted == 0
        assert outcome.dropped == 1

    @pytest.mark.asyncio
    async def test_rejected(self, sink):
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(409, text="conflict"))) as client:
            with pytest.raises(AssignmentRejected) as exc:
                await AssignmentConfigurator(GraphClient(client, CONTEXT), sink).assign(
                    "app-1", [intent("allDevices")]
                )

        assert exc.value.status_code == 409
        assert exc.value.body == "conflict"
