"""
HTTP command surface tests
"""
from fastapi.testclient import TestClient

from kubequest.core.exceptions import CLUSTER_FULL_MESSAGE
from kubequest.main import app
from kubequest.services.cluster_service import ClusterService, get_cluster_service
from kubequest.simulation.clock import AsyncioClock

API = "/api/v1"


class TestClusterEndpoints:

    def test_read_cluster(self, client):
        resp = client.get(f"{API}/cluster")
        assert resp.status_code == 200
        body = resp.json()
        assert [n["id"] for n in body["nodes"]] == ["node-1", "node-2"]
        assert body["total_pods"] == 0
        assert body["free_slots"] == 8
        assert body["ready_nodes"] == 2

    def test_add_node(self, client):
        resp = client.post(f"{API}/cluster/nodes")
        assert resp.status_code == 201
        assert resp.json()["nodes"][-1]["id"] == "node-3"

    def test_add_pods_until_full(self, client):
        for _ in range(8):
            assert client.post(f"{API}/cluster/pods").status_code == 201

        resp = client.post(f"{API}/cluster/pods")
        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "ClusterFull"
        assert body["detail"] == CLUSTER_FULL_MESSAGE
        assert body["node_count"] == 2

        nodes = client.get(f"{API}/cluster").json()["nodes"]
        assert [len(n["pods"]) for n in nodes] == [4, 4]

    def test_crash_and_heal_with_virtual_clock(self, client):
        for _ in range(3):
            client.post(f"{API}/cluster/pods")

        crashed = client.post(f"{API}/cluster/nodes/node-1/crash").json()
        node_a = crashed["nodes"][0]
        assert node_a["status"] == "NotReady"
        assert [p["status"] for p in node_a["pods"]] == ["Crashed"] * 3

        healed = client.post(f"{API}/cluster/clock/advance", json={"ms": 2000}).json()
        assert healed["nodes"][0]["pods"] == []
        assert len(healed["nodes"][1]["pods"]) == 3

        history = client.get(f"{API}/cluster/recoveries").json()
        assert history["dropped_pod_total"] == 0
        assert history["reports"][0]["node_id"] == "node-1"
        assert history["reports"][0]["overflow"] is False

    def test_remove_unknown_node_is_idempotent(self, client):
        for _ in range(2):
            resp = client.delete(f"{API}/cluster/nodes/node-404")
            assert resp.status_code == 200
            assert len(resp.json()["nodes"]) == 2

    def test_remove_node(self, client):
        resp = client.delete(f"{API}/cluster/nodes/node-1")
        assert [n["id"] for n in resp.json()["nodes"]] == ["node-2"]

    def test_reset(self, client):
        client.post(f"{API}/cluster/nodes")
        client.post(f"{API}/cluster/pods")
        body = client.post(f"{API}/cluster/reset").json()
        assert [n["id"] for n in body["nodes"]] == ["node-4", "node-5"]
        assert body["total_pods"] == 0

    def test_advance_rejects_negative(self, client):
        resp = client.post(f"{API}/cluster/clock/advance", json={"ms": -5})
        assert resp.status_code == 422

    def test_advance_refused_on_realtime_clock(self):
        realtime = ClusterService(AsyncioClock())
        app.dependency_overrides[get_cluster_service] = lambda: realtime
        try:
            with TestClient(app) as c:
                resp = c.post(f"{API}/cluster/clock/advance", json={"ms": 100})
            assert resp.status_code == 409
        finally:
            app.dependency_overrides.clear()


class TestClusterStream:

    def test_sends_current_then_each_mutation(self, client):
        with client.websocket_connect(f"{API}/cluster/stream") as ws:
            first = ws.receive_json()
            assert first["version"] == 1
            assert first["total_pods"] == 0

            client.post(f"{API}/cluster/pods")
            second = ws.receive_json()
            assert second["version"] == 2
            assert second["total_pods"] == 1

            client.post(f"{API}/cluster/nodes/node-1/crash")
            third = ws.receive_json()
            assert third["nodes"][0]["status"] == "NotReady"

    def test_inbound_frames_are_ignored(self, client):
        with client.websocket_connect(f"{API}/cluster/stream") as ws:
            ws.receive_json()
            ws.send_text("hello")
            client.post(f"{API}/cluster/nodes")
            assert ws.receive_json()["nodes"][-1]["id"] == "node-3"

    def test_disconnect_unsubscribes_without_mutation(self, client, service):
        with client.websocket_connect(f"{API}/cluster/stream") as ws:
            ws.receive_json()
            assert service.notifier.subscriber_count == 1
        assert service.notifier.subscriber_count == 0


class TestConceptEndpoints:

    def test_list_concepts(self, client):
        body = client.get(f"{API}/concepts").json()
        assert [c["id"] for c in body][:3] == ["cluster", "node", "pod"]
        assert len(body) == 8

    def test_get_concept(self, client):
        body = client.get(f"{API}/concepts/pod").json()
        assert body["analogy"] == "The Shipping Container"
        assert body["visual_action"] == "ADD_POD"

    def test_unknown_concept(self, client):
        assert client.get(f"{API}/concepts/kubelet").status_code == 404


class TestTutorEndpoint:

    def test_missing_key_is_reported_in_answer(self, client):
        resp = client.post(f"{API}/tutor/ask", json={"question": "What is a pod?", "concept_id": "pod"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["is_error"] is True
        assert "GROQ_API_KEY" in body["answer"]

    def test_empty_question_rejected(self, client):
        assert client.post(f"{API}/tutor/ask", json={"question": ""}).status_code == 422

    def test_unknown_concept_context(self, client):
        resp = client.post(f"{API}/tutor/ask", json={"question": "hi", "concept_id": "nope"})
        assert resp.status_code == 404


def test_root(client):
    assert "Welcome" in client.get("/").json()["message"]
