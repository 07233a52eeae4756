"""
Shared fixtures: a virtual clock, a fresh cluster store and an API client wired to it.
"""
import pytest
from fastapi.testclient import TestClient

from kubequest.main import app
from kubequest.services.cluster_service import ClusterService, get_cluster_service
from kubequest.services.tutor_service import TutorService, get_tutor_service
from kubequest.simulation.clock import VirtualClock


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def service(clock):
    return ClusterService(clock, initial_node_count=2, max_pods_per_node=4, recovery_delay_ms=2000, seed=0)


@pytest.fixture
def published(service):
    """Every snapshot the store publishes from now on."""
    snapshots = []
    service.notifier.subscribe(snapshots.append)
    return snapshots


@pytest.fixture
def offline_tutor():
    return TutorService(api_key=None)


@pytest.fixture
def client(service, offline_tutor):
    app.dependency_overrides[get_cluster_service] = lambda: service
    app.dependency_overrides[get_tutor_service] = lambda: offline_tutor
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def fill(service, count):
    """Adds `count` pods and returns their ids."""
    return [service.add_pod() for _ in range(count)]
