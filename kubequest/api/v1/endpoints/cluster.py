# kubequest/api/v1/endpoints/cluster.py
import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from kubequest.models.cluster import ClockAdvanceRequest, ClusterSnapshot, RecoveryHistoryResponse
from kubequest.services.cluster_service import ClusterService, get_cluster_service

logger = logging.getLogger(__name__)
router = APIRouter()

# Handlers stay async: commands and recovery timers share the event loop thread.


@router.get("", response_model=ClusterSnapshot, summary="Current cluster snapshot")
async def read_cluster(service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    return service.snapshot()


@router.post("/nodes", response_model=ClusterSnapshot, status_code=status.HTTP_201_CREATED, summary="Launch a new node")
async def add_node(service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    service.add_node()
    return service.snapshot()


@router.delete("/nodes/{node_id}", response_model=ClusterSnapshot, summary="Remove a node and discard its pods")
async def remove_node(node_id: str, service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    # Unknown ids are a no-op so removal stays idempotent under races with recovery
    service.remove_node(node_id)
    return service.snapshot()


@router.post(
    "/pods",
    response_model=ClusterSnapshot,
    status_code=status.HTTP_201_CREATED,
    summary="Deploy a new pod",
    description="Places a pod on the first Ready node with a free slot. Returns 409 when the cluster is full.",
)
async def add_pod(service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    # ClusterFullError is mapped to 409 by the application exception handler
    service.add_pod()
    return service.snapshot()


@router.post(
    "/nodes/{node_id}/crash",
    response_model=ClusterSnapshot,
    summary="Crash a node",
    description="Marks the node NotReady right away; its pods are rescheduled after the recovery delay.",
)
async def crash_node(node_id: str, service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    service.crash_node(node_id)
    return service.snapshot()


@router.post("/reset", response_model=ClusterSnapshot, summary="Reset to the initial fleet")
async def reset_cluster(service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    return service.bootstrap()


@router.get("/recoveries", response_model=RecoveryHistoryResponse, summary="Self-healing history")
async def read_recoveries(service: ClusterService = Depends(get_cluster_service)) -> RecoveryHistoryResponse:
    return RecoveryHistoryResponse(
        reports=list(service.recovery_history),
        dropped_pod_total=service.dropped_pod_total,
    )


@router.post("/clock/advance", response_model=ClusterSnapshot, summary="Advance the virtual clock")
async def advance_clock(req: ClockAdvanceRequest, service: ClusterService = Depends(get_cluster_service)) -> ClusterSnapshot:
    if getattr(service.clock, "mode", None) != "virtual":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The simulator runs on a realtime clock; set CLOCK_MODE=virtual to step time manually.",
        )
    fired = service.advance_clock(req.ms)
    logger.info(f"Virtual clock advanced by {req.ms} ms, {fired} task(s) fired.")
    return service.snapshot()


@router.websocket("/stream")
async def stream_snapshots(websocket: WebSocket, service: ClusterService = Depends(get_cluster_service)):
    """
    Sends the current snapshot, then one snapshot per mutation.
    The client's receive side is watched alongside the queue so a closed
    connection unsubscribes right away instead of on the next mutation.
    """
    await websocket.accept()
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = service.notifier.subscribe(queue.put_nowait)
    logger.info(f"Snapshot subscriber connected ({service.notifier.subscriber_count} active).")
    receiver = asyncio.ensure_future(websocket.receive())
    getter = None
    try:
        await websocket.send_json(service.snapshot().model_dump(mode="json"))
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)
            if receiver in done:
                if receiver.result()["type"] == "websocket.disconnect":
                    break
                # Inbound frames carry no commands
                receiver = asyncio.ensure_future(websocket.receive())
            if getter in done:
                await websocket.send_json(getter.result().model_dump(mode="json"))
            else:
                getter.cancel()
    except WebSocketDisconnect:
        pass
    finally:
        for task in (receiver, getter):
            if task is not None and not task.done():
                task.cancel()
        unsubscribe()
        logger.info(f"Snapshot subscriber disconnected ({service.notifier.subscriber_count} active).")
