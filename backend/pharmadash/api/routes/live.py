"""Live views over WebSocket: push a fresh chart every time its tables change."""
import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from pharmadash.api.deps import websocket_session
from pharmadash.api.routes.analytics import distribution_chart, inventory_chart
from pharmadash.services.aggregation import DISTRIBUTION_TABLES, get_all_table_counts
from pharmadash.services.live_view import LiveView
from pharmadash.services.read_models import TOP6_INVENTORY_IDS, get_top6_inventory

logger = logging.getLogger(__name__)

router = APIRouter()

# Closed before accept: no valid session token
WS_UNAUTHORIZED = 4401


async def _serve(websocket: WebSocket, view: LiveView, render) -> None:
    async def push(value):
        await websocket.send_json(render(value))

    view.on_update = push
    try:
        await push(await view.start())
        # Nothing is expected from the client; this returns only on disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Live view on {', '.join(view.relations)} disconnected")
    finally:
        await view.close()


@router.websocket("/inventory/top6")
async def live_top6_inventory(websocket: WebSocket):
    session = await asyncio.to_thread(websocket_session, websocket)
    if not session.is_authenticated:
        await websocket.close(code=WS_UNAUTHORIZED)
        return
    await websocket.accept()
    view = LiveView(
        websocket.app.state.store,
        "Inventory",
        get_top6_inventory,
        row_ids=TOP6_INVENTORY_IDS,
    )
    await _serve(websocket, view, inventory_chart)


@router.websocket("/table-distribution")
async def live_table_distribution(websocket: WebSocket):
    session = await asyncio.to_thread(websocket_session, websocket)
    if not session.is_authenticated:
        await websocket.close(code=WS_UNAUTHORIZED)
        return
    await websocket.accept()
    view = LiveView(
        websocket.app.state.store,
        [model.__tablename__ for _, model, _ in DISTRIBUTION_TABLES],
        get_all_table_counts,
    )
    await _serve(websocket, view, distribution_chart)
