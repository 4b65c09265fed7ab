import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from beamgate.dependencies import get_hyperbeam
from beamgate.errors import HyperbeamAPIError
from beamgate.services.hyperbeam import HyperbeamClient
from beamgate.services.viewer import render_viewer_page

logger = logging.getLogger(__name__)

router = APIRouter()


# Only mounted for the "viewer" deployment variant.
@router.get("/session/{session_id}", name="render_session")
async def render_session(
    session_id: str,
    hyperbeam: HyperbeamClient = Depends(get_hyperbeam),
):
    """Serve a page that embeds the VM's Hyperbeam viewer."""
    try:
        vm = await hyperbeam.get_vm(session_id)
    except HyperbeamAPIError as e:
        return PlainTextResponse("Session not found", status_code=e.status_code)

    embed_url = vm.get("embed_url") if isinstance(vm, dict) else None
    if not embed_url:
        logger.error("Hyperbeam returned VM %s without an embed_url", session_id)
        return PlainTextResponse("Session has no viewer URL", status_code=502)

    return HTMLResponse(render_viewer_page(embed_url, session_id))
