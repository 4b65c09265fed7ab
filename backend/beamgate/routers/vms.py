import logging
import time
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from beamgate.config import Settings, VMDefaults
from beamgate.dependencies import get_app_settings, get_hyperbeam, get_vm_defaults
from beamgate.errors import BadRequest, HyperbeamAPIError, TooManyVMs
from beamgate.services.hyperbeam import HyperbeamClient

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Schemas ──


class SessionLink(BaseModel):
    session_id: str
    session_url: str


class KillResponse(BaseModel):
    message: str


# ── Helpers ──


def make_tag(prefix: str, requested: str | None = None) -> str:
    """Caller's tag if given, else ``{prefix}-{epoch millis}``."""
    if requested:
        return requested
    return f"{prefix}-{int(time.time() * 1000)}"


def _last_raw_segment(request: Request) -> str:
    """Final segment of the still-encoded request path, so %2F stays inside the id."""
    raw_path = request.scope.get("raw_path") or request.url.path.encode()
    path = raw_path.split(b"?", 1)[0].decode("latin-1")
    return path.rsplit("/", 1)[-1]


def build_vm_params(vm: VMDefaults, tag: str) -> dict:
    """Body for Hyperbeam's POST /vm."""
    return {
        "start_url": vm.start_url,
        "timeout": {
            "absolute": vm.timeout.absolute,
            "inactive": vm.timeout.inactive,
            "offline": vm.timeout.offline,
            "warning": vm.timeout.warning,
        },
        "webgl": vm.webgl,
        "dark": vm.dark,
        "tag": tag,
        "touch_gestures": {
            "swipe": vm.mobile,
            "pinch": vm.mobile,
        },
        "search_engine": vm.search_engine,
        "quality": {
            "mode": vm.quality,
        },
    }


# ── Endpoints ──


@router.get("/start-vm")
async def start_vm(
    request: Request,
    tag: str | None = None,
    settings: Settings = Depends(get_app_settings),
    vm: VMDefaults = Depends(get_vm_defaults),
    hyperbeam: HyperbeamClient = Depends(get_hyperbeam),
):
    """Create a Hyperbeam VM unless the account is already at capacity."""
    active = await hyperbeam.list_vms()
    if len(active) >= vm.max_vms:
        logger.warning("Refusing to start VM: %d active (max %d)", len(active), vm.max_vms)
        raise TooManyVMs("Too many VMs are active right now. Check back later.")

    new_vm = await hyperbeam.create_vm(build_vm_params(vm, make_tag(vm.tag_prefix, tag)))

    if settings.deployment_variant == "viewer":
        session_id = new_vm["session_id"]
        return SessionLink(
            session_id=session_id,
            session_url=str(request.app.url_path_for("render_session", session_id=session_id)),
        )
    return new_vm


@router.delete("/kill-vm/{session_path:path}", response_model=KillResponse)
async def kill_vm(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    hyperbeam: HyperbeamClient = Depends(get_hyperbeam),
):
    """Terminate the VM named by the last path segment."""
    session_id = unquote(_last_raw_segment(request))
    if not session_id:
        raise BadRequest("A valid Session ID is required in the path.")

    try:
        await hyperbeam.delete_vm(session_id)
    except HyperbeamAPIError as e:
        if settings.deployment_variant == "viewer":
            # Viewer deployments only report the upstream status
            raise HyperbeamAPIError(e.message, status_code=e.status_code) from e
        raise

    return KillResponse(message=f"Virtual machine {session_id} exited successfully.")
