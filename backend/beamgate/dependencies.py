from fastapi import Request

from beamgate.config import Settings, VMDefaults
from beamgate.services.hyperbeam import HyperbeamClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_vm_defaults(request: Request) -> VMDefaults:
    return request.app.state.vm_defaults


def get_hyperbeam(request: Request) -> HyperbeamClient:
    """Hyperbeam client bound to the key resolved by GatewayMiddleware."""
    return HyperbeamClient(api_key=request.state.hb_api_key)
