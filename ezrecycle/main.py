import asyncio
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from ezrecycle.advisory_client import AdvisoryClient
from ezrecycle.api_keys import gemini_key_status
from ezrecycle.config_loader import get_config, get_options_summary
from ezrecycle.errors import ValidationError
from ezrecycle.guidance import GuidanceService
from ezrecycle.logic.wizard import validate_descriptor
from ezrecycle.models import ItemDescriptor, OptionsResponse, ValidationErrorResponse
from ezrecycle.sessions import session_manager

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="EzRecycle Guidance API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def _cleanup_sessions_periodically():
    """Background task to clean up stale wizard sessions every 30 minutes."""
    while True:
        await asyncio.sleep(1800)
        session_manager.cleanup_stale()


@app.on_event("startup")
async def startup_event():
    """Build the single advisory client and the pipeline that uses it."""
    advisory_client = AdvisoryClient.from_config()
    app.state.advisory_client = advisory_client
    app.state.guidance_service = GuidanceService(advisory_client)
    asyncio.create_task(_cleanup_sessions_periodically())
    logger.info(f"Server ready (oracle configured: {advisory_client.is_configured()})")


def get_guidance_service(request: Request) -> GuidanceService:
    return request.app.state.guidance_service


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    body = ValidationErrorResponse(detail=exc.message, field=exc.field)
    return JSONResponse(status_code=422, content=body.model_dump())


class FieldUpdate(BaseModel):
    field: str
    value: Optional[str] = None


class MaterialToggle(BaseModel):
    material: str


class KeyPress(BaseModel):
    key: str
    multiline: bool = False


@app.get("/")
async def root():
    return {"message": "EzRecycle Guidance API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/options", response_model=OptionsResponse)
async def get_options():
    """Form vocabularies: materials, plastic codes, sizes, conditions."""
    return get_options_summary()


@app.get("/status")
async def get_status():
    """Oracle configuration status. Keys are masked."""
    config = get_config()
    return {
        "app": config.app.model_dump(),
        "model": config.advisory.model,
        "api_key": gemini_key_status().model_dump(),
    }


# =============================================================================
# GUIDANCE
# =============================================================================

@app.post("/guidance")
async def create_guidance(descriptor: ItemDescriptor, service: GuidanceService = Depends(get_guidance_service)):
    """Get recycling guidance for one item.

    Validation problems return 422 with a corrective message. Oracle and
    parsing problems still return 200 with a degraded guidance result.
    """
    validate_descriptor(descriptor)
    result = await service.get_guidance(descriptor)
    return result.to_json_dict()


# =============================================================================
# WIZARD SESSIONS
# =============================================================================

@app.get("/wizard/{session_id}")
async def get_wizard(session_id: str):
    return session_manager.get_session(session_id).to_dict()


@app.post("/wizard/{session_id}/field")
async def update_wizard_field(session_id: str, update: FieldUpdate):
    wizard = session_manager.get_session(session_id)
    wizard.set_field(update.field, update.value)
    return wizard.to_dict()


@app.post("/wizard/{session_id}/material")
async def toggle_wizard_material(session_id: str, toggle: MaterialToggle):
    wizard = session_manager.get_session(session_id)
    selected = wizard.toggle_material(toggle.material)
    return {"selected": selected, "state": wizard.to_dict()}


@app.post("/wizard/{session_id}/next")
async def wizard_next(session_id: str):
    wizard = session_manager.get_session(session_id)
    moved = wizard.next_stage()
    return {"moved": moved, "state": wizard.to_dict()}


@app.post("/wizard/{session_id}/back")
async def wizard_back(session_id: str):
    wizard = session_manager.get_session(session_id)
    moved = wizard.previous_stage()
    return {"moved": moved, "state": wizard.to_dict()}


@app.post("/wizard/{session_id}/key")
async def wizard_key(session_id: str, press: KeyPress):
    wizard = session_manager.get_session(session_id)
    moved = wizard.handle_key(press.key, target_multiline=press.multiline)
    return {"moved": moved, "state": wizard.to_dict()}


@app.post("/wizard/{session_id}/submit")
async def wizard_submit(session_id: str, service: GuidanceService = Depends(get_guidance_service)):
    """Submit the wizard. Validation errors come back in state.error."""
    wizard = session_manager.get_session(session_id)
    await wizard.submit(service)
    return wizard.to_dict()


@app.post("/wizard/{session_id}/reset")
async def wizard_reset(session_id: str):
    wizard = session_manager.get_session(session_id)
    wizard.reset()
    return wizard.to_dict()
