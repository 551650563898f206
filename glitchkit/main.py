from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import base64
import binascii
import logging
import os

from glitchkit.core.errors import DecodeError, MissingSource
from glitchkit.core.io import AudioIO
from glitchkit.export.exporter import ARCHIVE_NAME, Exporter
from glitchkit.export.wav import encode_wav
from glitchkit.kit.generator import KitGenerator
from glitchkit.params import KIT_SIZE, resolve_params

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("glitchkit")

WORKERS = int(os.environ.get("GLITCHKIT_WORKERS", "1"))
MAX_KIT_SIZE = 64

app = FastAPI(
    title="Glitch Kit Engine",
    version="1.0.0",
    description="Turns one recording into a kit of processed one-shots"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "glitchkit-engine"}


def _build_kit(body: dict):
    """Decode the request audio and run one generation. Returns (kit, params, seed)."""
    body = body.copy()
    encoded = body.pop("audio", None)
    seed = body.pop("seed", None)
    count = body.pop("count", KIT_SIZE)

    if not encoded:
        raise HTTPException(status_code=400, detail="No source audio supplied")
    try:
        payload = base64.b64decode(encoded, validate=True)
    except (binascii.Error, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="audio must be base64-encoded")

    try:
        params = resolve_params(body)
        count = int(count)
        seed = None if seed is None else int(seed)
    except (TypeError, ValueError, OverflowError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not 0 <= count <= MAX_KIT_SIZE:
        raise HTTPException(status_code=422, detail=f"count must be in [0, {MAX_KIT_SIZE}]")

    generator = KitGenerator(seed=seed, workers=WORKERS)
    try:
        source = AudioIO.from_bytes(payload)
        kit = generator.generate(source, params, count)
    except (DecodeError, MissingSource) as e:
        logger.warning("Kit generation aborted: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return kit, params, generator.seed


@app.post("/generate/kit")
def generate_kit(body: dict):
    """
    Generates a kit from base64-encoded source audio.
    Returns JSON with base64 WAV per shot and produced/requested counts.
    """
    kit, params, seed = _build_kit(body)
    return {
        "shots": [
            {
                "id": shot.id,
                "audio": base64.b64encode(encode_wav(shot.buffer)).decode("utf-8"),
                "duration": shot.buffer.duration,
            }
            for shot in kit
        ],
        "requested": kit.requested,
        "produced": kit.produced,
        "seed": seed,
        "resolved_params": params.to_dict(),
    }


@app.post("/export/kit")
def export_kit(body: dict):
    """
    Generates a kit and returns it as a ZIP file.
    """
    kit, params, seed = _build_kit(body)
    zip_bytes = Exporter.create_kit_zip(kit, params={**params.to_dict(), "seed": seed})
    return Response(
        content=zip_bytes,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={ARCHIVE_NAME}"}
    )


if __name__ == "__main__":
    uvicorn.run("glitchkit.main:app", host="0.0.0.0", port=8000, reload=True)
