from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from loreforge.api.routes import router
from loreforge.api.routes_schemas import router_schemas
from loreforge.core.config import get_settings

settings = get_settings()

app = FastAPI(title="loreforge Content Pipeline API", version="0.1.0")  # Main ASGI app

# CORS origins come from CORS_ORIGINS ("*" by default for local preview tools)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}  # Basic liveness


app.include_router(router)
app.include_router(router_schemas)
