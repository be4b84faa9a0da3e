from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import health, ingest, parse

app = FastAPI(title="Quick Add - Task Input Parser", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(parse.router, prefix="/parse", tags=["parse"])
app.include_router(ingest.router, prefix="/ingest", tags=["ingest"])


@app.get("/")
def root():
    return {"ok": True, "service": "quickadd", "version": "0.1.0"}
