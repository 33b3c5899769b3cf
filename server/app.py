"""FastAPI application exposing flow analysis over HTTP."""

import os

from dotenv import load_dotenv
load_dotenv()  # load environment variables from .env file

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.flow_routes import router as flow_router

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

app = FastAPI(
    title="Flowstudio API",
    description="Stateless validation, variable resolution and suggestions for prompt flows",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(flow_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "endpoints": {
            "validate": "/api/flows/validate",
            "variables": "/api/flows/variables",
            "connections": "/api/flows/connections/validate",
            "suggestions": "/api/flows/suggestions",
            "completion": "/api/flows/completion",
            "bind": "/api/flows/bind",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
