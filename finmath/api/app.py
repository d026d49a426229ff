"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finmath.api.routes import calculations
from finmath.config import settings

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="finmath",
    description="Fixed-precision financial arithmetic and rate-of-return solvers",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculations.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
