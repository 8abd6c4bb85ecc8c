import logging

from fastapi import FastAPI

from api.routers import ops, synthesis

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

app = FastAPI(title="task-synthesis")
app.include_router(synthesis.router)
app.include_router(ops.router)
