import logging
import os

from fastapi import FastAPI

from notionary.api import auth, groups, notes, workspaces

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

app = FastAPI(title="Notionary API")

app.include_router(auth.router)
app.include_router(workspaces.router)
app.include_router(groups.router)
app.include_router(notes.router)


@app.get("/health")
def health():
    return {"ok": True}
