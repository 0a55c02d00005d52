import asyncio
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docintake import config
from docintake.api import chats, documents, users
from docintake.database.mongo import connect_to_mongo, close_mongo_connection
from docintake.database.document_crud import ensure_indexes
from docintake.logging_config import setup_logging
from docintake.services.pipeline import cancel_background_tasks, recover_stuck_documents

logger = setup_logging()

app = FastAPI(title="Document Intake Service")

# CORS middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_recovery_task = None

@app.on_event("startup")
async def startup_event():
    global _recovery_task
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    await connect_to_mongo()
    await ensure_indexes()
    # Documents left "processing" by a crash are restarted without blocking startup
    _recovery_task = asyncio.create_task(recover_stuck_documents())
    logger.info("Document intake service started")

@app.on_event("shutdown")
async def shutdown_event():
    # Jobs need the database, so stop them before the client goes away
    await cancel_background_tasks(_recovery_task)
    await close_mongo_connection()


# Include routers
app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])
app.include_router(chats.router, prefix="/api/chat", tags=["Chat"])
app.include_router(users.router, prefix="/api", tags=["Users"])

@app.get("/")
async def root():
    return {"message": "API is running."}
