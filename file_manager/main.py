from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import config
from app.errors import FileManagerError
from app.routes.file_routes import router as files_router
from app.services.blob_store import BlobStore
from app.services.file_registry import FileRegistry
from logger_config import setup_logger, structured_log

# Data storage path
UPLOAD_DIR = Path(config.UPLOAD_DIR)
TEMP_DIR = Path(config.TEMP_DIR)

# Logger setup
logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One blob store and one registry per process; the registry starts empty
    app.state.blob_store = BlobStore(UPLOAD_DIR, TEMP_DIR)
    await app.state.blob_store.initialize()
    app.state.registry = FileRegistry()
    yield
    logger.info(f"Shutting down, forgetting {len(app.state.registry)} registered files")


app = FastAPI(title="File Manager", lifespan=lifespan)

origins = [o.strip() for o in config.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FileManagerError)
async def file_manager_error_handler(request: Request, exc: FileManagerError):
    logger.info(structured_log(
        "Request failed",
        method=request.method,
        path=request.url.path,
        status=exc.status_code,
        code=exc.code,
    ))
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(structured_log(
        "Unhandled error",
        method=request.method,
        path=request.url.path,
        cause=repr(exc),
    ), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Something went wrong!", "code": "INTERNAL_ERROR"},
    )


app.include_router(files_router)


def mount_frontend(app: FastAPI, directory: Path) -> bool:
    """Serve the front-end bundle at ``/`` if its directory exists.

    Must run after the API routes are registered, since the mount matches
    every path.
    """
    if not directory.is_dir():
        logger.info(f"No front-end directory at {directory}, serving the API only")
        return False
    app.mount("/", StaticFiles(directory=directory, html=True), name="frontend")
    return True


mount_frontend(app, Path(config.PUBLIC_DIR))


if __name__ == "__main__":
    logger.info("Starting File Manager server...")
    logger.info(f"Upload directory: {UPLOAD_DIR}")
    logger.info(f"Temporary directory: {TEMP_DIR}")
    logger.info(f"Maximum upload size: {config.MAX_FILE_SIZE / (1024*1024):.2f} MB")
    logger.info(f"Environment: {config.APP_ENV}")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
