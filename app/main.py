import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import BlogError
from app.middleware import RequestLogMiddleware
from app.routers import comments, metrics, posts, users
from app.schemas import ApiResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


configure_logging()

app = FastAPI(
    title="Blog API",
    description="Posts, comments and likes with owner/admin authorization",
    version="1.0.0",
)

# Middleware
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    """Render a rejected service operation as the message envelope."""
    logger.warning(
        "%s %s rejected: %s (%d)",
        request.method,
        request.url.path,
        exc.message,
        exc.status_code,
    )
    body = ApiResponse(message=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True))


# Routers
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(users.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
