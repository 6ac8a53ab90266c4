from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.access.router import router as access_router
from app.chapters.router import router as chapters_router
from app.config import Settings
from app.courses.router import router as courses_router
from app.database import dispose_db, init_db
from app.progress.router import router as progress_router
from app.purchases.router import router as purchases_router
from app.scorm_tracking.router import router as scorm_tracking_router
from shared.middleware.error_handler import register_error_handlers
from shared.middleware.request_id import request_id_middleware


def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.course_database_url)

    yield

    await dispose_db()


SWAGGER_DESCRIPTION = """\
## Learnhub Course Access Service

Decides how a learner enters a course and serves the content behind
that decision: entitlement (purchases), chapter progress, chapter and
SCORM content, and course publishing.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Access** | Resolve entitlement + progress + delivery mode; redirect into a course |
| **Purchases** | Purchase lookup, free enrollment, admin grants |
| **Courses** | Authoring, publish / unpublish, SCORM launch descriptor |
| **Chapters** | Chapter content with purchase lock; chapter authoring |
| **Progress** | Per-chapter completion |
| **SCORM Tracking** | Per-user SCORM runtime data (LMSCommit) |

### Authentication

Bearer JWT in the `Authorization` header:
`{"sub": "<user_uuid>", "email": "...", "roles": [...]}`.
The access endpoints accept anonymous callers and resolve them to DENIED.

### Access resolution

```
no user / course missing or unpublished / no content  →  DENIED   (/)
SCORM package attached                                →  SCORM    (/courses/{id}/scorm)
published chapters                                    →  CHAPTER  (/courses/{id}/chapters/{first})
```
"""


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Learnhub Course Access",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    app.middleware("http")(request_id_middleware)
    register_error_handlers(app)

    app.include_router(access_router, prefix="/api/v1")
    app.include_router(purchases_router, prefix="/api/v1")
    app.include_router(courses_router, prefix="/api/v1")
    app.include_router(chapters_router, prefix="/api/v1")
    app.include_router(progress_router, prefix="/api/v1")
    app.include_router(scorm_tracking_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "course"}

    return app


app = create_app()
