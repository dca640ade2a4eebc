import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classio.api import auth, parent, student, teacher, principal, superadmin
from classio.core.config import settings
from classio.core.exceptions import ClassioError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Classio")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ClassioError)
def classio_error_handler(request: Request, exc: ClassioError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(parent.router, prefix="/api/parent", tags=["parent"])
app.include_router(student.router, prefix="/api/student", tags=["student"])
app.include_router(teacher.router, prefix="/api/teacher", tags=["teacher"])
app.include_router(principal.router, prefix="/api/principal", tags=["principal"])
app.include_router(superadmin.router, prefix="/api/superadmin", tags=["superadmin"])
