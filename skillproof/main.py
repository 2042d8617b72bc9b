from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from skillproof import models  # noqa: F401  регистрирует таблицы в Base.metadata
from skillproof.database import Base, engine
from skillproof.routers import (
    auth as auth_router,
    certificates as certificates_router,
    marketplace as marketplace_router,
    mini_tests as tests_router,
    profile as profile_router,
    proofs as proofs_router,
    skills as skills_router,
)
from skillproof.utils.error_handler import (
    AppException,
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from skillproof.utils.logger import logger

app = FastAPI(title="SkillProof API")
Base.metadata.create_all(bind=engine)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(auth_router.router)
app.include_router(profile_router.router)
app.include_router(skills_router.router)
app.include_router(proofs_router.router)
app.include_router(tests_router.router)
app.include_router(certificates_router.router)
app.include_router(marketplace_router.router)

logger.info("SkillProof API initialised")


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("skillproof.main:app", host="127.0.0.1", port=8000, reload=True)
