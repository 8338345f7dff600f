from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pmc_portal.core.config import get_settings
from pmc_portal.core.db import create_schema, engine
from pmc_portal.core.logging import setup_logging
from pmc_portal.routes.health import router as health_router
from pmc_portal.routes.auth import router as auth_router
from pmc_portal.routes.otp_attempts import router as otp_attempts_router
from pmc_portal.routes.applications import router as applications_router
from pmc_portal.routes.payments import router as payments_router
from pmc_portal.routes.admin import router as admin_router

settings = get_settings()
setup_logging(settings.log_level)
if engine is not None:
    create_schema(engine)

app = FastAPI(title="PMC Registration Portal")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_base_url],
    allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(otp_attempts_router)
app.include_router(applications_router)
app.include_router(payments_router)
app.include_router(admin_router)
