import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from installplan.application import configure_planning_service
from installplan.infrastructure import build_plan_repository
from installplan.routes import plan, teams, works


def create_app() -> FastAPI:
    app = FastAPI(title="InstallPlan Crew Scheduling API", version="0.1.0")

    configure_planning_service(build_plan_repository())

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(works.router, prefix="/api")
    app.include_router(teams.router, prefix="/api")
    app.include_router(plan.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "InstallPlan Crew Scheduling API",
                "docs": "/docs",
                "health": "/api/plan",
            }
        )

    return app


app = create_app()
