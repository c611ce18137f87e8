from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atlas_auth.core.settings import Settings


def add_cors_middleware(app: FastAPI, settings: Settings):
    # Credentials cannot be combined with a wildcard origin.
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
