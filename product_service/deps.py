from functools import lru_cache

from fastapi.middleware.cors import CORSMiddleware

from .storage import ObjectStore, build_object_store

def add_cors(app, origins=None):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

@lru_cache
def get_object_store() -> ObjectStore:
    return build_object_store()
