"""HTTP surface for the PR dashboard's news hooks.

  POST   /api/pr/news-hooks      refresh (fetch + curate + accumulate)
  GET    /api/pr/news-hooks      cached hooks inside the retention window
  DELETE /api/pr/news-hooks/old  retention sweep

Endpoints are plain `def` so FastAPI runs the blocking pipeline in its threadpool.
"""
import os
from functools import lru_cache

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from news_hooks.errors import StoreError
from news_hooks.logging_setup import configure_logging
from news_hooks.pipeline import (
    NewsHooksPipeline,
    build_pipeline,
    read_news_hooks,
    refresh_news_hooks,
)

app = FastAPI(
    title="PR News Hooks API",
    description="Curated industry news hooks with content plans",
    version="1.0.0",
)


@lru_cache(maxsize=1)
def get_pipeline() -> NewsHooksPipeline:
    return build_pipeline()


@app.post("/api/pr/news-hooks")
def refresh_hooks(pipeline: NewsHooksPipeline = Depends(get_pipeline)):
    result = refresh_news_hooks(pipeline)
    return JSONResponse(result.to_response(), status_code=200 if result.success else 500)


@app.get("/api/pr/news-hooks")
def get_hooks(pipeline: NewsHooksPipeline = Depends(get_pipeline)):
    result = read_news_hooks(pipeline)
    return JSONResponse(
        result.to_response(include_count=False),
        status_code=200 if result.success else 500,
    )


@app.delete("/api/pr/news-hooks/old")
def delete_old_hooks(pipeline: NewsHooksPipeline = Depends(get_pipeline)):
    try:
        deleted = pipeline.cleanup()
    except StoreError as e:
        return JSONResponse({"success": False, "error": str(e)}, status_code=500)
    return {"success": True, "deleted": deleted}


def main():
    configure_logging()
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    print(f"Starting News Hooks API on {host}:{port}...")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
