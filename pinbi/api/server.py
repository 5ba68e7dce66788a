"""
pinbi FastAPI 服务

提供词典搜索、拼音候选、标调接口
"""

import os
import time
import uuid
from typing import Any, List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from pinbi.engine import PinyinEngine, create_engine, DataLoadError, enable_file_logging, get_api_logger
from pinbi.engine.logging import LOG_DIR

logger = get_api_logger()

SERVER_ERROR = "服务器内部错误"


# ===== 请求/响应模型 =====

class QueryRequest(BaseModel):
    """搜索请求（query 非字符串或为空时返回空结果）"""
    query: Any = None


class ToneRequest(BaseModel):
    """标调请求"""
    text: str = Field(..., description="音节文本")
    tone: int = Field(..., description="声调 1-4，其它值不做处理")


class EntryItem(BaseModel):
    """词典条目"""
    word: str
    romanization: str
    meanings: List[str]
    example: Optional[str] = None
    variant: Optional[str] = None


class CandidateItem(EntryItem):
    """拼音候选"""
    match_type: str
    is_shorthand: bool = False
    syllable_count: int


class DictionaryResponse(BaseModel):
    results: List[EntryItem] = Field(default_factory=list)
    count: int = 0


class CandidateResponse(BaseModel):
    results: List[CandidateItem] = Field(default_factory=list)
    count: int = 0
    is_shorthand: bool = False


class ToneResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str


# ===== 全局引擎实例 =====
engine: Optional[PinyinEngine] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    global engine

    logger.info("=" * 50)
    logger.info("pinbi API 服务启动")

    if engine is None:
        engine = create_engine()
    try:
        engine.warm_up()
    except DataLoadError as e:
        # 首次请求时会重新尝试加载
        logger.error(f"词典预加载失败: {e}")

    logger.info("=" * 50)

    yield

    engine = None
    logger.info("pinbi API 服务已停止")


app = FastAPI(
    title="pinbi API",
    description="拼音编辑辅助引擎 API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录所有请求的详细日志"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.perf_counter()

    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"[{request_id}] --> {request.method} {request.url.path} | IP: {client_ip}")

    try:
        response = await call_next(request)
    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"[{request_id}] <-- ERROR | {elapsed_ms:.2f}ms | {type(e).__name__}: {e}")
        raise

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    status_code = response.status_code
    log_level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
    getattr(logger, log_level)(f"[{request_id}] <-- {status_code} | {elapsed_ms:.2f}ms")

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
    return response


def _get_engine() -> PinyinEngine:
    if engine is None:
        logger.error("引擎未就绪，拒绝请求")
        raise HTTPException(status_code=503, detail="引擎未就绪")
    return engine


def _clean_query(query: Any) -> Optional[str]:
    if not isinstance(query, str) or not query.strip():
        return None
    return query.strip()


# ===== API 路由 =====

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """健康检查"""
    from pinbi import __version__
    return HealthResponse(
        status="healthy" if engine else "not_ready",
        version=__version__,
    )


@app.post("/api/dictionary", response_model=DictionaryResponse)
def search_dictionary(request: QueryRequest):
    """词典全文搜索"""
    query = _clean_query(request.query)
    if query is None:
        return DictionaryResponse()

    current = _get_engine()
    try:
        results = current.search_dictionary(query)
    except Exception as e:
        logger.error(f"词典搜索失败: query='{query}', error={e}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    return DictionaryResponse(
        results=[EntryItem(**entry.to_dict()) for entry in results],
        count=len(results),
    )


@app.post("/api/hanzi", response_model=CandidateResponse)
def search_hanzi(request: QueryRequest):
    """拼音 → 汉字候选"""
    query = _clean_query(request.query)
    if query is None:
        return CandidateResponse()

    current = _get_engine()
    try:
        output = current.suggest(query)
    except Exception as e:
        logger.error(f"候选搜索失败: query='{query}', error={e}", exc_info=True)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    logger.debug(
        f"候选: '{query}' -> {[c.entry.word for c in output.candidates[:3]]} "
        f"| {output.metadata.get('elapsed_ms')}ms"
    )
    return CandidateResponse(
        results=[CandidateItem(**c.to_dict()) for c in output.candidates],
        count=len(output.candidates),
        is_shorthand=output.is_shorthand,
    )


@app.post("/api/tone", response_model=ToneResponse)
def convert_tone(request: ToneRequest):
    """给音节标调"""
    return ToneResponse(text=_get_engine().apply_tone(request.text, request.tone))


@app.get("/stats")
def get_stats():
    """获取引擎统计信息"""
    stats = _get_engine().get_stats()
    logger.info(f"统计查询: {stats}")
    return stats


# ===== 启动入口 =====

def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    if enable_file_logging():
        logger.info(f"日志文件目录: {LOG_DIR}")

    logger.info(f"启动 pinbi API 服务: http://{host}:{port}")
    logger.info(f"API 文档: http://{host}:{port}/docs")

    uvicorn.run(
        "pinbi.api.server:app",
        host=host,
        port=port,
        reload=False,
        workers=1,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
