import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, File, Request, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from models.resume_models import (
    AnalyzeRequest,
    AnalyzeResponse,
    ImproveRequest,
    ImproveResult,
    ResumeResponse,
    SuggestionsRequest,
    SuggestionsResponse,
    UploadResponse,
)
from services.ai_gateway import AIGateway
from services.config import Settings, load_settings
from services.debounce import Debouncer
from services.errors import InvalidRequest, PDFExtractionError, ResumeNotFound, ResumeServiceError
from services.gemini_client import GeminiClient
from services.pdf_processor import PDFProcessor
from services.resume_store import InMemoryResumeStore, ResumeStore, new_record
from services.section_parser import parse_sections
from services.suggestion_engine import SuggestionEngine

settings = load_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Resume Editor API", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
pdf_processor = PDFProcessor()
suggestion_engine = SuggestionEngine()
resume_store = InMemoryResumeStore()


def get_settings() -> Settings:
    return settings


def get_store() -> ResumeStore:
    return resume_store


@lru_cache()
def get_gateway() -> AIGateway:
    client = GeminiClient(settings.google_ai_api_key)
    return AIGateway(
        client.generate,
        model=settings.gemini_model,
        improve_params={"temperature": settings.improve_temperature,
                        "max_output_tokens": settings.improve_max_tokens},
        analyze_params={"temperature": settings.analyze_temperature,
                        "max_output_tokens": settings.analyze_max_tokens},
    )


@app.exception_handler(ResumeServiceError)
async def resume_service_error_handler(request: Request, exc: ResumeServiceError):
    content = {"error": exc.error, "details": exc.detail}
    if isinstance(exc, PDFExtractionError):
        content["error"] = exc.message
        if exc.suggestion:
            content["suggestion"] = exc.suggestion
    logger.warning(f"{request.url.path} failed with {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Request failed", "details": str(exc)})


@app.get("/")
async def root():
    return {"message": "Resume Editor API is working"}


@app.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "services": {
            "pdf_processor": "running",
            "suggestion_engine": "running",
            "ai_gateway": "configured" if settings.ai_configured else "not configured",
        }
    }


@app.post("/api/upload", response_model=UploadResponse)
async def upload_resume(file: UploadFile = File(...),
                        settings: Settings = Depends(get_settings),
                        store: ResumeStore = Depends(get_store)):
    """
    Upload a PDF resume, extract its text and keep it for the editor
    """
    if file.content_type != "application/pdf":
        raise InvalidRequest("Only PDF files are allowed")

    too_large = f"File size must be less than {settings.max_upload_bytes // (1024 * 1024)}MB"
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise InvalidRequest(too_large)

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise InvalidRequest(too_large)

    logger.info(f"Processing PDF file: {file.filename}, size: {len(content)} bytes")
    extracted_text = await run_in_threadpool(pdf_processor.extract_text, content)

    record = new_record(file.filename or "resume.pdf", extracted_text)
    store.put(record.id, record)

    logger.info(f"Stored resume {record.id} for: {file.filename}")
    return UploadResponse(resume_id=record.id, content=record.content, file_name=record.file_name)


@app.get("/api/resume/{resume_id}", response_model=ResumeResponse)
async def get_resume(resume_id: str, store: ResumeStore = Depends(get_store)):
    record = store.get(resume_id)
    if record is None:
        raise ResumeNotFound(f"Resume {resume_id} not found",
                             detail="The uploaded resume could not be found. Please upload again.")

    return ResumeResponse(content=record.content, file_name=record.file_name,
                          sections=parse_sections(record.content))


@app.post("/api/suggestions", response_model=SuggestionsResponse)
async def suggestions(req: SuggestionsRequest):
    """
    Instant rule-based suggestions; no AI call
    """
    return SuggestionsResponse(suggestions=suggestion_engine.generate_suggestions(
        req.resume_content, req.target_role, req.target_area, req.current_section
    ))


@app.post("/api/improve-resume", response_model=ImproveResult)
async def improve_resume(req: ImproveRequest, gateway: AIGateway = Depends(get_gateway)):
    return await run_in_threadpool(gateway.improve, req)


@app.post("/api/analyze-resume", response_model=AnalyzeResponse)
async def analyze_resume(req: AnalyzeRequest, gateway: AIGateway = Depends(get_gateway)):
    analysis = await run_in_threadpool(gateway.analyze, req)
    return AnalyzeResponse(analysis=analysis)


@app.websocket("/ws/suggestions")
async def live_suggestions(websocket: WebSocket, settings: Settings = Depends(get_settings)):
    """
    Live suggestions while the user types. Each message is a SuggestionsRequest;
    analysis runs once input has been quiet for the debounce window and only
    the latest input is answered.
    """
    await websocket.accept()
    debouncer = Debouncer(settings.suggestion_debounce_seconds)

    async def send_suggestions(req: SuggestionsRequest):
        found = suggestion_engine.generate_suggestions(
            req.resume_content, req.target_role, req.target_area, req.current_section
        )
        await websocket.send_json(SuggestionsResponse(suggestions=found).model_dump(mode="json", by_alias=True))

    try:
        while True:
            message = await websocket.receive_text()
            try:
                req = SuggestionsRequest.model_validate_json(message)
            except ValidationError as e:
                await websocket.send_json({"error": "Invalid request", "details": str(e)})
                continue

            if not req.resume_content or not req.target_role:
                debouncer.cancel("analysis")
                continue
            debouncer.schedule("analysis", send_suggestions, req)
    except WebSocketDisconnect:
        logger.info("Live suggestion client disconnected")
    finally:
        debouncer.cancel_all()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
