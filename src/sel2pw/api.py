"""FastAPI REST API for Selenium to Playwright conversion."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .analyzer import ProjectAnalyzer, ProjectFile, ProjectStructure
from .batch import BatchConverter
from .config import ConverterSettings
from .converter import convert_source
from .errors import (
    ClassConversionError,
    FileReadError,
    InvalidSourceError,
    NoJavaSourcesError,
    OutputPathError,
    Sel2pwError,
)
from .parsing import parse_gradle
from .rewriter import rewrite_line


# --- Pydantic Schemas ---


class CommentSchema(BaseModel):
    line: int
    text: str
    type: str  # "info"|"warning"|"error"


class ConvertRequest(BaseModel):
    """Request body for converting one Java file."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., description="Java source text")
    file_path: Optional[str] = Field(default=None, alias="filePath")


class ConvertResponse(BaseModel):
    code: str
    comments: list[CommentSchema]


class RewriteRequest(BaseModel):
    """Request body for rewriting a single statement."""

    model_config = ConfigDict(populate_by_name=True)

    line: str
    line_number: int = Field(default=0, ge=0, alias="lineNumber")


class RewriteResponse(BaseModel):
    code: str
    comments: list[CommentSchema]
    category: str


class ProjectFileSchema(BaseModel):
    path: str
    content: str


class ProjectRequest(BaseModel):
    """Request body carrying a whole project as decoded files."""

    files: list[ProjectFileSchema]


class GradleRequest(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    detail: str
    error_type: str


# --- Helper Functions ---


def get_settings() -> ConverterSettings:
    """Converter settings for this request, honouring SEL2PW_* overrides."""
    return ConverterSettings.from_env()


def analyze_request(request: ProjectRequest) -> tuple[ProjectStructure, list[str]]:
    """Analyze request files; a project without Java sources yields a warning."""
    files = [ProjectFile(path=f.path, content=f.content) for f in request.files]
    structure = ProjectAnalyzer().analyze(files)
    warnings: list[str] = []
    if not structure.classes:
        warnings.append(str(NoJavaSourcesError()))
    return structure, warnings


# --- FastAPI App ---


app = FastAPI(
    title="sel2pw API",
    description="REST API for converting Selenium Java tests to Playwright TypeScript",
    version=__version__,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    InvalidSourceError: 400,
    NoJavaSourcesError: 400,
    FileReadError: 400,
    ClassConversionError: 500,
    OutputPathError: 500,
}


@app.exception_handler(Sel2pwError)
async def sel2pw_error_handler(request: Request, exc: Sel2pwError) -> JSONResponse:
    """Map Sel2pwError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# --- Endpoints ---


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.post("/api/convert", response_model=ConvertResponse)
def convert_file(request: ConvertRequest):
    """Convert one Java test class to a Playwright test module."""
    if not request.source.strip():
        raise InvalidSourceError("source is empty")
    return convert_source(request.source, get_settings()).to_dict()


@app.post("/api/rewrite", response_model=RewriteResponse)
def rewrite_statement(request: RewriteRequest):
    """Rewrite a single Java statement."""
    result = rewrite_line(request.line, request.line_number)
    return {
        "code": result.code,
        "comments": [c.to_dict() for c in result.comments],
        "category": result.category,
    }


@app.post("/api/analyze")
def analyze_project(request: ProjectRequest):
    """Classify project classes and return their dependency graph."""
    structure, warnings = analyze_request(request)
    return {**structure.to_dict(), "warnings": warnings}


@app.post("/api/convert/batch")
def convert_batch(request: ProjectRequest):
    """Convert every class of a project."""
    structure, warnings = analyze_request(request)
    result = BatchConverter(structure, get_settings()).convert()
    return {**result.to_dict(), "warnings": warnings}


@app.post("/api/gradle")
def read_gradle(request: GradleRequest):
    """Read project metadata from a Gradle build file."""
    return parse_gradle(request.content).to_dict()
