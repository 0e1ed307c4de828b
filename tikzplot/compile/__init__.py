from .latex import CompileResult, DocumentCompiler, LatexCompiler
from .pipelines import (
    COMPILE_SUFFIXES,
    CompiledDocumentPipeline,
    OutputPipeline,
    RawMarkupPipeline,
    select_pipeline,
    wrap_standalone,
)

__all__ = [
    "COMPILE_SUFFIXES",
    "CompileResult",
    "CompiledDocumentPipeline",
    "DocumentCompiler",
    "LatexCompiler",
    "OutputPipeline",
    "RawMarkupPipeline",
    "select_pipeline",
    "wrap_standalone",
]
